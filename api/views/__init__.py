"""
API Views Module

This module contains focused views organized by domain.

Available view modules:
- comment_views: Comment retrieval and analysis (direct API)
- history_views: Saved analysis history
- slack_views: Slack slash command and interactivity events
"""

from .comment_views import CommentAnalyzeView, CommentRetrieveView
from .history_views import HistoryDetailView, HistoryListView, HistorySaveView
from .slack_views import slack_command, slack_events

__all__ = [
    "CommentRetrieveView",
    "CommentAnalyzeView",
    "HistoryListView",
    "HistoryDetailView",
    "HistorySaveView",
    "slack_command",
    "slack_events",
]
