from django.urls import path

from .views import (
    CommentAnalyzeView,
    CommentRetrieveView,
    HistoryDetailView,
    HistoryListView,
    HistorySaveView,
    slack_command,
    slack_events,
)

urlpatterns = [
    # Direct API
    path("comments/retrieve/", CommentRetrieveView.as_view(), name="comments_retrieve"),
    path("comments/analyze/", CommentAnalyzeView.as_view(), name="comments_analyze"),
    # History
    path("history/", HistoryListView.as_view(), name="history_list"),
    path("history/save/", HistorySaveView.as_view(), name="history_save"),
    path("history/<str:analysis_id>/", HistoryDetailView.as_view(), name="history_detail"),
    # Slack
    path("slack/command/", slack_command, name="slack_command"),
    path("slack/events/", slack_events, name="slack_events"),
]
