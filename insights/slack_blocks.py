"""
Slack message payloads for the /analyze command.
"""

from typing import Sequence

from .schemas import InsightItem, InsightResult

USAGE_TEXT = "Usage: `/analyze https://www.youtube.com/watch?v=...`"


def _section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _divider() -> dict:
    return {"type": "divider"}


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"• {line}" for line in lines)


def usage_message() -> dict:
    return {
        "response_type": "ephemeral",
        "text": f"❌ Please provide a YouTube URL\n\n{USAGE_TEXT}",
    }


def invalid_url_message() -> dict:
    return {
        "response_type": "ephemeral",
        "text": "❌ Invalid YouTube URL. Please provide a valid YouTube video link.",
    }


def acknowledgement_message(video_url: str) -> dict:
    """Immediate ephemeral reply sent before the job starts"""
    return {
        "response_type": "ephemeral",
        "text": "🔍 Analyzing YouTube video...",
        "blocks": [
            _section("🔍 *Analyzing YouTube video...*\n\nThis may take a few minutes. I'll update you when it's done!"),
            _section(f"📹 Video: `{video_url}`"),
        ],
    }


def progress_message(total_comments: int) -> dict:
    return {
        "text": f"✅ Retrieved {total_comments} comments. Analyzing...",
        "blocks": [_section(f"✅ *Retrieved {total_comments} comments*\n\n🤖 Running AI analysis...")],
    }


def no_content_message(video_url: str) -> dict:
    return {
        "text": "ℹ️ No comments found",
        "blocks": [_section(f"ℹ️ *No comments found*\n\nThere is nothing to analyze for `{video_url}`.")],
    }


def error_message(title: str, detail: str) -> dict:
    return {
        "text": f"❌ {title}",
        "blocks": [_section(f"❌ *{title}*\n\n{detail or 'Unknown error'}")],
    }


def _insight_lines(items: Sequence[InsightItem], limit: int = 3) -> list[str]:
    lines = []
    for item in items[:limit]:
        line = item.text
        if item.frequency is not None:
            line += f" _(~{item.frequency:g} mentions)_"
        lines.append(line)
    return lines


def analysis_message(result: InsightResult) -> dict:
    """Final Block Kit report for a completed analysis"""
    info = result.video_info
    sentiment = result.sentiment_analysis
    breakdown = sentiment.breakdown

    blocks = [
        {"type": "header", "text": {"type": "plain_text", "text": "✅ Analysis Complete"}},
        _section(f"*{info.title}*\nby {info.channel}\n📊 Analyzed {info.total_comments_analyzed} comments"),
        _divider(),
        _section(
            "*😊 Sentiment Breakdown*\n"
            f"✅ Positive: {breakdown.positive}%\n"
            f"❌ Negative: {breakdown.negative}%\n"
            f"➖ Neutral: {breakdown.neutral}%\n"
            f"_{sentiment.overall_tone}_"
        ),
    ]

    drivers = sentiment.sentiment_drivers
    if drivers.positive_drivers:
        blocks.append(_section(f"*Positive Drivers:*\n{_bullets(drivers.positive_drivers)}"))
    if drivers.negative_drivers:
        blocks.append(_section(f"*Negative Drivers:*\n{_bullets(drivers.negative_drivers)}"))
    blocks.append(_divider())

    for title, items in (
        ("🧠 Knowledge Gaps", result.knowledge_gaps),
        ("📈 Demand Signals", result.demand_signals),
        ("😓 Pain Points", result.pain_points),
    ):
        if items:
            blocks.append(_section(f"*{title}*\n{_bullets(_insight_lines(items))}"))
            blocks.append(_divider())

    if result.actionable_recommendations:
        blocks.append(_section(f"*💡 Recommendations*\n{_bullets(result.actionable_recommendations[:3])}"))
        blocks.append(_divider())

    blocks.append({
        "type": "actions",
        "elements": [
            {
                "type": "button",
                "text": {"type": "plain_text", "text": "🔗 View Video"},
                "url": info.url,
                "action_id": "view_video",
            }
        ],
    })

    return {"text": f"✅ Analysis complete for: {info.title}", "blocks": blocks}
