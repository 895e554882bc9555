"""Deterministic ranking of retrieved comments."""

from typing import Sequence

from ..schemas import RetrievedItem


def rank_by_likes(items: Sequence[RetrievedItem], limit: int) -> list[RetrievedItem]:
    """Top ``limit`` items by likes; ties keep provider order (sorted is stable)."""
    return sorted(items, key=lambda item: item.likes, reverse=True)[:limit]


def rank_by_replies(items: Sequence[RetrievedItem], limit: int) -> list[RetrievedItem]:
    """Top ``limit`` items by reply count; ties keep provider order."""
    return sorted(items, key=lambda item: item.reply_count, reverse=True)[:limit]


def format_excerpt(items: Sequence[RetrievedItem]) -> str:
    """Render the ranked excerpt as numbered prompt lines."""
    return "\n\n".join(
        f"[{i}] ({item.likes} likes) {item.author}: {item.text}"
        for i, item in enumerate(items, start=1)
    )
