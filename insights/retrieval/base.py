"""
Abstract interface for comment retrieval strategies.
"""

from abc import ABC, abstractmethod
from typing import Optional

from telemetry.resilience import Deadline

from ..schemas import RetrievalResult, RetrievedItem


class CommentRetriever(ABC):
    """Fetches the audience comments of one video"""

    name: str = "retriever"

    @abstractmethod
    def fetch(self, source_identifier: str, cap: int, deadline: Optional[Deadline] = None) -> RetrievalResult:
        """
        Retrieve up to ``cap`` comments for a video.

        Args:
            source_identifier: Video URL or 11-character id
            cap: Maximum number of comments returned
            deadline: Overall pipeline budget; every wait is clipped to it

        Returns:
            RetrievalResult with at most ``cap`` items

        Raises:
            InvalidInputError: the identifier is not a YouTube video
            UpstreamTimeoutError: the provider did not finish in time
            UpstreamFailureError: the provider reported a terminal error
        """

    @staticmethod
    def clip(items: list[RetrievedItem], cap: int) -> list[RetrievedItem]:
        """Providers may over-deliver; never return more than ``cap`` items."""
        return items[:cap]
