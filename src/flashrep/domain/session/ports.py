"""
Port for publishing study session analytics.

Any call may fail; SessionTracker catches and logs failures so that
scheduling never depends on analytics availability.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import SessionSummary


class AnalyticsSink(ABC):
    """
    Port for the external analytics service.

    Implementations:
        - LoggingAnalyticsSink: Logs events and keeps them in memory.
        - HttpAnalyticsSink: Posts events to an HTTP analytics endpoint.
    """

    @abstractmethod
    async def start_session(self, user_id: str, context: dict[str, Any]) -> str:
        """
        Register a new study session.

        Returns:
            The session ID assigned by the analytics service.
        """
        pass

    @abstractmethod
    async def record_card_answer(self, session_id: str, payload: dict[str, Any]) -> None:
        """Record one answered card for the given session."""
        pass

    @abstractmethod
    async def end_session(
        self, session_id: str, user_id: str, summary: SessionSummary
    ) -> dict[str, Any] | None:
        """
        Close the session and hand over its summary.

        Returns:
            Whatever summary the analytics service computed, if any.
        """
        pass

    async def close(self) -> None:
        """Release connections held by the sink. The default holds none."""
        return None
