"""
Logging analytics sink: keeps session events in memory and logs them.

Used when no analytics service is configured, and as a test double.
"""

import logging
from typing import Any

from ulid import ULID

from flashrep.domain.session.models import SessionSummary
from flashrep.domain.session.ports import AnalyticsSink

logger = logging.getLogger(__name__)


class LoggingAnalyticsSink(AnalyticsSink):
    def __init__(self):
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def start_session(self, user_id: str, context: dict[str, Any]) -> str:
        session_id = f"session_{ULID()}"
        self.events.append(
            ("start_session", {"sessionId": session_id, "userId": user_id, **context})
        )
        logger.info(f"study_session_start session={session_id} user={user_id}")
        return session_id

    async def record_card_answer(self, session_id: str, payload: dict[str, Any]) -> None:
        self.events.append(("card_answered", {"sessionId": session_id, **payload}))
        logger.debug(
            f"card_answered session={session_id} card={payload.get('cardId')} "
            f"correct={payload.get('wasCorrect')}"
        )

    async def end_session(
        self, session_id: str, user_id: str, summary: SessionSummary
    ) -> dict[str, Any] | None:
        data = summary.as_dict()
        self.events.append(("study_session_end", data))
        logger.info(
            f"study_session_end session={session_id} user={user_id} "
            f"cards={summary.answered_count} accuracy={summary.accuracy:.2f}"
        )
        return data
