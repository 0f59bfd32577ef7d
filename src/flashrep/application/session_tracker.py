"""
Session tracker: lifecycle of one study session.

NOT_STARTED -> ACTIVE -> ENDED (terminal). Session analytics are delegated to
an AnalyticsSink; every sink failure is logged and swallowed so the study
flow is never blocked by analytics.
"""

import asyncio
import logging
from typing import Any

from ulid import ULID

from flashrep.domain.constants import ANALYTICS_TIMEOUT, DEFAULT_CONFIDENCE
from flashrep.domain.errors import SessionAlreadyActiveError
from flashrep.domain.review.ports import Clock
from flashrep.domain.session.models import (
    CardAnswer,
    Session,
    SessionStatus,
    SessionSummary,
)
from flashrep.domain.session.ports import AnalyticsSink

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Generate a local session ID using ULID."""
    return f"session_{ULID()}"


class SessionTracker:
    """
    Tracks a single study session.

    One tracker owns at most one session. Use a new tracker for the next session.
    """

    def __init__(
        self,
        sink: AnalyticsSink,
        clock: Clock,
        timeout: float = ANALYTICS_TIMEOUT,
    ):
        """
        Args:
            sink: Analytics sink that receives session events.
            clock: Source of the current time.
            timeout: Seconds to wait for each sink call before giving up.
        """
        self._sink = sink
        self._clock = clock
        self._timeout = timeout
        self._status = SessionStatus.NOT_STARTED
        self._session: Session | None = None
        self._summary: SessionSummary | None = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def summary(self) -> SessionSummary | None:
        return self._summary

    async def start_session(
        self, user_id: str, context: dict[str, Any] | None = None
    ) -> Session:
        """
        Start the session and register it with the analytics sink.

        If the sink cannot provide a session ID, a local one is generated.

        Raises:
            SessionAlreadyActiveError: If this tracker already started a session.
        """
        if self._status is not SessionStatus.NOT_STARTED:
            owned = self._session.session_id if self._session else "pending"
            raise SessionAlreadyActiveError(
                f"Tracker already owns session {owned} ({self._status.value})"
            )

        context = dict(context or {})
        # Claim the tracker before the first await so a concurrent start fails.
        self._status = SessionStatus.ACTIVE

        session_id: str | None = None
        try:
            session_id = await self._call_sink(self._sink.start_session(user_id, context))
        except asyncio.CancelledError:
            self._status = SessionStatus.NOT_STARTED
            raise
        except Exception as e:
            logger.warning(f"Analytics unavailable, starting session locally: {e}")

        if not session_id:
            session_id = generate_session_id()

        self._session = Session(
            session_id=str(session_id),
            user_id=user_id,
            started_at=self._clock.now(),
            context=context,
        )
        logger.info(f"Started session {self._session.session_id} for user {user_id}")
        return self._session

    async def record_answer(
        self,
        card_id: str,
        time_spent_seconds: float,
        was_correct: bool,
        confidence: int = DEFAULT_CONFIDENCE,
        attempts: int = 1,
    ) -> CardAnswer | None:
        """
        Append an answer to the active session.

        Returns None without recording anything if the session is not active.
        """
        if self._status is not SessionStatus.ACTIVE or self._session is None:
            logger.info(
                f"Ignoring answer for card {card_id}: session is {self._status.value}"
            )
            return None

        answer = CardAnswer(
            card_id=card_id,
            time_spent_seconds=time_spent_seconds,
            was_correct=was_correct,
            confidence=confidence,
            attempts=attempts,
            answered_at=self._clock.now(),
        )
        session = self._session
        session.cards_answered.append(answer)

        try:
            await self._call_sink(
                self._sink.record_card_answer(session.session_id, answer.to_payload())
            )
        except Exception as e:
            logger.warning(f"Failed to publish answer for card {card_id}: {e}")

        return answer

    async def end_session(self) -> SessionSummary | None:
        """
        End the session and publish its summary.

        The ENDED transition is committed before the sink is called, so a slow
        or failing publish can never reopen the session. Calling this again
        returns the same summary without publishing twice.
        """
        if self._status is SessionStatus.ENDED:
            logger.debug("end_session called on an ended session; ignoring")
            return self._summary

        if self._status is SessionStatus.NOT_STARTED or self._session is None:
            logger.info("end_session called before start_session; ignoring")
            return None

        session = self._session
        session.ended_at = self._clock.now()
        self._summary = SessionSummary.from_session(session)
        self._status = SessionStatus.ENDED

        logger.info(
            f"Ended session {session.session_id}: "
            f"{self._summary.answered_count} answered, "
            f"accuracy {self._summary.accuracy:.0%}"
        )

        try:
            await self._call_sink(
                self._sink.end_session(session.session_id, session.user_id, self._summary)
            )
        except Exception as e:
            logger.warning(f"Failed to publish summary for session {session.session_id}: {e}")

        return self._summary

    async def _call_sink(self, coro):
        return await asyncio.wait_for(coro, timeout=self._timeout)
