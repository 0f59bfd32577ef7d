"""
Domain models for study sessions.

Timestamps are epoch milliseconds.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from flashrep.domain.constants import DEFAULT_CONFIDENCE


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class CardAnswer:
    """
    A single answered card within a session.

    Attributes:
        card_id: The card that was answered.
        time_spent_seconds: Time the learner spent on the card.
        was_correct: Whether the recall counted as a success.
        confidence: Self-reported confidence, 1-5.
        attempts: Number of attempts before the answer was recorded.
        answered_at: Epoch ms at which the answer was recorded.
    """

    card_id: str
    time_spent_seconds: float
    was_correct: bool
    confidence: int = DEFAULT_CONFIDENCE
    attempts: int = 1
    answered_at: int | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the analytics sink (camelCase keys)."""
        return {
            "cardId": self.card_id,
            "timeSpent": self.time_spent_seconds,
            "wasCorrect": self.was_correct,
            "confidenceLevel": self.confidence,
            "attempts": self.attempts,
            "timestamp": self.answered_at,
        }


@dataclass
class Session:
    session_id: str
    user_id: str
    started_at: int
    context: dict[str, Any] = field(default_factory=dict)
    cards_answered: list[CardAnswer] = field(default_factory=list)
    ended_at: int | None = None


@dataclass(frozen=True)
class SessionSummary:
    """
    Aggregate figures computed when a session ends.

    accuracy is correct / answered, 0.0 when nothing was answered.
    """

    session_id: str
    user_id: str
    answered_count: int
    correct_count: int
    accuracy: float
    total_time_seconds: float
    average_time_per_card: float
    duration_seconds: float

    @classmethod
    def from_session(cls, session: Session) -> "SessionSummary":
        answered = len(session.cards_answered)
        correct = sum(1 for a in session.cards_answered if a.was_correct)
        total_time = sum(a.time_spent_seconds for a in session.cards_answered)
        ended_at = session.ended_at if session.ended_at is not None else session.started_at

        return cls(
            session_id=session.session_id,
            user_id=session.user_id,
            answered_count=answered,
            correct_count=correct,
            accuracy=correct / answered if answered else 0.0,
            total_time_seconds=total_time,
            average_time_per_card=total_time / answered if answered else 0.0,
            duration_seconds=max(0, ended_at - session.started_at) / 1000.0,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
