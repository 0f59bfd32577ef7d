"""
Domain models for card review scheduling.

These are pure data structures with no I/O or external dependencies.
Timestamps are epoch milliseconds.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from flashrep.domain.constants import (
    DEFAULT_EF,
    MAX_QUALITY,
    MIN_QUALITY,
    PASSING_QUALITY,
)
from flashrep.domain.errors import InvalidQualityError


class QualityRating(IntEnum):
    """Learner self-assessed recall quality, 1 (total failure) to 5 (perfect)."""

    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4
    PERFECT = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def is_lapse(self) -> bool:
        return self < PASSING_QUALITY

    @classmethod
    def parse(cls, value: object) -> "QualityRating":
        """
        Validate a raw rating at the calling boundary.

        Accepts ints and digit strings. Raises InvalidQualityError for anything
        outside 1-5, for floats and for bools.
        """
        if isinstance(value, bool):
            raise InvalidQualityError(value)
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, int):
            raise InvalidQualityError(value)
        if not MIN_QUALITY <= value <= MAX_QUALITY:
            raise InvalidQualityError(value)
        return cls(value)


@dataclass(frozen=True)
class CardReviewState:
    """
    SM-2 review state for a single card.

    Attributes:
        card_id: Identifier of the card this state belongs to.
        repetition: Consecutive successful reviews since the last lapse.
        interval: Current interval in days.
        ease_factor: Interval multiplier, never below MIN_EF.
        review_count: Total number of reviews, lapses included.
        last_reviewed: Epoch ms of the last review, None if never reviewed.
        next_review: Epoch ms at which the card becomes due.
    """

    card_id: str
    repetition: int = 0
    interval: int = 0
    ease_factor: float = DEFAULT_EF
    review_count: int = 0
    last_reviewed: int | None = None
    next_review: int = 0

    @classmethod
    def initial(cls, card_id: str, now_ms: int) -> "CardReviewState":
        """State of a card entering the queue for the first time."""
        return cls(card_id=card_id, next_review=now_ms)

    def is_due(self, now_ms: int) -> bool:
        return self.next_review <= now_ms


@dataclass
class Card:
    """
    A flashcard as seen by the review core: normalized content plus review state.
    """

    card_id: str
    question: str
    answer: str
    review: CardReviewState
    hints: str = ""
    tags: list[str] = field(default_factory=list)
    subject: str | None = None

    @property
    def next_review(self) -> int:
        return self.review.next_review


@dataclass(frozen=True)
class QueueStats:
    """
    Classification of a queue snapshot.

    new + learning + reviewing always equals total; due is an independent overlay.
    """

    total: int = 0
    due: int = 0
    new: int = 0
    learning: int = 0
    reviewing: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "due": self.due,
            "new": self.new,
            "learning": self.learning,
            "reviewing": self.reviewing,
        }
