"""
SM-2 review scheduler.

Maps (review state, quality, now) to a new review state. This is a pure
computation module with no I/O.

Interval progression:
- quality < 3 (lapse): repetition = 0, interval = 1 day, ease unchanged
- repetition 0: interval = 1 day
- repetition 1: interval = 6 days
- repetition > 1: interval = round(interval * EF)

Ease factor adjustment on success:
    EF' = max(1.3, round2(EF + 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)))

Repetition advances on every call, not once per calendar day, so two
successful answers on the same day move a card two steps.
"""

import math
from collections.abc import Iterable
from dataclasses import replace

from flashrep.domain.constants import (
    DAY_MS,
    FIRST_INTERVAL,
    LAPSE_INTERVAL,
    MIN_EF,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)
from flashrep.domain.review.models import CardReviewState


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf."""
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round to two decimals, halves toward +inf."""
    return math.floor(value * 100 + 0.5) / 100


def ease_delta(quality: int) -> float:
    miss = 5 - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


class ReviewScheduler:
    """
    Modified SM-2 scheduler.

    Stateless and side-effect free. Quality must already be validated
    (see QualityRating.parse); the scheduler does not clamp it.
    """

    def update(self, state: CardReviewState, quality: int, now_ms: int) -> CardReviewState:
        """
        Compute the review state that follows an answer.

        Args:
            state: Current review state of the card.
            quality: Recall quality, 1-5.
            now_ms: Current time in epoch milliseconds.

        Returns:
            A new CardReviewState; the input is not modified.
        """
        repetition = state.repetition
        interval = state.interval
        ease_factor = state.ease_factor

        if quality < PASSING_QUALITY:
            repetition = 0
            interval = LAPSE_INTERVAL
        else:
            if repetition == 0:
                interval = FIRST_INTERVAL
            elif repetition == 1:
                interval = SECOND_INTERVAL
            else:
                interval = round_half_up(interval * ease_factor)
            repetition += 1
            ease_factor = max(MIN_EF, round2(ease_factor + ease_delta(quality)))

        return replace(
            state,
            repetition=repetition,
            interval=interval,
            ease_factor=ease_factor,
            review_count=state.review_count + 1,
            last_reviewed=now_ms,
            next_review=now_ms + interval * DAY_MS,
        )

    def update_many(
        self, answers: Iterable[tuple[CardReviewState, int]], now_ms: int
    ) -> list[CardReviewState]:
        """Reschedule a batch of (state, quality) pairs at the same instant."""
        return [self.update(state, quality, now_ms) for state, quality in answers]


_default_scheduler = ReviewScheduler()


def update(state: CardReviewState, quality: int, now_ms: int) -> CardReviewState:
    """Module-level shortcut for ReviewScheduler().update."""
    return _default_scheduler.update(state, quality, now_ms)
