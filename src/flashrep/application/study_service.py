"""
Study Service: Application layer orchestrator.

Runs one study session: pull the next due card from the queue, reschedule it
with the learner's rating, record the answer, and put the new state back.
"""

import logging
from typing import Any

from flashrep.application.review_queue import ReviewQueue
from flashrep.application.scheduler import ReviewScheduler
from flashrep.application.session_tracker import SessionTracker
from flashrep.domain.constants import DEFAULT_CONFIDENCE, PASSING_QUALITY
from flashrep.domain.errors import CardNotFoundError
from flashrep.domain.review.models import Card, CardReviewState, QualityRating, QueueStats
from flashrep.domain.review.ports import CardRepository, Clock

logger = logging.getLogger(__name__)


class StudyService:
    """
    Application service tying the queue, scheduler and session tracker together.

    The service never writes back to the card repository. Callers persist the
    states returned by answer() (or the queue's cards) themselves.
    """

    def __init__(
        self,
        repository: CardRepository,
        tracker: SessionTracker,
        clock: Clock,
        queue: ReviewQueue | None = None,
        scheduler: ReviewScheduler | None = None,
    ):
        self._repo = repository
        self._tracker = tracker
        self._clock = clock
        self.queue = queue or ReviewQueue()
        self._scheduler = scheduler or ReviewScheduler()

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    async def load(self, owner_id: str) -> list[Card]:
        """Fetch the owner's cards and seed the queue with them."""
        raw_cards = await self._repo.fetch(owner_id)
        cards = self.queue.seed(raw_cards, self._clock.now())
        logger.info(f"Loaded {len(cards)} cards for {owner_id}")
        return cards

    async def start(self, user_id: str, context: dict[str, Any] | None = None) -> None:
        await self._tracker.start_session(user_id, context)

    def next_card(self) -> Card | None:
        return self.queue.next_due(self._clock.now())

    async def answer(
        self,
        card_id: str,
        quality: Any,
        time_spent_seconds: float = 0.0,
        confidence: int | None = None,
    ) -> CardReviewState:
        """
        Apply a learner's rating to a card.

        Args:
            card_id: The card that was answered.
            quality: Raw rating; validated here, 1-5.
            time_spent_seconds: Time the learner spent on the card.
            confidence: Self-reported confidence; defaults to 3.

        Returns:
            The card's new review state.

        Raises:
            InvalidQualityError: If quality is not an integer in 1-5.
            CardNotFoundError: If the card is not in the queue.
        """
        rating = QualityRating.parse(quality)

        card = self.queue.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        now = self._clock.now()
        new_state = self._scheduler.update(card.review, int(rating), now)

        await self._tracker.record_answer(
            card_id,
            time_spent_seconds,
            was_correct=rating >= PASSING_QUALITY,
            confidence=confidence if confidence is not None else DEFAULT_CONFIDENCE,
        )

        self.queue.replace(card_id, new_state)
        logger.debug(
            f"Card {card_id} rated {rating.label}: interval {new_state.interval}d, "
            f"ease {new_state.ease_factor}"
        )
        return new_state

    async def finish(self):
        return await self._tracker.end_session()

    def stats(self) -> QueueStats:
        return self.queue.classify(self._clock.now())
