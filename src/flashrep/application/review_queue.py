"""
Review queue: the caller-owned, ordered working set of cards.

Cards are kept sorted ascending by next_review. Sorting is stable, so cards
with equal next_review keep their prior relative order. The queue never
reorders on its own: replace() reorders after each update, and callers that
mutate cards directly must call reorder() before the next lookup.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from flashrep.application.stats.aggregator import StatsAggregator
from flashrep.domain.constants import DEFAULT_EF
from flashrep.domain.errors import CardNotFoundError
from flashrep.domain.review.fields import (
    CONTENT_FIELD_ALIASES,
    first_text,
    lookup,
    normalize_hints,
    normalize_tags,
    read_review_fields,
)
from flashrep.domain.review.models import Card, CardReviewState, QueueStats

logger = logging.getLogger(__name__)


class ReviewQueue:
    def __init__(
        self,
        cards: Iterable[Card] | None = None,
        aggregator: StatsAggregator | None = None,
    ):
        self._cards: list[Card] = list(cards or [])
        self._aggregator = aggregator or StatsAggregator()
        self.reorder()

    @classmethod
    def from_cards(
        cls,
        raw_cards: Iterable[Card | dict[str, Any]],
        now_ms: int,
        aggregator: StatsAggregator | None = None,
    ) -> "ReviewQueue":
        queue = cls(aggregator=aggregator)
        queue.seed(raw_cards, now_ms)
        return queue

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    @property
    def cards(self) -> list[Card]:
        """Snapshot of the queue in review order."""
        return list(self._cards)

    def seed(self, raw_cards: Iterable[Card | dict[str, Any]], now_ms: int) -> list[Card]:
        """
        Replace the working set with the given cards.

        Raw dicts may use snake_case or camelCase field names, and the older
        statement/proof content names. Missing review fields get the default
        state (repetition 0, interval 0, ease 2.5, due now). Malformed or
        non-finite optional fields fall back to the same defaults instead of
        raising.

        Returns:
            The seeded cards, sorted ascending by next_review.
        """
        cards: list[Card] = []
        for index, raw in enumerate(raw_cards):
            if isinstance(raw, Card):
                cards.append(raw)
            else:
                cards.append(_card_from_raw(raw, now_ms, index))

        self._cards = cards
        self.reorder()
        logger.debug(f"Seeded review queue with {len(cards)} cards")
        return self.cards

    def reorder(self) -> None:
        """Stable sort ascending by next_review."""
        self._cards.sort(key=lambda card: card.review.next_review)

    def classify(self, now_ms: int) -> QueueStats:
        return self._aggregator.classify(self._cards, now_ms)

    def next_due(self, now_ms: int) -> Card | None:
        """First card in review order that is due, or None."""
        for card in self._cards:
            if card.review.next_review <= now_ms:
                return card
        return None

    def due_cards(self, now_ms: int) -> list[Card]:
        return [card for card in self._cards if card.review.next_review <= now_ms]

    def get(self, card_id: str) -> Card | None:
        for card in self._cards:
            if card.card_id == card_id:
                return card
        return None

    def replace(self, card_id: str, state: CardReviewState) -> Card:
        """
        Store an updated review state for a card and reorder.

        Raises:
            CardNotFoundError: If no card with card_id is in the queue.
        """
        card = self.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        card.review = state
        self.reorder()
        return card



def _card_from_raw(raw: dict[str, Any], now_ms: int, index: int) -> Card:
    card_id = str(lookup(raw, CONTENT_FIELD_ALIASES["card_id"]) or f"card-{index}")
    fields = read_review_fields(raw)

    review = CardReviewState(
        card_id=card_id,
        repetition=fields.get("repetition", 0),
        interval=fields.get("interval", 0),
        ease_factor=fields.get("ease_factor", DEFAULT_EF),
        review_count=fields.get("review_count", 0),
        last_reviewed=fields.get("last_reviewed"),
        next_review=fields.get("next_review", now_ms),
    )

    return Card(
        card_id=card_id,
        question=first_text(raw, CONTENT_FIELD_ALIASES["question"]),
        answer=first_text(raw, CONTENT_FIELD_ALIASES["answer"]),
        review=review,
        hints=normalize_hints(raw.get("hints")),
        tags=normalize_tags(raw.get("tags")),
        subject=raw.get("subject"),
    )
