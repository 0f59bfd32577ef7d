"""
Raw card normalization at the repository boundary.

Cards come from several generations of the data store:
- content under question/answer or the older statement/proof names
- hints stored as a string, a list of strings, or missing
- review fields in camelCase, snake_case, or a nested legacy "spaced"
  object ({interval, repetition, easeFactor, dueDate})
- timestamps as epoch milliseconds, ISO-8601 strings, or datetimes

normalize_card maps all of them to one snake_case shape. Missing review
fields stay missing; ReviewQueue.seed fills them with defaults.
"""

import logging
from typing import Any

from flashrep.domain.review.fields import (
    CONTENT_FIELD_ALIASES,
    REVIEW_FIELD_ALIASES,
    first_text,
    lookup,
    normalize_hints,
    normalize_tags,
    read_review_fields,
    to_epoch_ms,
)
from flashrep.domain.review.models import CardReviewState

logger = logging.getLogger(__name__)

__all__ = ["normalize_card", "denormalize_review", "normalize_hints", "to_epoch_ms"]


def normalize_card(raw: dict[str, Any], index: int = 0) -> dict[str, Any]:
    """
    Map a raw card dict to the canonical shape used by ReviewQueue.

    Never raises for missing or malformed optional fields; bad values are
    dropped (and defaulted later) or clamped to their invariants.
    """
    card_id = lookup(raw, CONTENT_FIELD_ALIASES["card_id"]) or f"card-{index}"

    card: dict[str, Any] = {
        "card_id": str(card_id),
        "question": first_text(raw, CONTENT_FIELD_ALIASES["question"]),
        "answer": first_text(raw, CONTENT_FIELD_ALIASES["answer"]),
        "hints": normalize_hints(raw.get("hints")),
        "tags": normalize_tags(raw.get("tags")),
        "subject": raw.get("subject") or None,
    }

    legacy = raw.get("spaced") if isinstance(raw.get("spaced"), dict) else {}
    review = read_review_fields(raw, legacy)

    for name, aliases in REVIEW_FIELD_ALIASES.items():
        if name in review:
            continue
        value = lookup(raw, aliases)
        if value is None:
            value = lookup(legacy, aliases)
        if value is not None:
            logger.debug(f"Dropping malformed {name}={value!r} on card {card['card_id']}")

    card.update(review)
    return card


def denormalize_review(state: CardReviewState) -> dict[str, Any]:
    """Review fields in camelCase, for writing back to the store."""
    return {
        "repetition": state.repetition,
        "interval": state.interval,
        "easeFactor": state.ease_factor,
        "reviewCount": state.review_count,
        "lastReviewed": state.last_reviewed,
        "nextReview": state.next_review,
    }
