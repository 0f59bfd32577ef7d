"""
Field names and value coercion for raw card records.

Raw cards come from several generations of the data store, so content and
review fields appear under more than one name. These helpers read any of
them and coerce values to the invariants of CardReviewState. Malformed
values come back as None so the caller can fall back to a default.
"""

import math
from datetime import date, datetime, timezone
from typing import Any

from flashrep.domain.constants import MIN_EF

# canonical name -> accepted source keys, first match wins
REVIEW_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "repetition": ("repetition", "repetitions"),
    "interval": ("interval",),
    "ease_factor": ("easeFactor", "ease_factor"),
    "review_count": ("reviewCount", "review_count"),
    "last_reviewed": ("lastReviewed", "last_reviewed"),
    "next_review": ("nextReview", "next_review", "dueDate", "due_date"),
}

CONTENT_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "card_id": ("id", "card_id", "cardId"),
    "question": ("question", "statement"),
    "answer": ("answer", "proof"),
}

TIMESTAMP_FIELDS = {"last_reviewed", "next_review"}


def read_review_fields(*sources: dict[str, Any]) -> dict[str, Any]:
    """
    Collect the review fields found in the given sources.

    Earlier sources win. Fields that are missing or malformed everywhere are
    left out of the result.
    """
    fields: dict[str, Any] = {}
    for name, aliases in REVIEW_FIELD_ALIASES.items():
        for source in sources:
            value = lookup(source, aliases)
            if value is None:
                continue
            coerced = coerce_review_field(name, value)
            if coerced is not None:
                fields[name] = coerced
                break
    return fields


def coerce_review_field(name: str, value: Any) -> Any:
    """Coerce one review field, clamping to its invariant. None if malformed."""
    if isinstance(value, bool):
        return None
    if name in TIMESTAMP_FIELDS:
        return to_epoch_ms(value)

    try:
        number = float(value)
        if not math.isfinite(number):
            return None
        if name == "ease_factor":
            return max(MIN_EF, number)
        return max(0, int(value) if isinstance(value, int) else int(number))
    except (TypeError, ValueError, OverflowError):
        return None


def to_epoch_ms(value: Any) -> int | None:
    """Convert a timestamp-like value to epoch milliseconds, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, date):
        return to_epoch_ms(datetime(value.year, value.month, value.day))
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.lstrip("-").isdigit():
            return int(text)
        try:
            return to_epoch_ms(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def normalize_hints(hints: Any) -> str:
    if hints is None:
        return ""
    if isinstance(hints, (list, tuple)):
        return " ".join(str(h) for h in hints if h is not None)
    return str(hints)


def normalize_tags(tags: Any) -> list[str]:
    if not tags:
        return []
    if isinstance(tags, str):
        return [t.strip() for t in tags.split(",") if t.strip()]
    if isinstance(tags, (list, tuple, set)):
        return [str(t) for t in tags if t is not None]
    return [str(tags)]


def first_text(raw: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = raw.get(key)
        if value:
            return str(value)
    return ""


def lookup(source: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if source.get(key) is not None:
            return source[key]
    return None
