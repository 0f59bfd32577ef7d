import pytest

from flashrep.application.review_queue import ReviewQueue
from flashrep.application.scheduler import ReviewScheduler
from flashrep.domain.constants import DAY_MS, DEFAULT_EF
from flashrep.domain.errors import CardNotFoundError
from flashrep.domain.review.models import Card, CardReviewState


def make_card(card_id, next_review, review_count=0):
    return Card(
        card_id=card_id,
        question=f"Q {card_id}",
        answer=f"A {card_id}",
        review=CardReviewState(
            card_id=card_id, next_review=next_review, review_count=review_count
        ),
    )


def test_seed_defaults_missing_review_fields(now):
    queue = ReviewQueue()

    cards = queue.seed([{"card_id": "c1", "question": "Q", "answer": "A"}], now)

    review = cards[0].review
    assert review.repetition == 0
    assert review.interval == 0
    assert review.ease_factor == DEFAULT_EF
    assert review.review_count == 0
    assert review.last_reviewed is None
    assert review.next_review == now


def test_seed_keeps_existing_review_fields(now):
    raw = {
        "card_id": "c1",
        "repetition": 3,
        "interval": 15,
        "ease_factor": 2.2,
        "review_count": 7,
        "last_reviewed": now - 15 * DAY_MS,
        "next_review": now,
    }

    card = ReviewQueue().seed([raw], now)[0]

    assert card.review == CardReviewState(
        card_id="c1",
        repetition=3,
        interval=15,
        ease_factor=2.2,
        review_count=7,
        last_reviewed=now - 15 * DAY_MS,
        next_review=now,
    )


def test_seed_tolerates_malformed_optional_fields(now):
    raw = {
        "card_id": "c1",
        "repetition": "lots",
        "interval": None,
        "ease_factor": 0.2,
        "review_count": -4,
        "next_review": "soon",
        "tags": "algebra",
    }

    card = ReviewQueue().seed([raw], now)[0]

    assert card.review.repetition == 0
    assert card.review.interval == 0
    assert card.review.ease_factor == 1.3
    assert card.review.review_count == 0
    assert card.review.next_review == now
    assert card.tags == ["algebra"]


def test_seed_sorts_by_next_review(now):
    raws = [
        {"card_id": "late", "next_review": now + 3 * DAY_MS},
        {"card_id": "early", "next_review": now - DAY_MS},
        {"card_id": "fresh"},
    ]

    cards = ReviewQueue().seed(raws, now)

    assert [c.card_id for c in cards] == ["early", "fresh", "late"]


def test_seed_assigns_ids_to_cards_without_one(now):
    cards = ReviewQueue().seed([{"question": "Q1"}, {"question": "Q2"}], now)
    assert [c.card_id for c in cards] == ["card-0", "card-1"]


def test_seed_accepts_card_objects(now):
    card = make_card("c1", now)
    assert ReviewQueue().seed([card], now) == [card]


def test_empty_queue(now):
    queue = ReviewQueue.from_cards([], now)

    assert len(queue) == 0
    assert queue.classify(now).as_dict() == {
        "total": 0,
        "due": 0,
        "new": 0,
        "learning": 0,
        "reviewing": 0,
    }
    assert queue.next_due(now) is None


def test_reorder_is_stable_for_equal_keys(now):
    cards = [make_card(name, now) for name in ["a", "b", "c", "d"]]
    queue = ReviewQueue(cards)

    for _ in range(5):
        queue.reorder()

    assert [c.card_id for c in queue] == ["a", "b", "c", "d"]


def test_reorder_keeps_relative_order_of_ties_among_other_cards(now):
    cards = [
        make_card("x", now + 2),
        make_card("tie1", now + 1),
        make_card("y", now),
        make_card("tie2", now + 1),
    ]
    queue = ReviewQueue(cards)

    assert [c.card_id for c in queue] == ["y", "tie1", "tie2", "x"]


def test_replace_updates_state_and_reorders(now):
    queue = ReviewQueue([make_card("a", now - 2), make_card("b", now - 1)])
    updated = ReviewScheduler().update(queue.get("a").review, 5, now)

    queue.replace("a", updated)

    assert [c.card_id for c in queue] == ["b", "a"]
    assert queue.get("a").review == updated


def test_replace_unknown_card_raises(now):
    queue = ReviewQueue([make_card("a", now)])
    with pytest.raises(CardNotFoundError):
        queue.replace("missing", CardReviewState(card_id="missing"))


def test_next_due_returns_earliest_due_card(now):
    queue = ReviewQueue([make_card("future", now + DAY_MS), make_card("past", now - DAY_MS)])

    assert queue.next_due(now).card_id == "past"
    assert [c.card_id for c in queue.due_cards(now)] == ["past"]


def test_next_due_none_when_nothing_due(now):
    queue = ReviewQueue([make_card("future", now + 1)])
    assert queue.next_due(now) is None


def test_classify_all_due(now):
    queue = ReviewQueue(
        [make_card("a", now - DAY_MS), make_card("b", now), make_card("c", now - 1)]
    )
    assert queue.classify(now).due == 3


def test_classify_partitions_by_review_count(now):
    counts = [0, 0, 1, 4, 5, 12]
    queue = ReviewQueue(
        [make_card(f"c{i}", now + i, review_count=n) for i, n in enumerate(counts)]
    )

    stats = queue.classify(now)

    assert stats.total == 6
    assert stats.new == 2
    assert stats.learning == 2
    assert stats.reviewing == 2
    assert stats.new + stats.learning + stats.reviewing == stats.total
    assert stats.due == 1


def test_cards_property_is_a_copy(now):
    queue = ReviewQueue([make_card("a", now)])
    queue.cards.clear()
    assert len(queue) == 1


def test_seed_reads_camel_case_and_legacy_content_names(now):
    raw = {
        "id": "a",
        "statement": "S",
        "proof": "P",
        "repetition": 3,
        "interval": 10,
        "easeFactor": 2.0,
        "reviewCount": 7,
        "lastReviewed": now - 10 * DAY_MS,
        "nextReview": now + 10 * DAY_MS,
    }

    card = ReviewQueue().seed([raw], now)[0]

    assert card.question == "S"
    assert card.answer == "P"
    assert card.review == CardReviewState(
        card_id="a",
        repetition=3,
        interval=10,
        ease_factor=2.0,
        review_count=7,
        last_reviewed=now - 10 * DAY_MS,
        next_review=now + 10 * DAY_MS,
    )


@pytest.mark.parametrize("ease", [float("inf"), float("-inf"), float("nan")])
def test_seed_non_finite_ease_falls_back_to_default(now, ease):
    raw = {"card_id": "a", "repetition": 3, "interval": 6, "easeFactor": ease}

    card = ReviewQueue().seed([raw], now)[0]
    assert card.review.ease_factor == DEFAULT_EF

    result = ReviewScheduler().update(card.review, 4, now)
    assert result.interval == 15
