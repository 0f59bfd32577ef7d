import pytest

from flashrep.domain.errors import CardNotFoundError, InvalidQualityError
from flashrep.domain.review.models import CardReviewState, QualityRating
from flashrep.domain.session.models import CardAnswer, Session, SessionSummary


@pytest.mark.parametrize(
    "value,expected",
    [(1, QualityRating.AGAIN), (5, QualityRating.PERFECT), ("3", QualityRating.GOOD)],
)
def test_quality_parse_accepts_valid_values(value, expected):
    assert QualityRating.parse(value) is expected


@pytest.mark.parametrize("value", [0, 6, 2.0, "five", "", None, False])
def test_quality_parse_rejects_invalid_values(value):
    with pytest.raises(InvalidQualityError):
        QualityRating.parse(value)


def test_invalid_quality_is_a_value_error():
    with pytest.raises(ValueError):
        QualityRating.parse(9)


def test_quality_labels_and_lapses():
    assert [q.label for q in QualityRating] == ["Again", "Hard", "Good", "Easy", "Perfect"]
    assert [q.is_lapse for q in QualityRating] == [True, True, False, False, False]


def test_initial_state_defaults():
    state = CardReviewState.initial("c1", 1000)
    assert state == CardReviewState(
        card_id="c1",
        repetition=0,
        interval=0,
        ease_factor=2.5,
        review_count=0,
        last_reviewed=None,
        next_review=1000,
    )
    assert state.is_due(1000)
    assert not state.is_due(999)


def test_summary_from_session_with_open_session():
    session = Session(session_id="s", user_id="u", started_at=5000)
    session.cards_answered.append(CardAnswer("c1", 2.0, True))

    summary = SessionSummary.from_session(session)

    assert summary.duration_seconds == 0.0
    assert summary.accuracy == 1.0
    assert summary.as_dict()["answered_count"] == 1


def test_card_not_found_message():
    assert str(CardNotFoundError("c9")) == "Card not found in queue: 'c9'"
