"""
Stats aggregator for classifying a review queue snapshot.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable

from flashrep.domain.constants import LEARNING_THRESHOLD
from flashrep.domain.review.models import Card, CardReviewState, QueueStats


class StatsAggregator:
    """
    Classifies cards into total/due/new/learning/reviewing counts.

    Stateless and side-effect free.
    """

    def __init__(self, learning_threshold: int = LEARNING_THRESHOLD):
        """
        Args:
            learning_threshold: review_count at which a card stops "learning"
                and counts as "reviewing".
        """
        self.learning_threshold = learning_threshold

    def classify(
        self, items: Iterable[Card | CardReviewState], now_ms: int
    ) -> QueueStats:
        """
        Classify a snapshot of cards.

        new, learning and reviewing partition the snapshot by review_count;
        due counts cards with next_review <= now_ms across all three.
        """
        total = due = new = learning = reviewing = 0

        for item in items:
            state = item.review if isinstance(item, Card) else item
            total += 1

            if state.next_review <= now_ms:
                due += 1

            if state.review_count == 0:
                new += 1
            elif state.review_count < self.learning_threshold:
                learning += 1
            else:
                reviewing += 1

        return QueueStats(
            total=total, due=due, new=new, learning=learning, reviewing=reviewing
        )
