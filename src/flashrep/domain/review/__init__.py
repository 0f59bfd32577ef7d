# Domain Review Package
from .models import Card, CardReviewState, QualityRating, QueueStats
from .ports import CardRepository, Clock

__all__ = [
    "Card",
    "CardReviewState",
    "QualityRating",
    "QueueStats",
    "CardRepository",
    "Clock",
]
