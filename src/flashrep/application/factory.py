"""
Adapter Factory
Centralizes the logic for selecting infrastructure adapters from config.
"""

from pathlib import Path

from flashrep.application.config import AppConfig
from flashrep.domain.review.ports import CardRepository
from flashrep.domain.session.ports import AnalyticsSink
from flashrep.infrastructure.adapters.analytics import HttpAnalyticsSink, LoggingAnalyticsSink
from flashrep.infrastructure.adapters.yaml_repository import YamlCardRepository


def get_analytics_sink(config: AppConfig) -> AnalyticsSink:
    """
    Returns the AnalyticsSink implementation selected by config.analytics_backend.
    """
    if config.analytics_backend == "http":
        return HttpAnalyticsSink(
            base_url=config.analytics_url, timeout=config.analytics_timeout_seconds
        )
    return LoggingAnalyticsSink()


def get_card_repository(config: AppConfig, deck_path: Path | None = None) -> CardRepository:
    """
    Returns a CardRepository for the given deck file, or config.deck_path.

    Raises:
        ValueError: If neither a deck path nor config.deck_path is set.
    """
    path = deck_path or config.deck_path
    if path is None:
        raise ValueError("No deck file given. Pass DECK or set FLASHREP_DECK_PATH.")
    return YamlCardRepository(path)
