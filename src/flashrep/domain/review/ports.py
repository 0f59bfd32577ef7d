"""
Ports (interfaces) for card retrieval and time.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any


class CardRepository(ABC):
    """
    Port for fetching raw cards from a data store.

    Implementations:
        - YamlCardRepository: Reads cards from a YAML deck file.
    """

    @abstractmethod
    async def fetch(self, owner_id: str) -> list[dict[str, Any]]:
        """
        Fetch raw cards for a user or deck.

        Args:
            owner_id: User ID or deck ID the cards belong to.

        Returns:
            List of raw card dicts. Content and review field names are
            normalized by the adapter; review fields may be missing.
        """
        pass


class Clock(ABC):
    """Port for the current time, injected so scheduling is deterministic."""

    @abstractmethod
    def now(self) -> int:
        """Return the current time as epoch milliseconds."""
        pass
