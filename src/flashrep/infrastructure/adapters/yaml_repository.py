"""
YAML deck repository: Infrastructure adapter for deck files on disk.

Implements CardRepository over a YAML file. Accepted layouts:

    cards:            # one deck, shared by every owner
      - id: c1
        question: ...

    alice:            # one list per user or deck ID
      - id: c1
        ...

A bare top-level list is treated like the "cards" layout.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from flashrep.domain.errors import DeckFileError
from flashrep.domain.review.models import Card
from flashrep.domain.review.ports import CardRepository

from .card_normalizer import denormalize_review, normalize_card

logger = logging.getLogger(__name__)


class YamlCardRepository(CardRepository):
    """
    Reads cards from, and writes review state back to, a YAML deck file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    async def fetch(self, owner_id: str) -> list[dict[str, Any]]:
        """
        Fetch the normalized cards for a user or deck.

        Returns an empty list if the owner has no cards in this file.
        """
        data = self._load()
        raw_cards = _select_cards(data, owner_id)

        cards = []
        for index, raw in enumerate(raw_cards):
            if not isinstance(raw, dict):
                logger.warning(f"Skipping non-mapping card #{index} in {self.path}")
                continue
            cards.append(normalize_card(raw, index))

        logger.debug(f"Loaded {len(cards)} cards for {owner_id} from {self.path}")
        return cards

    def save(self, owner_id: str, cards: Iterable[Card]) -> int:
        """
        Write review state of the given cards back into the deck file.

        Content fields are left untouched. Cards are matched by id, falling
        back to their position for cards stored without one.

        Returns:
            The number of cards updated.
        """
        data = self._load()
        raw_cards = _select_cards(data, owner_id)
        by_id = {card.card_id: card for card in cards}

        updated = 0
        for index, raw in enumerate(raw_cards):
            if not isinstance(raw, dict):
                continue
            card_id = str(normalize_card(raw, index)["card_id"])
            card = by_id.get(card_id)
            if card is None:
                continue

            raw.update(denormalize_review(card.review))
            updated += 1

        try:
            self.path.write_text(
                yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except OSError as e:
            raise DeckFileError(f"Could not write deck file {self.path}: {e}") from e

        logger.info(f"Saved review state for {updated} cards to {self.path}")
        return updated

    def _load(self) -> Any:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise DeckFileError(f"Could not read deck file {self.path}: {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DeckFileError(f"Invalid YAML in {self.path}: {e}") from e

        if data is None:
            return {"cards": []}
        if not isinstance(data, (dict, list)):
            raise DeckFileError(f"Deck file {self.path} must hold a list or mapping of cards")
        return data


def _select_cards(data: Any, owner_id: str) -> list[Any]:
    if isinstance(data, list):
        return data

    cards = data.get("cards")
    if cards is None:
        cards = data.get(owner_id)
    if cards is None:
        return []
    if not isinstance(cards, list):
        raise DeckFileError(f"Cards for {owner_id!r} must be a list")
    return cards
