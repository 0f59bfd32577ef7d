# Infrastructure Adapters Package
from .card_normalizer import normalize_card
from .yaml_repository import YamlCardRepository

__all__ = ["normalize_card", "YamlCardRepository"]
