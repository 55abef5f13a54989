from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import combinations

from .config import GameConfig
from .types import Card


@dataclass(frozen=True)
class SetRules:
    """Legality of a card triple under the feature encoding.

    Feature ``i`` of card ``c`` is ``(c // feature_values**i) % feature_values``.
    A group of ``set_size`` cards is a legal set when, for every feature, the
    values are either all the same or all different.
    """

    feature_count: int = 4
    feature_values: int = 3
    set_size: int = 3

    @staticmethod
    def from_config(config: GameConfig) -> "SetRules":
        return SetRules(
            feature_count=config.feature_count,
            feature_values=config.feature_values,
            set_size=config.set_size,
        )

    def card_features(self, card: Card) -> tuple[int, ...]:
        feats: list[int] = []
        for _ in range(self.feature_count):
            feats.append(card % self.feature_values)
            card //= self.feature_values
        return tuple(feats)

    def is_legal_set(self, cards: Sequence[Card]) -> bool:
        if len(cards) != self.set_size or len(set(cards)) != self.set_size:
            return False
        features = [self.card_features(c) for c in cards]
        for i in range(self.feature_count):
            distinct = len({f[i] for f in features})
            if distinct != 1 and distinct != self.set_size:
                return False
        return True

    def find_sets(self, cards: Iterable[Card], limit: int | None = None) -> list[tuple[Card, ...]]:
        """Exhaustive search; stops after ``limit`` sets when given."""
        found: list[tuple[Card, ...]] = []
        if limit is not None and limit <= 0:
            return found
        for combo in combinations(sorted(set(cards)), self.set_size):
            if self.is_legal_set(combo):
                found.append(combo)
                if limit is not None and len(found) >= limit:
                    break
        return found

    def has_set(self, cards: Iterable[Card]) -> bool:
        return bool(self.find_sets(cards, limit=1))
