from __future__ import annotations

import threading

from setgame.logging_utils import get_logger

from .cards import SetRules
from .config import GameConfig
from .surface import RenderSurface
from .types import Card, Slot

log = get_logger("table")


class Table:
    """The shared 3x4 grid, the players' tokens and the ready flag.

    ``lock`` is the single table critical section. It is re-entrant so the
    dealer can hold it across a whole structural change while calling the
    per-card methods below, which take it as well.
    """

    def __init__(self, config: GameConfig, surface: RenderSurface) -> None:
        self.config = config
        self.surface = surface
        self.lock = threading.RLock()
        self.slot_to_card: list[Card | None] = [None] * config.table_size
        self.card_to_slot: list[Slot | None] = [None] * config.deck_size
        self.tokens: list[list[bool]] = [[False] * config.table_size for _ in range(config.player_count)]
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def set_ready(self, ready: bool) -> None:
        with self.lock:
            self._ready = ready

    def count_cards(self) -> int:
        with self.lock:
            return sum(1 for c in self.slot_to_card if c is not None)

    def cards_on_table(self) -> list[Card]:
        with self.lock:
            return [c for c in self.slot_to_card if c is not None]

    def empty_slots(self) -> list[Slot]:
        with self.lock:
            return [s for s, c in enumerate(self.slot_to_card) if c is None]

    def place_card(self, card: Card, slot: Slot) -> None:
        with self.lock:
            if self.slot_to_card[slot] is not None or self.card_to_slot[card] is not None:
                log.error(f"refusing to place card {card} on slot {slot}: slot or card already in use")
                return
            self.slot_to_card[slot] = card
            self.card_to_slot[card] = slot
            self.surface.place_card(card, slot)

    def remove_card(self, slot: Slot) -> Card | None:
        """Removes the card on ``slot`` along with every token on it."""
        with self.lock:
            card = self.slot_to_card[slot]
            if card is None:
                return None
            for player, row in enumerate(self.tokens):
                if row[slot]:
                    row[slot] = False
                    self.surface.remove_token(player, slot)
            self.slot_to_card[slot] = None
            self.card_to_slot[card] = None
            self.surface.remove_card(slot)
            return card

    def has_token(self, player: int, slot: Slot) -> bool:
        return self.tokens[player][slot]

    def place_token(self, player: int, slot: Slot) -> bool:
        with self.lock:
            if self.slot_to_card[slot] is None:
                log.error(f"player {player} tried to place a token on empty slot {slot}")
                return False
            if self.tokens[player][slot]:
                return False
            self.tokens[player][slot] = True
            self.surface.place_token(player, slot)
            return True

    def remove_token(self, player: int, slot: Slot) -> bool:
        with self.lock:
            if not self.tokens[player][slot]:
                return False
            self.tokens[player][slot] = False
            self.surface.remove_token(player, slot)
            return True

    def token_slots(self, player: int) -> list[Slot]:
        with self.lock:
            return [s for s, placed in enumerate(self.tokens[player]) if placed]

    def hints(self, rules: SetRules) -> list[tuple[Slot, ...]]:
        """Slot groups on the table that hold a legal set."""
        with self.lock:
            sets = rules.find_sets(self.cards_on_table())
            return [tuple(sorted(self.card_to_slot[c] for c in s)) for s in sets]  # type: ignore[type-var]
