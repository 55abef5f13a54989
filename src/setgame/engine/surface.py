from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .types import Card, Slot


class RenderSurface(Protocol):
    """Outbound calls the game emits for whatever draws the table.

    Called from the dealer and player threads; implementations must be
    thread-safe and must not block.
    """

    def place_card(self, card: Card, slot: Slot) -> None: ...

    def remove_card(self, slot: Slot) -> None: ...

    def place_token(self, player: int, slot: Slot) -> None: ...

    def remove_token(self, player: int, slot: Slot) -> None: ...

    def set_score(self, player: int, score: int) -> None: ...

    def set_freeze(self, player: int, millis: int) -> None: ...

    def set_countdown(self, millis: int, warn: bool) -> None: ...

    def set_elapsed(self, millis: int) -> None: ...

    def announce_winners(self, players: Sequence[int]) -> None: ...


class NullSurface:
    """Draws nothing. Used when the game runs without a display."""

    def place_card(self, card: Card, slot: Slot) -> None:
        pass

    def remove_card(self, slot: Slot) -> None:
        pass

    def place_token(self, player: int, slot: Slot) -> None:
        pass

    def remove_token(self, player: int, slot: Slot) -> None:
        pass

    def set_score(self, player: int, score: int) -> None:
        pass

    def set_freeze(self, player: int, millis: int) -> None:
        pass

    def set_countdown(self, millis: int, warn: bool) -> None:
        pass

    def set_elapsed(self, millis: int) -> None:
        pass

    def announce_winners(self, players: Sequence[int]) -> None:
        pass
