from __future__ import annotations

import random
import threading

from setgame.logging_utils import get_logger

from .cards import SetRules
from .config import GameConfig, check_config
from .dealer import Dealer, EventSink
from .player import Player
from .surface import NullSurface, RenderSurface
from .table import Table

log = get_logger("game")


class Game:
    """Wires the table, dealer and players together and owns the dealer thread."""

    def __init__(
        self,
        config: GameConfig,
        surface: RenderSurface | None = None,
        events: EventSink | None = None,
    ) -> None:
        check_config(config)
        self.config = config
        self.surface: RenderSurface = surface if surface is not None else NullSurface()
        self.rules = SetRules.from_config(config)
        self.table = Table(config, self.surface)

        seed = config.seed
        self.dealer = Dealer(
            config,
            self.table,
            self.rules,
            rng=random.Random(seed),
            events=events,
        )
        self.players = [
            Player(
                config,
                self.table,
                self.dealer,
                player_id=i,
                human=spec.human,
                rng=random.Random(None if seed is None else seed + i + 1),
            )
            for i, spec in enumerate(config.players)
        ]
        self.dealer.seat(self.players)
        self._thread: threading.Thread | None = None

    def key_pressed(self, player: int, slot: int) -> None:
        """Input-source entry point; safe to call from any thread."""
        if 0 <= player < len(self.players):
            self.players[player].key_pressed(slot)

    def start(self) -> None:
        log.info(
            f"starting game: {self.config.player_count} players, deck {self.config.deck_size}, "
            f"turn timeout {self.config.turn_timeout_millis} ms"
        )
        self._thread = threading.Thread(target=self.dealer.run, name="dealer", daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> bool:
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def terminate(self) -> None:
        self.dealer.terminate()

    def run(self) -> list[int]:
        """Plays until the deck runs dry or ``terminate`` is called; returns the winners."""
        self.start()
        self.join()
        return list(self.dealer.winners)
