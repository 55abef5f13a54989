from __future__ import annotations

import argparse
import sys
import threading
from collections.abc import Sequence
from pathlib import Path

from setgame.engine import ConfigError, Game
from setgame.engine.types import Card, Slot
from setgame.logging_utils import get_logger, setup_logging
from setgame.paths import get_paths
from setgame.services.config import ConfigService, all_computer
from setgame.services.telemetry import TelemetryService

log = get_logger("console")


class ConsoleSurface:
    """Render surface that writes table events to the log."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.scores: dict[int, int] = {}
        self.winners: list[int] | None = None

    def place_card(self, card: Card, slot: Slot) -> None:
        log.debug(f"card {card} -> slot {slot}")

    def remove_card(self, slot: Slot) -> None:
        log.debug(f"slot {slot} cleared")

    def place_token(self, player: int, slot: Slot) -> None:
        log.debug(f"player {player} token on {slot}")

    def remove_token(self, player: int, slot: Slot) -> None:
        log.debug(f"player {player} token off {slot}")

    def set_score(self, player: int, score: int) -> None:
        with self._lock:
            self.scores[player] = score
        log.info(f"player {player} score {score}")

    def set_freeze(self, player: int, millis: int) -> None:
        pass

    def set_countdown(self, millis: int, warn: bool) -> None:
        if warn:
            log.debug(f"countdown {millis} ms")

    def set_elapsed(self, millis: int) -> None:
        pass

    def announce_winners(self, players: Sequence[int]) -> None:
        with self._lock:
            self.winners = list(players)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="setgame-headless")
    parser.add_argument("--config", type=Path, default=None, help="JSON configuration file")
    parser.add_argument("--players", type=int, default=None, help="number of computer players")
    parser.add_argument("--seconds", type=float, default=10.0, help="stop the game after this long")
    args = parser.parse_args(argv)

    setup_logging()
    paths = get_paths()
    try:
        config = ConfigService(paths.data_dir, paths.schema_dir).load(args.config)
        config = all_computer(config, args.players)
        events = TelemetryService(Path(config.telemetry_path)) if config.telemetry_path else None
        surface = ConsoleSurface()
        game = Game(config, surface=surface, events=events)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 2

    game.start()
    if not game.join(timeout=args.seconds):
        game.terminate()
        game.join()

    scores = ", ".join(f"{p.id}:{p.score}" for p in game.players)
    print(f"scores {scores}")
    print(f"winners {game.dealer.winners}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
