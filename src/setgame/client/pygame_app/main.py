from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from setgame.engine import ConfigError, Game
from setgame.logging_utils import setup_logging
from setgame.paths import get_paths
from setgame.services.config import ConfigService
from setgame.services.telemetry import TelemetryService

from .app import App, GameContext, build_keymap
from .asset_manager import AssetManager
from .table_view import TableView


def main() -> int:
    parser = argparse.ArgumentParser(prog="setgame")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--width", type=int, default=720)
    parser.add_argument("--height", type=int, default=640)
    args = parser.parse_args()

    setup_logging()
    paths = get_paths()
    try:
        config = ConfigService(paths.data_dir, paths.schema_dir).load(args.config)
        build_keymap(config)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 2

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Set")
    clock = pygame.time.Clock()

    assets = AssetManager()
    view = TableView(config, assets)
    events = TelemetryService(Path(config.telemetry_path)) if config.telemetry_path else None
    game = Game(config, surface=view, events=events)

    ctx = GameContext(screen=screen, clock=clock, config=config, view=view, game=game)
    try:
        return App(ctx).run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    raise SystemExit(main())
