from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

from setgame.engine import Game
from setgame.engine.config import ConfigError, GameConfig

from .table_view import TableView


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    config: GameConfig
    view: TableView
    game: Game


def build_keymap(config: GameConfig) -> dict[str, tuple[int, int]]:
    """Maps a typed character to (player, slot) for every human player.

    Raises ConfigError when a human seat has no keys or two slots share a key.
    """
    keymap: dict[str, tuple[int, int]] = {}
    problems: list[str] = []
    for pid, spec in enumerate(config.players):
        if not spec.human:
            continue
        if len(spec.keys) != config.table_size:
            problems.append(f"human player {spec.name!r} needs {config.table_size} keys, got {len(spec.keys)}")
            continue
        for slot, ch in enumerate(spec.keys):
            key = ch.lower()
            if key in keymap:
                owner = config.players[keymap[key][0]].name
                problems.append(f"key {ch!r} of {spec.name!r} is already used by {owner!r}")
                continue
            keymap[key] = (pid, slot)
    if problems:
        raise ConfigError("Invalid keyboard layout:\n" + "\n".join(f"- {p}" for p in problems))
    return keymap


class App:
    """Main-thread pygame loop: forwards key presses, draws the table view."""

    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self.keymap = build_keymap(ctx.config)
        self.running = True

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
            return
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
                return
            hit = self.keymap.get(event.unicode.lower()) if event.unicode else None
            if hit is not None:
                player, slot = hit
                self.ctx.game.key_pressed(player, slot)

    def run(self) -> int:
        self.ctx.game.start()
        try:
            while self.running:
                self.ctx.clock.tick(30)
                for event in pygame.event.get():
                    self.handle_event(event)
                self.ctx.view.render(self.ctx.screen)
                pygame.display.flip()
        finally:
            self.ctx.game.terminate()
            self.ctx.game.join()
        return 0
