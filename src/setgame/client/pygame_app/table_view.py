from __future__ import annotations

import threading
from collections.abc import Sequence

import pygame  # type: ignore[import-not-found]

from setgame.engine.cards import SetRules
from setgame.engine.config import GameConfig
from setgame.engine.types import Card, Slot

from .asset_manager import AssetManager
from .ui import draw_card, draw_text


class TableView:
    """Render surface fed by the game threads and drawn by the pygame loop.

    Every write and the whole of ``render`` run under one lock, so a frame
    never shows half an update.
    """

    def __init__(self, config: GameConfig, assets: AssetManager) -> None:
        self.config = config
        self.assets = assets
        self.rules = SetRules.from_config(config)
        self._lock = threading.Lock()
        self._cards: list[Card | None] = [None] * config.table_size
        self._tokens: list[set[int]] = [set() for _ in range(config.table_size)]
        self._scores = [0] * config.player_count
        self._freeze = [0] * config.player_count
        self._timer_text = ""
        self._warn = False
        self._winners: list[int] | None = None

    # RenderSurface

    def place_card(self, card: Card, slot: Slot) -> None:
        with self._lock:
            self._cards[slot] = card

    def remove_card(self, slot: Slot) -> None:
        with self._lock:
            self._cards[slot] = None

    def place_token(self, player: int, slot: Slot) -> None:
        with self._lock:
            self._tokens[slot].add(player)

    def remove_token(self, player: int, slot: Slot) -> None:
        with self._lock:
            self._tokens[slot].discard(player)

    def set_score(self, player: int, score: int) -> None:
        with self._lock:
            self._scores[player] = score

    def set_freeze(self, player: int, millis: int) -> None:
        with self._lock:
            self._freeze[player] = millis

    def set_countdown(self, millis: int, warn: bool) -> None:
        with self._lock:
            if warn:
                self._timer_text = f"{millis / 1000:.2f}"
            else:
                self._timer_text = f"{(millis + 999) // 1000}"
            self._warn = warn

    def set_elapsed(self, millis: int) -> None:
        with self._lock:
            self._timer_text = f"{millis // 1000}"
            self._warn = False

    def announce_winners(self, players: Sequence[int]) -> None:
        with self._lock:
            self._winners = list(players)

    # Drawing

    def _slot_rect(self, slot: Slot) -> pygame.Rect:
        row, col = divmod(slot, self.config.columns)
        w, h = 150, 110
        return pygame.Rect(40 + col * (w + 16), 90 + row * (h + 16), w, h)

    def render(self, screen: pygame.Surface) -> None:
        fonts = self.assets.fonts
        with self._lock:
            screen.fill((20, 60, 40))
            color = (240, 80, 80) if self._warn else (240, 240, 240)
            if self._timer_text:
                draw_text(screen, fonts.big, f"Time: {self._timer_text}", (40, 30), color=color)

            for slot, card in enumerate(self._cards):
                rect = self._slot_rect(slot)
                if card is None:
                    pygame.draw.rect(screen, (30, 80, 55), rect, border_radius=10)
                else:
                    feats = self.rules.card_features(card)
                    value = feats[1] if len(feats) > 1 else 0
                    draw_card(screen, rect, feats, self.assets.card_color(value))
                for i, player in enumerate(sorted(self._tokens[slot])):
                    dot = (rect.x + 12 + i * 16, rect.bottom - 12)
                    pygame.draw.circle(screen, self.assets.player_color(player), dot, 6)

            x = 40
            y = 90 + self.config.rows * 126 + 10
            for pid, spec in enumerate(self.config.players):
                label = f"{spec.name}: {self._scores[pid]}"
                if self._freeze[pid] > 0:
                    label += f" ({(self._freeze[pid] + 999) // 1000})"
                draw_text(screen, fonts.ui, label, (x, y), color=self.assets.player_color(pid))
                y += 26

            if self._winners is not None:
                self._draw_winners(screen)

    def _draw_winners(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        screen.blit(overlay, (0, 0))
        names = [self.config.players[p].name for p in self._winners or []]
        title = "IT IS A DRAW!" if len(names) > 1 else "THE WINNER IS"
        draw_text(screen, self.assets.fonts.big, title, (260, 300))
        draw_text(screen, self.assets.fonts.ui, ", ".join(names), (260, 350))
