from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

Color = tuple[int, int, int]

CARD_COLORS: tuple[Color, ...] = ((210, 40, 60), (40, 160, 70), (120, 60, 170))
PLAYER_COLORS: tuple[Color, ...] = (
    (240, 200, 60),
    (60, 180, 240),
    (240, 120, 200),
    (140, 240, 120),
    (240, 150, 60),
    (180, 180, 240),
)


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


class AssetManager:
    """Fonts and palette. Cards are drawn from their features, not images."""

    def __init__(self) -> None:
        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 34),
        )

    def card_color(self, value: int) -> Color:
        return CARD_COLORS[value % len(CARD_COLORS)]

    def player_color(self, player: int) -> Color:
        return PLAYER_COLORS[player % len(PLAYER_COLORS)]
