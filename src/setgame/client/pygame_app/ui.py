from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from .asset_manager import Color


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def _draw_shape(screen: pygame.Surface, shape: int, rect: pygame.Rect, color: Color, width: int) -> None:
    if shape == 0:
        pygame.draw.ellipse(screen, color, rect, width)
    elif shape == 1:
        points = [(rect.centerx, rect.top), (rect.right, rect.centery), (rect.centerx, rect.bottom), (rect.left, rect.centery)]
        pygame.draw.polygon(screen, color, points, width)
    else:
        pygame.draw.rect(screen, color, rect, width, border_radius=6)


def draw_card(screen: pygame.Surface, rect: pygame.Rect, features: tuple[int, ...], color: Color) -> None:
    """Feature 0: count, 1: colour (already resolved), 2: shape, 3: shading."""
    pygame.draw.rect(screen, (235, 235, 228), rect, border_radius=10)
    pygame.draw.rect(screen, (0, 0, 0), rect, width=2, border_radius=10)

    count = (features[0] if features else 0) + 1
    shape = features[2] if len(features) > 2 else 0
    shading = features[3] if len(features) > 3 else 0

    h = rect.height // 4
    w = rect.width - 40
    gap = 6
    total = count * h + (count - 1) * gap
    y = rect.centery - total // 2
    for _ in range(count):
        r = pygame.Rect(rect.x + 20, y, w, h)
        if shading == 0:
            _draw_shape(screen, shape, r, color, 0)
        elif shading == 1:
            _draw_shape(screen, shape, r, color, 2)
        else:
            for x in range(r.left + 4, r.right, 8):
                pygame.draw.line(screen, color, (x, r.top + 3), (x, r.bottom - 3), 1)
            _draw_shape(screen, shape, r, color, 2)
        y += h + gap
