"""Headless multi-threaded runtime for the Set card game.

IMPORTANT: This package must never import pygame.
"""

from .cards import SetRules
from .config import ConfigError, GameConfig, PlayerSpec, check_config
from .dealer import Dealer
from .game import Game
from .player import Player
from .surface import NullSurface, RenderSurface
from .table import Table
from .types import PlayerStatus, Verdict

__all__ = [
    "ConfigError",
    "Dealer",
    "Game",
    "GameConfig",
    "NullSurface",
    "Player",
    "PlayerSpec",
    "PlayerStatus",
    "RenderSurface",
    "SetRules",
    "Table",
    "Verdict",
    "check_config",
]
