from __future__ import annotations

from dataclasses import dataclass, field


class ConfigError(ValueError):
    """Raised at startup when the game configuration cannot be played."""


@dataclass(frozen=True)
class PlayerSpec:
    name: str
    human: bool = False
    keys: str = ""  # one character per slot, row by row; humans only


def _default_players() -> tuple[PlayerSpec, ...]:
    return (
        PlayerSpec(name="Player 1", human=False),
        PlayerSpec(name="Player 2", human=False),
    )


@dataclass(frozen=True)
class GameConfig:
    players: tuple[PlayerSpec, ...] = field(default_factory=_default_players)
    deck_size: int = 81
    table_size: int = 12
    rows: int = 3
    columns: int = 4
    set_size: int = 3
    feature_count: int = 4
    feature_values: int = 3
    turn_timeout_millis: int = 60000
    turn_timeout_warning_millis: int = 5000
    point_freeze_millis: int = 1000
    penalty_freeze_millis: int = 3000
    computer_key_delay_millis: int = 3
    display_tick_millis: int = 900
    warning_tick_millis: int = 10
    hints: bool = False
    seed: int | None = None
    telemetry_path: str | None = None

    @property
    def player_count(self) -> int:
        return len(self.players)


def check_config(config: GameConfig) -> None:
    """Cross-field checks that a JSON schema cannot express."""
    problems: list[str] = []
    if not config.players:
        problems.append("at least one player is required")
    if config.set_size != config.feature_values:
        problems.append(
            f"set_size ({config.set_size}) must equal feature_values ({config.feature_values})"
        )
    if config.deck_size > config.feature_values**config.feature_count:
        problems.append(
            f"deck_size ({config.deck_size}) exceeds the "
            f"{config.feature_values}^{config.feature_count} distinct cards"
        )
    if config.table_size < config.set_size:
        problems.append(f"table_size ({config.table_size}) is smaller than set_size ({config.set_size})")
    if config.rows * config.columns != config.table_size:
        problems.append(f"rows x columns ({config.rows}x{config.columns}) must equal table_size ({config.table_size})")
    for p in config.players:
        if p.human and p.keys and len(p.keys) != config.table_size:
            problems.append(f"player {p.name!r} needs exactly {config.table_size} keys, got {len(p.keys)}")
    if problems:
        raise ConfigError("Invalid game configuration:\n" + "\n".join(f"- {p}" for p in problems))
