from __future__ import annotations

import json
from dataclasses import fields, replace
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from setgame.engine.config import ConfigError, GameConfig, PlayerSpec, check_config


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Missing config file: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ConfigError("\n".join(lines))


def _parse_player(raw: Mapping[str, object]) -> PlayerSpec:
    # schema guarantees name/human
    return PlayerSpec(
        name=str(raw["name"]),
        human=bool(raw["human"]),
        keys=str(raw.get("keys", "")),
    )


def config_from_dict(raw: Mapping[str, object]) -> GameConfig:
    known = {f.name for f in fields(GameConfig)}
    kwargs: dict[str, object] = {k: v for k, v in raw.items() if k in known and k != "players"}
    players_raw = raw.get("players", [])
    if not isinstance(players_raw, list):
        raise ConfigError("players must be a list")
    kwargs["players"] = tuple(_parse_player(p) for p in players_raw if isinstance(p, dict))
    config = GameConfig(**kwargs)  # type: ignore[arg-type]
    check_config(config)
    return config


class ConfigService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def default_path(self) -> Path:
        return self._data_dir / "config.json"

    def load(self, path: Path | None = None) -> GameConfig:
        config_path = path if path is not None else self.default_path()
        raw = _load_json(config_path)
        schema = _load_json(self._schema_dir / "config.schema.json")
        validate_json(raw, schema, context=str(config_path))
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path} must hold an object")
        return config_from_dict(raw)


def all_computer(config: GameConfig, count: int | None = None) -> GameConfig:
    """Same settings, but every seat is a computer player."""
    n = config.player_count if count is None else count
    players = tuple(PlayerSpec(name=f"Computer {i + 1}", human=False) for i in range(n))
    return replace(config, players=players)
