from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from setgame.engine import ConfigError, Game, GameConfig, PlayerSpec, check_config
from setgame.paths import get_paths
from setgame.services.config import ConfigService, all_computer


def _service() -> ConfigService:
    paths = get_paths()
    return ConfigService(paths.data_dir, paths.schema_dir)


def _write(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_bundled_config_validates() -> None:
    config = _service().load()
    assert config.deck_size == 81
    assert config.table_size == 12
    assert config.set_size == 3
    assert config.player_count == 3
    assert config.players[0].human
    assert len(config.players[0].keys) == 12
    assert not config.players[2].human


def test_partial_file_uses_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path, {"players": [{"name": "Solo", "human": False}], "turn_timeout_millis": -1})
    config = _service().load(path)
    assert config.player_count == 1
    assert config.turn_timeout_millis == -1
    assert config.penalty_freeze_millis == GameConfig().penalty_freeze_millis


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid JSON"):
        _service().load(path)


def test_schema_violation_is_reported(tmp_path: Path) -> None:
    path = _write(tmp_path, {"players": [{"name": "A"}], "deck_size": "many"})
    with pytest.raises(ConfigError, match="Schema validation failed"):
        _service().load(path)


def test_missing_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Missing config file"):
        _service().load(tmp_path / "nope.json")


def test_set_size_must_match_feature_values() -> None:
    with pytest.raises(ConfigError, match="set_size"):
        check_config(GameConfig(set_size=4))


def test_grid_shape_and_deck_bounds() -> None:
    with pytest.raises(ConfigError, match="rows x columns"):
        check_config(GameConfig(rows=4))
    with pytest.raises(ConfigError, match="deck_size"):
        check_config(GameConfig(deck_size=82))


def test_human_keys_must_cover_the_table() -> None:
    config = GameConfig(players=(PlayerSpec(name="A", human=True, keys="qwe"),))
    with pytest.raises(ConfigError, match="keys"):
        check_config(config)


def test_game_refuses_bad_config() -> None:
    with pytest.raises(ConfigError):
        Game(replace(GameConfig(), players=()))


def test_all_computer_replaces_seats() -> None:
    config = all_computer(_service().load(), 4)
    assert config.player_count == 4
    assert not any(p.human for p in config.players)
