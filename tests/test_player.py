from __future__ import annotations

import threading
import time

from _support import RecordingSurface, make_config, wait_until

from setgame.engine import GameConfig, Player, Table


class FakeArbiter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.claims: list[int] = []

    def submit_claim(self, player: int) -> None:
        with self._lock:
            self.claims.append(player)


def _setup(config: GameConfig | None = None) -> tuple[Player, Table, FakeArbiter, RecordingSurface]:
    config = config or make_config(humans=1)
    surface = RecordingSurface()
    table = Table(config, surface)
    for slot in range(config.table_size):
        table.place_card(slot, slot)
    table.set_ready(True)
    arbiter = FakeArbiter()
    player = Player(config, table, arbiter, player_id=0, human=True)
    player.start()
    return player, table, arbiter, surface


def _press_all(player: Player, slots: list[int]) -> None:
    for slot in slots:
        assert wait_until(lambda: player.inbox.empty())
        player.key_pressed(slot)


def test_press_dropped_while_table_not_ready() -> None:
    player, table, arbiter, _ = _setup()
    try:
        table.set_ready(False)
        player.key_pressed(0)
        assert player.inbox.empty()
    finally:
        player.terminate()


def test_second_press_removes_token() -> None:
    player, table, arbiter, _ = _setup()
    try:
        _press_all(player, [5])
        assert wait_until(lambda: player.my_tokens == [5])
        assert table.has_token(0, 5)
        _press_all(player, [5])
        assert wait_until(lambda: player.my_tokens == [])
        assert not table.has_token(0, 5)
        assert arbiter.claims == []
    finally:
        player.terminate()


def test_press_on_empty_slot_is_discarded() -> None:
    player, table, arbiter, _ = _setup()
    try:
        table.remove_card(7)
        _press_all(player, [7, 1])
        assert wait_until(lambda: player.my_tokens == [1])
    finally:
        player.terminate()


def test_two_tokens_make_no_claim() -> None:
    player, _, arbiter, _ = _setup()
    try:
        _press_all(player, [0, 1])
        assert wait_until(lambda: len(player.my_tokens) == 2)
        time.sleep(0.05)
        assert arbiter.claims == []
        assert player.status == "idle"
    finally:
        player.terminate()


def test_third_token_claims_and_blocks_input() -> None:
    player, _, arbiter, _ = _setup()
    try:
        _press_all(player, [0, 1, 2])
        assert wait_until(lambda: arbiter.claims == [0])
        assert player.status == "awaiting_verdict"
        player.key_pressed(4)
        assert player.inbox.empty()
        assert player.my_tokens == [0, 1, 2]
    finally:
        player.terminate()


def test_point_scores_and_freezes() -> None:
    player, _, arbiter, surface = _setup()
    try:
        _press_all(player, [0, 1, 2])
        assert wait_until(lambda: arbiter.claims == [0])
        player.deliver("point")
        assert wait_until(lambda: player.score == 1 and player.status == "idle")
        assert player.my_tokens == []
        assert (0, 1) in surface.named("set_score")
        assert surface.named("set_freeze")[-1] == (0, 0)
    finally:
        player.terminate()


def test_penalty_clears_own_tokens() -> None:
    player, table, arbiter, _ = _setup()
    try:
        _press_all(player, [0, 1, 3])
        assert wait_until(lambda: arbiter.claims == [0])
        player.deliver("penalty")
        assert wait_until(lambda: player.status == "idle")
        assert player.score == 0
        assert player.my_tokens == []
        assert table.token_slots(0) == []
        assert table.count_cards() == 12
    finally:
        player.terminate()


def test_cancel_skips_the_freeze() -> None:
    config = make_config(humans=1, penalty_freeze_millis=10_000, point_freeze_millis=10_000)
    player, _, arbiter, surface = _setup(config)
    try:
        _press_all(player, [0, 1, 2])
        assert wait_until(lambda: arbiter.claims == [0])
        player.deliver("cancel")
        assert wait_until(lambda: player.status == "idle", timeout=1.0)
        assert surface.named("set_freeze") == []
    finally:
        player.terminate()


def test_terminate_interrupts_a_freeze() -> None:
    config = make_config(humans=1, penalty_freeze_millis=10_000)
    player, _, arbiter, _ = _setup(config)
    _press_all(player, [0, 1, 3])
    assert wait_until(lambda: arbiter.claims == [0])
    player.deliver("penalty")
    assert wait_until(lambda: player.status == "frozen_penalty")
    started = time.monotonic()
    player.terminate()
    assert time.monotonic() - started < 2.0


def test_terminate_while_waiting_for_a_verdict() -> None:
    player, _, arbiter, _ = _setup()
    _press_all(player, [0, 1, 2])
    assert wait_until(lambda: arbiter.claims == [0])
    started = time.monotonic()
    player.terminate()
    assert time.monotonic() - started < 2.0
    assert player.status == "idle"


def test_computer_player_presses_keys_by_itself() -> None:
    config = make_config(humans=0, computers=1)
    surface = RecordingSurface()
    table = Table(config, surface)
    for slot in range(config.table_size):
        table.place_card(slot, slot)
    table.set_ready(True)
    arbiter = FakeArbiter()
    player = Player(config, table, arbiter, player_id=0, human=False)
    player.start()
    try:
        assert wait_until(lambda: len(arbiter.claims) == 1)
        assert len(player.my_tokens) == 3
    finally:
        player.terminate()
