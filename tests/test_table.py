from __future__ import annotations

from _support import RecordingSurface, make_config

from setgame.engine import SetRules, Table


def _table() -> tuple[Table, RecordingSurface]:
    surface = RecordingSurface()
    return Table(make_config(), surface), surface


def test_place_and_remove_card_keeps_maps_in_sync() -> None:
    table, surface = _table()
    table.place_card(17, 4)
    assert table.slot_to_card[4] == 17
    assert table.card_to_slot[17] == 4
    assert table.count_cards() == 1

    assert table.remove_card(4) == 17
    assert table.slot_to_card[4] is None
    assert table.card_to_slot[17] is None
    assert table.count_cards() == 0
    assert surface.named("place_card") == [(17, 4)]
    assert surface.named("remove_card") == [(4,)]


def test_occupied_slot_is_not_overwritten() -> None:
    table, _ = _table()
    table.place_card(1, 0)
    table.place_card(2, 0)
    assert table.slot_to_card[0] == 1
    assert table.card_to_slot[2] is None


def test_token_needs_a_card() -> None:
    table, surface = _table()
    assert not table.place_token(0, 3)
    assert not table.has_token(0, 3)
    assert surface.named("place_token") == []


def test_token_toggle_results() -> None:
    table, _ = _table()
    table.place_card(9, 3)
    assert table.place_token(1, 3)
    assert not table.place_token(1, 3)
    assert table.token_slots(1) == [3]
    assert table.remove_token(1, 3)
    assert not table.remove_token(1, 3)


def test_removing_card_clears_every_players_token() -> None:
    table, surface = _table()
    table.place_card(9, 3)
    table.place_token(0, 3)
    table.place_token(1, 3)
    table.remove_card(3)
    assert not table.has_token(0, 3)
    assert not table.has_token(1, 3)
    assert sorted(surface.named("remove_token")) == [(0, 3), (1, 3)]


def test_ready_flag() -> None:
    table, _ = _table()
    assert not table.ready
    table.set_ready(True)
    assert table.ready


def test_hints_report_slots() -> None:
    table, _ = _table()
    for slot, card in enumerate([0, 4, 1, 9, 2]):
        table.place_card(card, slot)
    assert table.hints(SetRules()) == [(0, 2, 4)]
