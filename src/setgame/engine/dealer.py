from __future__ import annotations

import math
import random
import threading
import time
from collections import deque
from collections.abc import Sequence
from typing import Mapping, Protocol

from setgame.logging_utils import get_logger

from .cards import SetRules
from .config import GameConfig
from .player import Player
from .table import Table
from .types import Card, Slot, Verdict

log = get_logger("dealer")


class EventSink(Protocol):
    def log(self, event_type: str, payload: Mapping[str, object]) -> None: ...


class Dealer:
    """Deals cards, runs the turn timer and judges claims one at a time.

    Claims are served strictly in the order players submitted them. The
    dealer never raises towards players: every claim ends in exactly one
    verdict posted to the claimer's mailbox.
    """

    def __init__(
        self,
        config: GameConfig,
        table: Table,
        rules: SetRules,
        rng: random.Random | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.config = config
        self.table = table
        self.rules = rules
        self.rng = rng if rng is not None else random.Random()
        self.events = events
        self.players: list[Player] = []
        self.deck: list[Card] = list(range(config.deck_size))
        self.winners: list[int] = []

        self.reshuffle_at = math.inf
        self.last_reset = time.monotonic()

        # Dealer monitor: guards the claim queue and the dealer's wait for claims.
        self._monitor = threading.Condition()
        self._claims: deque[int] = deque()
        self._terminate = threading.Event()
        self._turn_over = False

    def seat(self, players: Sequence[Player]) -> None:
        self.players = list(players)

    @property
    def terminated(self) -> bool:
        return self._terminate.is_set()

    # ------------------------------------------------------------------
    # Thread entry point
    # ------------------------------------------------------------------

    def run(self) -> None:
        log.info(f"thread {threading.current_thread().name} starting.")
        for p in self.players:
            p.start()
        self.update_timer(reset=True)
        while not self.should_finish():
            self.place_cards_on_table()
            self.timer_loop()
            self.update_timer(reset=True)
            self.remove_all_cards_from_table()
        self._stop_players()
        self.announce_winners()
        log.info(f"thread {threading.current_thread().name} terminated.")

    def terminate(self) -> None:
        self._terminate.set()
        with self._monitor:
            self._monitor.notify_all()

    def should_finish(self) -> bool:
        if self._terminate.is_set():
            return True
        return not self.rules.has_set(self.deck + self.table.cards_on_table())

    def timer_loop(self) -> None:
        self._turn_over = self._needs_reshuffle_without_timer()
        while not self._terminate.is_set() and not self._turn_over:
            if self.config.turn_timeout_millis > 0 and time.monotonic() >= self.reshuffle_at:
                break
            self.update_timer(reset=False)
            self.sleep_until_woken_or_timeout()
            self.update_timer(reset=False)
            self.adjudicate_next()

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def submit_claim(self, player: int) -> None:
        with self._monitor:
            self._claims.append(player)
            self._monitor.notify_all()

    def pending_claims(self) -> list[int]:
        """Inspection helper: claimer ids still queued, oldest first. Not used by the game loop."""
        with self._monitor:
            return list(self._claims)

    def sleep_until_woken_or_timeout(self) -> None:
        with self._monitor:
            self._monitor.wait_for(
                lambda: bool(self._claims) or self._terminate.is_set(),
                timeout=self._next_wait_seconds(),
            )

    def _next_wait_seconds(self) -> float:
        tick = self.config.display_tick_millis / 1000.0
        if self.config.turn_timeout_millis <= 0:
            return tick
        remaining = self.reshuffle_at - time.monotonic()
        if remaining * 1000 < self.config.turn_timeout_warning_millis:
            tick = self.config.warning_tick_millis / 1000.0
        return max(0.0, min(remaining, tick))

    def adjudicate_next(self) -> Verdict | None:
        """Judges the oldest pending claim, if any, and returns the verdict."""
        with self._monitor:
            if not self._claims:
                return None
            claimer = self._claims.popleft()
        player = self.players[claimer]

        verdict: Verdict
        with self.table.lock:
            slots = list(player.my_tokens)
            cards = [self.table.slot_to_card[s] for s in slots]
            if len(slots) < self.config.set_size or any(c is None for c in cards):
                # cards were taken away after the claim was queued
                verdict = "cancel"
            elif not self.rules.is_legal_set([c for c in cards if c is not None]):
                verdict = "penalty"
            else:
                verdict = "point"
            record = self._reply(player, verdict, slots, cards)

            if verdict == "point":
                self.table.set_ready(False)
                overlapping = self._claimers_touching(slots)
                for slot in slots:
                    self._remove_card(slot)
                self._cancel_claims(overlapping)
                self.place_cards_on_table()

        self._record_claims([record])
        if verdict != "point":
            return verdict

        self.update_timer(reset=True)
        if not self.rules.has_set(self.deck + self.table.cards_on_table()):
            log.info("no legal set left in deck or on table")
            self._turn_over = True
        elif self._needs_reshuffle_without_timer():
            self._turn_over = True
        return "point"

    def _reply(
        self, player: Player, verdict: Verdict, slots: list[Slot], cards: list[Card | None]
    ) -> dict[str, object]:
        """Posts the verdict; the returned event is written by ``_record_claims`` outside the table lock."""
        log.info(f"player {player.id} claimed slots {slots} (cards {cards}): {verdict}")
        player.deliver(verdict)
        return {"player": player.id, "slots": slots, "cards": cards, "verdict": verdict}

    def _record_claims(self, records: Sequence[dict[str, object]]) -> None:
        if self.events is None:
            return
        for rec in records:
            self.events.log("claim", rec)

    def _claimers_touching(self, slots: Sequence[Slot]) -> list[int]:
        removed = set(slots)
        with self._monitor:
            return [pid for pid in self._claims if removed.intersection(self.players[pid].my_tokens)]

    def _cancel_claims(self, claimers: Sequence[int]) -> None:
        with self._monitor:
            for pid in claimers:
                if pid in self._claims:
                    self._claims.remove(pid)
        for pid in claimers:
            log.info(f"player {pid} lost its claim to a removed card: cancel")
            self.players[pid].deliver("cancel")

    # ------------------------------------------------------------------
    # Table structure
    # ------------------------------------------------------------------

    def place_cards_on_table(self) -> None:
        with self.table.lock:
            self.table.set_ready(False)
            self.rng.shuffle(self.deck)
            for slot in self.table.empty_slots():
                if not self.deck:
                    break
                self.table.place_card(self.deck.pop(0), slot)
            self.table.set_ready(True)
        if self.config.hints:
            for group in self.table.hints(self.rules):
                log.info(f"hint: slots {list(group)}")

    def _remove_card(self, slot: Slot) -> Card | None:
        card = self.table.remove_card(slot)
        for p in self.players:
            p.forget_slot(slot)
        return card

    def remove_all_cards_from_table(self) -> None:
        """Full reset: every card goes back to the deck and pending claims are cancelled."""
        with self.table.lock:
            self.table.set_ready(False)
            returned = 0
            for slot in range(self.config.table_size):
                card = self._remove_card(slot)
                if card is not None:
                    self.deck.append(card)
                    returned += 1
            with self._monitor:
                pending = list(self._claims)
                self._claims.clear()
            records = [self._reply(self.players[pid], "cancel", [], []) for pid in pending]
            for p in self.players:
                p.reset()
            self.table.set_ready(True)
        self._record_claims(records)
        log.info(f"reshuffle: {returned} cards returned, {len(self.deck)} in deck")
        if self.events is not None:
            self.events.log("reshuffle", {"returned": returned, "deck": len(self.deck)})
        self.update_timer(reset=True)

    def _needs_reshuffle_without_timer(self) -> bool:
        if self.config.turn_timeout_millis > 0:
            return False
        on_table = self.table.cards_on_table()
        if self.rules.has_set(on_table):
            return False
        # only worth it if the deck can still produce a set
        return bool(self.deck) and self.rules.has_set(self.deck + on_table)

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def update_timer(self, reset: bool) -> None:
        now = time.monotonic()
        timeout = self.config.turn_timeout_millis
        if reset:
            self.last_reset = now
            self.reshuffle_at = now + timeout / 1000.0 if timeout > 0 else math.inf
        if timeout > 0:
            remaining = max(0, math.ceil((self.reshuffle_at - now) * 1000))
            self.table.surface.set_countdown(remaining, remaining < self.config.turn_timeout_warning_millis)
        elif timeout == 0:
            self.table.surface.set_elapsed(int((now - self.last_reset) * 1000))

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _stop_players(self) -> None:
        for p in reversed(self.players):
            p.terminate()
        with self._monitor:
            pending = list(self._claims)
            self._claims.clear()
        for pid in pending:
            self.players[pid].deliver("cancel")

    def announce_winners(self) -> list[int]:
        if not self.players:
            self.winners = []
        else:
            best = max(p.score for p in self.players)
            self.winners = [p.id for p in self.players if p.score == best]
        log.info(f"winners: {self.winners}")
        if self.events is not None:
            self.events.log("winners", {"players": self.winners, "scores": [p.score for p in self.players]})
        self.table.surface.announce_winners(self.winners)
        return self.winners
