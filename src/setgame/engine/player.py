from __future__ import annotations

import math
import queue
import random
import threading
import time
from typing import Protocol

from setgame.logging_utils import get_logger

from .config import GameConfig
from .table import Table
from .types import PlayerStatus, Slot, Verdict

log = get_logger("player")

_SHUTDOWN_POLL_SECONDS = 0.25


class ClaimArbiter(Protocol):
    def submit_claim(self, player: int) -> None: ...


class Player:
    """One participant: a control thread fed by key presses.

    Human players receive presses from the input source via ``key_pressed``;
    computer players also run a key-generator thread that presses random
    slots. Both share the same control loop.
    """

    def __init__(
        self,
        config: GameConfig,
        table: Table,
        dealer: ClaimArbiter,
        player_id: int,
        human: bool,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config
        self.table = table
        self.dealer = dealer
        self.id = player_id
        self.human = human
        self.rng = rng if rng is not None else random.Random()

        self.score = 0
        self.status: PlayerStatus = "idle"
        self.my_tokens: list[Slot] = []
        # None is the wake-up sentinel pushed on terminate.
        self.inbox: queue.Queue[Slot | None] = queue.Queue(maxsize=config.set_size)
        self.mailbox: queue.Queue[Verdict] = queue.Queue(maxsize=1)

        self._terminate = threading.Event()
        self._thread: threading.Thread | None = None
        self._ai_thread: threading.Thread | None = None

    @property
    def terminated(self) -> bool:
        return self._terminate.is_set()

    def start(self) -> None:
        self._thread = threading.Thread(target=self.run, name=f"player-{self.id}", daemon=True)
        self._thread.start()

    def run(self) -> None:
        log.info(f"thread {threading.current_thread().name} starting.")
        if not self.human:
            self._create_key_generator()

        while not self._terminate.is_set():
            slot = self.inbox.get()
            if slot is None or self._terminate.is_set():
                break
            if self._toggle(slot):
                self._claim()

        if self._ai_thread is not None:
            self._ai_thread.join()
        log.info(f"thread {threading.current_thread().name} terminated.")

    def key_pressed(self, slot: Slot) -> None:
        """Non-blocking; drops the press unless the player can act on it."""
        if self._terminate.is_set() or not self.table.ready or self.status != "idle":
            return
        if not 0 <= slot < self.config.table_size:
            return
        try:
            self.inbox.put_nowait(slot)
        except queue.Full:
            pass

    def _toggle(self, slot: Slot) -> bool:
        """Applies one press. Returns True when the player now holds a full claim."""
        with self.table.lock:
            if self.table.has_token(self.id, slot):
                self.table.remove_token(self.id, slot)
                if slot in self.my_tokens:
                    self.my_tokens.remove(slot)
                return False
            if len(self.my_tokens) < self.config.set_size and self.table.slot_to_card[slot] is not None:
                self.table.place_token(self.id, slot)
                self.my_tokens.append(slot)
                if len(self.my_tokens) == self.config.set_size:
                    self.status = "awaiting_verdict"
                    return True
            return False

    def _claim(self) -> None:
        self.dealer.submit_claim(self.id)
        verdict: Verdict | None = None
        while verdict is None:
            try:
                verdict = self.mailbox.get(timeout=_SHUTDOWN_POLL_SECONDS)
            except queue.Empty:
                # the dealer may already be gone
                if self._terminate.is_set():
                    verdict = "cancel"
        if verdict == "point":
            self.point()
        elif verdict == "penalty":
            self.penalty()
        else:
            self.status = "idle"

    def point(self) -> None:
        with self.table.lock:
            self.my_tokens.clear()
            self.score += 1
        self.table.surface.set_score(self.id, self.score)
        self._freeze("frozen_point", self.config.point_freeze_millis)

    def penalty(self) -> None:
        with self.table.lock:
            for slot in self.my_tokens:
                self.table.remove_token(self.id, slot)
            self.my_tokens.clear()
        self._freeze("frozen_penalty", self.config.penalty_freeze_millis)

    def _freeze(self, status: PlayerStatus, millis: int) -> None:
        self.status = status
        deadline = time.monotonic() + millis / 1000.0
        tick = min(self.config.display_tick_millis, 1000) / 1000.0
        while not self._terminate.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self.table.surface.set_freeze(self.id, math.ceil(remaining * 1000))
            self._terminate.wait(min(remaining, tick))
        self.table.surface.set_freeze(self.id, 0)
        self.status = "idle"

    def _create_key_generator(self) -> None:
        def press_keys() -> None:
            log.info(f"thread {threading.current_thread().name} starting.")
            delay = self.config.computer_key_delay_millis / 1000.0
            while not self._terminate.is_set():
                self.key_pressed(self.rng.randrange(self.config.table_size))
                self._terminate.wait(delay)
            log.info(f"thread {threading.current_thread().name} terminated.")

        self._ai_thread = threading.Thread(target=press_keys, name=f"computer-{self.id}", daemon=True)
        self._ai_thread.start()

    # Called by the dealer, always while it holds the table lock.

    def forget_slot(self, slot: Slot) -> None:
        if slot in self.my_tokens:
            self.my_tokens.remove(slot)

    def reset(self) -> None:
        self.my_tokens.clear()
        while True:
            try:
                self.inbox.get_nowait()
            except queue.Empty:
                break

    def deliver(self, verdict: Verdict) -> None:
        try:
            self.mailbox.put_nowait(verdict)
        except queue.Full:
            log.error(f"player {self.id} already holds an unread verdict; dropping {verdict}")

    def terminate(self) -> None:
        self._terminate.set()
        while True:
            try:
                self.inbox.put_nowait(None)
                break
            except queue.Full:
                try:
                    self.inbox.get_nowait()
                except queue.Empty:
                    pass
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
