from __future__ import annotations

from typing import Literal

# Dealer's answer to a claim, posted once into the claimer's mailbox.
Verdict = Literal["point", "penalty", "cancel"]

PlayerStatus = Literal["idle", "frozen_point", "frozen_penalty", "awaiting_verdict"]

Card = int
Slot = int
