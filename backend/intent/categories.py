"""
Intent and navigation enumerations.

Rules:
- Closed sets; adding a member requires a rule in intent.classifier and,
  for categories, an English entry in replies.tables.
- No behavior here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IntentCategory(str, Enum):
    """Classification bucket selecting which template set a reply comes from."""

    VOICE_HELP = "voiceHelp"
    GREETING = "greeting"
    HOW_ARE_YOU = "howAreYou"
    BALANCE = "balance"
    PRICE = "price"
    STAKING = "staking"
    NAVIGATION = "navigation"
    SEND_MONEY = "sendMoney"
    BUY_CRYPTO = "buyCrypto"
    DEFI = "defi"
    TRADING = "trading"
    DEFAULT = "default"


class NavigationTarget(str, Enum):
    """Destination identifiers understood by the screen-composition layer."""

    PORTFOLIO = "portfolio"
    SWAP = "swap"
    STAKE = "stake"
    DEFI = "defi"
    SEND = "send"
    RECEIVE = "receive"
    NONE = "none"


@dataclass(frozen=True)
class Intent:
    """Classifier output: one category plus an optional destination."""
    category: IntentCategory
    target: NavigationTarget = NavigationTarget.NONE

    @property
    def navigates(self) -> bool:
        return self.target is not NavigationTarget.NONE
