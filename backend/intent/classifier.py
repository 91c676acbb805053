"""
Keyword intent classifier.

Rules are an explicit ordered list of (predicate, category) pairs evaluated
top to bottom; the first rule that matches wins. Matching is
case-insensitive substring probing, so "hi" also matches inside "this".
Category precedence:

    voiceHelp > greeting > howAreYou > balance > price > staking >
    navigation > sendMoney > buyCrypto > defi > trading > default

Navigation is only reachable through a trigger phrase ("go to", "open",
"navigate", "show me", "take me to"). A trigger phrase together with a
destination keyword is a direct navigation command; it is checked right
after howAreYou so that "take me to staking" opens the staking page instead
of answering a staking question. A trigger phrase without a destination
falls to the generic navigation slot with target NONE.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from constants import NAVIGATION_TRIGGER_PHRASES
from intent.categories import Intent, IntentCategory, NavigationTarget
from observability.logger import log_event


class Rule(Protocol):
    """Predicate half of a (predicate, category) pair."""

    @property
    def category(self) -> IntentCategory: ...

    def matches(self, lowered: str) -> bool: ...


def _normalize(owner: str, keywords: tuple[str, ...]) -> tuple[str, ...]:
    if not keywords:
        raise ValueError(f"rule for {owner} has no keywords")
    return tuple(k.lower() for k in keywords)


@dataclass(frozen=True)
class KeywordRule:
    """Matches when any keyword is a substring. Keywords stored lower-cased."""
    category: IntentCategory
    keywords: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "keywords", _normalize(self.category.value, self.keywords)
        )

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


@dataclass(frozen=True)
class DestinationRule:
    """(keywords, target) pair for the navigation second pass."""
    target: NavigationTarget
    keywords: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "keywords", _normalize(self.target.value, self.keywords)
        )

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


DESTINATION_RULES: tuple[DestinationRule, ...] = (
    DestinationRule(NavigationTarget.PORTFOLIO, ("portfolio", "portafolio")),
    DestinationRule(NavigationTarget.SWAP, ("swap", "exchange", "trade")),
    DestinationRule(NavigationTarget.STAKE, ("stake", "staking")),
    DestinationRule(NavigationTarget.DEFI, ("defi",)),
    DestinationRule(NavigationTarget.SEND, ("send",)),
    DestinationRule(NavigationTarget.RECEIVE, ("receive",)),
)


def resolve_destination(
    lowered: str,
    destinations: Sequence[DestinationRule] = DESTINATION_RULES,
) -> NavigationTarget:
    """First matching destination in order, else NONE."""
    for rule in destinations:
        if rule.matches(lowered):
            return rule.target
    return NavigationTarget.NONE


@dataclass(frozen=True)
class NavigationCommandRule:
    """Trigger phrase AND a resolvable destination."""
    triggers: KeywordRule
    destinations: tuple[DestinationRule, ...] = DESTINATION_RULES

    @property
    def category(self) -> IntentCategory:
        return IntentCategory.NAVIGATION

    def matches(self, lowered: str) -> bool:
        return (
            self.triggers.matches(lowered)
            and resolve_destination(lowered, self.destinations) is not NavigationTarget.NONE
        )


# =============================================================================
# Rule table
# =============================================================================

NAVIGATION_TRIGGERS = KeywordRule(IntentCategory.NAVIGATION, NAVIGATION_TRIGGER_PHRASES)

INTENT_RULES: tuple[Rule, ...] = (
    KeywordRule(IntentCategory.VOICE_HELP, (
        "voice", "microphone", "mic", "not working", "can't hear",
    )),
    KeywordRule(IntentCategory.GREETING, (
        "hello", "hi", "hey", "hola", "salut",
    )),
    KeywordRule(IntentCategory.HOW_ARE_YOU, (
        "how are you", "how's it going", "como estas", "comment allez",
    )),
    KeywordRule(IntentCategory.BALANCE, (
        "balance", "portfolio", "worth", "saldo", "portafolio", "portefeuille",
    )),
    KeywordRule(IntentCategory.PRICE, (
        "price", "cost", "value", "precio", "prix",
    )),
    NavigationCommandRule(NAVIGATION_TRIGGERS),
    KeywordRule(IntentCategory.STAKING, (
        "stake", "staking", "earn", "reward", "apy",
    )),
    NAVIGATION_TRIGGERS,
    KeywordRule(IntentCategory.SEND_MONEY, (
        "send", "transfer", "pay",
    )),
    KeywordRule(IntentCategory.BUY_CRYPTO, (
        "buy", "purchase", "get",
    )),
    KeywordRule(IntentCategory.DEFI, (
        "defi", "yield", "liquidity", "farm", "lending",
    )),
    KeywordRule(IntentCategory.TRADING, (
        "trade", "trading", "market",
    )),
)


class IntentClassifier:
    """
    Deterministic text -> Intent mapping.

    Rule tables are injectable so precedence can be audited and tested in
    isolation; the defaults reproduce the production ordering.
    """

    def __init__(
        self,
        rules: Sequence[Rule] = INTENT_RULES,
        destinations: Sequence[DestinationRule] = DESTINATION_RULES,
        *,
        session_id: str | None = None,
    ) -> None:
        self._rules = tuple(rules)
        self._destinations = tuple(destinations)
        self._session_id = session_id

    @property
    def precedence(self) -> tuple[IntentCategory, ...]:
        """Distinct categories in evaluation order, DEFAULT last."""
        ordered: list[IntentCategory] = []
        for rule in self._rules:
            if rule.category not in ordered:
                ordered.append(rule.category)
        ordered.append(IntentCategory.DEFAULT)
        return tuple(ordered)

    def classify(self, text: str) -> Intent:
        lowered = text.lower()
        intent = Intent(category=IntentCategory.DEFAULT)

        for rule in self._rules:
            if rule.matches(lowered):
                intent = Intent(category=rule.category)
                break

        if intent.category is IntentCategory.NAVIGATION:
            intent = Intent(
                category=IntentCategory.NAVIGATION,
                target=resolve_destination(lowered, self._destinations),
            )

        log_event({
            "event_type": "INTENT_CLASSIFIED",
            "session_id": self._session_id,
            "category": intent.category.value,
            "target": intent.target.value,
            "text_len": len(text),
        })
        return intent
