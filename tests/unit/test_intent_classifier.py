# pylint: disable=missing-module-docstring,missing-function-docstring
import json

import pytest

from intent.categories import Intent, IntentCategory, NavigationTarget
from intent.classifier import (
    INTENT_RULES,
    IntentClassifier,
    KeywordRule,
    resolve_destination,
)
from observability import logger


C = IntentCategory
T = NavigationTarget


@pytest.fixture
def classifier() -> IntentClassifier:
    return IntentClassifier()


@pytest.mark.parametrize(
    ("text", "category"),
    [
        ("Hello there", C.GREETING),
        ("hello, what's my balance?", C.GREETING),
        ("What's my balance?", C.BALANCE),
        ("How much is my portfolio worth", C.BALANCE),
        ("Show me current prices", C.PRICE),
        ("I want to earn rewards", C.STAKING),
        ("my microphone is not working", C.VOICE_HELP),
        ("how are you doing", C.HOW_ARE_YOU),
        ("transfer 5 ICP to bob", C.SEND_MONEY),
        ("I'd like to purchase ICP", C.BUY_CRYPTO),
        ("liquidity pools", C.DEFI),
        ("trading ideas", C.TRADING),
        ("quelle est la météo", C.DEFAULT),
        ("", C.DEFAULT),
    ],
)
def test_first_matching_rule_wins(classifier: IntentClassifier, text: str, category: C) -> None:
    assert classifier.classify(text).category is category


def test_matching_is_case_insensitive(classifier: IntentClassifier) -> None:
    assert classifier.classify("WHAT'S MY BALANCE").category is C.BALANCE


def test_matching_is_substring_based(classifier: IntentClassifier) -> None:
    # "hi" inside "this" counts
    assert classifier.classify("this").category is C.GREETING


def test_direct_navigation_command_resolves_destination(classifier: IntentClassifier) -> None:
    assert classifier.classify("take me to staking") == Intent(C.NAVIGATION, T.STAKE)


@pytest.mark.parametrize(
    ("text", "category"),
    [
        ("show me my portfolio", C.BALANCE),
        ("open my portfolio balance", C.BALANCE),
        ("go to my portfolio", C.BALANCE),
        ("show me the price to swap", C.PRICE),
    ],
)
def test_balance_and_price_outrank_navigation_commands(
    classifier: IntentClassifier,
    text: str,
    category: C,
) -> None:
    assert classifier.classify(text) == Intent(category)


@pytest.mark.parametrize(
    ("text", "target"),
    [
        ("open swap", T.SWAP),
        ("navigate to exchange", T.SWAP),
        ("show me defi", T.DEFI),
        ("open the send page", T.SEND),
        ("open receive", T.RECEIVE),
    ],
)
def test_navigation_targets(classifier: IntentClassifier, text: str, target: T) -> None:
    intent = classifier.classify(text)

    assert intent.category is C.NAVIGATION
    assert intent.target is target
    assert intent.navigates


def test_trigger_without_destination_has_no_target(classifier: IntentClassifier) -> None:
    intent = classifier.classify("navigate somewhere")

    assert intent == Intent(C.NAVIGATION, T.NONE)
    assert not intent.navigates


def test_non_navigation_intents_never_carry_a_target(classifier: IntentClassifier) -> None:
    assert classifier.classify("send 50 ICP").target is T.NONE


def test_resolve_destination_order() -> None:
    assert resolve_destination("portfolio swap") is T.PORTFOLIO
    assert resolve_destination("nothing here") is T.NONE


def test_precedence_is_explicit_and_default_last(classifier: IntentClassifier) -> None:
    assert classifier.precedence == (
        C.VOICE_HELP,
        C.GREETING,
        C.HOW_ARE_YOU,
        C.BALANCE,
        C.PRICE,
        C.NAVIGATION,
        C.STAKING,
        C.SEND_MONEY,
        C.BUY_CRYPTO,
        C.DEFI,
        C.TRADING,
        C.DEFAULT,
    )


def test_injected_rules_replace_defaults() -> None:
    classifier = IntentClassifier(rules=(KeywordRule(C.PRICE, ("HOLA",)),))

    assert classifier.classify("hola amigo").category is C.PRICE
    assert classifier.classify("hello").category is C.DEFAULT


def test_keyword_rule_requires_keywords() -> None:
    with pytest.raises(ValueError):
        KeywordRule(C.PRICE, ())


def test_default_rules_cover_every_category_but_default() -> None:
    covered = {rule.category for rule in INTENT_RULES}
    assert covered == set(C) - {C.DEFAULT}


def test_classification_is_logged(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)

    IntentClassifier(session_id="sess_1").classify("open swap")

    event = json.loads(captured[-1])
    assert event["event_type"] == "INTENT_CLASSIFIED"
    assert event["session_id"] == "sess_1"
    assert event["category"] == "navigation"
    assert event["target"] == "swap"
