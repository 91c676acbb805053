# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from config import AppConfig


def test_defaults_when_env_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ENV", "LOG_LEVEL", "ENABLE_JSON_LOGS", "ASSISTANT_NAME",
        "DEFAULT_LANGUAGE", "SIMULATE_REPLY_LATENCY", "RANDOM_SEED",
    ):
        monkeypatch.delenv(name, raising=False)

    config = AppConfig.load_from_env()

    assert config == AppConfig()
    assert config.assistant_name == "Nova"
    assert config.default_language == "en"
    assert config.simulate_reply_latency is True
    assert config.random_seed is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("ENABLE_JSON_LOGS", "0")
    monkeypatch.setenv("ASSISTANT_NAME", "Ava")
    monkeypatch.setenv("DEFAULT_LANGUAGE", "es")
    monkeypatch.setenv("SIMULATE_REPLY_LATENCY", "0")
    monkeypatch.setenv("RANDOM_SEED", "7")

    config = AppConfig.load_from_env()

    assert config.env == "prod"
    assert config.enable_json_logs is False
    assert config.assistant_name == "Ava"
    assert config.default_language == "es"
    assert config.simulate_reply_latency is False
    assert config.random_seed == 7


def test_bad_seed_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RANDOM_SEED", "seven")

    with pytest.raises(ValueError):
        AppConfig.load_from_env()
