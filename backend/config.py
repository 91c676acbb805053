"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No conversation logic
- No behavioral constants (see constants.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from constants import DEFAULT_ASSISTANT_NAME, DEFAULT_REPLY_LANGUAGE


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default) == "1"


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the gateway, which builds one chat session per client.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str = "dev"
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool = True

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    assistant_name: str = DEFAULT_ASSISTANT_NAME
    default_language: str = DEFAULT_REPLY_LANGUAGE

    # Artificial reply delay; disabled in tests and fast REPL runs
    simulate_reply_latency: bool = True

    # Seed for reply selection; None means non-deterministic
    random_seed: int | None = None

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if RANDOM_SEED is set but not an integer.
        """
        raw_seed = os.environ.get("RANDOM_SEED")

        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            enable_json_logs=_env_flag("ENABLE_JSON_LOGS", "1"),

            assistant_name=os.environ.get("ASSISTANT_NAME", DEFAULT_ASSISTANT_NAME),
            default_language=os.environ.get("DEFAULT_LANGUAGE", DEFAULT_REPLY_LANGUAGE),
            simulate_reply_latency=_env_flag("SIMULATE_REPLY_LATENCY", "1"),
            random_seed=int(raw_seed) if raw_seed else None,
        )
