"""
Reply generation from locale tables.

Responsibilities:
- Resolve (intent, language) to exactly one reply string
- Apply language and category fallback to the English root table
- Substitute the assistant's display name
- Simulate assistant "thinking" with an artificial delay

Non-responsibilities:
- No classification
- No message log writes
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, Mapping

from constants import (
    DEFAULT_ASSISTANT_NAME,
    DEFAULT_REPLY_LANGUAGE,
    REPLY_DELAY_MAX_MS,
    REPLY_DELAY_MIN_MS,
    ms_to_seconds,
)
from intent.categories import Intent, IntentCategory, NavigationTarget
from observability.logger import log_event
from replies.tables import (
    LOCALE_RESPONSE_TABLES,
    NAVIGATION_CONFIRMATIONS,
    LocaleResponseTable,
    validate_tables,
)


SleepFn = Callable[[float], Awaitable[None]]


class ResponseGenerator:
    """
    Picks a localized reply template for an intent.

    Randomness and sleeping are injected: pass a seeded random.Random and a
    no-op sleep for deterministic tests.
    """

    def __init__(
        self,
        *,
        assistant_name: str = DEFAULT_ASSISTANT_NAME,
        tables: Mapping[str, LocaleResponseTable] = LOCALE_RESPONSE_TABLES,
        confirmations: Mapping[NavigationTarget, str] = NAVIGATION_CONFIRMATIONS,
        root_language: str = DEFAULT_REPLY_LANGUAGE,
        rng: random.Random | None = None,
        simulate_latency: bool = True,
        sleep: SleepFn = asyncio.sleep,
        session_id: str | None = None,
    ) -> None:
        validate_tables(tables, root_language)

        self._assistant_name = assistant_name
        self._tables = tables
        self._confirmations = confirmations
        self._root_language = root_language
        self._rng = rng or random.Random()
        self._simulate_latency = simulate_latency
        self._sleep = sleep
        self._session_id = session_id

    @property
    def assistant_name(self) -> str:
        return self._assistant_name

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def variants(self, category: IntentCategory, language: str | None) -> tuple[str, ...]:
        """
        Candidate templates for (category, language) after fallback.

        Language absent -> root table. Category absent in the chosen table
        -> root table's entries for that category. Never raises for a known
        category.
        """
        table = self._tables.get(_primary(language), self._tables[self._root_language])
        candidates = table.get(category)
        if not candidates:
            candidates = self._tables[self._root_language][category]
        return candidates

    def render(self, template: str) -> str:
        return template.replace("{assistant_name}", self._assistant_name)

    def select(self, intent: Intent, language: str | None) -> str:
        """Choose a reply without any delay."""
        if intent.category is IntentCategory.NAVIGATION and intent.navigates:
            confirmation = self._confirmations.get(intent.target)
            if confirmation is not None:
                return self.render(confirmation)

        candidates = self.variants(intent.category, language)
        return self.render(self._rng.choice(candidates))

    def next_delay_ms(self) -> float:
        """Uniform draw from [REPLY_DELAY_MIN_MS, REPLY_DELAY_MAX_MS)."""
        span = REPLY_DELAY_MAX_MS - REPLY_DELAY_MIN_MS
        return REPLY_DELAY_MIN_MS + self._rng.random() * span

    async def generate(self, intent: Intent, language: str | None) -> str:
        """Wait out the simulated processing window, then select a reply."""
        if self._simulate_latency:
            delay_ms = self.next_delay_ms()
            log_event({
                "event_type": "REPLY_DELAY_STARTED",
                "session_id": self._session_id,
                "delay_ms": round(delay_ms),
            })
            await self._sleep(ms_to_seconds(delay_ms))

        return self.select(intent, language)


def _primary(language: str | None) -> str:
    """'es-ES' -> 'es'; None/empty -> ''."""
    if not language:
        return ""
    return language.replace("_", "-").split("-")[0].lower()
