"""
CONSTANTS
---------
Single source of truth for all behavioral invariants of the command engine.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final, Mapping, Tuple

# =============================================================================
# Speech capture session
# =============================================================================

# A listening attempt with no terminal event is force-stopped after this
SPEECH_LISTEN_TIMEOUT_MS: Final[int] = 10_000

# Recognition config handed to the capture capability
SPEECH_CONTINUOUS: Final[bool] = False
SPEECH_INTERIM_RESULTS: Final[bool] = False
SPEECH_MAX_ALTERNATIVES: Final[int] = 1

# =============================================================================
# Language resolution
# =============================================================================

DEFAULT_SPEECH_LANGUAGE_TAG: Final[str] = "en-US"

SPEECH_LANGUAGE_TAGS: Final[Mapping[str, str]] = {
    "en": "en-US",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "it": "it-IT",
    "pt": "pt-PT",
    "ru": "ru-RU",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "zh": "zh-CN",
    "hi": "hi-IN",
    "ar": "ar-SA",
    "nl": "nl-NL",
    "pl": "pl-PL",
    # No recognizer support for Twi / Swahili; capture in English
    "tw": "en-US",
    "sw": "en-US",
}

# Root fallback table for replies
DEFAULT_REPLY_LANGUAGE: Final[str] = "en"

# =============================================================================
# Reply generation
# =============================================================================

# Artificial "thinking" delay, drawn uniformly from [min, max)
REPLY_DELAY_MIN_MS: Final[int] = 800
REPLY_DELAY_MAX_MS: Final[int] = 2_000

DEFAULT_ASSISTANT_NAME: Final[str] = "Nova"

# =============================================================================
# Conversation texts
# =============================================================================

WELCOME_TEMPLATE: Final[str] = (
    "Hello! I'm {assistant_name}, your VoiceChain AI assistant. "
    "I'm here to help you with everything crypto and DeFi related. "
    "You can speak to me or type - I understand multiple languages! {hint}"
)

WELCOME_HINT_VOICE: Final[str] = (
    "Try saying \"What's my balance?\" or \"Show me current prices\" to get started!"
)

WELCOME_HINT_TEXT_ONLY: Final[str] = (
    "Note: Voice recognition is not supported on this device, "
    "but you can still type to me!"
)

RECOGNITION_ERROR_TEMPLATE: Final[str] = (
    "Voice recognition error: {message}. "
    "Please try typing your message or check your microphone permissions."
)

REPLY_FAILURE_APOLOGY: Final[str] = (
    "I'm sorry, I encountered an error processing your request. Please try again."
)

CAPTURE_START_FAILED_MESSAGE: Final[str] = "Failed to start voice recognition"

CAPTURE_UNSUPPORTED_MESSAGE: Final[str] = (
    "Speech recognition is not supported on this device"
)

# =============================================================================
# Navigation trigger phrases
# =============================================================================

NAVIGATION_TRIGGER_PHRASES: Final[Tuple[str, ...]] = (
    "go to",
    "open",
    "navigate",
    "show me",
    "take me to",
)

# =============================================================================
# Helper Functions
# =============================================================================

def ms_to_seconds(duration_ms: float) -> float:
    """
    Convert milliseconds to seconds for asyncio.sleep().

    Edge cases:
    - Non-positive input returns 0.0.
    """
    if duration_ms <= 0:
        return 0.0
    return duration_ms / 1000.0
