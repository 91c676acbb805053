"""Recognition language tag resolution."""

from __future__ import annotations

from typing import Mapping

from constants import DEFAULT_SPEECH_LANGUAGE_TAG, SPEECH_LANGUAGE_TAGS


def resolve_language_tag(
    language: str | None,
    *,
    tags: Mapping[str, str] = SPEECH_LANGUAGE_TAGS,
    default: str = DEFAULT_SPEECH_LANGUAGE_TAG,
) -> str:
    """
    Resolve an interface language into a recognizer language tag.

    Order: exact match, then primary subtag ("pt-BR" -> "pt"), then default.
    Never raises; unknown, empty or None input yields the default.
    """
    if not language:
        return default

    key = language.strip()
    if key in tags:
        return tags[key]

    primary = key.replace("_", "-").split("-")[0].lower()
    return tags.get(primary, default)
