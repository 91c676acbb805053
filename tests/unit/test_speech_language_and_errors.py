# pylint: disable=missing-module-docstring,missing-function-docstring
import pytest

from speech.errors import (
    ERROR_MESSAGES,
    RecognitionErrorKind,
    is_suppressed,
    kind_from_code,
    user_message,
)
from speech.language import resolve_language_tag


@pytest.mark.parametrize(
    ("language", "expected"),
    [
        ("en", "en-US"),
        ("es", "es-ES"),
        ("ja", "ja-JP"),
        ("pt-BR", "pt-PT"),
        ("zh_TW", "zh-CN"),
        ("FR", "fr-FR"),
        ("tw", "en-US"),
        ("sw", "en-US"),
        ("xx", "en-US"),
        ("", "en-US"),
        (None, "en-US"),
    ],
)
def test_resolve_language_tag(language: str | None, expected: str) -> None:
    assert resolve_language_tag(language) == expected


def test_resolve_language_tag_uses_injected_table() -> None:
    assert resolve_language_tag("xx", tags={"xx": "xx-YY"}, default="en-GB") == "xx-YY"
    assert resolve_language_tag("yy", tags={}, default="en-GB") == "en-GB"


@pytest.mark.parametrize(
    ("code", "kind"),
    [
        ("no-speech", RecognitionErrorKind.NO_SPEECH),
        ("audio-capture", RecognitionErrorKind.AUDIO_CAPTURE_DENIED),
        ("not-allowed", RecognitionErrorKind.PERMISSION_DENIED),
        ("network", RecognitionErrorKind.NETWORK_ERROR),
        ("aborted", RecognitionErrorKind.ABORTED),
        ("language-not-supported", RecognitionErrorKind.UNKNOWN),
        (None, RecognitionErrorKind.UNKNOWN),
    ],
)
def test_kind_from_code(code: str | None, kind: RecognitionErrorKind) -> None:
    assert kind_from_code(code) is kind


def test_every_visible_kind_has_a_message() -> None:
    for kind in RecognitionErrorKind:
        if is_suppressed(kind):
            assert user_message(kind) is None
        else:
            assert user_message(kind) == ERROR_MESSAGES[kind]
            assert ERROR_MESSAGES[kind]
