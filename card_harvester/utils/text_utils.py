"""Text helpers shared by the extractors and the table emitter."""

import re
import unicodedata
from typing import Any, Tuple


_WHITESPACE = re.compile(r'\s+')

# Katakana block that has a hiragana counterpart exactly 0x60 code points below
_KATAKANA_START = 0x30A1
_KATAKANA_END = 0x30F6
_KANA_OFFSET = 0x60


def normalize_text(value: Any) -> str:
    """Collapse whitespace the way every stored field value is cleaned.

    Non-breaking spaces become plain spaces, whitespace runs collapse to one
    space and the result is trimmed. ``None`` becomes an empty string.
    """
    if value is None:
        return ''
    text = str(value).replace('\u00a0', ' ')
    return _WHITESPACE.sub(' ', text).strip()


def strip_trailing_colon(key: str) -> str:
    """Drop a trailing half-width or full-width colon from a field label."""
    return key.rstrip(':：').rstrip()


def _fold_kana(text: str) -> str:
    chars = []
    for ch in text:
        code = ord(ch)
        if _KATAKANA_START <= code <= _KATAKANA_END:
            chars.append(chr(code - _KANA_OFFSET))
        else:
            chars.append(ch)
    return ''.join(chars)


def collation_key(text: str) -> Tuple[str, str, str]:
    """Sort key approximating Japanese locale collation.

    Primary level ignores width, case and the hiragana/katakana distinction;
    the secondary levels keep the order deterministic for strings that only
    differ in those respects.
    """
    text = text or ''
    width_folded = unicodedata.normalize('NFKC', text)
    primary = _fold_kana(width_folded).casefold()
    return (primary, width_folded.casefold(), text)
