"""Space-separated ``key: value`` field grammar.

Identity, system, library, and device strings share one grammar: a value
extends from its key until the next key token or end of string. Keys may
be written as ``key: value`` or ``key:value``. Unrecognized keys, the words
that follow them, and words before the first key are kept aside as
unparsed text. The grammar never fails: text with no recognized key yields
an all-null, partially parsed record.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Sequence

from core.constants import NULL_LITERAL

_KEY_TOKEN_PATTERN = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_]*):(?P<rest>.*)$")


@dataclass(frozen=True)
class KeyValueParse:
    """Values extracted from one key/value field.

    Attributes:
        values: Value per recognized key, None when absent or ``null``.
        unparsed: Tokens that belong to no recognized key.
    """

    values: dict[str, str | None]
    unparsed: tuple[str, ...]

    @property
    def is_partial(self) -> bool:
        """Return whether some tokens could not be attributed to a key."""
        return bool(self.unparsed)


def parse_key_value_field(raw_value: str | None, keys: Sequence[str]) -> KeyValueParse:
    """Parse one raw field into values for a fixed key set.

    Args:
        raw_value: Raw field text, possibly None.
        keys: Recognized keys, matched case-insensitively.

    Returns:
        Parsed values plus unattributed tokens.
    """
    values: dict[str, str | None] = {key: None for key in keys}
    if raw_value is None:
        return KeyValueParse(values=values, unparsed=())
    text = raw_value.strip()
    if not text or text.lower() == NULL_LITERAL:
        return KeyValueParse(values=values, unparsed=())
    recognized_keys = {key.lower(): key for key in keys}
    collected: dict[str, list[str]] = {}
    unparsed: list[str] = []
    current_key: str | None = None
    for token in text.split():
        key_token = _split_key_token(token)
        if key_token is not None:
            key_name, first_word = key_token
            current_key = recognized_keys.get(key_name.lower())
            if current_key is None:
                unparsed.append(token)
                continue
            collected[current_key] = [first_word] if first_word else []
            continue
        if current_key is None:
            unparsed.append(token)
            continue
        collected[current_key].append(token)
    for key, words in collected.items():
        values[key] = _normalize_value(words)
    return KeyValueParse(values=values, unparsed=tuple(unparsed))


def _split_key_token(token: str) -> tuple[str, str] | None:
    """Return (key name, attached value) when token starts any key.

    A ``scheme://`` token is a value, never a key.
    """
    match = _KEY_TOKEN_PATTERN.match(token)
    if match is None:
        return None
    rest = match.group("rest")
    if rest.startswith("//"):
        return None
    return match.group("key"), rest


def _normalize_value(words: list[str]) -> str | None:
    value = " ".join(words).strip()
    if not value or value.lower() == NULL_LITERAL:
        return None
    return value
