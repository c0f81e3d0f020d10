"""
Render tokens as printable strings for log lines and error messages.
"""

import unicodedata
from typing import Final

_SHORT_ESCAPES: Final[dict[str, str]] = {"\t": "\\t", "\n": "\\n", "\r": "\\r"}


def _render_char(c: str) -> str:
    if c in _SHORT_ESCAPES:
        return _SHORT_ESCAPES[c]
    # Cc, Cf, Cn, Co, Cs all share the leading C
    if unicodedata.category(c).startswith("C"):
        return f"\\u{ord(c):04x}"
    return c


def render_token(token: bytes) -> str:
    """
    Return ``token`` as readable text with control characters escaped.

    Bytes that are not valid UTF-8 on their own, such as the single bytes of
    a byte-level table, are shown as ``\\xNN``.
    """
    text = token.decode("utf-8", errors="backslashreplace")
    return "".join(_render_char(c) for c in text)
