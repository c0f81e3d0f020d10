"""
Codepoint splitting over raw UTF-8 bytes.
"""

from typing import Final

import regex as re

from .types import Token

# one well-formed sequence per lead byte class; any other byte stands alone
_CODEPOINT_RE: Final = re.compile(
    rb"[\x00-\x7f]|"
    rb"[\xc0-\xdf][\x80-\xbf]|"
    rb"[\xe0-\xef][\x80-\xbf]{2}|"
    rb"[\xf0-\xf7][\x80-\xbf]{3}|"
    rb".",
    re.DOTALL,
)

UNICODE_SPACES: Final[frozenset[int]] = frozenset(
    [
        # ASCII control spaces
        0x0009, 0x000A, 0x000B, 0x000C, 0x000D,
        0x0020, 0x0085, 0x00A0, 0x1680,
        *range(0x2000, 0x200B),
        0x2028, 0x2029, 0x202F, 0x205F, 0x3000,
    ]
)  # fmt: skip


def split_into_codepoints(data: bytes) -> list[Token]:
    """
    Split UTF-8 bytes into one piece per codepoint.

    Pieces concatenate back to ``data`` exactly. A byte that cannot start a
    well-formed sequence becomes a one-byte piece of its own. Sequences are
    grouped by lead byte only, so overlong forms (``\\xc0``/``\\xc1`` leads)
    and ``\\xf5``-``\\xf7`` leads still form one piece; such pieces are not
    valid UTF-8 and never count as whitespace.
    """
    return _CODEPOINT_RE.findall(data)


def is_unicode_space(piece: bytes) -> bool:
    """Return True if ``piece`` is exactly one whitespace codepoint."""
    try:
        cp = piece.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return len(cp) == 1 and ord(cp) in UNICODE_SPACES
