"""
Bidirectional mapping between text tokens and dense integer labels.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import BinaryIO

from ._codec import deserialize_entries, serialize_entries
from ._codepoints import is_unicode_space, split_into_codepoints
from ._decorators import log_construction
from ._lines import iter_lines
from ._sanitise import render_token
from .errors import (
    AlphabetError,
    ConfigLoadError,
    UnknownLabelError,
    UnknownTokenError,
)
from .strategy import StrategyName, TokenizationStrategy, get_strategy
from .types import Label, Labels, TextLike, Token

COMMENT_PREFIX = b"#"
ESCAPED_COMMENT = b"\\#"
SPACE_TOKEN = b" "

log = logging.getLogger(__name__)


def _as_bytes(text: TextLike) -> bytes:
    """Return ``text`` as UTF-8 bytes."""
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


class Alphabet:
    """
    Label table mapping tokens to labels and back.

    Tables are populated once, by ``from_config`` or ``from_buffer``, and are
    read-only afterwards. How input text is cut into tokens is decided by the
    tokenization strategy the table was built with.
    """

    def __init__(
        self, strategy: "StrategyName | TokenizationStrategy" = "codepoint"
    ) -> None:
        """Initialize an empty table; use the ``from_*`` constructors to fill it."""
        self._strategy = get_strategy(strategy)
        # label -> token, and token -> the latest label holding it
        self._label_to_token: dict[Label, Token] = {}
        self._token_to_label: dict[Token, Label] = {}
        self._size = 0
        self._space_label: Label | None = None

    # construction
    # ---------------------------------------------------------------------------

    @classmethod
    @log_construction
    def from_config(
        cls,
        source: str | os.PathLike | BinaryIO,
        strategy: "StrategyName | TokenizationStrategy" = "codepoint",
    ) -> "Alphabet":
        """
        Build a table from a line-oriented config.

        One token per line. Lines starting with ``#`` are comments, a line of
        exactly ``\\#`` is the token ``#``, blank lines are ignored and a line
        holding a single whitespace codepoint marks the space label.

        :param source: Path to the config file or an open binary stream.
        :param strategy: Tokenization strategy name or instance.
        :raises ConfigLoadError: If the source cannot be opened or read.
        """
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            log.info(f"loading alphabet config from {path}")
            try:
                with path.open("rb") as f:
                    return cls._parse_config(f, strategy)
            except OSError as e:
                raise ConfigLoadError(
                    f"cannot read alphabet config: {e.strerror}", path=str(path)
                ) from e

        try:
            return cls._parse_config(source, strategy)
        except OSError as e:
            raise ConfigLoadError("cannot read alphabet config stream") from e

    @classmethod
    def _parse_config(
        cls,
        stream: BinaryIO,
        strategy: "StrategyName | TokenizationStrategy",
    ) -> "Alphabet":
        alphabet = cls(strategy)
        label = 0
        for line in iter_lines(stream):
            if line == ESCAPED_COMMENT:
                line = COMMENT_PREFIX
            elif line.startswith(COMMENT_PREFIX):
                log.debug(f"skipping comment line {render_token(line)!r}")
                continue

            if not line:
                continue

            cps = split_into_codepoints(line)
            if len(cps) == 1 and is_unicode_space(cps[0]):
                alphabet._space_label = label

            if alphabet._insert(label, line):
                log.warning(
                    f"duplicate token {render_token(line)!r} in config, "
                    f"it now encodes to label {label}"
                )
            label += 1

        alphabet._size = label

        if alphabet._space_label is None:
            log.warning("alphabet config defines no whitespace token")
        return alphabet

    @classmethod
    @log_construction
    def from_buffer(
        cls,
        buffer: bytes | bytearray | memoryview,
        strategy: "StrategyName | TokenizationStrategy" = "codepoint",
    ) -> "Alphabet":
        """
        Build a table from bytes produced by ``serialize``.

        ``size`` is taken from the declared entry count. A repeated label
        replaces its earlier token; a repeated token keeps its earlier labels
        decodable and encodes to the latest one.

        :param buffer: Serialized table.
        :param strategy: Tokenization strategy name or instance.
        :raises MalformedBufferError: If the buffer is truncated.
        """
        count, entries = deserialize_entries(buffer)

        alphabet = cls(strategy)
        replaced = 0
        for label, token in entries:
            replaced += alphabet._insert(label, token)
        alphabet._size = count
        alphabet._space_label = alphabet._token_to_label.get(SPACE_TOKEN)

        if replaced:
            log.warning(f"{replaced} buffer entries repeat an earlier label or token")
        if len(alphabet._label_to_token) != count:
            log.warning(
                f"buffer declares {count} entries but holds "
                f"{len(alphabet._label_to_token)} distinct labels"
            )
        return alphabet

    def _insert(self, label: Label, token: Token) -> bool:
        """
        Map ``label`` to ``token`` and ``token`` to ``label``.

        A token seen again under a new label encodes to the new label while
        the earlier label still decodes to it. A label seen again drops its
        old token, which then encodes to another label holding it, if any.
        Every label decodes to a token that encodes to a label decoding to
        the same token. Returns True if an earlier entry was affected.
        """
        changed = False
        old_token = self._label_to_token.get(label)
        if old_token is not None and old_token != token:
            changed = True
            if self._token_to_label.get(old_token) == label:
                del self._token_to_label[old_token]
                aliases = [
                    other
                    for other, tok in self._label_to_token.items()
                    if tok == old_token and other != label
                ]
                if aliases:
                    self._token_to_label[old_token] = aliases[-1]
        old_label = self._token_to_label.get(token)
        if old_label is not None and old_label != label:
            changed = True
        self._label_to_token[label] = token
        self._token_to_label[token] = label
        return changed

    # properties
    # ---------------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of labels the table declares."""
        return self._size

    @property
    def space_label(self) -> Label | None:
        """Label of the whitespace token, or None if the table has none."""
        return self._space_label

    @property
    def strategy(self) -> TokenizationStrategy:
        return self._strategy

    def is_space(self, label: Label) -> bool:
        """Return True if ``label`` is the space label."""
        return self._space_label is not None and label == self._space_label

    def has_token(self, token: TextLike) -> bool:
        """Return True if ``token`` is stored in the table."""
        return _as_bytes(token) in self._token_to_label

    def has_label(self, label: Label) -> bool:
        """Return True if ``label`` is stored in the table."""
        return label in self._label_to_token

    def labels(self) -> list[Label]:
        return sorted(self._label_to_token)

    def tokens(self) -> list[Token]:
        return [self._label_to_token[label] for label in self.labels()]

    def items(self) -> list[tuple[Label, Token]]:
        """Return (label, token) pairs sorted by label."""
        return sorted(self._label_to_token.items())

    # encoding and decoding
    # ---------------------------------------------------------------------------

    def can_encode_token(self, token: TextLike) -> bool:
        """Return True if ``token`` may be passed to ``encode_token``."""
        return self._strategy.can_encode_token(self, _as_bytes(token))

    def can_encode(self, text: TextLike) -> bool:
        """Return True if every token of ``text`` may be passed to ``encode_token``."""
        return self._strategy.can_encode(self, _as_bytes(text))

    def encode_token(self, token: TextLike) -> Label:
        """
        Return the label of a single token.

        :raises UnknownTokenError: If the token is not in the table.
        """
        token = _as_bytes(token)
        try:
            return self._token_to_label[token]
        except KeyError:
            raise UnknownTokenError("token not in alphabet", token=token) from None

    def decode_label(self, label: Label) -> Token:
        """
        Return the token of a single label.

        :raises UnknownLabelError: If the label is not in the table.
        """
        try:
            return self._label_to_token[label]
        except KeyError:
            raise UnknownLabelError("label not in alphabet", label=label) from None

    def encode(self, text: TextLike) -> Labels:
        """
        Encode text into one label per token.

        Tokens are codepoints or raw bytes depending on the strategy.

        :raises UnknownTokenError: If a token of ``text`` is not in the table.
        """
        return [self.encode_token(tok) for tok in self._strategy.split(_as_bytes(text))]

    def decode_bytes(self, labels: Iterable[Label]) -> bytes:
        """
        Concatenate the tokens of ``labels``.

        :raises UnknownLabelError: If any label is not in the table.
        """
        return b"".join(self.decode_label(label) for label in labels)

    def decode(self, labels: Iterable[Label], errors: str = "replace") -> str:
        """
        Decode labels back into text.

        :param errors: How to handle invalid UTF-8, "strict" or "replace" (default: "replace").
        :raises UnknownLabelError: If any label is not in the table.
        """
        return self.decode_bytes(labels).decode("utf-8", errors=errors)

    # persistence
    # ---------------------------------------------------------------------------

    def serialize(self) -> bytes:
        """
        Serialize the table, entries ordered by label.

        :raises AlphabetError: If size, a label or a token length exceeds 16
            bits, or if ``size`` differs from the number of stored labels.
        """
        items = self.items()
        if len(items) != self._size:
            raise AlphabetError(
                f"size does not match stored labels (size: {self._size}) "
                f"(labels: {len(items)}) "
            )
        return serialize_entries(self._size, items)

    def save(self, path: str | os.PathLike) -> None:
        """Write ``serialize()`` output to ``path``."""
        path = Path(path)
        # create directory if does not exist
        path.parent.mkdir(parents=True, exist_ok=True)
        log.info(f"saving alphabet to {path}")
        path.write_bytes(self.serialize())

    def save_config(self, path: str | os.PathLike) -> None:
        """
        Write the table as a config file that ``from_config`` reads back.

        :raises AlphabetError: If labels are not exactly ``0..size-1`` or a
            token cannot be written as a config line.
        """
        if self.labels() != list(range(self._size)):
            raise AlphabetError("config form requires contiguous labels starting at 0")

        lines = []
        for token in self.tokens():
            if token == COMMENT_PREFIX:
                lines.append(ESCAPED_COMMENT)
                continue
            if (
                not token
                or b"\n" in token
                or b"\r" in token
                or token.startswith(COMMENT_PREFIX)
                or token == ESCAPED_COMMENT
            ):
                raise AlphabetError(
                    f"token cannot be written as a config line (token: {render_token(token)!r}) "
                )
            lines.append(token)

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        log.info(f"saving alphabet config to {path}")
        path.write_bytes(b"".join(line + b"\n" for line in lines))

    # dunder
    # ---------------------------------------------------------------------------

    def __len__(self) -> int:
        return self._size

    def __contains__(self, item: object) -> bool:
        if isinstance(item, int):
            return self.has_label(item)
        if isinstance(item, (str, bytes, bytearray, memoryview)):
            return self.has_token(item)
        return False

    def __iter__(self) -> Iterator[tuple[Label, Token]]:
        return iter(self.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return (
            self._strategy.name == other._strategy.name
            and self._size == other._size
            and self._space_label == other._space_label
            and self._label_to_token == other._label_to_token
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(size={self._size}, "
            f"space_label={self._space_label}, strategy={self._strategy.name!r})"
        )
