"""Factory functions for creating alphabets."""

import logging
import os
from pathlib import Path
from typing import Final

from ._codec import serialize_entries
from .alphabet import Alphabet
from .errors import ConfigLoadError
from .strategy import ByteStrategy, StrategyName, TokenizationStrategy

# byte alphabet: labels 0..254 hold bytes 0x01..0xff
BYTE_ALPHABET_SIZE: Final[int] = 255

log = logging.getLogger(__name__)


def byte_alphabet() -> Alphabet:
    """
    Build the identity byte table used for byte-level decoding.

    Every byte value ``b`` from 1 to 255 is its own token with label ``b - 1``,
    so the space label is 31. Encoding uses the byte strategy.

    .. code-block:: python

        alphabet = byte_alphabet()
        alphabet.encode("héllo")  # one label per UTF-8 byte
    """
    entries = [(b - 1, bytes([b])) for b in range(1, BYTE_ALPHABET_SIZE + 1)]
    buffer = serialize_entries(BYTE_ALPHABET_SIZE, entries)
    return Alphabet.from_buffer(buffer, strategy=ByteStrategy())


def get_alphabet(
    config: str | os.PathLike,
    strategy: "StrategyName | TokenizationStrategy" = "codepoint",
) -> Alphabet:
    """
    Load an alphabet from a config file.

    :param config: Path to the textual alphabet config.
    :param strategy: "codepoint" splits text per codepoint, "byte" per raw byte.
    :raises ConfigLoadError: If the config cannot be read.
    :raises StrategyError: If the strategy name is unknown.

    .. code-block:: python

        alphabet = get_alphabet("data/alphabet.txt")
        labels = alphabet.encode("hello")
    """
    return Alphabet.from_config(config, strategy=strategy)


def from_pretrained(
    path: str | os.PathLike,
    strategy: "StrategyName | TokenizationStrategy" = "codepoint",
) -> Alphabet:
    """
    Load an alphabet written by ``Alphabet.save``.

    :param path: Path to the serialized alphabet.
    :raises ConfigLoadError: If the file cannot be read.
    :raises MalformedBufferError: If the file contents are truncated.
    """
    path = Path(path)
    log.info(f"loading serialized alphabet from {path}")
    try:
        buffer = path.read_bytes()
    except OSError as e:
        raise ConfigLoadError(
            f"cannot read serialized alphabet: {e.strerror}", path=str(path)
        ) from e
    return Alphabet.from_buffer(buffer, strategy=strategy)


__all__ = [
    "BYTE_ALPHABET_SIZE",
    "byte_alphabet",
    "get_alphabet",
    "from_pretrained",
]
