"""Tokenization strategies for alphabet encoding."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Final, Literal, override

from ._codepoints import split_into_codepoints
from .errors import StrategyError
from .types import Token

if TYPE_CHECKING:
    from .alphabet import Alphabet


class TokenizationStrategy(ABC):
    """Base strategy for turning input bytes into alphabet tokens."""

    name: str = "base"

    @abstractmethod
    def split(self, data: bytes) -> list[Token]:
        """Split input bytes into the tokens that ``encode`` looks up."""

    @abstractmethod
    def can_encode_token(self, alphabet: "Alphabet", token: Token) -> bool:
        """Return True if ``token`` can be encoded with ``alphabet``."""

    @abstractmethod
    def can_encode(self, alphabet: "Alphabet", data: bytes) -> bool:
        """Return True if every token of ``data`` can be encoded with ``alphabet``."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class CodepointStrategy(TokenizationStrategy):
    """Strategy that treats each UTF-8 codepoint as one token."""

    name = "codepoint"

    @override
    def split(self, data: bytes) -> list[Token]:
        return split_into_codepoints(data)

    @override
    def can_encode_token(self, alphabet: "Alphabet", token: Token) -> bool:
        return alphabet.has_token(token)

    @override
    def can_encode(self, alphabet: "Alphabet", data: bytes) -> bool:
        return all(alphabet.has_token(cp) for cp in self.split(data))


class ByteStrategy(TokenizationStrategy):
    """
    Strategy that treats every raw byte as one token.

    Any input is considered encodable, regardless of what the table holds.
    """

    name = "byte"

    @override
    def split(self, data: bytes) -> list[Token]:
        return [bytes([b]) for b in data]

    @override
    def can_encode_token(self, alphabet: "Alphabet", token: Token) -> bool:
        return True

    @override
    def can_encode(self, alphabet: "Alphabet", data: bytes) -> bool:
        return True


StrategyName = Literal["codepoint", "byte"]

_TOKENIZATION_STRATEGIES: Final[dict[str, type[TokenizationStrategy]]] = {
    "codepoint": CodepointStrategy,
    "byte": ByteStrategy,
}


def list_strategies() -> list[str]:
    """Return available tokenization strategy names."""
    return list(_TOKENIZATION_STRATEGIES.keys())


def get_strategy(
    name: "StrategyName | TokenizationStrategy" = "codepoint",
) -> TokenizationStrategy:
    """
    Create a tokenization strategy by name.

    Strategy instances are passed through unchanged.

    :param name: Strategy identifier, "codepoint" or "byte".
    :raises StrategyError: If name is unknown.
    """
    if isinstance(name, TokenizationStrategy):
        return name

    if name not in _TOKENIZATION_STRATEGIES:
        raise StrategyError(
            "unknown strategy name",
            invalid_name=name,
            available_strats=list(_TOKENIZATION_STRATEGIES.keys()),
        )

    return _TOKENIZATION_STRATEGIES[name]()


__all__ = [
    "StrategyName",
    "TokenizationStrategy",
    "CodepointStrategy",
    "ByteStrategy",
    "list_strategies",
    "get_strategy",
]
