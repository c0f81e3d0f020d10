"""Custom exception hierarchy for ctcalphabet errors."""

from ._sanitise import render_token
from .types import Label, Token


class AlphabetError(Exception):
    """Base exception for all ctcalphabet errors."""


class ConfigLoadError(AlphabetError):
    """Raised when an alphabet config source cannot be opened or read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Initialize with an optional source path that gets appended to the message."""
        extra = " "
        if path:
            extra += f"(path: {path}) "
        super().__init__(message + extra)
        self.path = path


class MalformedBufferError(AlphabetError):
    """Raised when a serialized alphabet buffer is truncated or inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        offset: int | None = None,
        needed: int | None = None,
        remaining: int | None = None,
    ) -> None:
        """
        Initialize MalformedBufferError with cursor details.

        Args:
            message: Error message.
            offset: Buffer offset at which the failing read started.
            needed: Number of bytes the read required.
            remaining: Number of bytes left in the buffer at ``offset``.
        """
        extra = " "
        if offset is not None:
            extra += f"(offset: {offset}) "
        if needed is not None:
            extra += f"(needed: {needed}) "
        if remaining is not None:
            extra += f"(remaining: {remaining}) "
        super().__init__(message + extra)
        self.offset = offset
        self.needed = needed
        self.remaining = remaining


class UnknownSymbolError(AlphabetError):
    """Raised when a token or label is not part of the alphabet."""


class UnknownTokenError(UnknownSymbolError):
    """Raised when encoding a token that has no label."""

    def __init__(self, message: str, *, token: Token) -> None:
        super().__init__(f"{message} (invalid token: {render_token(token)!r}) ")
        self.token = token


class UnknownLabelError(UnknownSymbolError):
    """Raised when decoding a label that has no token."""

    def __init__(self, message: str, *, label: Label) -> None:
        super().__init__(f"{message} (invalid label: {label}) ")
        self.label = label


class StrategyError(AlphabetError):
    """Raised when strategy operations fail."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_strats: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available_strats}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available_strats = available_strats
