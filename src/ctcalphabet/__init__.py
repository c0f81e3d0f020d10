"""ctcalphabet: token <-> label tables for sequence decoders."""

from .alphabet import Alphabet
from .errors import (
    AlphabetError,
    ConfigLoadError,
    MalformedBufferError,
    StrategyError,
    UnknownLabelError,
    UnknownSymbolError,
    UnknownTokenError,
)
from .factory import byte_alphabet, from_pretrained, get_alphabet
from ._codepoints import is_unicode_space, split_into_codepoints
from ._lines import LineReader, iter_lines
from .strategy import (
    ByteStrategy,
    CodepointStrategy,
    TokenizationStrategy,
    get_strategy,
    list_strategies,
)

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ctcalphabet")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Alphabet",
    "TokenizationStrategy",
    "CodepointStrategy",
    "ByteStrategy",
    "LineReader",
    "AlphabetError",
    "ConfigLoadError",
    "MalformedBufferError",
    "UnknownSymbolError",
    "UnknownTokenError",
    "UnknownLabelError",
    "StrategyError",
    "byte_alphabet",
    "get_alphabet",
    "from_pretrained",
    "get_strategy",
    "list_strategies",
    "iter_lines",
    "split_into_codepoints",
    "is_unicode_space",
]
