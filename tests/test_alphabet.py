"""Unit tests for Alphabet construction, lookups, encode/decode and serialization."""

import io
import logging

import pytest

import ctcalphabet as ca
from ctcalphabet import (
    Alphabet,
    AlphabetError,
    ConfigLoadError,
    MalformedBufferError,
    UnknownLabelError,
    UnknownSymbolError,
    UnknownTokenError,
)
from ctcalphabet._codec import serialize_entries

EXAMPLE_CONFIG = b"a\nb\n \n#comment\n\\#\n"


def _from_bytes(data: bytes, strategy: str = "codepoint") -> Alphabet:
    return Alphabet.from_config(io.BytesIO(data), strategy=strategy)


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def example_alphabet():
    """Return the alphabet a, b, space, #."""
    return _from_bytes(EXAMPLE_CONFIG)


@pytest.fixture
def letters_config(tmp_path):
    """Return the path of a config with lowercase letters, space and apostrophe."""
    path = tmp_path / "alphabet.txt"
    lines = ["# letters", " ", *"abcdefghijklmnopqrstuvwxyz", "'", "é", "日"]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def letters_alphabet(letters_config):
    """Return the alphabet built from ``letters_config``."""
    return Alphabet.from_config(letters_config)


# Config parsing
# ---------------------------------------------------------------------------


def test_example_labels(example_alphabet):
    """Labels are assigned in order, skipping comments."""
    assert example_alphabet.items() == [(0, b"a"), (1, b"b"), (2, b" "), (3, b"#")]
    assert example_alphabet.size == 4
    assert len(example_alphabet) == 4
    assert example_alphabet.space_label == 2


def test_example_encode_decode(example_alphabet):
    """Encode and decode the documented example."""
    assert example_alphabet.encode("ab") == [0, 1]
    assert example_alphabet.decode([1, 0, 2]) == "ba "


def test_comment_contributes_no_entry():
    """A comment line does not consume a label."""
    alphabet = _from_bytes(b"#hello\nx\n")
    assert alphabet.items() == [(0, b"x")]


def test_escaped_comment_is_hash_token():
    """A line of exactly \\# is the token #."""
    alphabet = _from_bytes(b"\\#\n")
    assert alphabet.items() == [(0, b"#")]
    assert alphabet.encode("#") == [0]


def test_escape_only_applies_to_whole_line():
    """Longer lines starting with \\# are ordinary tokens."""
    alphabet = _from_bytes(b"\\#x\n")
    assert alphabet.items() == [(0, b"\\#x")]


def test_blank_lines_skipped():
    """Blank lines do not consume labels."""
    alphabet = _from_bytes(b"\n\na\n\r\n\rb")
    assert alphabet.items() == [(0, b"a"), (1, b"b")]


def test_multi_codepoint_token():
    """A line with several codepoints is one token."""
    alphabet = _from_bytes("ab\nç\n".encode("utf-8"))
    assert alphabet.encode_token("ab") == 0
    assert alphabet.encode_token("ç") == 1
    assert not alphabet.can_encode("ab")


@pytest.mark.parametrize("nl", [b"\n", b"\r", b"\r\n"])
def test_newline_equivalence(nl):
    """The same content with any terminator builds the same table."""
    content = [b"a", b"#c", b" ", b"\\#", b"", "ü".encode("utf-8")]
    reference = _from_bytes(b"\n".join(content))
    assert _from_bytes(nl.join(content)) == reference
    assert _from_bytes(nl.join(content) + nl) == reference


def test_config_from_path(letters_alphabet):
    """Configs load from a filesystem path."""
    assert letters_alphabet.size == 30
    assert letters_alphabet.space_label == 0
    assert letters_alphabet.encode("hé 日") == [8, 28, 0, 29]


def test_missing_config_raises(tmp_path):
    """An unreadable source raises ConfigLoadError."""
    with pytest.raises(ConfigLoadError) as exc:
        Alphabet.from_config(tmp_path / "missing.txt")
    assert exc.value.path == str(tmp_path / "missing.txt")


def test_get_alphabet(letters_config, letters_alphabet):
    """get_alphabet wraps from_config."""
    assert ca.get_alphabet(letters_config) == letters_alphabet


# Whitespace detection
# ---------------------------------------------------------------------------


def test_ascii_space_sets_space_label():
    """A line holding one ASCII space is the space label."""
    alphabet = _from_bytes(b"a\n \nb\n")
    assert alphabet.space_label == 1
    assert alphabet.is_space(1)
    assert not alphabet.is_space(0)


@pytest.mark.parametrize("space", ["\t", "\x0b", "\x0c", "\u00a0", "\u2003", "\u3000"])
def test_unicode_space_sets_space_label(space):
    """Any single whitespace codepoint is the space label."""
    alphabet = _from_bytes(f"a\n{space}\n".encode("utf-8"))
    assert alphabet.space_label == 1


def test_no_space_label():
    """Without a whitespace line the space label is absent."""
    alphabet = _from_bytes(b"a\nb\n")
    assert alphabet.space_label is None
    assert not alphabet.is_space(0)


def test_two_spaces_is_not_space_label():
    """Whitespace tokens longer than one codepoint do not mark space."""
    alphabet = _from_bytes(b"a\n  \n")
    assert alphabet.space_label is None


# Lookups
# ---------------------------------------------------------------------------


def test_bijection(letters_alphabet):
    """encode_token and decode_label are inverse for every entry."""
    for label, token in letters_alphabet.items():
        assert letters_alphabet.encode_token(token) == label
        assert letters_alphabet.decode_label(label) == token


def test_can_encode(letters_alphabet):
    """can_encode holds only when every codepoint is known."""
    assert letters_alphabet.can_encode("hello world")
    assert letters_alphabet.can_encode("")
    assert not letters_alphabet.can_encode("Hello")
    assert letters_alphabet.can_encode_token("é")
    assert not letters_alphabet.can_encode_token("E")


def test_encode_length_is_codepoint_count(letters_alphabet):
    """One label per codepoint, not per byte."""
    text = "été"
    assert len(letters_alphabet.encode(text)) == 3


def test_encode_decode_inverse(letters_alphabet):
    """Decoding encoded text returns it unchanged."""
    text = "it's a 日 é"
    assert letters_alphabet.decode(letters_alphabet.encode(text)) == text
    assert letters_alphabet.decode_bytes(letters_alphabet.encode(text)) == text.encode()


def test_encode_accepts_bytes(letters_alphabet):
    """bytes input is treated as UTF-8."""
    assert letters_alphabet.encode(b"ab") == letters_alphabet.encode("ab")


def test_unknown_token_raises(example_alphabet):
    """Encoding an unknown token raises UnknownTokenError."""
    with pytest.raises(UnknownTokenError) as exc:
        example_alphabet.encode("abc")
    assert exc.value.token == b"c"


def test_unknown_label_raises(example_alphabet):
    """Decoding an unknown label raises UnknownLabelError."""
    with pytest.raises(UnknownLabelError) as exc:
        example_alphabet.decode([0, 99])
    assert exc.value.label == 99


def test_unknown_symbols_share_base_class(example_alphabet):
    """Both lookup failures are UnknownSymbolError."""
    with pytest.raises(UnknownSymbolError):
        example_alphabet.encode_token("z")
    with pytest.raises(UnknownSymbolError):
        example_alphabet.decode_label(-1)


def test_contains(example_alphabet):
    """Membership works for tokens and labels."""
    assert "a" in example_alphabet
    assert b"#" in example_alphabet
    assert 3 in example_alphabet
    assert 4 not in example_alphabet
    assert None not in example_alphabet


# Serialization
# ---------------------------------------------------------------------------


def test_serialize_round_trip(letters_alphabet):
    """from_buffer(serialize()) rebuilds an equal table."""
    restored = Alphabet.from_buffer(letters_alphabet.serialize())
    assert restored == letters_alphabet
    assert restored.size == letters_alphabet.size
    assert restored.space_label == letters_alphabet.space_label


def test_serialize_is_sorted_by_label(example_alphabet):
    """Entries are written in label order."""
    assert example_alphabet.serialize() == serialize_entries(
        4, [(0, b"a"), (1, b"b"), (2, b" "), (3, b"#")]
    )


def test_serialize_deterministic():
    """Tables with identical entries serialize identically."""
    first = Alphabet.from_buffer(serialize_entries(2, [(1, b"y"), (0, b"x")]))
    second = Alphabet.from_buffer(serialize_entries(2, [(0, b"x"), (1, b"y")]))
    assert first.serialize() == second.serialize()


def test_buffer_space_label_from_ascii_space():
    """A deserialized ASCII space token sets the space label."""
    alphabet = Alphabet.from_buffer(serialize_entries(2, [(7, b"x"), (3, b" ")]))
    assert alphabet.space_label == 3
    assert alphabet.labels() == [3, 7]


def test_buffer_without_space():
    """Without an ASCII space token the space label is absent."""
    alphabet = Alphabet.from_buffer(serialize_entries(1, [(0, b"\t")]))
    assert alphabet.space_label is None


def test_buffer_size_is_declared_count():
    """size comes from the header, even with overwritten entries."""
    buffer = serialize_entries(3, [(0, b"a"), (0, b"b"), (1, b"a")])
    alphabet = Alphabet.from_buffer(buffer)
    assert alphabet.size == 3
    assert alphabet.items() == [(0, b"b"), (1, b"a")]
    assert alphabet.encode_token("a") == 1
    assert not alphabet.has_label(2)


def test_repeated_buffer_token_keeps_earlier_label():
    """A token stored under two labels decodes from both and encodes to the last."""
    buffer = serialize_entries(2, [(0, b"a"), (1, b"a")])
    alphabet = Alphabet.from_buffer(buffer)
    assert alphabet.items() == [(0, b"a"), (1, b"a")]
    assert alphabet.decode_label(0) == b"a"
    assert alphabet.encode_token("a") == 1


def test_relabelled_token_falls_back_to_remaining_label():
    """Replacing a label's token leaves the old token encodable via another label."""
    buffer = serialize_entries(2, [(0, b"a"), (1, b"a"), (1, b"b")])
    alphabet = Alphabet.from_buffer(buffer)
    assert alphabet.items() == [(0, b"a"), (1, b"b")]
    assert alphabet.encode_token("a") == 0
    assert alphabet.encode_token("b") == 1


def test_serialize_rejects_size_mismatch():
    """A table whose declared size exceeds its labels cannot be serialized."""
    alphabet = Alphabet.from_buffer(serialize_entries(3, [(0, b"a"), (0, b"b")]))
    with pytest.raises(AlphabetError):
        alphabet.serialize()


def test_repeated_config_line_round_trip():
    """A config with a repeated line survives serialization."""
    alphabet = _from_bytes(b"a\nb\na\n \n")
    assert alphabet.size == 4
    assert alphabet.space_label == 3
    assert alphabet.decode_label(0) == b"a"
    assert alphabet.decode_label(2) == b"a"
    assert alphabet.encode_token("a") == 2
    assert alphabet.decode([0, 1, 2]) == "aba"

    restored = Alphabet.from_buffer(alphabet.serialize())
    assert restored == alphabet
    assert restored.size == 4
    assert restored.space_label == 3


def test_construction_is_logged(caplog):
    """Constructors log the label count and space label."""
    with caplog.at_level(logging.INFO, logger="ctcalphabet"):
        _from_bytes(EXAMPLE_CONFIG)
    assert "from_config: 4 labels, space label 2, strategy codepoint" in caplog.text


@pytest.mark.parametrize("cut", [0, 1, 3, 6, 10])
def test_truncated_buffer_raises(example_alphabet, cut):
    """Truncated buffers fail without returning a table."""
    with pytest.raises(MalformedBufferError):
        Alphabet.from_buffer(example_alphabet.serialize()[:cut])


def test_save_and_from_pretrained(letters_alphabet, tmp_path):
    """save writes a file that from_pretrained reads back."""
    path = tmp_path / "nested" / "alphabet.bin"
    letters_alphabet.save(path)
    assert ca.from_pretrained(path) == letters_alphabet


def test_from_pretrained_missing_file(tmp_path):
    """Missing serialized files raise ConfigLoadError."""
    with pytest.raises(ConfigLoadError):
        ca.from_pretrained(tmp_path / "missing.bin")


# Config writing
# ---------------------------------------------------------------------------


def test_save_config_round_trip(example_alphabet, tmp_path):
    """save_config output parses back to the same table."""
    path = tmp_path / "out.txt"
    example_alphabet.save_config(path)
    assert path.read_bytes() == b"a\nb\n \n\\#\n"
    assert Alphabet.from_config(path) == example_alphabet


def test_save_config_rejects_gaps(tmp_path):
    """Non-contiguous labels have no config form."""
    alphabet = Alphabet.from_buffer(serialize_entries(1, [(5, b"x")]))
    with pytest.raises(AlphabetError):
        alphabet.save_config(tmp_path / "out.txt")


@pytest.mark.parametrize("token", [b"#x", b"a\nb", b"\\#"])
def test_save_config_rejects_unwritable_tokens(token, tmp_path):
    """Tokens that would not read back unchanged are rejected."""
    alphabet = Alphabet.from_buffer(serialize_entries(1, [(0, token)]))
    with pytest.raises(AlphabetError):
        alphabet.save_config(tmp_path / "out.txt")


def test_unknown_token_message_escapes_controls(example_alphabet):
    """Control characters are escaped in error messages."""
    with pytest.raises(UnknownTokenError) as exc:
        example_alphabet.encode_token(b"\n")
    assert "\\n" in str(exc.value)
