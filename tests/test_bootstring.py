"""Unit tests for the generic Bootstring machine and its codec API.

Tests cover:
- Parameter validation
- Digit and threshold helpers
- Custom parameter sets
- Registration with the codecs module
"""

import codecs
import io

import pytest

from rfc3492 import PUNYCODE, Bootstring, InvalidInputError
from rfc3492.bootstring import encode_basic, flagged


@pytest.fixture(scope="module")
def codec_name():
    """Register a Punycode codec once for this module."""
    Bootstring().register("rfc3492")
    return "rfc3492"


class TestParameters:
    """Test suite for Bootstring parameter validation."""

    @pytest.mark.unit
    def test_defaults_are_punycode(self):
        """Test that the default parameters produce Punycode."""
        codec = Bootstring()
        assert codec.base == 36
        assert codec.encode("bücher") == b"bcher-kva"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"tmin": 27},
            {"tmax": 36},
            {"tmin": -1},
            {"skew": 0},
            {"damp": 1},
            {"initial_bias": 35, "tmin": 2},
            {"initial_n": 0x41},
            {"delimiter": "a"},
            {"delimiter": "A"},
            {"delimiter": "--"},
            {"delimiter": "é"},
            {"digits": "aAbcdefghijklmnopqrstuvwxyz012345678"},
            {"digits": "ébcdefghijklmnopqrstuvwxyz0123456789"},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        """Test that parameters violating RFC 3492 section 4 are refused."""
        with pytest.raises(ValueError):
            Bootstring(**kwargs)

    @pytest.mark.unit
    def test_type_validation(self):
        """Test that pydantic rejects values of the wrong type."""
        with pytest.raises(ValueError):
            Bootstring(tmin="one")

    @pytest.mark.unit
    def test_custom_delimiter(self):
        """Test a parameter set that only changes the delimiter."""
        codec = Bootstring(delimiter="_")
        assert codec.encode("bücher") == b"bcher_kva"
        assert codec.decode(b"bcher_kva") == "bücher"
        with pytest.raises(InvalidInputError):
            codec.decode(b"bcher-kva")

    @pytest.mark.unit
    def test_custom_digits_round_trip(self):
        """Test a parameter set with a reordered digit alphabet."""
        codec = Bootstring(digits="0123456789abcdefghijklmnopqrstuvwxyz")
        text = "grüße 世界"
        encoded = codec.encode(text)
        assert encoded != PUNYCODE.encode(text)
        assert codec.decode(encoded) == text


class TestHelpers:
    """Test suite for digit, threshold and case helpers."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "k, bias, expected",
        [(36, 72, 1), (72, 72, 1), (80, 72, 8), (98, 72, 26), (108, 72, 26)],
    )
    def test_threshold(self, k, bias, expected):
        """Test the clamped threshold for each digit position."""
        assert PUNYCODE.threshold(k, bias) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value, flag, expected",
        [(0, False, "a"), (25, False, "z"), (26, False, "0"), (35, False, "9"),
         (0, True, "A"), (25, True, "Z"), (26, True, "0")],
    )
    def test_encode_digit(self, value, flag, expected):
        """Test digit bytes, uppercase only for letters when flagged."""
        assert PUNYCODE.encode_digit(value, flag) == ord(expected)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "char, expected",
        [("a", 0), ("A", 0), ("z", 25), ("Z", 25), ("0", 26), ("9", 35),
         ("-", -1), ("!", -1), ("\x00", -1), ("\xff", -1)],
    )
    def test_decode_digit(self, char, expected):
        """Test the digit lookup table including rejected bytes."""
        assert PUNYCODE.decode_digit(ord(char)) == expected

    @pytest.mark.unit
    def test_flagged(self):
        """Test that only ASCII uppercase letters are flagged."""
        assert flagged(ord("A")) and flagged(ord("Z"))
        assert not flagged(ord("a"))
        assert not flagged(ord("0"))
        assert not flagged(ord("["))

    @pytest.mark.unit
    def test_encode_basic(self):
        """Test case forcing of basic code points."""
        assert encode_basic(ord("a"), True) == ord("A")
        assert encode_basic(ord("A"), False) == ord("a")
        assert encode_basic(ord("A"), True) == ord("A")
        assert encode_basic(ord("-"), True) == ord("-")


class TestCodecRegistration:
    """Test suite for Bootstring.register."""

    @pytest.mark.unit
    def test_str_encode(self, codec_name):
        """Test str.encode through the registered codec."""
        assert "bücher".encode(codec_name) == b"bcher-kva"

    @pytest.mark.unit
    def test_bytes_decode(self, codec_name):
        """Test bytes.decode through the registered codec."""
        assert b"bcher-kva".decode(codec_name) == "bücher"

    @pytest.mark.unit
    def test_lookup_normalizes_name(self, codec_name):
        """Test that the lookup is case-insensitive."""
        assert codecs.lookup(codec_name.upper()).name == codec_name

    @pytest.mark.unit
    def test_unrelated_name_still_missing(self, codec_name):
        """Test that registration does not answer for other names."""
        with pytest.raises(LookupError):
            codecs.lookup(codec_name + "-unrelated")

    @pytest.mark.unit
    def test_incremental(self, codec_name):
        """Test the incremental encoder and decoder."""
        encoder = codecs.getincrementalencoder(codec_name)()
        decoder = codecs.getincrementaldecoder(codec_name)()
        assert encoder.encode("München", final=True) == b"Mnchen-3ya"
        assert decoder.decode(b"Mnchen-3ya", final=True) == "München"

    @pytest.mark.unit
    def test_stream_reader(self, codec_name):
        """Test reading through the stream reader."""
        reader = codecs.getreader(codec_name)(io.BytesIO(b"bcher-kva"))
        assert reader.read() == "bücher"

    @pytest.mark.unit
    def test_only_strict_errors(self, codec_name):
        """Test that lenient error handlers are refused."""
        with pytest.raises(UnicodeError):
            b"bcher-kva".decode(codec_name, "ignore")

    @pytest.mark.unit
    def test_decode_errors_surface(self, codec_name):
        """Test that malformed input raises through bytes.decode."""
        with pytest.raises(UnicodeError):
            b"bcher-kv".decode(codec_name)

    @pytest.mark.unit
    def test_register_twice(self, codec_name):
        """Test that an existing codec name cannot be taken over."""
        with pytest.raises(RuntimeError):
            PUNYCODE.register(codec_name)
