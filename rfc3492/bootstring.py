""" Bootstring transcoder, as specified in RFC 3492

The algorithm is generic over its parameters; Punycode is the instance
defined in section 5 (see rfc3492.punycode). All integer state is kept
within the 32-bit signed range, anything beyond raises an overflow error.
"""

import codecs
import logging
from collections.abc import Mapping, MutableMapping
from typing import Self

from pydantic.dataclasses import dataclass

from .exceptions import (
    InvalidInputError,
    OutputSizeExceededError,
    PunycodeOverflowError,
)
from .utf8 import MAX_CODE_POINT, decompose, encode_codepoint

logger = logging.getLogger(__name__)

MAX_INT = 2147483647

digits = "abcdefghijklmnopqrstuvwxyz0123456789"

##################### Basic code points ##############################

def is_basic(code_point: int) -> bool:
    return code_point < 0x80

def flagged(byte: int) -> bool:
    """Uppercase flag of a basic code point."""
    return 0x41 <= byte <= 0x5A

def encode_basic(code_point: int, flag: bool) -> int:
    """Force the case of a basic code point: upper if flag, else lower."""
    if flag and 0x61 <= code_point <= 0x7A:
        return code_point - 0x20
    if not flag and 0x41 <= code_point <= 0x5A:
        return code_point + 0x20
    return code_point

def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        # non-ASCII characters turn into bytes >= 0x80 and get rejected
        return data.encode("utf-8")
    return bytes(data)

def _flag_lookup(case_flags) -> Mapping:
    if case_flags is None:
        return {}
    if isinstance(case_flags, Mapping):
        return case_flags
    return dict(enumerate(case_flags))

def _check_errors(errors: str):
    if errors != 'strict':
        raise UnicodeError("Unsupported error handling " + errors)

def _normalize_codec_name(name: str) -> str:
    return name.lower().replace('-', '_').replace(' ', '_')

@dataclass
class Bootstring:
    digits: str = digits
    delimiter: str = '-'
    initial_bias: int = 72
    initial_n: int = 0x80
    tmin: int = 1
    tmax: int = 26
    skew: int = 38
    damp: int = 700

    def __post_init__(self):
        # sanity checks, RFC 3492 section 4
        self.base = len(self.digits)
        if not 0 <= self.tmin <= self.tmax <= self.base - 1:
            raise ValueError("expected 0 <= tmin <= tmax <= base-1")
        if self.skew < 1:
            raise ValueError("skew must be at least 1")
        if self.damp < 2:
            raise ValueError("damp must be at least 2")
        if self.initial_bias % self.base > self.base - self.tmin:
            raise ValueError("initial_bias mod base must not exceed base-tmin")
        if is_basic(self.initial_n):
            raise ValueError("initial_n must not be a basic code point")
        if len(self.delimiter) != 1 or not is_basic(ord(self.delimiter)):
            raise ValueError("delimiter must be a single basic code point")
        if not all(is_basic(ord(c)) for c in self.digits):
            raise ValueError("digits must be basic code points")
        if len(set(self.digits.lower())) != self.base:
            raise ValueError("digits must be unique, ignoring case")
        if self.delimiter.lower() in self.digits.lower():
            raise ValueError("delimiter must not be a digit")

        self._lower = self.digits.lower().encode('ascii')
        self._upper = self.digits.upper().encode('ascii')
        values = [-1] * 256
        for value, char in enumerate(self._lower):
            values[char] = value
        for value, char in enumerate(self._upper):
            values[char] = value
        self._digit_values = tuple(values)

    ##################### Digits and bias ############################

    def threshold(self, k: int, bias: int) -> int:
        if k <= bias:
            return self.tmin
        if k >= bias + self.tmax:
            return self.tmax
        return k - bias

    def encode_digit(self, d: int, flag: bool = False) -> int:
        """Byte for digit value d, uppercase if flag (letters only)."""
        return (self._upper if flag else self._lower)[d]

    def decode_digit(self, byte: int) -> int:
        """Value of a digit byte, or -1 if it does not represent one."""
        return self._digit_values[byte & 0xFF]

    def adapt_bias(self, delta: int, num_points: int, is_first: bool) -> int:
        """3.4 Bias adaptation"""
        if is_first:
            delta //= self.damp
        else:
            delta //= 2
        delta += delta // num_points

        k = 0
        while delta > ((self.base - self.tmin) * self.tmax) // 2:
            delta //= self.base - self.tmin
            k += self.base
        return k + ((self.base - self.tmin + 1) * delta) // (delta + self.skew)

    ##################### Encoding ###################################

    def encode_codepoints(self, code_points, max_output_length: int | None = None,
                          case_flags=None) -> bytes:
        """Encode a sequence of code points (RFC 3492 section 6.3)."""
        max_out = MAX_INT if max_output_length is None else max_output_length
        flags = _flag_lookup(case_flags)
        base = self.base
        output = bytearray()

        # 3.1 Basic code point segregation
        for j, code_point in enumerate(code_points):
            if is_basic(code_point):
                if max_out - len(output) < 2:
                    raise OutputSizeExceededError(
                        "output exceeds %d bytes" % max_out)
                flag = flags.get(j)
                if flag is not None:
                    code_point = encode_basic(code_point, flag)
                output.append(code_point)

        h = b = len(output)
        if b > 0:
            output.append(ord(self.delimiter))

        # 3.2 Insertion unsort coding
        n = self.initial_n
        delta = 0
        bias = self.initial_bias
        while h < len(code_points):
            m = min(c for c in code_points if c >= n)
            if m - n > (MAX_INT - delta) // (h + 1):
                logger.debug("delta overflow before U+%04X", m)
                raise PunycodeOverflowError(
                    "delta overflow at code point U+%04X" % m)
            delta += (m - n) * (h + 1)
            n = m

            for j, code_point in enumerate(code_points):
                if code_point < n:
                    delta += 1
                    if delta > MAX_INT:
                        logger.debug("delta overflow at position %d", j)
                        raise PunycodeOverflowError(
                            "delta overflow at position %d" % j)
                elif code_point == n:
                    # 3.3 Generalized variable-length integers
                    q = delta
                    k = base
                    while True:
                        if len(output) >= max_out:
                            raise OutputSizeExceededError(
                                "output exceeds %d bytes" % max_out)
                        t = self.threshold(k, bias)
                        if q < t:
                            break
                        output.append(self.encode_digit(t + (q - t) % (base - t)))
                        q = (q - t) // (base - t)
                        k += base
                    output.append(self.encode_digit(q, flags.get(j, False)))
                    bias = self.adapt_bias(delta, h + 1, h == b)
                    delta = 0
                    h += 1

            delta += 1
            n += 1

        return bytes(output)

    def encode(self, text, max_output_length: int | None = None,
               case_flags=None) -> bytes:
        """Encode text into its ASCII representation.

        text is either a str or UTF-8 bytes. Ill-formed UTF-8 and lone
        surrogates are replaced with U+FFFD first. case_flags maps code
        point indexes to the desired case (True for uppercase); indexes
        that are absent keep the case they have.
        """
        if isinstance(text, str):
            text = text.encode('utf-8', 'surrogatepass')
        return self.encode_codepoints(decompose(text), max_output_length,
                                      case_flags)

    ##################### Decoding ###################################

    def decode_codepoints(self, data, max_output_length: int | None = None,
                          case_flags: list[bool] | MutableMapping | None = None) -> list[int]:
        """Decode into a list of code points (RFC 3492 section 6.2).

        If case_flags is a list it is replaced with one uppercase flag per
        decoded code point; a mapping is refilled with index -> flag.
        """
        data = _as_bytes(data)
        max_out = MAX_INT if max_output_length is None else max_output_length
        capture = case_flags is not None
        base = self.base
        length = len(data)

        b = max(data.rfind(ord(self.delimiter)), 0)
        if b > max_out:
            raise OutputSizeExceededError(
                "basic code points exceed %d" % max_out)

        output = []
        flags = []
        for pos in range(b):
            byte = data[pos]
            if not is_basic(byte):
                logger.debug("non-basic byte 0x%02X at position %d", byte, pos)
                raise InvalidInputError(
                    "non-basic code point 0x%02X at position %d" % (byte, pos))
            output.append(byte)
            if capture:
                flags.append(flagged(byte))

        n = self.initial_n
        i = 0
        bias = self.initial_bias
        pos = b + 1 if b > 0 else 0
        while pos < length:
            oldi = i
            w = 1
            k = base
            while True:
                if pos >= length:
                    logger.debug("input ends inside a variable-length integer")
                    raise InvalidInputError("incomplete punycode string")
                digit = self.decode_digit(data[pos])
                if digit < 0:
                    logger.debug("invalid digit 0x%02X at position %d",
                                 data[pos], pos)
                    raise InvalidInputError(
                        "invalid extended code point %r at position %d"
                        % (chr(data[pos]), pos))
                pos += 1
                if digit > (MAX_INT - i) // w:
                    logger.debug("integer overflow at position %d", pos - 1)
                    raise PunycodeOverflowError(
                        "integer overflow at position %d" % (pos - 1))
                i += digit * w
                t = self.threshold(k, bias)
                if digit < t:
                    break
                if w > MAX_INT // (base - t):
                    logger.debug("weight overflow at position %d", pos - 1)
                    raise PunycodeOverflowError(
                        "weight overflow at position %d" % (pos - 1))
                w *= base - t
                k += base

            count = len(output) + 1
            bias = self.adapt_bias(i - oldi, count, oldi == 0)
            if i // count > MAX_INT - n:
                logger.debug("code point overflow at position %d", pos - 1)
                raise PunycodeOverflowError("code point overflow")
            n += i // count
            i %= count
            if n > MAX_CODE_POINT:
                logger.debug("decoded value U+%X is outside Unicode", n)
                raise InvalidInputError("invalid character U+%X" % n)
            if len(output) >= max_out:
                raise OutputSizeExceededError(
                    "output exceeds %d code points" % max_out)

            output.insert(i, n)
            if capture:
                flags.insert(i, flagged(data[pos - 1]))
            i += 1

        if isinstance(case_flags, MutableMapping):
            case_flags.clear()
            case_flags.update(enumerate(flags))
        elif capture:
            case_flags[:] = flags
        return output

    def decode(self, data, max_output_length: int | None = None,
               case_flags: list[bool] | MutableMapping | None = None) -> str:
        """Decode an ASCII representation back into text."""
        code_points = self.decode_codepoints(data, max_output_length, case_flags)
        return b"".join(map(encode_codepoint, code_points)).decode(
            'utf-8', 'surrogatepass')

    ### encodings module API
    def register(this, name: str) -> Self:
        """Make this transcoder available through the codecs registry."""
        name = _normalize_codec_name(name)
        try:
            codecs.lookup(name)
        except LookupError:
            pass
        else:
            raise RuntimeError("Codec with this name already registered: " + name)

        class Codec(codecs.Codec):
            def encode(self, input, errors='strict'):
                _check_errors(errors)
                return this.encode(input), len(input)

            def decode(self, input, errors='strict'):
                _check_errors(errors)
                return this.decode(input), len(input)

        class IncrementalEncoder(codecs.IncrementalEncoder):
            def encode(self, input, final=False):
                _check_errors(self.errors)
                return this.encode(input)

        class IncrementalDecoder(codecs.IncrementalDecoder):
            def decode(self, input, final=False):
                _check_errors(self.errors)
                return this.decode(input)

        class StreamWriter(Codec, codecs.StreamWriter):
            pass

        class StreamReader(Codec, codecs.StreamReader):
            pass

        codec_info = codecs.CodecInfo(
                name=name,
                encode=Codec().encode,
                decode=Codec().decode,
                incrementalencoder=IncrementalEncoder,
                incrementaldecoder=IncrementalDecoder,
                streamwriter=StreamWriter,
                streamreader=StreamReader,
            )

        @codecs.register
        def search_function(codec_name: str) -> codecs.CodecInfo | None:
            if _normalize_codec_name(codec_name) != name:
                return None
            else:
                return codec_info

        logger.debug("registered codec %s", name)
        return this
