""" Punycode, the Bootstring profile of RFC 3492 section 5

Module level functions operate on the shared PUNYCODE instance.
"""

from collections.abc import MutableMapping

from .bootstring import MAX_INT, Bootstring

BASE = 36
TMIN = 1
TMAX = 26
SKEW = 38
DAMP = 700
INITIAL_BIAS = 72
INITIAL_N = 128
DELIMITER = '-'

PUNYCODE = Bootstring(
    digits="abcdefghijklmnopqrstuvwxyz0123456789",
    delimiter=DELIMITER,
    initial_bias=INITIAL_BIAS,
    initial_n=INITIAL_N,
    tmin=TMIN,
    tmax=TMAX,
    skew=SKEW,
    damp=DAMP,
)

def adapt_bias(delta: int, num_points: int, is_first: bool) -> int:
    return PUNYCODE.adapt_bias(delta, num_points, is_first)

def encode(text, max_output_length: int | None = None, case_flags=None) -> bytes:
    """Encode text (str or UTF-8 bytes) as Punycode.

    >>> encode("bücher")
    b'bcher-kva'
    """
    return PUNYCODE.encode(text, max_output_length, case_flags)

def decode(data, max_output_length: int | None = None,
           case_flags: list[bool] | MutableMapping | None = None) -> str:
    """Decode Punycode back into text.

    >>> decode(b"bcher-kva")
    'bücher'
    """
    return PUNYCODE.decode(data, max_output_length, case_flags)

__all__ = [
    'BASE', 'TMIN', 'TMAX', 'SKEW', 'DAMP', 'INITIAL_BIAS', 'INITIAL_N',
    'DELIMITER', 'MAX_INT', 'PUNYCODE', 'adapt_bias', 'encode', 'decode',
]
