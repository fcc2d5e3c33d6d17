""" Punycode (RFC 3492) transcoding between Unicode text and ASCII """

from .bootstring import Bootstring
from .exceptions import (
    InvalidInputError,
    OutputSizeExceededError,
    PunycodeError,
    PunycodeOverflowError,
)
from .punycode import (
    BASE,
    DAMP,
    DELIMITER,
    INITIAL_BIAS,
    INITIAL_N,
    MAX_INT,
    PUNYCODE,
    SKEW,
    TMAX,
    TMIN,
    adapt_bias,
    decode,
    encode,
)
from .utf8 import decompose, encode_codepoint

__version__ = "1.0.0"
