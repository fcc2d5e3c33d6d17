"""Errors raised by the Bootstring transcoder.

All of them derive from the builtin ``UnicodeError`` so that the codec
machinery and existing ``except UnicodeError`` handlers keep working.
"""


class PunycodeError(UnicodeError):
    """Base class for transcoding failures."""


class InvalidInputError(PunycodeError):
    """Malformed digit, non-ASCII basic code point or truncated integer."""


class PunycodeOverflowError(PunycodeError):
    """An accumulator would leave the 32-bit signed range."""


class OutputSizeExceededError(PunycodeError):
    """The result does not fit in the requested maximum output length."""
