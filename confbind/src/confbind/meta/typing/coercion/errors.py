"""Errors of the string coercion registry."""

from ....abstract.exceptions.traced_exceptions import TracedException


class TypingError(TracedException):
    """General Error for the coercion extension."""


class CoercionRegistryError(TypingError):
    """Signals an invalid registration in a coercion registry."""


class ConvertingFromStringError(TypingError):
    """Signals that a raw string is not a valid textual encoding of the target type."""
