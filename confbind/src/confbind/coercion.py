"""
Re-export coercion module for cleaner imports.

This allows: from confbind.coercion import coerce
Instead of: from confbind.meta.typing.coercion import coerce
"""

from .meta.typing.coercion import (
    CoercionRegistry,
    FACTORY_METHOD_NAMES,
    coercion_registry,
    coerce,
    register_known_types,
    TypingError,
    CoercionRegistryError,
    ConvertingFromStringError,
)

__all__ = [
    "CoercionRegistry",
    "FACTORY_METHOD_NAMES",
    "coercion_registry",
    "coerce",
    "register_known_types",
    "TypingError",
    "CoercionRegistryError",
    "ConvertingFromStringError",
]
