"""
MIT License

Copyright (c) 2025 Sébastien Gachoud

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

-------------------------------------------------------------------------------

Author: Sébastien Gachoud
Created: 2025-12-19
Description: Built-in converters for the coercion registry. This module registers converters
            for str, bool, int and float, and the factory lookups for enumerations and for
            types exposing a string factory method.
🦙
"""

import re
from enum import Enum

from .errors import ConvertingFromStringError
from .registry import CoercionRegistry, Converter, coercion_registry, named_factory, weak_target


_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|nan|inf|infinity)",
    re.IGNORECASE,
)


def str_converter(value: str) -> str:
    """Strings are kept as is."""
    return value


def bool_converter(value: str) -> bool:
    """Only 'true' and 'false' are accepted, case insensitive."""
    match value.lower():
        case "true":
            return True
        case "false":
            return False
    raise ConvertingFromStringError(f"Could not convert '{value}' to 'bool'.")


def int_converter(value: str) -> int:
    """Optionally signed decimal digits. No whitespace, no digit separators."""
    if not _INT_PATTERN.fullmatch(value):
        raise ConvertingFromStringError(f"Could not convert '{value}' to 'int'.")
    return int(value)


def float_converter(value: str) -> float:
    """Decimal or scientific notation, nan and inf. No whitespace, no digit separators."""
    if not _FLOAT_PATTERN.fullmatch(value):
        raise ConvertingFromStringError(f"Could not convert '{value}' to 'float'.")
    return float(value)


def enum_factory(target: type) -> Converter | None:
    """Enumerations are looked up by member name."""
    if not issubclass(target, Enum):
        return None
    resolve = weak_target(target)

    def converter(value: str) -> Enum:
        return resolve()[value]

    return converter


def register_known_types(registry: CoercionRegistry) -> CoercionRegistry:
    """Register the built-in converters and factory lookups on a registry.

    Args:
        registry (CoercionRegistry): The registry to populate.

    Returns:
        CoercionRegistry: The same registry, to allow chaining.
    """
    registry.register_converter(str, str_converter)
    registry.register_converter(bool, bool_converter)
    registry.register_converter(int, int_converter)
    registry.register_converter(float, float_converter)

    registry.register_factory(enum_factory)
    registry.register_factory(named_factory)
    return registry


# Register the known types on the default registry
register_known_types(coercion_registry())
