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
Description: This module provides the registry used to coerce raw strings to typed values.
            A target type is converted with the first applicable rule:
            - an exact type converter (str, bool, int, float are registered by default),
            - a string factory of the target type (Enum names, value_of, from_string, ...),
            - the constructor of the target type called with the string.
            The rules can be extended with register_converter and register_factory.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import inspect
import weakref
from functools import lru_cache
from types import ClassMethodDescriptorType, NoneType
from typing import Any, Callable, Final

from .errors import CoercionRegistryError, ConvertingFromStringError
from ..utilities import Annotation, unwrap_optional


FACTORY_METHOD_NAMES: Final[tuple[str, ...]] = ("value_of", "from_string", "fromisoformat")

type Converter = Callable[[str], Any]
type FactoryLookup = Callable[[type], Converter | None]


def instance_checked(factory: Callable[[str], Any], target: type) -> Converter:
    """Wrap a factory so that a result which is not an instance of the target is rejected.

    Args:
        factory (Callable[[str], Any]): The factory to wrap.
        target (type): The expected type of the result.

    Returns:
        Converter: The wrapped factory.
    """

    def converter(value: str) -> Any:
        result = factory(value)
        if not isinstance(result, target):
            raise ConvertingFromStringError(
                f"Factory {factory!r} returned '{type(result)}' instead of '{target}'."
            )
        return result

    return converter


def weak_target(target: type) -> Callable[[], type]:
    """Weakly reference a target type, so that converters built for it do not keep it alive.

    Args:
        target (type): The type to reference.

    Returns:
        Callable[[], type]: Returns the type, raises ConvertingFromStringError once it is reclaimed.
    """
    reference = weakref.ref(target)

    def resolve() -> type:
        resolved = reference()
        if resolved is None:
            raise ConvertingFromStringError("The target type was reclaimed.")
        return resolved

    return resolve


def named_factory(target: type) -> Converter | None:
    """Look for a static or class method of the target building an instance from a string.

    The names of FACTORY_METHOD_NAMES are probed in order.
    """
    for name in FACTORY_METHOD_NAMES:
        try:
            attribute = inspect.getattr_static(target, name)
        except AttributeError:
            continue
        if isinstance(attribute, (classmethod, staticmethod, ClassMethodDescriptorType)):
            return _named_converter(weak_target(target), name)
    return None


def _named_converter(resolve: Callable[[], type], name: str) -> Converter:
    def converter(value: str) -> Any:
        target = resolve()
        return instance_checked(getattr(target, name), target)(value)

    return converter


def constructor_converter(target: type) -> Converter:
    """Use the constructor of the target as a converter."""
    resolve = weak_target(target)

    def converter(value: str) -> Any:
        return resolve()(value)

    return converter


class CoercionRegistry:
    """
    A class to hold the converters and factory lookups used to coerce strings to types. It allows
    customization.

    Resolved converters are cached per type, weakly: the built-in converters only reference their
    type weakly, so dynamically created types are not kept alive by the cache. A custom factory
    lookup returning a closure over its type keeps that type cached until `clear_cache` or
    `clear_cache_for_type`.
    """

    __converters: dict[type, Converter]
    __factories: list[FactoryLookup]
    __cache: weakref.WeakKeyDictionary[type, tuple[Converter, ...]]

    def __init__(self) -> NoneType:
        self.__converters = {}
        self.__factories = []
        self.__cache = weakref.WeakKeyDictionary()

    def clear_cache(self) -> None:
        """Clear the cache of all resolved converters."""
        self.__cache.clear()

    def clear_cache_for_type(self, target: type) -> None:
        """Clear the resolved converters of a single type."""
        self.__cache.pop(target, None)

    def register_converter(self, target: type, converter: Converter) -> None:
        """
        Register a converter for an exact type. A registered converter is the only rule applied to
        its type: when it fails, the coercion fails. Subclasses of the type are not concerned.

        Args:
            target (type): The type for which the converter is registered.
            converter (Converter): A function converting a string to the type. It signals an
                invalid string by raising.
        """
        if not isinstance(target, type):
            raise CoercionRegistryError(f"Cannot register a converter for '{target}', not a type.")
        self.__converters[target] = converter
        self.clear_cache()

    def register_factory(self, lookup: FactoryLookup) -> None:
        """
        Register a factory lookup. Lookups are consulted in registration order for types without
        a registered converter. A lookup returns a converter for the given type or None when it
        does not apply.

        Args:
            lookup (FactoryLookup): The factory lookup to register.
        """
        self.__factories.append(lookup)
        self.clear_cache()

    def has_converter(self, target: type) -> bool:
        """Check if a converter is registered for an exact type."""
        return target in self.__converters

    def list_registered_types(self) -> list[type]:
        """Get all registered types for debugging/introspection."""
        return list(self.__converters.keys())

    def converters_for(self, target: Annotation) -> tuple[Converter, ...]:
        """Get the ordered converters to try for a target. If a cached value exists, it is returned.

        Args:
            target (Annotation): The target type. Optional[T] is treated as T.

        Returns:
            tuple[Converter, ...]: The converters, in the order they must be tried. Empty if no
                rule applies.
        """
        target = unwrap_optional(target)
        if not isinstance(target, type):
            # Only types can be registered or constructed.
            return ()
        try:
            return self.__cache[target]
        except KeyError:
            pass

        converters: tuple[Converter, ...]
        if target in self.__converters:
            converters = (self.__converters[target],)
        else:
            factories = (lookup(target) for lookup in self.__factories)
            converters = (
                *(factory for factory in factories if factory is not None),
                constructor_converter(target),
            )

        self.__cache[target] = converters
        return converters

    def coerce(self, target: Annotation, value: str | None) -> Any:
        """Coerce a raw string to the target type.

        For example:
            >>> registry.coerce(int, "42") # 42
            >>> registry.coerce(int, "abc") # None
            >>> registry.coerce(pathlib.Path, "etc/app.conf") # PosixPath('etc/app.conf')

        Args:
            target (Annotation): The target type.
            value (str | None): The raw string.

        Returns:
            Any: The converted value, or None if no rule could convert the string.
        """
        if value is None:
            return None
        for converter in self.converters_for(target):
            try:
                result = converter(value)
            except Exception:  # pylint: disable=broad-except
                continue
            if result is not None:
                return result
        return None


@lru_cache(1)
def coercion_registry() -> CoercionRegistry:
    """Default coercion registry. Allows to register custom converters and factory lookups.
    See CoercionRegistry for more information.

    Returns:
        CoercionRegistry: the registry instance.
    """
    return CoercionRegistry()


def coerce(target: Annotation, value: str | None) -> Any:
    """This function is a shortcut to `coercion_registry().coerce()`."""
    return coercion_registry().coerce(target, value)
