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
Created: 2025-12-22
Description: This module provides the ConfigurationFactory, binding a map of string properties
            to typed configuration objects through their setter methods.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final, overload

import structlog

from .errors import (
    ApplicationError,
    CoercionError,
    InstantiationError,
    InvalidConfigurationError,
    StructuralError,
)
from .metadata import AnnotatedMetadataProvider, AttributeMetadata, MetadataProvider
from .metadata_cache import MetadataCache
from .problems import Monitor, NULL_MONITOR, Problems
from .resolver import PropertyResolver
from ..meta.typing.coercion import CoercionRegistry, coercion_registry

PREFIX_SEPARATOR: Final[str] = "."

logger = structlog.get_logger("confbind.factory")


def normalize_prefix(prefix: str | None) -> str:
    """An empty prefix stays empty, any other prefix is followed by exactly one separator."""
    if not prefix:
        return ""
    return prefix.rstrip(PREFIX_SEPARATOR) + PREFIX_SEPARATOR


def _snapshot(properties: Mapping[str, str]) -> Mapping[str, str]:
    for key, value in properties.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(
                f"Properties must map strings to strings, got {key!r}: {value!r}."
            )
    return MappingProxyType(dict(properties))


class ConfigurationFactory:
    """Builds configuration objects from a map of string properties.

    Examples:
        >>> class ServerConfig:
        ...     def __init__(self):
        ...         self.port = 80
        ...
        ...     @config("port")
        ...     @legacy_config("old-port")
        ...     def set_port(self, port: int) -> None:
        ...         self.port = port

        >>> factory = ConfigurationFactory({"server.port": "8080"})
        >>> factory.build(ServerConfig, "server").port
        8080

    Every problem of a build is collected before failing, and raised as a single
    ConfigurationError listing all of them. Deprecated properties are reported as warnings to the
    monitor and never prevent a build.
    """

    def __init__(
        self,
        properties: Mapping[str, str],
        monitor: Monitor = NULL_MONITOR,
        provider: MetadataProvider | None = None,
        registry: CoercionRegistry | None = None,
    ) -> None:
        self._properties = _snapshot(properties)
        self._monitor = monitor
        self._metadata_cache = MetadataCache(provider or AnnotatedMetadataProvider(), monitor)
        self._registry = registry if registry is not None else coercion_registry()
        self._resolver = PropertyResolver(self._properties)

    @property
    def properties(self) -> Mapping[str, str]:
        """Read only snapshot of the properties."""
        return self._properties

    def get_properties(self) -> Mapping[str, str]:
        """This function is a shortcut to `self.properties`."""
        return self._properties

    @property
    def metadata_cache(self) -> MetadataCache:
        return self._metadata_cache

    @overload
    def build[T](self, config_class: type[T]) -> T: ...

    @overload
    def build[T](
        self, config_class: type[T], prefix: str | None, instance: T | None = None
    ) -> T: ...

    def build[T](
        self, config_class: type[T], prefix: str | None = None, instance: T | None = None
    ) -> T:
        """Build a configuration object, or populate the given instance.

        Args:
            config_class (type[T]): The configuration class.
            prefix (str | None): Prefix of the property names, without trailing separator.
            instance (T | None): An instance to populate instead of a default constructed one.

        Raises:
            TypeError: Raised if config_class is None or not a class.
            StructuralError: Raised if the metadata of the class is invalid.
            InstantiationError: Raised if the class could not be default constructed.
            ConfigurationError: Raised with every problem if any attribute could not be bound.

        Returns:
            T: The populated instance.
        """
        if config_class is None:
            raise TypeError("config_class is None")
        if not isinstance(config_class, type):
            raise TypeError(f"config_class must be a class, got {config_class!r}")

        prefix = normalize_prefix(prefix)

        metadata = self._metadata_cache.get_metadata(config_class)
        metadata.problems.raise_if_errors(StructuralError)

        if instance is None:
            instance = self._new_instance(config_class)

        problems = Problems(self._monitor)
        for attribute in metadata.attributes.values():
            try:
                self._set_config_property(instance, attribute, prefix, problems)
            except InvalidConfigurationError as e:
                problems.add_failure(e)

        if problems.has_errors():
            logger.debug(
                "configuration-binding-failed",
                config_class=config_class.__qualname__,
                errors=len(problems.errors),
            )
        problems.raise_if_errors()

        logger.debug(
            "configuration-bound",
            config_class=config_class.__qualname__,
            prefix=prefix,
            warnings=len(problems.warnings),
        )
        return instance

    @staticmethod
    def _new_instance[T](config_class: type[T]) -> T:
        try:
            return config_class()
        except Exception as e:
            raise InstantiationError(
                f"Error creating instance of configuration class [{config_class.__qualname__}]"
            ) from e

    def _set_config_property(
        self, instance: Any, attribute: AttributeMetadata, prefix: str, problems: Problems
    ) -> None:
        value = self._property_value(attribute, prefix, problems)

        # No value, the setter is not called.
        if value is None:
            return

        setter = attribute.setter
        try:
            setter.apply(instance, value)
        except Exception as e:
            raise ApplicationError(setter.describe(), type(instance).__qualname__) from e

    def _property_value(
        self, attribute: AttributeMetadata, prefix: str, problems: Problems
    ) -> Any:
        operative = self._resolver.resolve(attribute, prefix, problems)
        if operative is None:
            return None

        key, raw = operative
        setter = attribute.setter
        value = self._registry.coerce(setter.parameter_type, raw)
        if value is None:
            raise CoercionError(raw, setter.parameter_type, attribute.name, key, setter.describe())
        return value
