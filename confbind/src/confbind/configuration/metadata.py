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
Created: 2025-12-20
Description: Structural metadata of configuration classes. This includes:
            - Setter, AttributeMetadata and ConfigurationMetadata, the description of the
              bindable attributes of a class.
            - The MetadataProvider protocol, used by the factory to obtain the metadata.
            - The config and legacy_config decorators, and the AnnotatedMetadataProvider
              reading them.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import inspect
import weakref
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Protocol

from .problems import Monitor, NULL_MONITOR, Problems
from ..meta.typing.utilities import (
    Annotation,
    setter_parameter_type,
    setter_parameters,
    type_name,
)


SETTER_PREFIX: Final[str] = "set_"
MARKER_ATTRIBUTE: Final[str] = "__confbind_attribute__"

_POSITIONAL: Final = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class Setter:
    """Single argument method setting an attribute on a configuration instance.

    The method is looked up by name on the instance when applied, so a setter never references
    the class it belongs to. `qualified_name` is the module and qualified name of the method.
    """

    name: str
    parameter_type: Annotation
    qualified_name: str

    def apply(self, instance: Any, value: Any) -> None:
        """Invoke the setter on the instance."""
        getattr(instance, self.name)(value)

    def describe(self) -> str:
        """Human readable signature, used in diagnostics."""
        return f"{self.qualified_name}({type_name(self.parameter_type)})"

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class AttributeMetadata:
    """A bindable attribute of a configuration class.

    A `property_name` of None means that the attribute is never set from properties.
    """

    name: str
    property_name: str | None
    setter: Setter
    deprecated_names: tuple[str, ...] = ()


class ConfigurationMetadata:
    """Metadata of a configuration class: its attributes and the structural problems found while
    extracting them. The class is only weakly referenced.
    """

    def __init__(
        self,
        config_class: type,
        attributes: Mapping[str, AttributeMetadata],
        problems: Problems,
    ) -> None:
        self._config_class = weakref.ref(config_class)
        self._name = config_class.__qualname__
        self._attributes = MappingProxyType(dict(attributes))
        self._problems = problems

    @property
    def config_class(self) -> type | None:
        """The described class, or None if it was reclaimed."""
        return self._config_class()

    @property
    def name(self) -> str:
        return self._name

    @property
    def attributes(self) -> Mapping[str, AttributeMetadata]:
        return self._attributes

    @property
    def problems(self) -> Problems:
        return self._problems

    def __repr__(self) -> str:
        return f"<ConfigurationMetadata {self._name}({', '.join(self._attributes)})>"


class MetadataProvider(Protocol):
    """Extracts the metadata of a configuration class. Structural problems are recorded in the
    problems of the returned metadata, forwarded to the given monitor.
    """

    def extract(self, config_class: type, monitor: Monitor) -> ConfigurationMetadata: ...


@dataclass
class _Marker:
    property_name: str | None = None
    configured: bool = False
    deprecated_names: list[str] = field(default_factory=list)


def _marker(function: Any) -> _Marker:
    marker = getattr(function, MARKER_ATTRIBUTE, None)
    if marker is None:
        marker = _Marker()
        setattr(function, MARKER_ATTRIBUTE, marker)
    return marker


def config[F](property_name: str) -> Callable[[F], F]:
    """Mark a method as the setter of the attribute bound to `property_name`.

    Examples:
        >>> class ServerConfig:
        ...     def __init__(self):
        ...         self.port = 80
        ...
        ...     @config("port")
        ...     @legacy_config("old-port")
        ...     def set_port(self, port: int) -> None:
        ...         self.port = port

    Args:
        property_name (str): The external name of the property.

    Returns:
        Callable[[F], F]: The decorator.
    """

    def decorator(function: F) -> F:
        marker = _marker(function)
        marker.property_name = property_name
        marker.configured = True
        return function

    return decorator


def legacy_config[F](*deprecated_names: str) -> Callable[[F], F]:
    """Add deprecated property names to a setter. Used without `config`, the attribute has no
    current property name.

    Args:
        *deprecated_names (str): The legacy external names of the property, by priority.

    Returns:
        Callable[[F], F]: The decorator.
    """

    def decorator(function: F) -> F:
        marker = _marker(function)
        for name in deprecated_names:
            if name not in marker.deprecated_names:
                marker.deprecated_names.append(name)
        return function

    return decorator


def _marked_members(config_class: type) -> dict[str, Any]:
    """Marked members of the class, most derived definitions only, bases first."""
    names = dict.fromkeys(
        name
        for klass in reversed(config_class.__mro__)
        if klass is not object
        for name in vars(klass)
    )
    members = {}
    for name in names:
        member = inspect.getattr_static(config_class, name)
        function = getattr(member, "__func__", member)
        if hasattr(member, MARKER_ATTRIBUTE) or hasattr(function, MARKER_ATTRIBUTE):
            members[name] = member
    return members


class AnnotatedMetadataProvider:
    """Metadata provider reading the `config` and `legacy_config` decorators.

    The name of an attribute is the name of its setter without the `set_` prefix. Every structural
    problem is recorded, not only the first one.
    """

    def extract(
        self, config_class: type, monitor: Monitor = NULL_MONITOR
    ) -> ConfigurationMetadata:
        problems = Problems(monitor)
        name = config_class.__qualname__

        self._verify_constructor(config_class, problems)

        attributes: dict[str, AttributeMetadata] = {}
        claimed: dict[str, str] = {}
        for member_name, member in _marked_members(config_class).items():
            attribute = self._attribute(name, member_name, member, problems)
            if attribute is None:
                continue
            if attribute.name in attributes:
                problems.add_error(
                    f"Attribute '{attribute.name}' of [{name}] is set by more than one "
                    "configuration method"
                )
                continue
            if self._claim_names(attribute, claimed, problems):
                attributes[attribute.name] = attribute

        return ConfigurationMetadata(config_class, attributes, problems)

    @staticmethod
    def _verify_constructor(config_class: type, problems: Problems) -> None:
        try:
            signature = inspect.signature(config_class)
        except (TypeError, ValueError):
            # No signature available, builtins for instance. Instantiation will tell.
            return
        required = [
            p.name
            for p in signature.parameters.values()
            if p.default is inspect.Parameter.empty
            and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
        if required:
            problems.add_error(
                f"Configuration class [{config_class.__qualname__}] does not have a constructor "
                f"without arguments. Required: {', '.join(required)}"
            )

    @staticmethod
    def _attribute(
        class_name: str, member_name: str, member: Any, problems: Problems
    ) -> AttributeMetadata | None:
        where = f"{class_name}.{member_name}"
        if isinstance(member, (staticmethod, classmethod)) or not inspect.isfunction(member):
            problems.add_error(f"Configuration method [{where}] is not an instance method")
            return None

        marker: _Marker = getattr(member, MARKER_ATTRIBUTE)
        if marker.configured and not (marker.property_name and marker.property_name.strip()):
            problems.add_error(f"Configuration method [{where}] has an empty property name")
            return None

        try:
            parameters = setter_parameters(member)
        except (TypeError, ValueError) as e:
            problems.add_error(f"Configuration method [{where}] has no inspectable signature", e)
            return None
        if len(parameters) != 1 or parameters[0].kind not in _POSITIONAL:
            problems.add_error(
                f"Configuration method [{where}] does not take exactly one parameter"
            )
            return None

        try:
            parameter_type = setter_parameter_type(member)
        except LookupError:
            problems.add_error(
                f"Configuration method [{where}] does not declare the type of its parameter"
            )
            return None
        except Exception as e:  # pylint: disable=broad-except
            problems.add_error(
                f"Configuration method [{where}] has an unresolvable parameter type: {e}", e
            )
            return None

        return AttributeMetadata(
            name=member_name.removeprefix(SETTER_PREFIX) or member_name,
            property_name=marker.property_name if marker.configured else None,
            setter=Setter(
                member_name, parameter_type, f"{member.__module__}.{member.__qualname__}"
            ),
            deprecated_names=tuple(marker.deprecated_names),
        )

    @staticmethod
    def _claim_names(
        attribute: AttributeMetadata, claimed: dict[str, str], problems: Problems
    ) -> bool:
        """Record the property names of the attribute, checking they are not used elsewhere."""
        valid = True
        if attribute.property_name in attribute.deprecated_names:
            problems.add_error(
                f"Attribute '{attribute.name}' lists its property name "
                f"'{attribute.property_name}' as deprecated"
            )
            valid = False

        names = [attribute.property_name, *attribute.deprecated_names]
        for property_name in filter(None, names):
            owner = claimed.get(property_name)
            if owner is not None and owner != attribute.name:
                problems.add_error(
                    f"Property '{property_name}' of attribute '{attribute.name}' is already "
                    f"bound to attribute '{owner}'"
                )
                valid = False
            else:
                claimed[property_name] = attribute.name
        return valid
