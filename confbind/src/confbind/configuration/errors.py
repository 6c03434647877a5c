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
Created: 2025-12-18
Description: Exceptions raised while binding properties to configuration objects.
            - StructuralError, InstantiationError: fail fast failures of a build.
            - ConfigurationError: aggregated failure carrying every recorded problem.
            - InvalidConfigurationError: per attribute failures (conflict, coercion,
              application) which end up as problems of an aggregated failure.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..abstract.exceptions.traced_exceptions import TracedException
from ..meta.typing.utilities import type_name

if TYPE_CHECKING:
    from .problems import Problem


class ConfigurationError(TracedException):
    """Aggregated configuration failure.

    Holds the ordered problems recorded while building a configuration object so the caller
    sees every misconfiguration at once. The string form lists every message.
    """

    def __init__(self, problems: Iterable[Problem] = (), message: str | None = None) -> None:
        self.problems: tuple[Problem, ...] = tuple(problems)
        super().__init__(message if message is not None else self._render())

    def _render(self) -> str:
        if not self.problems:
            return "Configuration error"
        lines = ["Configuration errors:", ""]
        lines.extend(
            f"{i}) {problem.severity.name}: {problem.message}"
            for i, problem in enumerate(self.problems, start=1)
        )
        return "\n".join(lines)

    @property
    def messages(self) -> tuple[str, ...]:
        """Messages of all the problems, in recording order."""
        return tuple(problem.message for problem in self.problems)

    @property
    def errors(self) -> tuple[Problem, ...]:
        """Problems with an ERROR severity."""
        return tuple(problem for problem in self.problems if problem.is_error)

    @property
    def warnings(self) -> tuple[Problem, ...]:
        """Problems with a WARNING severity."""
        return tuple(problem for problem in self.problems if not problem.is_error)


class StructuralError(ConfigurationError):
    """The metadata of a configuration class is invalid. Raised before any instantiation."""


class InstantiationError(ConfigurationError):
    """The configuration class could not be default constructed."""

    def __init__(self, message: str) -> None:
        super().__init__((), message)


class InvalidConfigurationError(TracedException):
    """A single attribute could not be bound. Recorded as a problem, never raised by `build`."""


class ResolutionConflictError(InvalidConfigurationError):
    """Two keys of the same attribute carry different values."""

    def __init__(self, key: str, value: str, operative_key: str, operative_value: str) -> None:
        self.key = key
        self.value = value
        self.operative_key = operative_key
        self.operative_value = operative_value
        super().__init__(
            f"Value for property '{key}' (={value}) conflicts with property "
            f"'{operative_key}' (={operative_value})"
        )


class CoercionError(InvalidConfigurationError):
    """A present value could not be converted to the declared type of the attribute."""

    def __init__(
        self, value: str, target: Any, attribute: str, key: str, setter: str
    ) -> None:
        self.value = value
        self.target = target
        self.attribute = attribute
        self.key = key
        super().__init__(
            f"Could not coerce value '{value}' to {type_name(target)} for attribute "
            f"'{attribute}' (property '{key}') in [{setter}]"
        )


class ApplicationError(InvalidConfigurationError):
    """The setter raised while being invoked. The original exception is the `__cause__`."""

    def __init__(self, setter: str, instance_type: str) -> None:
        self.setter = setter
        self.instance_type = instance_type
        super().__init__(
            f"Error invoking configuration method [{setter}] on instance of [{instance_type}]"
        )

