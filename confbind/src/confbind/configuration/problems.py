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
Description: Accumulator of configuration problems (warnings and errors). Every problem is
            forwarded to a monitor as soon as it is recorded, and the accumulated problems
            can be raised at once as a single ConfigurationError.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol

import structlog

from ..abstract.exceptions import root_cause
from .errors import ConfigurationError, InvalidConfigurationError


class Severity(IntEnum):
    """Severity of a problem. Only ERROR problems prevent a configuration from being built."""

    WARNING = 1
    ERROR = 2


@dataclass(frozen=True)
class Problem:
    """A single recorded problem."""

    severity: Severity
    message: str
    cause: BaseException | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.name}: {self.message}"


class Monitor(Protocol):
    """Receives problems as they are recorded, independently of the outcome of a build."""

    def on_error(self, problem: Problem) -> None: ...

    def on_warning(self, problem: Problem) -> None: ...


class NullMonitor:
    """Monitor ignoring every problem."""

    def on_error(self, problem: Problem) -> None:
        _ = problem

    def on_warning(self, problem: Problem) -> None:
        _ = problem

    def __repr__(self) -> str:
        return "NULL_MONITOR"


NULL_MONITOR = NullMonitor()


class LoggingMonitor:
    """Monitor forwarding problems to a structlog logger.

    The logger is not configured here, applications own `structlog.configure`.
    """

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("confbind.problems")

    def on_error(self, problem: Problem) -> None:
        self._logger.error("configuration-problem", message=problem.message, **_causes(problem))

    def on_warning(self, problem: Problem) -> None:
        self._logger.warning("configuration-problem", message=problem.message, **_causes(problem))


def _causes(problem: Problem) -> dict[str, str]:
    if problem.cause is None:
        return {}
    return {"cause": repr(problem.cause), "root_cause": repr(root_cause(problem.cause))}


class Problems:
    """Ordered accumulator of problems.

    Examples:
        >>> problems = Problems()
        >>> problems.add_warning("Configuration property 'a' has been deprecated.")
        >>> problems.raise_if_errors()  # warnings never raise

        >>> problems.add_error("Something is wrong")
        >>> problems.raise_if_errors()  # raises ConfigurationError with both messages
    """

    def __init__(self, monitor: Monitor = NULL_MONITOR) -> None:
        self._monitor = monitor
        self._problems: list[Problem] = []

    @property
    def monitor(self) -> Monitor:
        return self._monitor

    def record(
        self, severity: Severity, message: str, cause: BaseException | None = None
    ) -> Problem:
        """Record a problem and forward it to the monitor.

        Args:
            severity (Severity): The severity of the problem.
            message (str): The formatted message.
            cause (BaseException | None): The failure at the origin of the problem, if any.

        Returns:
            Problem: The recorded problem.
        """
        problem = Problem(Severity(severity), message, cause)
        self._problems.append(problem)
        if problem.is_error:
            self._monitor.on_error(problem)
        else:
            self._monitor.on_warning(problem)
        return problem

    def add_error(self, message: str, cause: BaseException | None = None) -> None:
        self.record(Severity.ERROR, message, cause)

    def add_warning(self, message: str, cause: BaseException | None = None) -> None:
        self.record(Severity.WARNING, message, cause)

    def add_failure(self, failure: InvalidConfigurationError) -> None:
        """Record an attribute failure as an error. The failure itself is the cause."""
        self.record(Severity.ERROR, str(failure), failure)

    def has_errors(self) -> bool:
        return any(problem.is_error for problem in self._problems)

    @property
    def problems(self) -> tuple[Problem, ...]:
        return tuple(self._problems)

    @property
    def errors(self) -> tuple[Problem, ...]:
        return tuple(problem for problem in self._problems if problem.is_error)

    @property
    def warnings(self) -> tuple[Problem, ...]:
        return tuple(problem for problem in self._problems if not problem.is_error)

    def raise_if_errors(
        self, error_type: type[ConfigurationError] = ConfigurationError
    ) -> None:
        """Raise every recorded problem as one error if at least one of them is an error.

        The cause of the first error carrying one becomes the `__cause__` of the raised error.

        Args:
            error_type (type[ConfigurationError]): The aggregated error class to raise.

        Raises:
            ConfigurationError: Raised when an error was recorded.
        """
        if not self.has_errors():
            return
        cause = next(
            (p.cause for p in self._problems if p.is_error and p.cause is not None), None
        )
        raise error_type(self._problems) from cause

    def __iter__(self) -> Iterator[Problem]:
        return iter(tuple(self._problems))

    def __len__(self) -> int:
        return len(self._problems)

    def __repr__(self) -> str:
        return (
            f"<Problems errors={len(self.errors)} warnings={len(self.warnings)}>"
        )
