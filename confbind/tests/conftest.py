"""Shared fixtures and doubles of the confbind tests."""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import Iterable

import pytest
import structlog

from confbind.configuration.metadata import AnnotatedMetadataProvider, ConfigurationMetadata
from confbind.configuration.problems import Monitor, Problem


class RecordingMonitor:
    """Monitor keeping every problem it receives."""

    def __init__(self) -> None:
        self.errors: list[Problem] = []
        self.warnings: list[Problem] = []

    def on_error(self, problem: Problem) -> None:
        self.errors.append(problem)

    def on_warning(self, problem: Problem) -> None:
        self.warnings.append(problem)


class CountingProvider:
    """Metadata provider counting its extractions, optionally failing the first ones."""

    def __init__(self, failures: int = 0, delegate: AnnotatedMetadataProvider | None = None):
        self.calls = 0
        self.failures = failures
        self.delegate = delegate or AnnotatedMetadataProvider()

    def extract(self, config_class: type, monitor: Monitor) -> ConfigurationMetadata:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"extraction {self.calls} failed")
        return self.delegate.extract(config_class, monitor)


@pytest.fixture
def monitor() -> RecordingMonitor:
    return RecordingMonitor()


@pytest.fixture
def reset_structlog() -> Iterable[None]:
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def counting_provider() -> type[CountingProvider]:
    return CountingProvider
