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
Description: End to end tests of the ConfigurationFactory.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from confbind.configuration.errors import (
    ApplicationError,
    CoercionError,
    ConfigurationError,
    InstantiationError,
    ResolutionConflictError,
    StructuralError,
)
from confbind.configuration.factory import ConfigurationFactory, normalize_prefix
from confbind.configuration.metadata import AnnotatedMetadataProvider, config, legacy_config
from confbind.meta.typing.coercion import CoercionRegistry, register_known_types


class Mode(Enum):
    FAST = "fast"
    SAFE = "safe"


class ServerConfig:
    instances = 0

    def __init__(self):
        ServerConfig.instances += 1
        self.port = 80
        self.calls: list[str] = []
        self.debug = False
        self.mode = Mode.SAFE
        self.root = Path(".")
        self.internal = "default"

    @config("port")
    @legacy_config("old-port")
    def set_port(self, port: int) -> None:
        self.calls.append("port")
        self.port = port

    @config("debug")
    def set_debug(self, debug: bool) -> None:
        self.calls.append("debug")
        self.debug = debug

    @config("mode")
    def set_mode(self, mode: Mode) -> None:
        self.calls.append("mode")
        self.mode = mode

    @config("root")
    def set_root(self, root: Path) -> None:
        self.calls.append("root")
        self.root = root

    @legacy_config("internal")
    def set_internal(self, internal: str) -> None:
        self.calls.append("internal")
        self.internal = internal


class ValidatingConfig:
    def __init__(self):
        self.workers = 1
        self.name = ""

    @config("workers")
    def set_workers(self, workers: int) -> None:
        if workers <= 0:
            raise ValueError("workers must be positive")
        self.workers = workers

    @config("name")
    def set_name(self, name: str) -> None:
        self.name = name


class RequiredArgumentConfig:
    created = False

    def __init__(self, host):
        RequiredArgumentConfig.created = True
        self.host = host

    @config("host")
    def set_host(self, host: str) -> None:
        self.host = host


class FailingConstructorConfig:
    def __init__(self):
        raise RuntimeError("cannot construct")

    @config("value")
    def set_value(self, value: str) -> None:
        """Setter."""


class TestNormalizePrefix:
    """Test the normalization of prefixes."""

    @pytest.mark.parametrize(
        ("prefix", "expected"),
        [
            (None, ""),
            ("", ""),
            ("server", "server."),
            ("server.", "server."),
            ("server..", "server."),
            ("a.b", "a.b."),
        ],
    )
    def test_normalize_prefix(self, prefix, expected):
        assert normalize_prefix(prefix) == expected


class TestProperties:
    """Test the properties snapshot."""

    def test_snapshot(self):
        """Later changes of the source mapping are not seen, and the snapshot is read only."""
        source = {"port": "8080"}
        factory = ConfigurationFactory(source)
        source["port"] = "9090"

        assert factory.properties == {"port": "8080"}
        assert factory.get_properties() is factory.properties
        with pytest.raises(TypeError):
            factory.properties["port"] = "1"  # type: ignore[index]

    def test_non_string_properties(self):
        """Keys and values must be strings."""
        with pytest.raises(TypeError):
            ConfigurationFactory({"port": 8080})  # type: ignore[dict-item]
        with pytest.raises(TypeError):
            ConfigurationFactory({1: "8080"})  # type: ignore[dict-item]


class TestBuild:
    """Test successful builds."""

    def test_end_to_end_with_deprecated_alias(self, monitor):
        """A matching deprecated alias only warns."""
        factory = ConfigurationFactory(
            {"server.port": "8080", "server.old-port": "8080"}, monitor=monitor
        )

        server = factory.build(ServerConfig, "server")

        assert server.port == 8080
        assert [p.message for p in monitor.warnings] == [
            "Configuration property 'server.old-port' has been deprecated. "
            "Use 'server.port' instead."
        ]
        assert monitor.errors == []

    def test_deprecated_alias_only(self, monitor):
        """A deprecated alias alone supplies the value."""
        server = ConfigurationFactory({"old-port": "8080"}, monitor=monitor).build(ServerConfig)

        assert server.port == 8080
        assert len(monitor.warnings) == 1
        assert "Use 'port' instead." in monitor.warnings[0].message

    def test_typed_values(self):
        """Values are coerced to the declared types of the setters."""
        server = ConfigurationFactory(
            {"port": "+443", "debug": "TRUE", "mode": "FAST", "root": "/srv/app"}
        ).build(ServerConfig)

        assert server.port == 443
        assert server.debug is True
        assert server.mode is Mode.FAST
        assert server.root == Path("/srv/app")

    def test_absent_properties_keep_defaults(self):
        """Setters of absent properties are not called."""
        server = ConfigurationFactory({"port": "8080"}).build(ServerConfig)

        assert server.calls == ["port"]
        assert server.debug is False
        assert server.mode is Mode.SAFE

    def test_no_property_name_keeps_default(self):
        """Attributes without property name are never looked up."""
        server = ConfigurationFactory({"internal": "x"}).build(ServerConfig)

        assert server.internal == "default"
        assert server.calls == []

    def test_prefix_isolation(self):
        """Only the keys under the prefix are used."""
        factory = ConfigurationFactory({"port": "1", "server.port": "2", "client.port": "3"})

        assert factory.build(ServerConfig).port == 1
        assert factory.build(ServerConfig, "server").port == 2
        assert factory.build(ServerConfig, "client.").port == 3

    def test_existing_instance(self):
        """An existing instance is populated instead of a new one."""
        before = ServerConfig.instances
        instance = ServerConfig()
        instance.mode = Mode.FAST

        result = ConfigurationFactory({"port": "8080"}).build(ServerConfig, None, instance)

        assert result is instance
        assert instance.port == 8080
        assert instance.mode is Mode.FAST
        assert ServerConfig.instances == before + 1

    def test_factory_is_reusable(self):
        """The same factory builds several instances, sharing the metadata."""
        factory = ConfigurationFactory({"port": "8080"})

        first = factory.build(ServerConfig)
        second = factory.build(ServerConfig)

        assert first is not second
        assert first.port == second.port == 8080
        assert ServerConfig in factory.metadata_cache
        assert len(factory.metadata_cache) == 1

    def test_custom_registry(self):
        """A custom registry overrides the default coercion rules."""
        registry = register_known_types(CoercionRegistry())
        registry.register_converter(int, lambda value: int(value, 16))

        server = ConfigurationFactory({"port": "1f90"}, registry=registry).build(ServerConfig)

        assert server.port == 8080


class TestBuildFailures:
    """Test the failures of a build."""

    def test_end_to_end_conflict(self, monitor):
        """Conflicting values fail the build without calling the setter."""
        factory = ConfigurationFactory(
            {"server.port": "8080", "server.old-port": "9090"}, monitor=monitor
        )
        instance = ServerConfig()

        with pytest.raises(ConfigurationError) as exc_info:
            factory.build(ServerConfig, "server", instance)

        assert instance.calls == []
        assert len(exc_info.value.errors) == 1
        assert len(exc_info.value.warnings) == 1
        message = str(exc_info.value)
        assert "'server.old-port' (=9090)" in message
        assert "'server.port' (=8080)" in message
        assert isinstance(exc_info.value.__cause__, ResolutionConflictError)
        assert len(monitor.errors) == 1

    def test_unparsable_value(self):
        """An unparsable value is a coercion error and the setter is not called."""
        instance = ServerConfig()

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationFactory({"port": "abc"}).build(ServerConfig, None, instance)

        assert instance.calls == []
        assert instance.port == 80
        (error,) = exc_info.value.errors
        assert error.message == (
            f"Could not coerce value 'abc' to int for attribute 'port' (property 'port') "
            f"in [{__name__}.ServerConfig.set_port(int)]"
        )
        assert isinstance(error.cause, CoercionError)

    @pytest.mark.parametrize(
        ("key", "value"),
        [("port", "80.5"), ("port", " 80"), ("debug", "yes"), ("mode", "turbo")],
    )
    def test_strict_coercion(self, key, value):
        """Values not strictly matching the declared type are rejected."""
        with pytest.raises(ConfigurationError):
            ConfigurationFactory({key: value}).build(ServerConfig)

    def test_every_problem_is_reported(self):
        """All the failing attributes are reported at once, the others are still applied."""
        instance = ServerConfig()

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationFactory(
                {"port": "abc", "debug": "maybe", "mode": "FAST"}
            ).build(ServerConfig, None, instance)

        assert len(exc_info.value.errors) == 2
        assert instance.mode is Mode.FAST

    def test_setter_failure(self):
        """A setter raising is an application error, with the original exception as cause."""
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationFactory({"workers": "0", "name": "pool"}).build(ValidatingConfig)

        (error,) = exc_info.value.errors
        assert error.message == (
            f"Error invoking configuration method [{__name__}.ValidatingConfig.set_workers(int)] "
            "on instance of [ValidatingConfig]"
        )
        assert isinstance(error.cause, ApplicationError)
        assert isinstance(error.cause.__cause__, ValueError)
        assert error.cause.root_cause().args == ("workers must be positive",)

    def test_structural_error_before_instantiation(self, monitor):
        """Invalid metadata fails before any instance is created."""
        RequiredArgumentConfig.created = False

        with pytest.raises(StructuralError) as exc_info:
            ConfigurationFactory({"host": "h"}, monitor=monitor).build(RequiredArgumentConfig)

        assert not RequiredArgumentConfig.created
        assert "does not have a constructor without arguments" in str(exc_info.value)
        assert len(monitor.errors) == 1

    def test_structural_error_with_instance(self):
        """Invalid metadata fails even when an instance is supplied."""
        instance = RequiredArgumentConfig("h")

        with pytest.raises(StructuralError):
            ConfigurationFactory({"host": "x"}).build(RequiredArgumentConfig, None, instance)

        assert instance.host == "h"

    def test_instantiation_error(self):
        """A failing constructor is an instantiation error."""
        with pytest.raises(InstantiationError) as exc_info:
            ConfigurationFactory({}).build(FailingConstructorConfig)

        assert str(exc_info.value) == (
            "Error creating instance of configuration class [FailingConstructorConfig]"
        )
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("config_class", [None, "ServerConfig", ServerConfig()])
    def test_not_a_class(self, config_class):
        """Only classes can be built."""
        with pytest.raises(TypeError):
            ConfigurationFactory({}).build(config_class)  # type: ignore[arg-type]


class TestConcurrentBuilds:
    """Test builds from several threads."""

    def test_metadata_computed_once(self):
        """Threads building the same class share one metadata computation."""
        calls = []
        delegate = AnnotatedMetadataProvider()

        def extract(config_class, monitor):
            calls.append(config_class)
            time.sleep(0.1)
            return delegate.extract(config_class, monitor)

        provider = MagicMock()
        provider.extract.side_effect = extract
        factory = ConfigurationFactory({"port": "8080"}, provider=provider)
        barrier = threading.Barrier(4)

        def build(_):
            barrier.wait(timeout=5)
            return factory.build(ServerConfig)

        with ThreadPoolExecutor(max_workers=4) as executor:
            servers = list(executor.map(build, range(4)))

        assert calls == [ServerConfig]
        assert all(server.port == 8080 for server in servers)


class TestLogging:
    """Test the debug events of the factory."""

    @pytest.mark.usefixtures("reset_structlog")
    def test_events(self):
        """Successful and failed bindings are logged."""
        factory = ConfigurationFactory({"port": "8080", "workers": "0"})

        with capture_logs() as logs:
            factory.build(ServerConfig)
            with pytest.raises(ConfigurationError):
                factory.build(ValidatingConfig)

        bound = next(log for log in logs if log["event"] == "configuration-bound")
        failed = next(log for log in logs if log["event"] == "configuration-binding-failed")
        assert bound["config_class"] == "ServerConfig"
        assert bound["prefix"] == ""
        assert failed["config_class"] == "ValidatingConfig"
        assert failed["errors"] == 1
