"""Property binding for confbind."""

from ..abstract.exceptions import TracedException, format_exception
from .errors import (
    ConfigurationError,
    StructuralError,
    InstantiationError,
    InvalidConfigurationError,
    ResolutionConflictError,
    CoercionError,
    ApplicationError,
)
from .problems import (
    Severity,
    Problem,
    Problems,
    Monitor,
    NullMonitor,
    NULL_MONITOR,
    LoggingMonitor,
)
from .metadata import (
    Setter,
    AttributeMetadata,
    ConfigurationMetadata,
    MetadataProvider,
    AnnotatedMetadataProvider,
    config,
    legacy_config,
)
from .metadata_cache import MetadataCache
from .resolver import PropertyResolver
from .factory import ConfigurationFactory, normalize_prefix

__all__ = [
    # Errors
    "TracedException",
    "format_exception",
    "ConfigurationError",
    "StructuralError",
    "InstantiationError",
    "InvalidConfigurationError",
    "ResolutionConflictError",
    "CoercionError",
    "ApplicationError",
    # Problems
    "Severity",
    "Problem",
    "Problems",
    "Monitor",
    "NullMonitor",
    "NULL_MONITOR",
    "LoggingMonitor",
    # Metadata
    "Setter",
    "AttributeMetadata",
    "ConfigurationMetadata",
    "MetadataProvider",
    "AnnotatedMetadataProvider",
    "config",
    "legacy_config",
    "MetadataCache",
    # Binding
    "PropertyResolver",
    "ConfigurationFactory",
    "normalize_prefix",
]
