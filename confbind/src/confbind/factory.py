"""
Re-export the binding API for cleaner imports.

This allows: from confbind.factory import ConfigurationFactory, config
Instead of: from confbind.configuration.factory import ConfigurationFactory
"""

from .configuration.factory import ConfigurationFactory, normalize_prefix
from .configuration.metadata import (
    AnnotatedMetadataProvider,
    AttributeMetadata,
    ConfigurationMetadata,
    MetadataProvider,
    Setter,
    config,
    legacy_config,
)
from .configuration.metadata_cache import MetadataCache
from .configuration.problems import (
    LoggingMonitor,
    Monitor,
    NULL_MONITOR,
    Problem,
    Problems,
    Severity,
)

__all__ = [
    "ConfigurationFactory",
    "normalize_prefix",
    "config",
    "legacy_config",
    "AnnotatedMetadataProvider",
    "AttributeMetadata",
    "ConfigurationMetadata",
    "MetadataProvider",
    "MetadataCache",
    "Setter",
    "Monitor",
    "NULL_MONITOR",
    "LoggingMonitor",
    "Problem",
    "Problems",
    "Severity",
]
