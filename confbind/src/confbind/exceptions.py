"""
Re-export exceptions module for cleaner imports.

This allows: from confbind.exceptions import ConfigurationError
Instead of: from confbind.configuration.errors import ConfigurationError
"""

from .abstract.exceptions import TracedException, format_exception, root_cause
from .configuration.errors import (
    ConfigurationError,
    StructuralError,
    InstantiationError,
    InvalidConfigurationError,
    ResolutionConflictError,
    CoercionError,
    ApplicationError,
)

__all__ = [
    "TracedException",
    "format_exception",
    "root_cause",
    "ConfigurationError",
    "StructuralError",
    "InstantiationError",
    "InvalidConfigurationError",
    "ResolutionConflictError",
    "CoercionError",
    "ApplicationError",
]
