"""String coercion system for confbind."""

# Import known_types to register built-in converters
from . import known_types as _  # noqa: F401

from .registry import (
    FACTORY_METHOD_NAMES,
    CoercionRegistry,
    coerce,
    coercion_registry,
    constructor_converter,
    instance_checked,
    named_factory,
    weak_target,
)
from .known_types import (
    bool_converter,
    enum_factory,
    float_converter,
    register_known_types,
    int_converter,
    str_converter,
)
from .errors import (
    TypingError,
    CoercionRegistryError,
    ConvertingFromStringError,
)

__all__ = [
    # Core classes
    "CoercionRegistry",
    "FACTORY_METHOD_NAMES",
    # Main API functions
    "coercion_registry",
    "coerce",
    # Converters and factory lookups
    "str_converter",
    "bool_converter",
    "int_converter",
    "float_converter",
    "enum_factory",
    "named_factory",
    "register_known_types",
    "instance_checked",
    "constructor_converter",
    "weak_target",
    # Errors
    "TypingError",
    "CoercionRegistryError",
    "ConvertingFromStringError",
]
