"""
confbind: Binding of string properties to typed configuration objects.

This library provides:
- ConfigurationFactory to build configuration objects through their setter methods
- config and legacy_config decorators to declare property names and deprecated aliases
- Problems aggregation, so that every misconfiguration is reported at once
- An extensible registry coercing raw strings to typed values
"""

__version__ = "0.1.0"
__author__ = "Sébastien Gachoud"
__license__ = "MIT"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
]
