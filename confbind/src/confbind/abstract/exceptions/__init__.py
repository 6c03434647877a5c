"""Exception utilities for confbind."""

from .traced_exceptions import TracedException, format_exception, cause_chain, root_cause

__all__ = [
    "TracedException",
    "format_exception",
    "cause_chain",
    "root_cause",
]
