"""Type annotation utility functions.

This module provides helper functions for working with the annotations of setter methods:
checking union and optional types, and resolving the declared type of a setter parameter,
including forward references.
"""
import inspect
from collections.abc import Callable
from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin, get_type_hints

type Annotation = Any


def is_union(annotation: Annotation) -> bool:
    """Check if an annotation is a union. A union is a Union or UnionType type.

    Args:
        annotation (Any): The annotation to check.

    Returns:
        bool: Whether the annotation is a union.
    """
    o = get_origin(annotation) or annotation
    return o in (Union, UnionType)


def is_optional(annotation: Annotation) -> bool:
    """Check if an annotation is an optional. An optional is a Union with NoneType.

    Args:
        annotation (Any): The annotation to check.

    Returns:
        bool: Whether the annotation is an optional.
    """
    return is_union(annotation) and NoneType in get_args(annotation)


def is_binary_optional(annotation: Annotation) -> bool:
    """Check if an annotation is a binary optional. A binary optional is a Union with NoneType and
    a single other type.

    Args:
        annotation (Any): The annotation to check.

    Returns:
        bool: Whether the annotation is an optional.
    """
    if not is_union(annotation):
        return False
    args = get_args(annotation)
    return len(args) == 2 and NoneType in args


def unwrap_optional(annotation: Annotation) -> Annotation:
    """Return T for Optional[T] (or T | None). Any other annotation is returned unchanged."""
    if not is_binary_optional(annotation):
        return annotation
    return next(arg for arg in get_args(annotation) if arg is not NoneType)


def setter_parameters(function: Callable[..., Any]) -> list[inspect.Parameter]:
    """Parameters of an unbound method, `self` excluded.

    Args:
        function (Callable[..., Any]): The unbound method.

    Returns:
        list[inspect.Parameter]: The parameters following `self`.
    """
    return list(inspect.signature(function).parameters.values())[1:]


def setter_parameter_type(function: Callable[..., Any]) -> Annotation:
    """Declared type of the single parameter of a setter, with optionals unwrapped.

    Args:
        function (Callable[..., Any]): The unbound setter method.

    Raises:
        NameError: Raised by typing when a forward reference cannot be resolved.
        LookupError: Raised when the parameter has no annotation.

    Returns:
        Annotation: The resolved annotation.
    """
    parameter = setter_parameters(function)[0]
    hints = get_type_hints(function)
    if parameter.name not in hints:
        raise LookupError(f"Parameter '{parameter.name}' has no type annotation.")
    return unwrap_optional(hints[parameter.name])


def type_name(annotation: Annotation) -> str:
    """Qualified name of a type, without module for builtins. Other annotations use their repr."""
    if isinstance(annotation, type):
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    return repr(annotation)
