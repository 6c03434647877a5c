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
Created: 2025-12-21
Description: Resolution of the operative property of an attribute, among its current name and
            its deprecated names.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

from collections.abc import Mapping

from .errors import ResolutionConflictError
from .metadata import AttributeMetadata
from .problems import Problems


def deprecation_message(full_name: str, replacement: str | None) -> str:
    """Warning message for a deprecated property found in the properties."""
    advice = (
        "There is no replacement."
        if replacement is None
        else f"Use '{replacement}' instead."
    )
    return f"Configuration property '{full_name}' has been deprecated. {advice}"


class PropertyResolver:
    """Finds the key and value supplying an attribute.

    The current property name wins over deprecated names, and deprecated names are considered in
    their declared order. Every deprecated name present in the properties is reported as a
    warning. A deprecated value differing from the operative value is a conflict.
    """

    def __init__(self, properties: Mapping[str, str]) -> None:
        self._properties = properties

    def resolve(
        self, attribute: AttributeMetadata, prefix: str, problems: Problems
    ) -> tuple[str, str] | None:
        """Resolve the operative key and value of an attribute.

        Args:
            attribute (AttributeMetadata): The attribute to resolve.
            prefix (str): The normalized prefix, empty or ending with the separator.
            problems (Problems): Receives the deprecation warnings and the conflicts.

        Returns:
            tuple[str, str] | None: The operative key and value. None if the attribute has no
                property name, if no key has a value, or if a conflict was recorded.
        """
        if attribute.property_name is None:
            return None

        operative_key: str | None = prefix + attribute.property_name
        operative_value = self._properties.get(operative_key)
        if operative_value is None:
            operative_key = None

        conflict = False
        for deprecated_name in attribute.deprecated_names:
            full_name = prefix + deprecated_name
            value = self._properties.get(full_name)
            if value is None:
                continue

            problems.add_warning(
                deprecation_message(full_name, prefix + attribute.property_name)
            )
            if operative_key is None or operative_value is None:
                operative_key, operative_value = full_name, value
            elif value != operative_value:
                problems.add_failure(
                    ResolutionConflictError(full_name, value, operative_key, operative_value)
                )
                conflict = True

        if conflict or operative_key is None or operative_value is None:
            return None
        return operative_key, operative_value
