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
Created: 2025-07-11
Updated: 2025-12-18
Description: Base class and functions to ease exception tracing in a string, and to walk the
            chain of explicit causes of an exception.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"


import traceback


def format_exception(e: BaseException) -> str:
    """Format the provided exception to a string with its traceback.

    Args:
        e (BaseException): The exception to format.

    Returns:
        str: The string representation of the exception with its traceback.
    """
    return "".join(traceback.format_exception(type(e), e, e.__traceback__))


def cause_chain(e: BaseException) -> list[BaseException]:
    """List the exception followed by its explicit causes (`raise ... from ...`).

    Args:
        e (BaseException): The outermost exception.

    Returns:
        list[BaseException]: The exception and its causes, outermost first.
    """
    chain = [e]
    while chain[-1].__cause__ is not None and chain[-1].__cause__ not in chain:
        chain.append(chain[-1].__cause__)
    return chain


def root_cause(e: BaseException) -> BaseException:
    """The innermost explicit cause of an exception, the exception itself if it has none."""
    return cause_chain(e)[-1]


class TracedException(Exception):
    """Base traceable exception class."""

    def traceback_format(self) -> str:
        """Format the exception to a string with its traceback.

        Returns:
            str: The string representation of the exception with its traceback.
        """
        return format_exception(self)

    def root_cause(self) -> BaseException:
        """The innermost explicit cause of the exception."""
        return root_cause(self)
