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
Description: Thread safe memoization of configuration metadata, weakly keyed by class.
🦙
"""

from __future__ import annotations

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import threading
import weakref
from concurrent.futures import Future

import structlog

from .metadata import ConfigurationMetadata, MetadataProvider
from .problems import Monitor, NULL_MONITOR

logger = structlog.get_logger("confbind.metadata")


class MetadataCache:
    """Computes the metadata of each class at most once.

    Callers asking for a class whose metadata is being computed wait for that computation. A
    computation that raises is not cached: its waiters get the same exception and the next call
    computes again. Entries are dropped when their class is reclaimed.
    """

    def __init__(self, provider: MetadataProvider, monitor: Monitor = NULL_MONITOR) -> None:
        self._provider = provider
        self._monitor = monitor
        self._lock = threading.Lock()
        self._entries: weakref.WeakKeyDictionary[type, ConfigurationMetadata] = (
            weakref.WeakKeyDictionary()
        )
        self._pending: dict[type, Future[ConfigurationMetadata]] = {}

    @property
    def provider(self) -> MetadataProvider:
        return self._provider

    def get_metadata(self, config_class: type) -> ConfigurationMetadata:
        """Get the metadata of a class, computing it on the first request.

        Args:
            config_class (type): The configuration class.

        Raises:
            Exception: Whatever the provider raised while computing the metadata.

        Returns:
            ConfigurationMetadata: The metadata of the class.
        """
        with self._lock:
            metadata = self._entries.get(config_class)
            if metadata is not None:
                return metadata
            future = self._pending.get(config_class)
            computing = future is None
            if computing:
                future = self._pending[config_class] = Future()

        if not computing:
            return future.result()

        try:
            metadata = self._provider.extract(config_class, self._monitor)
        except BaseException as e:
            with self._lock:
                del self._pending[config_class]
            future.set_exception(e)
            logger.debug(
                "metadata-computation-failed", config_class=config_class.__qualname__, error=repr(e)
            )
            raise

        with self._lock:
            self._entries[config_class] = metadata
            del self._pending[config_class]
        future.set_result(metadata)
        logger.debug(
            "metadata-computed",
            config_class=config_class.__qualname__,
            attributes=len(metadata.attributes),
        )
        return metadata

    def clear(self) -> None:
        """Drop every computed entry. Computations in progress are not affected."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, config_class: type) -> bool:
        with self._lock:
            return config_class in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
