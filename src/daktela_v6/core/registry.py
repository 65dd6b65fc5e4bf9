"""Caller-owned registry of dispatchers keyed by instance and token.

The registry lets an application reuse one dispatcher (and its HTTP client)
per Daktela instance/credential pair without relying on global state. Its
lifetime is whatever the caller gives it.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from typing import Any, Callable, Optional

from daktela_v6.core.dispatcher import Dispatcher
from daktela_v6.core.http.executor import RequestExecutor
from daktela_v6.core.http.shared import normalize_url

logger = logging.getLogger(__name__)

DispatcherFactory = Callable[[str, str], Dispatcher]


def _default_factory(**executor_options: Any) -> DispatcherFactory:
    def factory(instance: str, access_token: str) -> Dispatcher:
        return Dispatcher(RequestExecutor(instance, access_token, **executor_options))

    return factory


def registry_key(instance: str, access_token: str) -> str:
    """Stable key for an instance/token pair; the token is never stored in clear."""
    material = f"{normalize_url(instance)}{access_token}".encode("utf-8")
    return hashlib.sha256(material).hexdigest()


class ClientRegistry:
    """Registry of dispatchers, one per instance/token pair.

    Args:
        factory: Callable building a dispatcher for ``(instance, access_token)``.
            Defaults to a plain executor configured with ``executor_options``.
        **executor_options: Keyword arguments for RequestExecutor when no
            factory is given (e.g. ``retry_policy=RetryPolicy()``).
    """

    def __init__(self, factory: Optional[DispatcherFactory] = None, **executor_options: Any):
        if factory is not None and executor_options:
            raise ValueError("executor_options cannot be combined with a custom factory")
        self._factory = factory or _default_factory(**executor_options)
        self._dispatchers: dict[str, Dispatcher] = {}
        self._lock = threading.Lock()

    def get_or_create(self, instance: str, access_token: str) -> Dispatcher:
        key = registry_key(instance, access_token)
        with self._lock:
            dispatcher = self._dispatchers.get(key)
            if dispatcher is None:
                logger.debug("Creating dispatcher for %s", normalize_url(instance))
                dispatcher = self._factory(instance, access_token)
                self._dispatchers[key] = dispatcher
            return dispatcher

    def remove(self, instance: str, access_token: str) -> bool:
        """Close and forget the dispatcher for a pair. Returns True if one existed."""
        key = registry_key(instance, access_token)
        with self._lock:
            dispatcher = self._dispatchers.pop(key, None)
        if dispatcher is None:
            return False
        dispatcher.close()
        return True

    def clear(self) -> None:
        with self._lock:
            dispatchers = list(self._dispatchers.values())
            self._dispatchers.clear()
        for dispatcher in dispatchers:
            dispatcher.close()

    def __len__(self) -> int:
        return len(self._dispatchers)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return registry_key(*pair) in self._dispatchers
