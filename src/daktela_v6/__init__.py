"""Daktela V6 REST API connector.

Builds CRUD requests, executes them with retry and rate-limit handling, and
pages through list endpoints lazily.

Example:
    from daktela_v6 import Dispatcher, RequestExecutor, RetryPolicy, build_read_request

    executor = RequestExecutor("mycompany.daktela.com", "token", retry_policy=RetryPolicy())
    with Dispatcher(executor) as dispatcher:
        envelope = dispatcher.execute(build_read_request("Users").set_take(10))
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("daktela-v6")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


__version__ = _get_version()

from daktela_v6.config import ClientConfig  # noqa: E402
from daktela_v6.core import (  # noqa: E402
    READ_LIMIT,
    ClientRegistry,
    CursorIterator,
    Dispatcher,
    JsonObject,
    PaginationCursor,
)
from daktela_v6.core.errors import (  # noqa: E402
    ConfigNotFoundError,
    DaktelaError,
    NotFoundError,
    RateLimitError,
    RequestError,
    UnknownRequestKindError,
)
from daktela_v6.core.http import (  # noqa: E402
    AuthMode,
    Envelope,
    HealthReport,
    RateLimitPolicy,
    RequestExecutor,
    RetryPolicy,
)
from daktela_v6.core.requests import (  # noqa: E402
    FilterTree,
    ReadMode,
    RequestKind,
    RequestVariant,
    Sort,
    build_create_request,
    build_delete_request,
    build_read_all_request,
    build_read_multiple_request,
    build_read_relation_request,
    build_read_request,
    build_read_single_request,
    build_update_request,
)

__all__ = [
    "__version__",
    "ClientConfig",
    "Dispatcher",
    "READ_LIMIT",
    "PaginationCursor",
    "CursorIterator",
    "ClientRegistry",
    "JsonObject",
    "RequestExecutor",
    "AuthMode",
    "HealthReport",
    "Envelope",
    "RetryPolicy",
    "RateLimitPolicy",
    "RequestVariant",
    "RequestKind",
    "ReadMode",
    "FilterTree",
    "Sort",
    "build_read_request",
    "build_read_single_request",
    "build_read_multiple_request",
    "build_read_all_request",
    "build_read_relation_request",
    "build_create_request",
    "build_update_request",
    "build_delete_request",
    "DaktelaError",
    "RequestError",
    "NotFoundError",
    "ConfigNotFoundError",
    "RateLimitError",
    "UnknownRequestKindError",
]
