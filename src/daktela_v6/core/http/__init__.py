"""HTTP transport for the Daktela V6 API.

Exports the executor, its resilience policies and the response envelope.
"""

from daktela_v6.core.http.envelope import Envelope
from daktela_v6.core.http.executor import (
    USER_AGENT,
    AuthMode,
    HealthReport,
    RequestExecutor,
)
from daktela_v6.core.http.rate_limit import RateLimitPolicy
from daktela_v6.core.http.retry import DEFAULT_RETRYABLE_STATUS_CODES, RetryPolicy

__all__ = [
    "Envelope",
    "RequestExecutor",
    "AuthMode",
    "HealthReport",
    "USER_AGENT",
    "RetryPolicy",
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "RateLimitPolicy",
]
