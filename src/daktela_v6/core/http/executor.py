"""Request executor for the Daktela V6 REST API.

This module implements RequestExecutor, the transport layer of the connector.
It builds the wire request, authenticates it, drives the retry and
rate-limit loop and parses the response envelope.

Resilience Configuration:
    - Retry: disabled unless a RetryPolicy is set; exponential backoff between
      attempts, bounded by ``1 + max_retries`` attempts in total
    - Rate Limit: HTTP 429 raises RateLimitError unless a RateLimitPolicy with
      ``auto_retry`` is set and the wait fits within ``max_wait_seconds``;
      every wait consumes one attempt of the retry budget
    - Error Handling:
        - Retryable statuses (408, 5xx by default): retried while attempts remain,
          then returned as a normal envelope
        - Connection failures: retried when ``retry_on_connection_error`` is set
        - Other transport failures: RequestError, never retried
        - Invalid JSON: RequestError

Example usage:
    executor = RequestExecutor(
        "mycompany.daktela.com",
        "token",
        retry_policy=RetryPolicy(),
        rate_limit_policy=RateLimitPolicy(),
    )
    envelope = executor.send("GET", "Users", {"take": 10})
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from enum import IntEnum
from typing import Any, Callable, Mapping, Optional

import httpx

from daktela_v6.core.errors.request import RateLimitError, RequestError
from daktela_v6.core.http.envelope import Envelope
from daktela_v6.core.http.rate_limit import RateLimitPolicy
from daktela_v6.core.http.retry import RetryPolicy
from daktela_v6.core.http.shared import (
    build_api_path,
    flatten_query_params,
    normalize_url,
    redact_secrets,
)

logger = logging.getLogger(__name__)

USER_AGENT = "daktela-v6-python-connector"
WHOAMI_ENDPOINT = "whoim"
DEFAULT_TIMEOUT = 2.0
DEFAULT_RATE_LIMIT_WAIT = 5

# Failures raised before the server could be reached
_CONNECTION_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)

SleepFunc = Callable[[float], None]


class AuthMode(IntEnum):
    """Where the access token is placed on the wire."""

    HEADER = 1  # X-AUTH-TOKEN header
    QUERY = 2  # accessToken query parameter


@dataclass
class HealthReport:
    """Result of a health check against the who-am-I endpoint."""

    healthy: bool
    latency_ms: float
    status_code: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


class RequestExecutor:
    """Transport for the Daktela V6 API.

    One executor is created per instance/token pair and reused for every
    call. Configuration (auth mode, logger, policies, custom client) is
    set once before use; it is not safe to change while a request runs.

    Attributes:
        base_url: Normalized instance URL (``https://host``)
        request_timeout: Per-call timeout in seconds for the default client
        verify_ssl: Whether the default client verifies certificates
        user_agent_suffix: Optional text appended to the User-Agent
        retry_policy: Retry configuration, or None to disable retries
        rate_limit_policy: 429 handling, or None to always raise RateLimitError
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        *,
        request_timeout: float = DEFAULT_TIMEOUT,
        auth_mode: AuthMode | int = AuthMode.HEADER,
        verify_ssl: bool = True,
        user_agent_suffix: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        retry_policy: Optional[RetryPolicy] = None,
        rate_limit_policy: Optional[RateLimitPolicy] = None,
        logger: Optional[logging.Logger] = None,
        sleep_func: Optional[SleepFunc] = None,
    ):
        """Initialize the executor.

        Args:
            base_url: Instance URL or bare host name; normalized to https.
            access_token: Access token of the API user.
            request_timeout: Timeout in seconds for the default client.
            auth_mode: AuthMode.HEADER (default) or AuthMode.QUERY.
            verify_ssl: Verify TLS certificates with the default client.
            user_agent_suffix: Text appended to the User-Agent (e.g. "MyApp/1.0").
            http_client: Custom httpx.Client. When set, timeout and SSL
                verification must be configured on that client instead.
            retry_policy: Retry configuration, None disables retries.
            rate_limit_policy: 429 configuration, None raises on every 429.
            logger: Logger for request tracing (defaults to this module's logger).
            sleep_func: Blocking sleep used for backoff and rate-limit waits.
        """
        self.base_url = normalize_url(base_url)
        self._access_token = access_token
        self.request_timeout = request_timeout
        self.auth_mode = auth_mode
        self.verify_ssl = verify_ssl
        self.user_agent_suffix = user_agent_suffix
        self.http_client = http_client
        self.retry_policy = retry_policy
        self.rate_limit_policy = rate_limit_policy
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._sleep: SleepFunc = sleep_func or time.sleep
        self._owned_client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def auth_mode(self) -> AuthMode:
        return self._auth_mode

    @auth_mode.setter
    def auth_mode(self, value: AuthMode | int) -> None:
        try:
            self._auth_mode = AuthMode(value)
        except ValueError as e:
            raise RequestError("Invalid authentication method") from e

    @property
    def user_agent(self) -> str:
        if self.user_agent_suffix is not None:
            return f"{USER_AGENT} {self.user_agent_suffix}"
        return USER_AGENT

    def close(self) -> None:
        """Close the internally created HTTP client (custom clients are left open)."""
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None

    def __enter__(self) -> "RequestExecutor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------

    def send(
        self,
        method: str,
        endpoint: str,
        query_params: Optional[Mapping[str, Any]] = None,
        body: Optional[Any] = None,
    ) -> Envelope:
        """Send one logical request and return its parsed envelope.

        Args:
            method: HTTP method (GET/POST/PUT/DELETE).
            endpoint: API endpoint relative to ``/api/v6/`` without ``.json``.
            query_params: Query parameters; nested values are bracket-encoded.
            body: JSON-serializable request payload, or None.

        Returns:
            Envelope parsed from the final response. Non-2xx statuses surface
            through ``http_status`` and ``errors``, not as exceptions.

        Raises:
            RateLimitError: HTTP 429 that cannot or should not be waited out.
            RequestError: Transport failure, exhausted retries, or invalid JSON.
        """
        client = self._get_client()
        retry = self.retry_policy
        max_attempts = 1 + (retry.max_retries if retry is not None else 0)
        last_error: Optional[Exception] = None

        for attempt in range(max_attempts):
            if attempt > 0 and retry is not None:
                delay_ms = retry.delay_for_attempt(attempt - 1)
                self.logger.info(
                    "Retrying request: attempt=%d delay_ms=%d endpoint=%s",
                    attempt + 1,
                    delay_ms,
                    endpoint,
                )
                self._sleep(delay_ms / 1000.0)

            self.logger.debug(
                "Sending API request: method=%s endpoint=%s has_body=%s attempt=%d",
                method,
                endpoint,
                body is not None,
                attempt + 1,
            )
            request = self._build_request(client, method, endpoint, query_params, body)

            try:
                response = client.send(request)
            except _CONNECTION_ERRORS as e:
                last_error = e
                message = redact_secrets(str(e))
                self.logger.warning(
                    "Connection error: endpoint=%s error=%s", endpoint, message
                )
                if retry is None or not retry.retry_on_connection_error:
                    raise RequestError(message, original_error=e) from e
                if attempt >= max_attempts - 1:
                    raise RequestError(
                        f"Max retries exceeded: {message}", original_error=e
                    ) from e
                continue
            except httpx.HTTPError as e:
                message = redact_secrets(str(e))
                self.logger.error(
                    "API request failed: method=%s endpoint=%s error=%s",
                    method,
                    endpoint,
                    message,
                )
                raise RequestError(message, original_error=e) from e

            status_code = response.status_code

            if status_code == 429:
                self._handle_rate_limit(response, endpoint)
                continue

            if (
                retry is not None
                and attempt < max_attempts - 1
                and retry.is_retryable_status(status_code)
            ):
                self.logger.warning(
                    "Retryable status code received: status=%d endpoint=%s",
                    status_code,
                    endpoint,
                )
                continue

            return self._parse_response(response)

        reason = redact_secrets(str(last_error)) if last_error is not None else "Unknown error"
        raise RequestError(f"Max retries exceeded: {reason}", original_error=last_error)

    def ping(self) -> bool:
        """Return True when the who-am-I endpoint answers with a 2xx status.

        Any failure (connection, authentication, rate limit, parsing) is
        reported as False.
        """
        try:
            return self.send("GET", WHOAMI_ENDPOINT).is_success
        except Exception as e:
            self.logger.warning("Ping failed: %s", redact_secrets(str(e)))
            return False

    def health_check(self) -> HealthReport:
        """Call the who-am-I endpoint and report health and latency.

        Never raises; failures are returned in ``HealthReport.error``.
        """
        start = time.perf_counter()
        try:
            envelope = self.send("GET", WHOAMI_ENDPOINT)
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthReport(
                healthy=False,
                latency_ms=round(latency_ms, 2),
                error=redact_secrets(str(e)),
            )

        latency_ms = (time.perf_counter() - start) * 1000
        return HealthReport(
            healthy=envelope.is_success,
            latency_ms=round(latency_ms, 2),
            status_code=envelope.http_status,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_client(self) -> httpx.Client:
        if self.http_client is not None:
            return self.http_client
        if self._owned_client is None:
            self._owned_client = httpx.Client(
                timeout=self.request_timeout,
                verify=self.verify_ssl,
            )
        return self._owned_client

    def _build_request(
        self,
        client: httpx.Client,
        method: str,
        endpoint: str,
        query_params: Optional[Mapping[str, Any]],
        body: Optional[Any],
    ) -> httpx.Request:
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
        }
        params = dict(query_params or {})
        if self.auth_mode is AuthMode.QUERY:
            params["accessToken"] = self._access_token
        else:
            headers["X-AUTH-TOKEN"] = self._access_token

        url = f"{self.base_url}{build_api_path(endpoint)}"
        content = json.dumps(body).encode("utf-8") if body is not None else None

        return client.build_request(
            method.upper(),
            url,
            params=flatten_query_params(params),
            headers=headers,
            content=content,
        )

    def _handle_rate_limit(self, response: httpx.Response, endpoint: str) -> None:
        """Wait out a 429 response or raise RateLimitError.

        Returns normally when the caller should retry.
        """
        policy = self.rate_limit_policy
        header = response.headers.get("Retry-After") or None
        if policy is not None:
            wait_seconds = policy.parse_retry_after(header)
        else:
            wait_seconds = DEFAULT_RATE_LIMIT_WAIT

        self.logger.warning(
            "Rate limit hit: endpoint=%s retry_after_seconds=%d", endpoint, wait_seconds
        )

        if policy is None or not policy.auto_retry:
            raise RateLimitError(wait_seconds)

        if wait_seconds > policy.max_wait_seconds:
            self.logger.error(
                "Rate limit wait time exceeds maximum: wait_seconds=%d max_wait_seconds=%d",
                wait_seconds,
                policy.max_wait_seconds,
            )
            raise RateLimitError(wait_seconds)

        self.logger.info("Waiting for rate limit reset: seconds=%d", wait_seconds)
        self._sleep(max(0, wait_seconds))

    def _parse_response(self, response: httpx.Response) -> Envelope:
        status_code = response.status_code
        raw = response.content
        if not raw:
            self.logger.debug("API response received (empty body): status=%d", status_code)
            return Envelope(None, 0, [], status_code)

        try:
            body = json.loads(raw)
        except ValueError as e:
            self.logger.error("Failed to parse API response: error=%s", e)
            raise RequestError(str(e), code=status_code, original_error=e) from e

        result = body.get("result") if isinstance(body, dict) else None
        if result is None:
            self.logger.debug("API response received (no result): status=%d", status_code)
            return Envelope(None, 0, [], status_code)

        if isinstance(result, dict) and result.get("data") is not None:
            data = result["data"]
        else:
            data = result

        total = 1
        if isinstance(result, dict) and result.get("total") is not None:
            try:
                total = int(result["total"])
            except (TypeError, ValueError):
                self.logger.warning("Ignoring non-numeric total: %r", result["total"])

        error = body.get("error")
        if error is None:
            errors: list[Any] = []
        elif isinstance(error, list):
            errors = error
        else:
            errors = [error]

        self.logger.debug(
            "API response received: status=%d total=%d has_errors=%s",
            status_code,
            total,
            bool(errors),
        )
        return Envelope(data, total, errors, status_code)
