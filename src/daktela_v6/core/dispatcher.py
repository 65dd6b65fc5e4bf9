"""Dispatcher mapping request variants onto executor calls.

Each operation kind resolves to an HTTP method, an endpoint and a query:

    CREATE            POST   {model}
    UPDATE            PUT    {model}/{object_name}
    DELETE            DELETE {model}/{object_name}
    READ / SINGLE     GET    {model}/{object_name}
    READ / MULTIPLE   GET    {model}[/{object_name}/{relation}]
    READ / ALL        GET    as MULTIPLE, page after page

A dispatched variant caches its envelope; dispatching it again returns the
cached envelope without a network call.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from daktela_v6.core.errors import NotFoundError, UnknownRequestKindError
from daktela_v6.core.http.envelope import Envelope
from daktela_v6.core.http.executor import RequestExecutor
from daktela_v6.core.requests.variant import ReadMode, RequestKind, RequestVariant

logger = logging.getLogger(__name__)

# Upper bound on pages fetched by a READ/ALL request
READ_LIMIT = 999


class Dispatcher:
    """Executes request variants against one Daktela instance.

    Example:
        dispatcher = Dispatcher(RequestExecutor("mycompany.daktela.com", "token"))
        envelope = dispatcher.execute(build_read_single_request("Users", "john"))
    """

    def __init__(self, executor: RequestExecutor):
        self.executor = executor

    def execute(self, variant: RequestVariant) -> Envelope:
        """Dispatch a variant and return its envelope.

        Raises:
            NotFoundError: The operation needs an object name and none is set.
            UnknownRequestKindError: The kind/read-mode combination is unknown.
            RequestError: Propagated from the executor.
            RateLimitError: Propagated from the executor.
        """
        if variant.executed and variant.response is not None:
            logger.debug("Returning cached response for %s", variant.model)
            return variant.response

        match variant.kind:
            case RequestKind.CREATE:
                envelope = self._execute_create(variant)
            case RequestKind.UPDATE:
                envelope = self._execute_update(variant)
            case RequestKind.DELETE:
                envelope = self._execute_delete(variant)
            case RequestKind.READ:
                match variant.read_mode:
                    case ReadMode.SINGLE:
                        envelope = self._execute_read_single(variant)
                    case ReadMode.MULTIPLE:
                        envelope = self._execute_read_multiple(variant)
                    case ReadMode.ALL:
                        envelope = self._execute_read_all(variant)
                    case _:
                        raise UnknownRequestKindError()
            case _:
                raise UnknownRequestKindError()

        variant.mark_executed(envelope)
        return envelope

    def close(self) -> None:
        self.executor.close()

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _execute_create(self, variant: RequestVariant) -> Envelope:
        return self.executor.send(
            "POST",
            variant.model,
            variant.additional_query_params,
            variant.attributes,
        )

    def _execute_update(self, variant: RequestVariant) -> Envelope:
        return self.executor.send(
            "PUT",
            _object_endpoint(variant),
            variant.additional_query_params,
            variant.attributes,
        )

    def _execute_delete(self, variant: RequestVariant) -> Envelope:
        return self.executor.send(
            "DELETE",
            _object_endpoint(variant),
            variant.additional_query_params,
        )

    def _execute_read_single(self, variant: RequestVariant) -> Envelope:
        endpoint = _object_endpoint(variant)
        query = dict(variant.additional_query_params)
        if variant.fields:
            query["fields"] = list(variant.fields)
        return self.executor.send("GET", endpoint, query)

    def _execute_read_multiple(self, variant: RequestVariant) -> Envelope:
        return self.executor.send(
            "GET", _list_endpoint(variant), _list_query(variant, variant.skip)
        )

    def _execute_read_all(self, variant: RequestVariant) -> Envelope:
        """Fetch every page and concatenate the data lists.

        The accumulated envelope carries the total, errors and status of the
        last page fetched.
        """
        endpoint = _list_endpoint(variant)
        take = variant.take
        response = Envelope([], 0, [], 0)

        for page in range(READ_LIMIT):
            current = self.executor.send("GET", endpoint, _list_query(variant, page * take))

            if current.has_errors and not variant.skip_error_requests:
                return current

            if not isinstance(current.data, list):
                if not variant.skip_error_requests:
                    return current
                logger.warning(
                    "Skipping non-list page while reading all %s: page=%d", variant.model, page
                )
                break

            response = Envelope(
                response.data + current.data,
                current.total,
                current.errors,
                current.http_status,
            )

            if len(current.data) < take:
                break
        else:
            logger.warning("Read limit reached for %s: pages=%d", variant.model, READ_LIMIT)

        return response


def _object_endpoint(variant: RequestVariant) -> str:
    if not variant.object_name:
        raise NotFoundError("No object name specified")
    return f"{variant.model}/{variant.object_name}"


def _list_endpoint(variant: RequestVariant) -> str:
    if variant.relation is not None and variant.object_name is not None:
        return f"{variant.model}/{variant.object_name}/{variant.relation}"
    return variant.model


def _list_query(variant: RequestVariant, skip: int) -> dict[str, Any]:
    query: dict[str, Any] = dict(variant.additional_query_params)
    query.update(
        {
            "skip": skip,
            "take": variant.take,
            "filter": variant.filters.to_dict(),
            "sort": [sort.to_dict() for sort in variant.sorts],
        }
    )
    if variant.fields:
        query["fields"] = list(variant.fields)
    return query


def describe(variant: RequestVariant) -> Optional[str]:
    """Return ``"METHOD endpoint"`` for a variant, or None when it cannot be resolved."""
    try:
        match variant.kind:
            case RequestKind.CREATE:
                return f"POST {variant.model}"
            case RequestKind.UPDATE:
                return f"PUT {_object_endpoint(variant)}"
            case RequestKind.DELETE:
                return f"DELETE {_object_endpoint(variant)}"
            case RequestKind.READ if variant.read_mode is ReadMode.SINGLE:
                return f"GET {_object_endpoint(variant)}"
            case RequestKind.READ:
                return f"GET {_list_endpoint(variant)}"
    except NotFoundError:
        return None
    return None
