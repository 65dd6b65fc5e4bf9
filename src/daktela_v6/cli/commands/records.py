"""Record commands: read, create, update, delete.

Filters are given as ``field:operator:value`` and sorts as ``field[:dir]``.
Payloads are given with repeated ``--attr key=value`` or a JSON ``--data`` object.
"""

import json
from typing import Any, Dict, Optional, Tuple

import click

from daktela_v6.cli.context import cli_command, get_context
from daktela_v6.cli.output import emit_error, emit_success
from daktela_v6.core.dispatcher import describe
from daktela_v6.core.http.envelope import Envelope
from daktela_v6.core.pagination import PaginationCursor
from daktela_v6.core.requests import (
    RequestVariant,
    build_create_request,
    build_delete_request,
    build_read_all_request,
    build_read_relation_request,
    build_read_request,
    build_read_single_request,
    build_update_request,
)


def _parse_filters(_ctx: Any, _param: Any, values: Tuple[str, ...]) -> list:
    clauses = []
    for raw in values:
        parts = raw.split(":", 2)
        if len(parts) != 3 or not parts[0] or not parts[1]:
            raise click.BadParameter(f"expected field:operator:value, got {raw!r}")
        clauses.append(parts)
    return clauses


def _parse_sorts(_ctx: Any, _param: Any, values: Tuple[str, ...]) -> list:
    sorts = []
    for raw in values:
        field_name, _, direction = raw.partition(":")
        if not field_name:
            raise click.BadParameter(f"expected field[:dir], got {raw!r}")
        sorts.append((field_name, direction or "asc"))
    return sorts


def _build_payload(attrs: Tuple[str, ...], data: Optional[str]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    if data:
        try:
            decoded = json.loads(data)
        except ValueError as e:
            raise ValueError(f"--data is not valid JSON: {e}") from e
        if not isinstance(decoded, dict):
            raise ValueError("--data must be a JSON object")
        payload.update(decoded)
    for raw in attrs:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise ValueError(f"--attr expects key=value, got {raw!r}")
        payload[key] = value
    return payload


def _emit_envelope(envelope: Envelope, variant: RequestVariant) -> None:
    body = {
        "data": envelope.data,
        "total": envelope.total,
        "errors": envelope.errors,
        "http_status": envelope.http_status,
    }
    meta = {"request": describe(variant)}
    if envelope.has_errors or not envelope.is_success:
        emit_error(
            f"API returned HTTP {envelope.http_status}",
            code="API_ERROR",
            error_type="api",
            details=body,
            meta=meta,
        )
    emit_success(body, meta=meta)


@click.command("read")
@click.argument("model")
@click.argument("object_name", required=False)
@click.option("--relation", help="Read a related collection of OBJECT_NAME.")
@click.option("--filter", "filters", multiple=True, callback=_parse_filters, help="field:operator:value")
@click.option("--sort", "sorts", multiple=True, callback=_parse_sorts, help="field[:asc|desc]")
@click.option("--fields", help="Comma-separated field projection.")
@click.option("--skip", type=int, default=0, show_default=True)
@click.option("--take", type=int, default=100, show_default=True)
@click.option("--all", "read_all", is_flag=True, help="Fetch every page.")
@click.option("--limit", type=int, help="Stream pages lazily and stop after this many records.")
@click.option("--skip-errors", is_flag=True, help="Ignore error pages while reading all pages.")
@click.pass_context
@cli_command("read")
def read_cmd(
    ctx: click.Context,
    model: str,
    object_name: Optional[str],
    relation: Optional[str],
    filters: list,
    sorts: list,
    fields: Optional[str],
    skip: int,
    take: int,
    read_all: bool,
    limit: Optional[int],
    skip_errors: bool,
) -> None:
    """Read records of MODEL, or the single record OBJECT_NAME."""
    if relation and not object_name:
        raise ValueError("--relation requires OBJECT_NAME")

    if relation:
        variant = build_read_relation_request(model, object_name, relation)
    elif object_name:
        variant = build_read_single_request(model, object_name)
    elif read_all:
        variant = build_read_all_request(model)
    else:
        variant = build_read_request(model)

    variant.add_filter_from_list(filters)
    for field_name, direction in sorts:
        variant.add_sort(field_name, direction)
    if fields:
        variant.set_fields([f.strip() for f in fields.split(",") if f.strip()])
    variant.set_skip(skip).set_take(take).set_skip_error_requests(skip_errors)

    dispatcher = get_context(ctx).dispatcher

    if limit is not None:
        cursor = PaginationCursor(
            dispatcher,
            variant,
            page_size=take,
            max_items=limit,
            stop_on_error=not skip_errors,
        )
        items = cursor.to_list()
        emit_success(
            {"data": items, "count": len(items)},
            meta={"request": describe(variant), "page_size": take, "limit": limit},
        )
        return

    _emit_envelope(dispatcher.execute(variant), variant)


@click.command("create")
@click.argument("model")
@click.option("--attr", "attrs", multiple=True, help="key=value attribute (repeatable).")
@click.option("--data", help="JSON object with attributes.")
@click.pass_context
@cli_command("create")
def create_cmd(ctx: click.Context, model: str, attrs: Tuple[str, ...], data: Optional[str]) -> None:
    """Create a record of MODEL."""
    variant = build_create_request(model).add_attributes(_build_payload(attrs, data))
    dispatcher = get_context(ctx).dispatcher
    _emit_envelope(dispatcher.execute(variant), variant)


@click.command("update")
@click.argument("model")
@click.argument("object_name")
@click.option("--attr", "attrs", multiple=True, help="key=value attribute (repeatable).")
@click.option("--data", help="JSON object with attributes.")
@click.pass_context
@cli_command("update")
def update_cmd(
    ctx: click.Context,
    model: str,
    object_name: str,
    attrs: Tuple[str, ...],
    data: Optional[str],
) -> None:
    """Update record OBJECT_NAME of MODEL."""
    variant = (
        build_update_request(model)
        .set_object_name(object_name)
        .add_attributes(_build_payload(attrs, data))
    )
    dispatcher = get_context(ctx).dispatcher
    _emit_envelope(dispatcher.execute(variant), variant)


@click.command("delete")
@click.argument("model")
@click.argument("object_name")
@click.pass_context
@cli_command("delete")
def delete_cmd(ctx: click.Context, model: str, object_name: str) -> None:
    """Delete record OBJECT_NAME of MODEL."""
    dispatcher = get_context(ctx).dispatcher
    variant = build_delete_request(model).set_object_name(object_name)
    _emit_envelope(dispatcher.execute(variant), variant)
