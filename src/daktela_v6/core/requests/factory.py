"""Builders for pre-configured request variants."""

from __future__ import annotations

from daktela_v6.core.requests.variant import ReadMode, RequestVariant


def build_read_request(model: str) -> RequestVariant:
    """Read request with the default (multiple) read mode."""
    return RequestVariant.read(model)


def build_read_single_request(model: str, object_name: str) -> RequestVariant:
    return RequestVariant.read(model, ReadMode.SINGLE).set_object_name(object_name)


def build_read_multiple_request(model: str) -> RequestVariant:
    return RequestVariant.read(model, ReadMode.MULTIPLE)


def build_read_all_request(model: str) -> RequestVariant:
    return RequestVariant.read(model, ReadMode.ALL)


def build_read_relation_request(
    model: str, object_name: str, relation: str
) -> RequestVariant:
    """Read the ``relation`` collection of one record, e.g. a user's activities.

    Example:
        >>> variant = build_read_relation_request("Users", "john", "Activities")
        >>> variant.relation
        'activities'
    """
    return (
        RequestVariant.read(model, ReadMode.MULTIPLE)
        .set_object_name(object_name)
        .set_relation(relation)
    )


def build_create_request(model: str) -> RequestVariant:
    return RequestVariant.create(model)


def build_update_request(model: str) -> RequestVariant:
    return RequestVariant.update(model)


def build_delete_request(model: str) -> RequestVariant:
    return RequestVariant.delete(model)
