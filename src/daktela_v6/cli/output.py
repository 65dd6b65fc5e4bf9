"""JSON output helpers for CLI commands.

Every command prints exactly one JSON document:

    {"success": bool, "data": {...}, "error": str | null, "meta": {"version": ...}}

``emit_error`` exits with status 1 after printing.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Mapping, NoReturn, Optional

import click

RESPONSE_VERSION = "response-v2"


def _build_meta(extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"version": RESPONSE_VERSION}
    if extra:
        meta.update(extra)
    return meta


def _emit(payload: Dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def emit_success(
    data: Optional[Mapping[str, Any]] = None,
    *,
    meta: Optional[Mapping[str, Any]] = None,
) -> None:
    """Print a success document."""
    _emit(
        {
            "success": True,
            "data": dict(data or {}),
            "error": None,
            "meta": _build_meta(meta),
        }
    )


def emit_error(
    message: str,
    *,
    code: str = "INTERNAL_ERROR",
    error_type: str = "internal",
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    """Print an error document and exit with status 1.

    Args:
        message: Human-readable description of the failure.
        code: Canonical error code (e.g. ``"NOT_FOUND"``).
        error_type: Error category (e.g. ``"transport"``).
        remediation: User-facing guidance on how to fix the issue.
        details: Additional machine-readable context.
        meta: Extra metadata merged into ``meta``.
    """
    payload: Dict[str, Any] = {"error_code": code, "error_type": error_type}
    if remediation is not None:
        payload["remediation"] = remediation
    if details:
        payload["details"] = dict(details)

    _emit(
        {
            "success": False,
            "data": payload,
            "error": message,
            "meta": _build_meta(meta),
        }
    )
    sys.exit(1)
