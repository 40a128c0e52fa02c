"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_DB_SYNC_COMPLETED,
    EVENT_REASON_DELETION_COMPLETED,
    EVENT_REASON_INPUT_CHANGED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body (apiVersion, kind and metadata are used)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_input_changed(body: dict[str, Any], input_hash: str) -> None:
    """Emit input hash changed event."""
    emit_event(body, EVENT_REASON_INPUT_CHANGED, f"Input hash changed to {input_hash}, workload will be restarted")


def emit_db_sync_completed(body: dict[str, Any]) -> None:
    """Emit db sync completed event."""
    emit_event(body, EVENT_REASON_DB_SYNC_COMPLETED, "Database sync job completed")


def emit_deletion_completed(body: dict[str, Any]) -> None:
    """Emit deletion completed event."""
    emit_event(body, EVENT_REASON_DELETION_COMPLETED, "Released all dependent finalizers")
