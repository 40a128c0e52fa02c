"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from ..constants import (
    COND_READY,
    MSG_READY,
    MSG_READY_INIT,
    REASON_INIT,
    REASON_READY,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_NONE,
    SEVERITY_WARNING,
    STATUS_FALSE,
    STATUS_TRUE,
    STATUS_UNKNOWN,
)

_SEVERITY_RANK = {SEVERITY_ERROR: 3, SEVERITY_WARNING: 2, SEVERITY_INFO: 1, SEVERITY_NONE: 0}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    severity: str = SEVERITY_NONE,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        severity: Severity of a non-true condition ("Error", "Warning", "Info")

    Returns:
        Updated list of conditions
    """
    now = _now()

    # Find existing condition
    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "severity": severity,
        "message": message,
        "lastTransitionTime": now,
    }

    if existing_idx is not None:
        existing = conditions[existing_idx]
        # Only update lastTransitionTime if status changed
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", now)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def find_condition(conditions: Iterable[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    """Return the condition of the given type, if present."""
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def _worst_condition(conditions: Iterable[dict[str, Any]], status: str) -> dict[str, Any] | None:
    """Most severe condition with the given status, newest first on ties."""
    candidates = [c for c in conditions if c.get("status") == status]
    if not candidates:
        return None
    return max(
        candidates,
        key=lambda c: (_SEVERITY_RANK.get(c.get("severity", SEVERITY_NONE), 0), c.get("lastTransitionTime", "")),
    )


class ConditionLedger:
    """Typed view over ``status.conditions`` of one resource.

    The ledger mutates the list it wraps in place, so the owning status
    dict always reflects the most recent write. Conditions are only ever
    added or updated, never removed.
    """

    def __init__(self, conditions: list[dict[str, Any]]):
        self._conditions = conditions

    def init(self, entries: Iterable[tuple[str, str, str]]) -> None:
        """Seed an Unknown condition per ``(type, reason, message)`` plus Ready."""
        for condition_type, reason, message in entries:
            if self.get(condition_type) is None:
                self.set_unknown(condition_type, reason, message)
        if self.get(COND_READY) is None:
            self.set_unknown(COND_READY, REASON_INIT, MSG_READY_INIT)

    def get(self, condition_type: str) -> dict[str, Any] | None:
        return find_condition(self._conditions, condition_type)

    def status_of(self, condition_type: str) -> str | None:
        cond = self.get(condition_type)
        return cond.get("status") if cond else None

    def is_true(self, condition_type: str) -> bool:
        return self.status_of(condition_type) == STATUS_TRUE

    def set_unknown(self, condition_type: str, reason: str, message: str) -> None:
        update_condition(self._conditions, condition_type, STATUS_UNKNOWN, reason, message)

    def set_true(self, condition_type: str, message: str) -> None:
        update_condition(self._conditions, condition_type, STATUS_TRUE, REASON_READY, message)

    def set_false(self, condition_type: str, reason: str, severity: str, message: str) -> None:
        update_condition(self._conditions, condition_type, STATUS_FALSE, reason, message, severity)

    def set(self, condition: dict[str, Any]) -> None:
        """Write a fully formed condition (e.g. the output of ``mirror``)."""
        update_condition(
            self._conditions,
            condition["type"],
            condition["status"],
            condition.get("reason", ""),
            condition.get("message", ""),
            condition.get("severity", SEVERITY_NONE),
        )

    @staticmethod
    def mirror(source: Iterable[dict[str, Any]] | None, as_type: str) -> dict[str, Any] | None:
        """Copy a collaborator's most relevant condition under a local type.

        A True ``Ready`` on the source is copied as is. Otherwise the most
        severe False condition wins, and failing that the source ``Ready``.

        Args:
            source: Conditions reported by the collaborator
            as_type: Condition type to use for the copy

        Returns:
            The mirrored condition, or None if the source reports nothing
        """
        source = list(source or [])
        if not source:
            return None

        ready = find_condition(source, COND_READY)
        chosen = ready if ready is not None and ready.get("status") == STATUS_TRUE else None
        if chosen is None:
            chosen = _worst_condition(source, STATUS_FALSE) or ready
        if chosen is None:
            return None

        return {
            "type": as_type,
            "status": chosen.get("status", STATUS_UNKNOWN),
            "reason": chosen.get("reason", ""),
            "severity": chosen.get("severity", SEVERITY_NONE),
            "message": chosen.get("message", ""),
        }

    def is_overall_ready(self) -> bool:
        """True iff every tracked (non-Ready) condition is True."""
        tracked = [c for c in self._conditions if c.get("type") != COND_READY]
        return bool(tracked) and all(c.get("status") == STATUS_TRUE for c in tracked)

    def set_overall_ready(self) -> None:
        """Derive the Ready condition from the tracked conditions."""
        if self.is_overall_ready():
            self.set_true(COND_READY, MSG_READY)
            return

        tracked = [c for c in self._conditions if c.get("type") != COND_READY]
        worst = _worst_condition(tracked, STATUS_FALSE)
        if worst is None:
            # Nothing has failed yet, so some tracked condition is still Unknown
            pending = _worst_condition(tracked, STATUS_UNKNOWN) or {}
            self.set_unknown(COND_READY, pending.get("reason", REASON_INIT), pending.get("message", MSG_READY_INIT))
            return
        self.set_false(
            COND_READY,
            worst.get("reason", ""),
            worst.get("severity", SEVERITY_INFO),
            worst.get("message", ""),
        )
