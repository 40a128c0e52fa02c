"""Reconciliation of DesignateAPI resources."""

from .context import ReconcileContext
from .dispatcher import ReconcileDispatcher

__all__ = ["ReconcileContext", "ReconcileDispatcher"]
