"""Utility functions for the Designate Operator."""

from .conditions import ConditionLedger, find_condition, update_condition
from .context import get_context_dict, get_correlation_id, with_correlation_id
from .errors import (
    CollaboratorError,
    DependencyNotReadyError,
    OperatorError,
    is_not_found,
    sanitize_exception,
)
from .events import emit_event
from .hashing import InputHashTracker, object_hash
from .secrets import get_secret_with_hash

__all__ = [
    "ConditionLedger",
    "find_condition",
    "update_condition",
    "get_context_dict",
    "get_correlation_id",
    "with_correlation_id",
    "OperatorError",
    "CollaboratorError",
    "DependencyNotReadyError",
    "is_not_found",
    "sanitize_exception",
    "emit_event",
    "InputHashTracker",
    "object_hash",
    "get_secret_with_hash",
]
