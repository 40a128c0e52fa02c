"""Handler for DesignateAPI CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..config import OperatorConfig
from ..constants import API_GROUP, API_VERSION, KIND_DESIGNATE_API, PLURAL_DESIGNATE_API
from ..models import Result
from ..reconciler import ReconcileDispatcher
from .base import BaseHandler


class DesignateAPIHandler(BaseHandler):
    """Handler for DesignateAPI resources.

    Create, update, resume and delete events and the periodic resync timer
    all run the same dispatcher pass; the pass itself decides between
    deletion and the phases. The timer is what notices a rotated or deleted
    secret and lost pods, since neither changes the DesignateAPI object.
    """

    def __init__(self):
        """Initialize DesignateAPI handler."""
        super().__init__(KIND_DESIGNATE_API)

    def reconcile(
        self,
        body: kopf.Body,
        dispatcher: ReconcileDispatcher,
        config: OperatorConfig,
    ) -> None:
        """Run one pass and hand any requeue back to kopf.

        Raises:
            kopf.TemporaryError: When the pass asks to be run again
        """
        meta = body.get("metadata") or {}
        result = self.reconcile_with_metrics(
            body,
            lambda: dispatcher.reconcile(meta.get("namespace", "default"), meta["name"]),
        )
        self.raise_for_requeue(meta, result, config)

    def raise_for_requeue(self, meta: dict[str, Any], result: Result, config: OperatorConfig) -> None:
        if result.is_done:
            self.log_info(meta, "Reconciliation complete", event="reconcile", reason="Reconciled")
            return
        delay = result.requeue_after or config.requeue_immediate_seconds
        self.log_info(meta, f"Requeue after {delay}s", event="reconcile", reason="Requeue", delay=delay)
        raise kopf.TemporaryError(f"requeue after {delay}s", delay=delay)


# Global handler instance
_handler = DesignateAPIHandler()

# Resync period, fixed when the handlers are registered
DRIFT_CHECK_INTERVAL = OperatorConfig.from_env().drift_check_interval_seconds


@kopf.on.create(API_GROUP, API_VERSION, PLURAL_DESIGNATE_API)
@kopf.on.update(API_GROUP, API_VERSION, PLURAL_DESIGNATE_API)
@kopf.on.resume(API_GROUP, API_VERSION, PLURAL_DESIGNATE_API)
@kopf.timer(API_GROUP, API_VERSION, PLURAL_DESIGNATE_API, interval=DRIFT_CHECK_INTERVAL)
def handle_designateapi(
    body: kopf.Body,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle DesignateAPI resource reconciliation."""
    _handler.reconcile(body, memo.dispatcher, memo.config)


@kopf.on.delete(API_GROUP, API_VERSION, PLURAL_DESIGNATE_API, optional=True)
def handle_designateapi_delete(
    body: kopf.Body,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Handle DesignateAPI resource deletion."""
    _handler.log_info(body.get("metadata") or {}, "DesignateAPI is being deleted", event="deletion", reason="Deletion")
    _handler.reconcile(body, memo.dispatcher, memo.config)
