"""Entry point of one reconcile pass for a DesignateAPI."""

from __future__ import annotations

import logging

from kubernetes.client.exceptions import ApiException

from .. import metrics
from ..constants import FINALIZER, KIND_DESIGNATE_API
from ..models import DesignateAPI, Result
from ..tracing import add_span_attribute, trace_span
from ..utils.context import with_correlation_id
from ..utils.errors import is_not_found, sanitize_exception
from .context import ReconcileContext
from .deletion import DeletionOrchestrator
from .phases import INITIAL_CONDITIONS, PhaseSequencer

logger = logging.getLogger(__name__)


class ReconcileDispatcher:
    """Loads an instance, routes it to deletion or the phases, persists it.

    Status is written on every exit path. A write failure is raised only
    when the pass itself succeeded, so it never hides a phase error.
    """

    def __init__(self, context: ReconcileContext):
        self.context = context
        self.phases = PhaseSequencer(context.drivers, context.config)
        self.deletion = DeletionOrchestrator(context.drivers)

    def reconcile(self, namespace: str, name: str) -> Result:
        with with_correlation_id() as corr_id:
            with trace_span(
                "reconcile",
                kind=KIND_DESIGNATE_API,
                attributes={"resource.name": name, "resource.namespace": namespace},
            ):
                add_span_attribute("correlation_id", corr_id)
                try:
                    instance = self.context.store.get(namespace, name)
                except ApiException as e:
                    if is_not_found(e):
                        logger.info(f"DesignateAPI {namespace}/{name} not found, nothing to do")
                        return Result()
                    raise
                return self._reconcile_loaded(instance)

    def _reconcile_loaded(self, instance: DesignateAPI) -> Result:
        seeding = False
        ok = False
        try:
            if not instance.is_deleting and FINALIZER not in instance.finalizers:
                instance.add_finalizer(FINALIZER)
                seeding = self._seed_conditions(instance)
                ok = True
                return Result.immediately()

            if not instance.conditions_initialized:
                seeding = self._seed_conditions(instance)
                ok = True
                return Result.immediately()

            if instance.is_deleting:
                result = self.deletion.run(instance)
            else:
                result = self.phases.run(instance)
            ok = True
            return result
        finally:
            self._persist(instance, seeding=seeding, raise_errors=ok)

    @staticmethod
    def _seed_conditions(instance: DesignateAPI) -> bool:
        if instance.conditions_initialized:
            return False
        instance.conditions.init(INITIAL_CONDITIONS)
        return True

    def _persist(self, instance: DesignateAPI, seeding: bool, raise_errors: bool) -> None:
        conditions = instance.conditions
        if not seeding:
            conditions.set_overall_ready()
        ready = conditions.is_overall_ready()
        metrics.resource_status_total.labels(kind=KIND_DESIGNATE_API, status="ready" if ready else "not_ready").inc()
        try:
            self.context.store.persist(instance)
        except Exception as e:
            if raise_errors:
                raise
            logger.error(
                f"Failed to persist status of {instance.namespace}/{instance.name} "
                f"after a failed pass: {sanitize_exception(e)}"
            )
