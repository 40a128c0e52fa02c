"""Ordered reconcile phases of a DesignateAPI."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

from kubernetes.client.exceptions import ApiException

from .. import metrics
from ..config import OperatorConfig
from ..constants import (
    COND_DB_READY,
    COND_DB_SYNC_READY,
    COND_DEPLOYMENT_READY,
    COND_EXPOSE_SERVICE_READY,
    COND_INPUT_READY,
    COND_KEYSTONE_ENDPOINT_READY,
    COND_KEYSTONE_SERVICE_READY,
    COND_SERVICE_CONFIG_READY,
    HASH_DB_SYNC,
    HASH_INPUT,
    KIND_DESIGNATE_API,
    MSG_DB_READY,
    MSG_DB_READY_ERROR,
    MSG_DB_READY_INIT,
    MSG_DB_READY_RUNNING,
    MSG_DB_SYNC_READY,
    MSG_DB_SYNC_READY_ERROR,
    MSG_DB_SYNC_READY_INIT,
    MSG_DB_SYNC_READY_RUNNING,
    MSG_DEPLOYMENT_READY,
    MSG_DEPLOYMENT_READY_ERROR,
    MSG_DEPLOYMENT_READY_INIT,
    MSG_DEPLOYMENT_READY_RUNNING,
    MSG_EXPOSE_SERVICE_READY,
    MSG_EXPOSE_SERVICE_READY_ERROR,
    MSG_EXPOSE_SERVICE_READY_INIT,
    MSG_EXPOSE_SERVICE_READY_RUNNING,
    MSG_INPUT_READY,
    MSG_INPUT_READY_ERROR,
    MSG_INPUT_READY_INIT,
    MSG_INPUT_READY_WAITING,
    MSG_KEYSTONE_ENDPOINT_READY_ERROR,
    MSG_KEYSTONE_ENDPOINT_READY_INIT,
    MSG_KEYSTONE_ENDPOINT_READY_RUNNING,
    MSG_KEYSTONE_SERVICE_READY_ERROR,
    MSG_KEYSTONE_SERVICE_READY_INIT,
    MSG_KEYSTONE_SERVICE_READY_RUNNING,
    MSG_SERVICE_CONFIG_READY,
    MSG_SERVICE_CONFIG_READY_CHANGED,
    MSG_SERVICE_CONFIG_READY_ERROR,
    MSG_SERVICE_CONFIG_READY_INIT,
    MSG_SERVICE_CONFIG_READY_WAITING,
    REASON_ERROR,
    REASON_INIT,
    REASON_INPUT_CHANGED,
    REASON_REQUESTED,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARNING,
)
from ..models import DesignateAPI, Result
from ..services.base import DriverFactory
from ..tracing import trace_span
from ..utils.conditions import ConditionLedger
from ..utils.errors import DependencyNotReadyError, is_not_found, sanitize_exception
from ..utils.events import emit_db_sync_completed, emit_input_changed
from ..utils.hashing import InputHashTracker

logger = logging.getLogger(__name__)

# Conditions seeded as Unknown on a fresh instance, in reporting order
INITIAL_CONDITIONS = [
    (COND_DB_READY, REASON_INIT, MSG_DB_READY_INIT),
    (COND_DB_SYNC_READY, REASON_INIT, MSG_DB_SYNC_READY_INIT),
    (COND_EXPOSE_SERVICE_READY, REASON_INIT, MSG_EXPOSE_SERVICE_READY_INIT),
    (COND_INPUT_READY, REASON_INIT, MSG_INPUT_READY_INIT),
    (COND_SERVICE_CONFIG_READY, REASON_INIT, MSG_SERVICE_CONFIG_READY_INIT),
    (COND_DEPLOYMENT_READY, REASON_INIT, MSG_DEPLOYMENT_READY_INIT),
    (COND_KEYSTONE_SERVICE_READY, REASON_INIT, MSG_KEYSTONE_SERVICE_READY_INIT),
    (COND_KEYSTONE_ENDPOINT_READY, REASON_INIT, MSG_KEYSTONE_ENDPOINT_READY_INIT),
]


@dataclass
class PassState:
    """Values handed from one phase to the next within a single pass."""

    instance: DesignateAPI
    conditions: ConditionLedger
    hashes: InputHashTracker
    env_inputs: dict[str, str] = field(default_factory=dict)
    input_hash: str = ""


@contextmanager
def reporting_errors(conditions: ConditionLedger, condition_type: str, message: str) -> Iterator[None]:
    """Record any escaping error as a False/Error condition, then re-raise."""
    try:
        yield
    except Exception as e:
        conditions.set_false(condition_type, REASON_ERROR, SEVERITY_ERROR, message.format(error=sanitize_exception(e)))
        raise


class PhaseSequencer:
    """Runs the reconcile phases of a live instance in order.

    Each phase either completes or stops the pass with a requeue. Errors
    are recorded on the phase's condition and propagate to the caller.
    """

    def __init__(self, drivers: DriverFactory, config: OperatorConfig):
        self.drivers = drivers
        self.config = config

    def phases(self) -> list[tuple[str, Callable[[PassState], Result]]]:
        return [
            ("input", self.check_input),
            ("config", self.materialize_config),
            ("hash", self.check_hash),
            ("db", self.reconcile_database),
            ("db_sync", self.reconcile_db_sync),
            ("expose", self.expose_endpoints),
            ("keystone_service", self.register_service),
            ("keystone_endpoint", self.register_endpoints),
            ("update", self.reconcile_update),
            ("upgrade", self.reconcile_upgrade),
            ("deploy", self.deploy),
        ]

    def run(self, instance: DesignateAPI) -> Result:
        state = PassState(
            instance=instance,
            conditions=instance.conditions,
            hashes=InputHashTracker(instance.hashes),
        )
        if instance.has_new_generation:
            # Ready drops for a changed spec even if a later phase stops the pass
            state.conditions.set_false(
                COND_DEPLOYMENT_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_DEPLOYMENT_READY_RUNNING
            )
        for phase, step in self.phases():
            start_time = time.time()
            outcome = "error"
            try:
                with trace_span(f"phase_{phase}", kind=KIND_DESIGNATE_API, attributes={"phase": phase}):
                    result = step(state)
                outcome = "requeue" if result.requeue else "success"
            finally:
                duration = time.time() - start_time
                metrics.phase_duration_seconds.labels(phase=phase, result=outcome).observe(duration)
            if result.requeue:
                metrics.requeue_total.labels(kind=KIND_DESIGNATE_API, phase=phase).inc()
                logger.info(f"Phase {phase} of {instance.namespace}/{instance.name} requeued: {result}")
                return result
        return Result()

    def check_input(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_INPUT_READY, MSG_INPUT_READY_ERROR):
            spec = instance.spec
            try:
                secret_hash = self.drivers.secrets(instance).read()
            except ApiException as e:
                if not is_not_found(e):
                    raise
                logger.info(f"Secret {instance.namespace}/{spec.secret} not found")
                conditions.set_false(COND_INPUT_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_INPUT_READY_WAITING)
                return Result.after(self.config.requeue_input_seconds)
            state.env_inputs[spec.secret] = secret_hash
        conditions.set_true(COND_INPUT_READY, MSG_INPUT_READY)
        return Result()

    def materialize_config(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_SERVICE_CONFIG_READY, MSG_SERVICE_CONFIG_READY_ERROR):
            try:
                self.drivers.config_materializer(instance).materialize(state.env_inputs)
            except DependencyNotReadyError as e:
                conditions.set_false(
                    COND_SERVICE_CONFIG_READY,
                    REASON_REQUESTED,
                    SEVERITY_WARNING,
                    MSG_SERVICE_CONFIG_READY_WAITING.format(dependency=e),
                )
                return Result.after(e.delay or self.config.requeue_keystone_seconds)
        return Result()

    def check_hash(self, state: PassState) -> Result:
        """Stop the pass when the inputs drifted since the recorded hash.

        The new hash is recorded and persisted with the status; the
        workload is only touched on the next pass, once the hash is stable.
        """
        instance, conditions = state.instance, state.conditions
        previous = instance.input_hash
        state.input_hash, changed = state.hashes.compute_and_record(HASH_INPUT, state.env_inputs)
        if changed:
            logger.info(
                f"Input hash of {instance.namespace}/{instance.name} changed from {previous} to {state.input_hash}"
            )
            conditions.set_false(
                COND_SERVICE_CONFIG_READY,
                REASON_INPUT_CHANGED,
                SEVERITY_INFO,
                MSG_SERVICE_CONFIG_READY_CHANGED,
            )
            metrics.drift_detected_total.labels(kind=KIND_DESIGNATE_API, hash_key=HASH_INPUT).inc()
            emit_input_changed(instance.body, state.input_hash)
            return Result.immediately()
        conditions.set_true(COND_SERVICE_CONFIG_READY, MSG_SERVICE_CONFIG_READY)
        return Result()

    def reconcile_database(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_DB_READY, MSG_DB_READY_ERROR):
            database = self.drivers.database(instance)
            for step in (database.create_or_update, database.wait_until_ready):
                result = step()
                if result.requeue:
                    conditions.set_false(COND_DB_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_DB_READY_RUNNING)
                    return result
            instance.status["databaseHostname"] = database.hostname
        conditions.set_true(COND_DB_READY, MSG_DB_READY)
        return Result()

    def reconcile_db_sync(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_DB_SYNC_READY, MSG_DB_SYNC_READY_ERROR):
            job = self.drivers.db_sync(instance, state.input_hash)
            result = job.run()
            if result.requeue:
                conditions.set_false(COND_DB_SYNC_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_DB_SYNC_READY_RUNNING)
                return result
            if job.changed:
                state.hashes.record(HASH_DB_SYNC, job.hash)
                logger.info(f"Job {HASH_DB_SYNC} hash added - {job.hash}")
                emit_db_sync_completed(instance.body)
        conditions.set_true(COND_DB_SYNC_READY, MSG_DB_SYNC_READY)
        return Result()

    def register_service(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_KEYSTONE_SERVICE_READY, MSG_KEYSTONE_SERVICE_READY_ERROR):
            service = self.drivers.keystone_service(instance)
            result = service.create_or_update()
            self._mirror(conditions, service.conditions, COND_KEYSTONE_SERVICE_READY, MSG_KEYSTONE_SERVICE_READY_RUNNING)
            if result.requeue:
                return result
            instance.status["serviceID"] = service.service_id
        return Result()

    def expose_endpoints(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_EXPOSE_SERVICE_READY, MSG_EXPOSE_SERVICE_READY_ERROR):
            exposer = self.drivers.endpoints(instance)
            result = exposer.expose()
            if result.requeue:
                conditions.set_false(
                    COND_EXPOSE_SERVICE_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_EXPOSE_SERVICE_READY_RUNNING
                )
                return result
            instance.status["apiEndpoints"] = exposer.endpoints
        conditions.set_true(COND_EXPOSE_SERVICE_READY, MSG_EXPOSE_SERVICE_READY)
        return Result()

    def register_endpoints(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_KEYSTONE_ENDPOINT_READY, MSG_KEYSTONE_ENDPOINT_READY_ERROR):
            endpoint = self.drivers.keystone_endpoint(instance)
            result = endpoint.create_or_update(dict(instance.api_endpoints))
            self._mirror(
                conditions, endpoint.conditions, COND_KEYSTONE_ENDPOINT_READY, MSG_KEYSTONE_ENDPOINT_READY_RUNNING
            )
        return result

    def reconcile_update(self, state: PassState) -> Result:
        logger.info(f"Reconciled service update of {state.instance.namespace}/{state.instance.name}")
        return Result()

    def reconcile_upgrade(self, state: PassState) -> Result:
        logger.info(f"Reconciled service upgrade of {state.instance.namespace}/{state.instance.name}")
        return Result()

    def deploy(self, state: PassState) -> Result:
        instance, conditions = state.instance, state.conditions
        with reporting_errors(conditions, COND_DEPLOYMENT_READY, MSG_DEPLOYMENT_READY_ERROR):
            workload = self.drivers.workload(instance)
            result = workload.apply(state.input_hash)
            instance.status["readyCount"] = workload.ready_count
            if result.requeue:
                conditions.set_false(COND_DEPLOYMENT_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_DEPLOYMENT_READY_RUNNING)
                return result
        if instance.has_new_generation:
            # A new generation is never reported ready by the pass that applies it
            logger.info(f"Rolling out generation {instance.generation} of {instance.namespace}/{instance.name}")
            instance.status["observedGeneration"] = instance.generation
        elif workload.ready_count > 0 and workload.rollout_complete:
            conditions.set_true(COND_DEPLOYMENT_READY, MSG_DEPLOYMENT_READY)
            instance.status["observedGeneration"] = instance.generation
            return Result()
        conditions.set_false(COND_DEPLOYMENT_READY, REASON_REQUESTED, SEVERITY_INFO, MSG_DEPLOYMENT_READY_RUNNING)
        return Result.after(self.config.requeue_short_seconds)

    @staticmethod
    def _mirror(conditions: ConditionLedger, source: list[dict], condition_type: str, running_message: str) -> None:
        mirrored = ConditionLedger.mirror(source, condition_type)
        if mirrored is None:
            conditions.set_false(condition_type, REASON_REQUESTED, SEVERITY_INFO, running_message)
        else:
            conditions.set(mirrored)
