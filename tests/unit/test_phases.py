"""Tests for the ordered reconcile phases."""

from __future__ import annotations

import pytest
from kubernetes.client.exceptions import ApiException

from conftest import make_body, not_found
from designate_operator.constants import (
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
)
from designate_operator.models import DesignateAPI, Result
from designate_operator.reconciler.phases import INITIAL_CONDITIONS, PhaseSequencer
from designate_operator.utils.errors import CollaboratorError, DependencyNotReadyError


@pytest.fixture
def seeded() -> DesignateAPI:
    instance = DesignateAPI(make_body())
    instance.conditions.init(INITIAL_CONDITIONS)
    return instance


@pytest.fixture
def sequencer(drivers, operator_config) -> PhaseSequencer:
    return PhaseSequencer(drivers, operator_config)


def converge(sequencer: PhaseSequencer, instance: DesignateAPI) -> Result:
    """Run the pass that records the first input hash, then the converging one."""
    first = sequencer.run(instance)
    assert first == Result.immediately()
    return sequencer.run(instance)


class TestPhaseOrder:
    def test_phase_names(self, sequencer):
        assert [name for name, _ in sequencer.phases()] == [
            "input",
            "config",
            "hash",
            "db",
            "db_sync",
            "expose",
            "keystone_service",
            "keystone_endpoint",
            "update",
            "upgrade",
            "deploy",
        ]


class TestConvergence:
    """A pass over healthy collaborators."""

    def test_first_pass_records_hash_without_deploying(self, sequencer, seeded, drivers, no_kopf_events):
        result = sequencer.run(seeded)

        assert result == Result.immediately()
        assert seeded.input_hash is not None
        assert drivers.deployment.applied == []
        assert seeded.conditions.get(COND_SERVICE_CONFIG_READY)["reason"] == "InputChanged"
        assert no_kopf_events.call_args.kwargs["reason"] == "InputChanged"

    def test_second_pass_converges(self, sequencer, seeded, drivers):
        result = converge(sequencer, seeded)

        assert result.is_done
        for condition_type, _, _ in INITIAL_CONDITIONS:
            assert seeded.conditions.is_true(condition_type), condition_type
        assert seeded.status["databaseHostname"] == "openstack.openstack.svc"
        assert seeded.status["serviceID"] == "svc-id"
        assert seeded.status["apiEndpoints"] == drivers.exposer.endpoints
        assert seeded.status["readyCount"] == 1
        assert seeded.status["observedGeneration"] == 3
        assert seeded.hashes[HASH_DB_SYNC] == "job-hash"
        assert drivers.deployment.applied == [seeded.input_hash]
        assert drivers.job.input_hash == seeded.input_hash

    def test_endpoints_registered_from_status(self, sequencer, seeded, drivers):
        converge(sequencer, seeded)

        assert drivers.ks_endpoint.endpoints == drivers.exposer.endpoints

    def test_steady_state_pass_is_idempotent(self, sequencer, seeded, drivers):
        converge(sequencer, seeded)
        input_hash = seeded.input_hash
        drivers.job.changed = False

        result = sequencer.run(seeded)

        assert result.is_done
        assert seeded.input_hash == input_hash
        assert drivers.deployment.applied == [input_hash, input_hash]


class TestInputPhase:
    def test_missing_secret_requeues_after_ten_seconds(self, sequencer, seeded, drivers):
        drivers.secret_reader.error = not_found()

        result = sequencer.run(seeded)

        assert result == Result.after(10.0)
        cond = seeded.conditions.get(COND_INPUT_READY)
        assert cond["status"] == "False"
        assert cond["severity"] == "Info"
        assert cond["message"] == "Input data resources missing"
        assert drivers.materializer.calls == 0
        assert seeded.input_hash is None

    def test_secret_read_error_propagates(self, sequencer, seeded, drivers):
        drivers.secret_reader.error = ApiException(status=500, reason="Internal Server Error")

        with pytest.raises(ApiException):
            sequencer.run(seeded)

        cond = seeded.conditions.get(COND_INPUT_READY)
        assert cond["severity"] == "Error"
        assert cond["message"] == "Input data error occurred (500) Internal Server Error"

    def test_missing_selector_key_is_an_error(self, sequencer, seeded, drivers):
        drivers.secret_reader.error = ValueError("secret osp-secret is missing keys DesignatePassword")

        with pytest.raises(ValueError):
            sequencer.run(seeded)

        assert seeded.conditions.get(COND_INPUT_READY)["reason"] == "Error"

    def test_invalid_spec_is_reported_on_input(self, sequencer, drivers):
        instance = DesignateAPI(make_body(spec={"databaseInstance": "openstack"}))
        instance.conditions.init(INITIAL_CONDITIONS)

        with pytest.raises(ValueError, match="secret is required"):
            sequencer.run(instance)

        assert instance.conditions.get(COND_INPUT_READY)["severity"] == "Error"
        assert drivers.secret_reader.calls == 0


class TestConfigPhase:
    def test_missing_keystone_requeues_with_warning(self, sequencer, seeded, drivers):
        drivers.materializer.error = DependencyNotReadyError("KeystoneAPI")

        result = sequencer.run(seeded)

        assert result == Result.after(10.0)
        cond = seeded.conditions.get(COND_SERVICE_CONFIG_READY)
        assert cond["severity"] == "Warning"
        assert cond["message"] == "Service config waiting for KeystoneAPI"

    def test_dependency_delay_is_honoured(self, sequencer, seeded, drivers):
        drivers.materializer.error = DependencyNotReadyError("KeystoneAPI", delay=2)

        assert sequencer.run(seeded) == Result.after(2)

    def test_render_error_propagates(self, sequencer, seeded, drivers):
        drivers.materializer.error = ApiException(status=403, reason="Forbidden")

        with pytest.raises(ApiException):
            sequencer.run(seeded)

        assert seeded.conditions.get(COND_SERVICE_CONFIG_READY)["reason"] == "Error"


class TestHashPhase:
    def test_drift_stops_pass_before_deployment(self, sequencer, seeded, drivers):
        converge(sequencer, seeded)
        old_hash = seeded.input_hash
        drivers.secret_reader.secret_hash = "rotated"

        result = sequencer.run(seeded)

        assert result == Result.immediately()
        assert seeded.input_hash != old_hash
        assert drivers.deployment.applied == [old_hash]
        assert seeded.conditions.status_of(COND_SERVICE_CONFIG_READY) == "False"

    def test_next_pass_rolls_deployment(self, sequencer, seeded, drivers):
        converge(sequencer, seeded)
        drivers.secret_reader.secret_hash = "rotated"
        sequencer.run(seeded)

        result = sequencer.run(seeded)

        assert result.is_done
        assert drivers.deployment.applied[-1] == seeded.input_hash
        assert drivers.job.input_hash == seeded.input_hash

    def test_drift_logs_previous_hash(self, sequencer, seeded, drivers, caplog):
        converge(sequencer, seeded)
        old_hash = seeded.input_hash
        drivers.secret_reader.secret_hash = "rotated"

        with caplog.at_level("INFO", logger="designate_operator.reconciler.phases"):
            sequencer.run(seeded)

        assert f"changed from {old_hash} to {seeded.input_hash}" in caplog.text

    def test_config_change_is_drift(self, sequencer, seeded, drivers):
        converge(sequencer, seeded)
        drivers.materializer.inputs = {"designate-api-config-data": "new-config"}

        assert sequencer.run(seeded) == Result.immediately()


class TestDatabasePhase:
    def test_database_pending(self, sequencer, seeded, drivers):
        converge(sequencer, seeded)
        drivers.db.create_result = Result.after(5.0)
        drivers.job.changed = False

        result = sequencer.run(seeded)

        assert result == Result.after(5.0)
        cond = seeded.conditions.get(COND_DB_READY)
        assert cond["status"] == "False"
        assert cond["message"] == "DB create in progress"

    def test_database_wait_pending(self, sequencer, seeded, drivers):
        drivers.db.wait_result = Result.after(5.0)

        converge_result = sequencer.run(seeded)
        result = sequencer.run(seeded)

        assert converge_result == Result.immediately()
        assert result == Result.after(5.0)
        assert "databaseHostname" not in seeded.status

    def test_database_error(self, sequencer, seeded, drivers):
        sequencer.run(seeded)
        drivers.db.error = CollaboratorError("MariaDB openstack is broken")

        with pytest.raises(CollaboratorError):
            sequencer.run(seeded)

        assert seeded.conditions.get(COND_DB_READY)["message"] == "DB error occurred MariaDB openstack is broken"


class TestDbSyncPhase:
    def test_running_job_requeues(self, sequencer, seeded, drivers):
        drivers.job.result = Result.after(5.0)

        sequencer.run(seeded)
        result = sequencer.run(seeded)

        assert result == Result.after(5.0)
        assert seeded.conditions.get(COND_DB_SYNC_READY)["message"] == "DBsync in progress"
        assert HASH_DB_SYNC not in seeded.hashes

    def test_completed_job_records_hash_and_event(self, sequencer, seeded, drivers, no_kopf_events):
        converge(sequencer, seeded)

        assert seeded.hashes[HASH_DB_SYNC] == "job-hash"
        reasons = [call.kwargs["reason"] for call in no_kopf_events.call_args_list]
        assert "DBSyncCompleted" in reasons

    def test_failed_job(self, sequencer, seeded, drivers):
        sequencer.run(seeded)
        drivers.job.error = CollaboratorError("job designate-api-db-sync failed")

        with pytest.raises(CollaboratorError):
            sequencer.run(seeded)

        assert seeded.conditions.get(COND_DB_SYNC_READY)["severity"] == "Error"


class TestExposePhase:
    def test_route_pending(self, sequencer, seeded, drivers):
        drivers.exposer.result = Result.after(5.0)

        sequencer.run(seeded)
        result = sequencer.run(seeded)

        assert result == Result.after(5.0)
        assert seeded.conditions.get(COND_EXPOSE_SERVICE_READY)["status"] == "False"
        assert not seeded.api_endpoints
        assert drivers.ks_endpoint.endpoints is None


class TestKeystonePhases:
    def test_service_without_conditions_is_in_progress(self, sequencer, seeded, drivers):
        drivers.ks_service.conditions = []
        drivers.ks_service.result = Result.after(10.0)

        sequencer.run(seeded)
        result = sequencer.run(seeded)

        assert result == Result.after(10.0)
        cond = seeded.conditions.get(COND_KEYSTONE_SERVICE_READY)
        assert cond["status"] == "False"
        assert cond["message"] == "KeystoneService registration in progress"
        assert "serviceID" not in seeded.status

    def test_service_condition_is_mirrored(self, sequencer, seeded, drivers):
        drivers.ks_service.conditions = [
            {"type": "Ready", "status": "False", "reason": "Error", "severity": "Error", "message": "keystone down"}
        ]
        drivers.ks_service.result = Result.after(10.0)

        sequencer.run(seeded)
        sequencer.run(seeded)

        cond = seeded.conditions.get(COND_KEYSTONE_SERVICE_READY)
        assert cond["severity"] == "Error"
        assert cond["message"] == "keystone down"

    def test_endpoint_requeue(self, sequencer, seeded, drivers):
        drivers.ks_endpoint.conditions = []
        drivers.ks_endpoint.result = Result.after(10.0)

        sequencer.run(seeded)
        result = sequencer.run(seeded)

        assert result == Result.after(10.0)
        assert seeded.conditions.status_of(COND_KEYSTONE_ENDPOINT_READY) == "False"
        assert drivers.deployment.applied == []

    def test_keystone_error_propagates(self, sequencer, seeded, drivers):
        sequencer.run(seeded)
        drivers.ks_service.error = ApiException(status=500, reason="Internal Server Error")

        with pytest.raises(ApiException):
            sequencer.run(seeded)

        assert seeded.conditions.get(COND_KEYSTONE_SERVICE_READY)["reason"] == "Error"


class TestDeployPhase:
    def test_no_ready_replicas_requeues(self, sequencer, seeded, drivers):
        drivers.deployment.ready_count = 0

        result = converge(sequencer, seeded)

        assert result == Result.after(5.0)
        assert seeded.status["readyCount"] == 0
        assert seeded.conditions.get(COND_DEPLOYMENT_READY)["message"] == "Deployment in progress"
        assert "observedGeneration" not in seeded.status

    def test_deployment_error(self, sequencer, seeded, drivers):
        sequencer.run(seeded)
        drivers.deployment.error = ApiException(status=422, reason="Unprocessable Entity")

        with pytest.raises(ApiException):
            sequencer.run(seeded)

        assert seeded.conditions.get(COND_DEPLOYMENT_READY)["severity"] == "Error"

    def test_unfinished_rollout_requeues(self, sequencer, seeded, drivers):
        drivers.deployment.rollout_complete = False

        result = converge(sequencer, seeded)

        assert result == Result.after(5.0)
        assert seeded.status["readyCount"] == 1
        assert seeded.conditions.status_of(COND_DEPLOYMENT_READY) == "False"
        assert "observedGeneration" not in seeded.status


class TestGenerationChange:
    """A spec edit that leaves the input hash unchanged."""

    @pytest.fixture
    def changed(self, sequencer, seeded, drivers) -> DesignateAPI:
        converge(sequencer, seeded)
        drivers.job.changed = False
        seeded.metadata["generation"] = 4
        seeded.raw_spec["replicas"] = 3
        return seeded

    def test_applying_pass_is_not_ready(self, sequencer, changed, drivers):
        input_hash = changed.input_hash

        result = sequencer.run(changed)

        assert result == Result.after(5.0)
        assert changed.conditions.get(COND_DEPLOYMENT_READY)["message"] == "Deployment in progress"
        assert changed.status["observedGeneration"] == 4
        assert drivers.deployment.applied[-1] == input_hash

    def test_next_pass_is_ready(self, sequencer, changed):
        sequencer.run(changed)

        result = sequencer.run(changed)

        assert result.is_done
        assert changed.conditions.is_true(COND_DEPLOYMENT_READY)

    def test_not_ready_when_earlier_phase_stops(self, sequencer, changed, drivers):
        drivers.db.create_result = Result.after(5.0)

        sequencer.run(changed)

        assert changed.conditions.status_of(COND_DEPLOYMENT_READY) == "False"
        assert changed.status["observedGeneration"] == 3


class TestHashKeys:
    def test_input_hash_key(self, sequencer, seeded):
        sequencer.run(seeded)
        assert set(seeded.hashes) == {HASH_INPUT}
