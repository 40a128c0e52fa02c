"""Tests for finalizer release on deletion."""

from __future__ import annotations

import pytest
from kubernetes.client.exceptions import ApiException

from conftest import make_body
from designate_operator.constants import FINALIZER
from designate_operator.models import DesignateAPI, Result
from designate_operator.reconciler.deletion import DeletionOrchestrator


def deleting_instance(**status) -> DesignateAPI:
    body = make_body(status=status)
    body["metadata"]["deletionTimestamp"] = "2026-01-01T00:00:00Z"
    return DesignateAPI(body)


class TestDeletionOrchestrator:
    """Test cases for DeletionOrchestrator.run."""

    def test_releases_all_finalizers_when_registered(self, drivers, no_kopf_events):
        instance = deleting_instance(apiEndpoints={"public": "http://designate-public"})

        result = DeletionOrchestrator(drivers).run(instance)

        assert result == Result()
        assert drivers.db.released == 1
        assert drivers.ks_endpoint.released == 1
        assert drivers.ks_service.released == 1
        assert FINALIZER not in instance.finalizers
        assert no_kopf_events.call_args.kwargs["reason"] == "DeletionCompleted"

    def test_skips_keystone_without_endpoints(self, drivers):
        instance = deleting_instance()

        DeletionOrchestrator(drivers).run(instance)

        assert drivers.db.released == 1
        assert drivers.ks_endpoint.released == 0
        assert drivers.ks_service.released == 0
        assert FINALIZER not in instance.finalizers

    def test_rerun_is_safe(self, drivers, no_kopf_events):
        instance = deleting_instance(apiEndpoints={"public": "http://designate-public"})
        orchestrator = DeletionOrchestrator(drivers)

        orchestrator.run(instance)
        assert orchestrator.run(instance) == Result()

        assert instance.finalizers == []
        reasons = [call.kwargs["reason"] for call in no_kopf_events.call_args_list]
        assert reasons.count("DeletionCompleted") == 1

    def test_error_keeps_own_finalizer(self, drivers):
        instance = deleting_instance(apiEndpoints={"public": "http://designate-public"})
        drivers.ks_endpoint.error = ApiException(status=500, reason="Internal Server Error")

        with pytest.raises(ApiException):
            DeletionOrchestrator(drivers).run(instance)

        assert drivers.ks_service.released == 0
        assert FINALIZER in instance.finalizers

    def test_other_finalizers_untouched(self, drivers):
        instance = deleting_instance()
        instance.finalizers.append("example.com/other")

        DeletionOrchestrator(drivers).run(instance)

        assert instance.finalizers == ["example.com/other"]
