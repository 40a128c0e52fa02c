"""Shared fixtures and fake drivers for unit tests."""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import patch

import pytest
from kubernetes.client.exceptions import ApiException

from designate_operator.config import OperatorConfig
from designate_operator.constants import COND_READY, FINALIZER
from designate_operator.models import DesignateAPI, Result


def make_body(**overrides: Any) -> dict[str, Any]:
    """Build a DesignateAPI body with a valid spec."""
    body: dict[str, Any] = {
        "apiVersion": "designate.openstack.org/v1beta1",
        "kind": "DesignateAPI",
        "metadata": {
            "name": "designate-api",
            "namespace": "openstack",
            "uid": "uid-1234",
            "generation": 3,
            "resourceVersion": "100",
            "finalizers": [FINALIZER],
        },
        "spec": {
            "databaseInstance": "openstack",
            "secret": "osp-secret",
        },
        "status": {},
    }
    for key, value in overrides.items():
        body[key] = value
    return body


def not_found() -> ApiException:
    return ApiException(status=404, reason="Not Found")


def ready_conditions() -> list[dict[str, Any]]:
    return [{"type": COND_READY, "status": "True", "reason": "Ready", "severity": "", "message": "Setup complete"}]


class FakeSecrets:
    def __init__(self, secret_hash: str = "secret-hash", error: Exception | None = None):
        self.secret_hash = secret_hash
        self.error = error
        self.calls = 0

    def read(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.secret_hash


class FakeConfig:
    def __init__(self, inputs: dict[str, str] | None = None, error: Exception | None = None):
        self.inputs = inputs if inputs is not None else {"designate-api-config-data": "config-hash"}
        self.error = error
        self.calls = 0

    def materialize(self, env_inputs: dict[str, str]) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        env_inputs.update(self.inputs)


class FakeDatabase:
    def __init__(self, create: Result = Result(), wait: Result = Result(), hostname: str = "openstack.openstack.svc"):
        self.create_result = create
        self.wait_result = wait
        self._hostname = hostname
        self.error: Exception | None = None
        self.released = 0

    @property
    def hostname(self) -> str:
        return self._hostname

    def create_or_update(self) -> Result:
        if self.error is not None:
            raise self.error
        return self.create_result

    def wait_until_ready(self) -> Result:
        return self.wait_result

    def release_finalizer(self) -> None:
        self.released += 1
        if self.error is not None:
            raise self.error


class FakeDbSync:
    def __init__(self, result: Result = Result(), changed: bool = True, job_hash: str = "job-hash"):
        self.result = result
        self.changed = changed
        self.hash = job_hash
        self.error: Exception | None = None
        self.input_hash: str | None = None

    def run(self) -> Result:
        if self.error is not None:
            raise self.error
        return self.result


class FakeKeystone:
    def __init__(self, result: Result = Result(), conditions: list[dict[str, Any]] | None = None):
        self.result = result
        self.conditions = ready_conditions() if conditions is None else conditions
        self.service_id = "svc-id"
        self.error: Exception | None = None
        self.endpoints: dict[str, str] | None = None
        self.released = 0

    def create_or_update(self, endpoints: dict[str, str] | None = None) -> Result:
        if self.error is not None:
            raise self.error
        self.endpoints = endpoints
        return self.result

    def release_finalizer(self) -> None:
        self.released += 1
        if self.error is not None:
            raise self.error


class FakeExposer:
    def __init__(self, result: Result = Result()):
        self.result = result
        self.endpoints = {
            "admin": "http://designate-admin.openstack.svc:9001",
            "internal": "http://designate-internal.openstack.svc:9001",
            "public": "http://designate-public.apps.example.com",
        }
        self.error: Exception | None = None

    def expose(self) -> Result:
        if self.error is not None:
            raise self.error
        return self.result


class FakeWorkload:
    def __init__(self, ready_count: int = 1):
        self.ready_count = ready_count
        self.rollout_complete = True
        self.applied: list[str] = []
        self.error: Exception | None = None

    def apply(self, input_hash: str) -> Result:
        if self.error is not None:
            raise self.error
        self.applied.append(input_hash)
        return Result()


class FakeDrivers:
    """DriverFactory handing out the same fakes for every pass."""

    def __init__(self):
        self.secret_reader = FakeSecrets()
        self.materializer = FakeConfig()
        self.db = FakeDatabase()
        self.job = FakeDbSync()
        self.ks_service = FakeKeystone()
        self.ks_endpoint = FakeKeystone()
        self.exposer = FakeExposer()
        self.deployment = FakeWorkload()

    def secrets(self, instance):
        return self.secret_reader

    def config_materializer(self, instance):
        return self.materializer

    def database(self, instance):
        return self.db

    def db_sync(self, instance, input_hash):
        self.job.input_hash = input_hash
        return self.job

    def keystone_service(self, instance):
        return self.ks_service

    def keystone_endpoint(self, instance):
        return self.ks_endpoint

    def endpoints(self, instance):
        return self.exposer

    def workload(self, instance):
        return self.deployment


class FakeStore:
    """InstanceStore keeping one body and counting writes."""

    def __init__(self, body: dict[str, Any] | None = None):
        self.body = body
        self.persisted: list[dict[str, Any]] = []
        self.error: Exception | None = None
        self.get_error: Exception | None = None

    def get(self, namespace: str, name: str) -> DesignateAPI:
        if self.get_error is not None:
            raise self.get_error
        if self.body is None:
            raise not_found()
        return DesignateAPI(self.body)

    def persist(self, instance: DesignateAPI) -> None:
        if self.error is not None:
            raise self.error
        self.persisted.append(copy.deepcopy(instance.body))
        self.body = copy.deepcopy(instance.body)


@pytest.fixture
def operator_config() -> OperatorConfig:
    return OperatorConfig()


@pytest.fixture
def drivers() -> FakeDrivers:
    return FakeDrivers()


@pytest.fixture
def instance() -> DesignateAPI:
    return DesignateAPI(make_body())


@pytest.fixture(autouse=True)
def no_kopf_events():
    """Kubernetes events need a running operator; record them instead."""
    with patch("designate_operator.utils.events.kopf.event") as mock_event:
        yield mock_event
