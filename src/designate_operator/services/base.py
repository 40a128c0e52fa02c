"""Resource driver interfaces used by the reconciler."""

from __future__ import annotations

from typing import Any, Protocol

from ..models import DesignateAPI, Result


class ReportsConditions(Protocol):
    """A collaborator that reports its own conditions for mirroring."""

    @property
    def conditions(self) -> list[dict[str, Any]]:
        """Conditions last observed on the collaborator resource."""
        ...


class DatabaseDriver(Protocol):
    """Protocol defining logical database operations."""

    @property
    def hostname(self) -> str | None:
        """Database hostname, resolved by ``create_or_update``."""
        ...

    def create_or_update(self) -> Result:
        """Request the service database on the database instance."""
        ...

    def wait_until_ready(self) -> Result:
        """Poll until the database has been created."""
        ...

    def release_finalizer(self) -> None:
        """Release this operator's finalizer on the database resource."""
        ...


class DbSyncJob(Protocol):
    """Protocol defining the schema sync job run once per input hash."""

    @property
    def hash(self) -> str:
        """Hash of the job definition."""
        ...

    @property
    def changed(self) -> bool:
        """True once a job for a new hash has completed in this pass."""
        ...

    def run(self) -> Result:
        """Run the job if its hash differs from the recorded one."""
        ...


class KeystoneServiceDriver(ReportsConditions, Protocol):
    """Protocol defining identity service registration."""

    @property
    def service_id(self) -> str | None:
        """ID assigned to the registered service."""
        ...

    def create_or_update(self) -> Result:
        """Register the service, requeueing until it reports Ready."""
        ...

    def release_finalizer(self) -> None:
        """Release this operator's finalizer on the service registration."""
        ...


class KeystoneEndpointDriver(ReportsConditions, Protocol):
    """Protocol defining identity endpoint registration."""

    def create_or_update(self, endpoints: dict[str, str]) -> Result:
        """Register one endpoint per endpoint class, requeueing until Ready."""
        ...

    def release_finalizer(self) -> None:
        """Release this operator's finalizer on the endpoint registration."""
        ...


class ConfigMaterializer(Protocol):
    """Protocol defining rendering of the scripts and config ConfigMaps."""

    def materialize(self, env_inputs: dict[str, str]) -> None:
        """Render and apply the ConfigMaps, recording their content hashes.

        Raises:
            DependencyNotReadyError: If template inputs are not available yet
        """
        ...


class WorkloadDeployer(Protocol):
    """Protocol defining the API workload."""

    @property
    def ready_count(self) -> int:
        """Ready replicas observed after the last apply."""
        ...

    @property
    def rollout_complete(self) -> bool:
        """Whether the Deployment controller finished rolling out the last apply."""
        ...

    def apply(self, input_hash: str) -> Result:
        """Create or update the workload for the given input hash."""
        ...


class EndpointExposer(Protocol):
    """Protocol defining exposure of the API endpoints."""

    @property
    def endpoints(self) -> dict[str, str]:
        """Resolved URL per endpoint class."""
        ...

    def expose(self) -> Result:
        """Create or update the Services and Route, resolving their URLs."""
        ...


class SecretReader(Protocol):
    """Protocol defining access to the input secret."""

    def read(self) -> str:
        """Return a hash of the secret data.

        Raises:
            kubernetes.client.exceptions.ApiException: 404 when the secret is absent
            ValueError: If a password selector key is missing
        """
        ...


class InstanceStore(Protocol):
    """Protocol defining load and conflict-checked save of instances."""

    def get(self, namespace: str, name: str) -> DesignateAPI:
        ...

    def persist(self, instance: DesignateAPI) -> None:
        ...


class DriverFactory(Protocol):
    """Builds the drivers for one instance and one reconcile pass."""

    def database(self, instance: DesignateAPI) -> DatabaseDriver:
        ...

    def db_sync(self, instance: DesignateAPI, input_hash: str) -> DbSyncJob:
        ...

    def keystone_service(self, instance: DesignateAPI) -> KeystoneServiceDriver:
        ...

    def keystone_endpoint(self, instance: DesignateAPI) -> KeystoneEndpointDriver:
        ...

    def config_materializer(self, instance: DesignateAPI) -> ConfigMaterializer:
        ...

    def workload(self, instance: DesignateAPI) -> WorkloadDeployer:
        ...

    def endpoints(self, instance: DesignateAPI) -> EndpointExposer:
        ...

    def secrets(self, instance: DesignateAPI) -> SecretReader:
        ...
