"""Driver factory backed by the Kubernetes API."""

from __future__ import annotations

from kubernetes import client

from ...config import OperatorConfig
from ...models import DesignateAPI
from .config import KubeConfigMaterializer
from .database import MariaDBDatabaseDriver
from .dbsync import KubeDbSyncJob
from .endpoints import KubeEndpointExposer
from .keystone import KubeKeystoneEndpoint, KubeKeystoneService
from .secrets import KubeSecretReader
from .workload import KubeWorkloadDeployer


class KubeDriverFactory:
    """Builds fresh drivers per pass; drivers hold no state across passes."""

    def __init__(
        self,
        config: OperatorConfig,
        custom_api: client.CustomObjectsApi,
        core_api: client.CoreV1Api,
        apps_api: client.AppsV1Api,
        batch_api: client.BatchV1Api,
    ) -> None:
        self.config = config
        self.custom_api = custom_api
        self.core_api = core_api
        self.apps_api = apps_api
        self.batch_api = batch_api

    def database(self, instance: DesignateAPI) -> MariaDBDatabaseDriver:
        return MariaDBDatabaseDriver(self.custom_api, instance, self.config.requeue_short_seconds)

    def db_sync(self, instance: DesignateAPI, input_hash: str) -> KubeDbSyncJob:
        return KubeDbSyncJob(
            self.batch_api,
            instance,
            input_hash,
            self.config.default_container_image,
            self.config.requeue_short_seconds,
        )

    def keystone_service(self, instance: DesignateAPI) -> KubeKeystoneService:
        return KubeKeystoneService(self.custom_api, instance, self.config.requeue_keystone_seconds)

    def keystone_endpoint(self, instance: DesignateAPI) -> KubeKeystoneEndpoint:
        return KubeKeystoneEndpoint(self.custom_api, instance, self.config.requeue_keystone_seconds)

    def config_materializer(self, instance: DesignateAPI) -> KubeConfigMaterializer:
        return KubeConfigMaterializer(self.core_api, self.custom_api, instance)

    def workload(self, instance: DesignateAPI) -> KubeWorkloadDeployer:
        return KubeWorkloadDeployer(self.apps_api, instance, self.config.default_container_image)

    def endpoints(self, instance: DesignateAPI) -> KubeEndpointExposer:
        return KubeEndpointExposer(
            self.core_api,
            self.custom_api,
            instance,
            self.config.expose_routes,
            self.config.requeue_short_seconds,
        )

    def secrets(self, instance: DesignateAPI) -> KubeSecretReader:
        return KubeSecretReader(self.core_api, instance)
