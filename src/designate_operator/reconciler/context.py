"""Explicit per-process context handed down to the reconciler."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kubernetes import client, config

from ..config import OperatorConfig
from ..services.base import DriverFactory, InstanceStore
from ..services.kube import KubeDriverFactory, KubeInstanceStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileContext:
    """Configuration, instance store and driver factory for all passes."""

    config: OperatorConfig
    store: InstanceStore
    drivers: DriverFactory

    @classmethod
    def from_cluster(cls, operator_config: OperatorConfig) -> ReconcileContext:
        """Build a context talking to the cluster the operator runs in."""
        try:
            config.load_incluster_config()
        except config.ConfigException:
            logger.info("Not running in a cluster, loading kubeconfig")
            config.load_kube_config()

        custom_api = client.CustomObjectsApi()
        return cls(
            config=operator_config,
            store=KubeInstanceStore(custom_api),
            drivers=KubeDriverFactory(
                operator_config,
                custom_api,
                client.CoreV1Api(),
                client.AppsV1Api(),
                client.BatchV1Api(),
            ),
        )
