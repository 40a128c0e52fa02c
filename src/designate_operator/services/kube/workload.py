"""Designate API deployment driver."""

from __future__ import annotations

from typing import Any

from kubernetes import client

from ...builders.workload import create_deployment
from ...models import DesignateAPI, Result
from .objects import apply_object, deployment_client


def is_rolled_out(deployment: dict[str, Any]) -> bool:
    """Check that the Deployment controller caught up with the applied spec.

    ``readyReplicas`` alone still counts pods of the previous ReplicaSet
    right after a patch, so the controller must have observed the current
    generation and updated every desired replica.
    """
    meta = deployment.get("metadata") or {}
    status = deployment.get("status") or {}
    if (status.get("observedGeneration") or 0) < (meta.get("generation") or 0):
        return False
    desired = (deployment.get("spec") or {}).get("replicas", 1)
    return (status.get("updatedReplicas") or 0) >= desired


class KubeWorkloadDeployer:
    """Applies the API Deployment and reports its rollout."""

    def __init__(self, api: client.AppsV1Api, instance: DesignateAPI, default_image: str) -> None:
        self.instance = instance
        self.default_image = default_image
        self.deployments = deployment_client(api)
        self._ready_count = 0
        self._rollout_complete = False

    @property
    def ready_count(self) -> int:
        return self._ready_count

    @property
    def rollout_complete(self) -> bool:
        return self._rollout_complete

    def apply(self, input_hash: str) -> Result:
        deployment, _ = apply_object(
            self.deployments,
            create_deployment(self.instance, input_hash, self.default_image),
        )
        self._ready_count = (deployment.get("status") or {}).get("readyReplicas") or 0
        self._rollout_complete = is_rolled_out(deployment)
        return Result()
