"""Builders for the Designate API workload and db-sync job manifests."""

from __future__ import annotations

from typing import Any

from ..constants import ANNOTATION_INPUT_HASH, DESIGNATE_API_PORT, SERVICE_NAME
from ..models import DesignateAPI
from .designateapi import owned_labels, service_labels

CONFIG_DATA_PATH = "/var/lib/config-data/default"
CONFIG_MERGED_PATH = "/var/lib/config-data/merged"
SCRIPTS_PATH = "/usr/local/bin/container-scripts"


def scripts_configmap_name(instance: DesignateAPI) -> str:
    return f"{instance.name}-scripts"


def config_data_configmap_name(instance: DesignateAPI) -> str:
    return f"{instance.name}-config-data"


def db_sync_job_name(instance: DesignateAPI) -> str:
    return f"{instance.name}-db-sync"


def _volumes(instance: DesignateAPI) -> list[dict[str, Any]]:
    return [
        {
            "name": "scripts",
            "configMap": {"name": scripts_configmap_name(instance), "defaultMode": 0o755},
        },
        {
            "name": "config-data",
            "configMap": {"name": config_data_configmap_name(instance)},
        },
        {"name": "config-data-merged", "emptyDir": {}},
    ]


def _volume_mounts() -> list[dict[str, Any]]:
    return [
        {"name": "scripts", "mountPath": SCRIPTS_PATH, "readOnly": True},
        {"name": "config-data", "mountPath": CONFIG_DATA_PATH, "readOnly": True},
        {"name": "config-data-merged", "mountPath": CONFIG_MERGED_PATH},
    ]


def _init_container(instance: DesignateAPI, image: str) -> dict[str, Any]:
    """Init container merging config data with passwords from the input secret."""
    spec = instance.spec
    return {
        "name": "init",
        "image": image,
        "command": ["/bin/bash", "-c", f"{SCRIPTS_PATH}/init.sh"],
        "env": [
            {
                "name": "DatabasePassword",
                "valueFrom": {
                    "secretKeyRef": {"name": spec.secret, "key": spec.password_selectors.database}
                },
            },
            {
                "name": "ServicePassword",
                "valueFrom": {
                    "secretKeyRef": {"name": spec.secret, "key": spec.password_selectors.service}
                },
            },
        ],
        "volumeMounts": _volume_mounts(),
    }


def _image(instance: DesignateAPI, default_image: str) -> str:
    return instance.spec.container_image or default_image


def create_db_sync_job(instance: DesignateAPI, input_hash: str, default_image: str) -> dict[str, Any]:
    """Create the db-sync Job manifest.

    The input hash is part of the pod template, so the job definition (and
    with it the recorded db-sync hash) changes whenever the inputs do.
    """
    image = _image(instance, default_image)
    labels = owned_labels(instance)
    return {
        "apiVersion": "batch/v1",
        "kind": "Job",
        "metadata": {
            "name": db_sync_job_name(instance),
            "namespace": instance.namespace,
            "labels": labels,
        },
        "spec": {
            "backoffLimit": 6,
            "template": {
                "metadata": {"labels": labels},
                "spec": {
                    "restartPolicy": "OnFailure",
                    "serviceAccountName": f"{SERVICE_NAME}-{instance.name}",
                    "initContainers": [_init_container(instance, image)],
                    "containers": [
                        {
                            "name": f"{SERVICE_NAME}-db-sync",
                            "image": image,
                            "command": ["/bin/bash", "-c"],
                            "args": [
                                "designate-manage --config-file "
                                f"{CONFIG_MERGED_PATH}/designate.conf database sync"
                            ],
                            "env": [{"name": "CONFIG_HASH", "value": input_hash}],
                            "volumeMounts": _volume_mounts(),
                        }
                    ],
                    "volumes": _volumes(instance),
                },
            },
        },
    }


def create_deployment(instance: DesignateAPI, input_hash: str, default_image: str) -> dict[str, Any]:
    """Create the Designate API Deployment manifest.

    Args:
        instance: The DesignateAPI being reconciled
        input_hash: Hash of all config and secret inputs; a change rolls the pods
        default_image: Image used when the resource does not set one

    Returns:
        Deployment manifest
    """
    spec = instance.spec
    image = _image(instance, default_image)
    selector = service_labels(instance)
    probe = {
        "httpGet": {"path": "/healthcheck", "port": DESIGNATE_API_PORT},
        "initialDelaySeconds": 5,
        "periodSeconds": 30,
        "timeoutSeconds": 5,
    }
    pod_spec: dict[str, Any] = {
        "serviceAccountName": f"{SERVICE_NAME}-{instance.name}",
        "initContainers": [_init_container(instance, image)],
        "containers": [
            {
                "name": f"{SERVICE_NAME}-api",
                "image": image,
                "command": ["/bin/bash", "-c"],
                "args": [
                    f"designate-api --config-file {CONFIG_MERGED_PATH}/designate.conf "
                    f"--config-dir {CONFIG_MERGED_PATH}/designate.conf.d"
                ],
                "ports": [{"name": "designate-api", "containerPort": DESIGNATE_API_PORT}],
                "env": [{"name": "CONFIG_HASH", "value": input_hash}],
                "readinessProbe": probe,
                "livenessProbe": probe,
                "volumeMounts": _volume_mounts(),
            }
        ],
        "volumes": _volumes(instance),
    }
    if spec.node_selector:
        pod_spec["nodeSelector"] = spec.node_selector

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": instance.name,
            "namespace": instance.namespace,
            "labels": owned_labels(instance),
        },
        "spec": {
            "replicas": spec.replicas,
            "selector": {"matchLabels": selector},
            "template": {
                "metadata": {
                    "labels": owned_labels(instance),
                    "annotations": {ANNOTATION_INPUT_HASH: input_hash},
                },
                "spec": pod_spec,
            },
        },
    }
