"""Create-or-patch primitives shared by the Kubernetes resource drivers."""

from __future__ import annotations

import copy
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from kubernetes import client

from ... import metrics
from ...constants import ANNOTATION_SPEC_HASH
from ...utils.errors import is_not_found
from ...utils.hashing import object_hash

logger = logging.getLogger(__name__)


@dataclass
class ObjectClient:
    """CRUD callables for one namespaced resource type.

    ``read``, ``patch`` and ``delete`` take ``(name, namespace, ...)``;
    ``create`` takes ``(namespace, body)``.
    """

    resource: str
    read: Callable[..., Any]
    create: Callable[..., Any]
    patch: Callable[..., Any]
    delete: Callable[..., Any]


def custom_object_client(
    api: client.CustomObjectsApi,
    group: str,
    version: str,
    plural: str,
) -> ObjectClient:
    """Client for a namespaced custom resource."""
    return ObjectClient(
        resource=plural,
        read=lambda name, namespace: api.get_namespaced_custom_object(group, version, namespace, plural, name),
        create=lambda namespace, body: api.create_namespaced_custom_object(group, version, namespace, plural, body),
        patch=lambda name, namespace, body: api.patch_namespaced_custom_object(
            group, version, namespace, plural, name, body
        ),
        delete=lambda name, namespace: api.delete_namespaced_custom_object(group, version, namespace, plural, name),
    )


def configmap_client(api: client.CoreV1Api) -> ObjectClient:
    return ObjectClient(
        resource="configmaps",
        read=api.read_namespaced_config_map,
        create=api.create_namespaced_config_map,
        patch=api.patch_namespaced_config_map,
        delete=api.delete_namespaced_config_map,
    )


def service_client(api: client.CoreV1Api) -> ObjectClient:
    return ObjectClient(
        resource="services",
        read=api.read_namespaced_service,
        create=api.create_namespaced_service,
        patch=api.patch_namespaced_service,
        delete=api.delete_namespaced_service,
    )


def deployment_client(api: client.AppsV1Api) -> ObjectClient:
    return ObjectClient(
        resource="deployments",
        read=api.read_namespaced_deployment,
        create=api.create_namespaced_deployment,
        patch=api.patch_namespaced_deployment,
        delete=api.delete_namespaced_deployment,
    )


def job_client(api: client.BatchV1Api) -> ObjectClient:
    return ObjectClient(
        resource="jobs",
        read=api.read_namespaced_job,
        create=api.create_namespaced_job,
        patch=api.patch_namespaced_job,
        # Background propagation so the job's pods go with it
        delete=lambda name, namespace: api.delete_namespaced_job(
            name, namespace, body=client.V1DeleteOptions(propagation_policy="Background")
        ),
    )


@contextmanager
def api_call(resource: str, operation: str) -> Iterator[None]:
    """Record count and duration of one Kubernetes API call."""
    start_time = time.time()
    try:
        yield
        metrics.api_call_total.labels(resource=resource, operation=operation, result="success").inc()
    except Exception as e:
        result = "not_found" if is_not_found(e) else "error"
        metrics.api_call_total.labels(resource=resource, operation=operation, result=result).inc()
        raise
    finally:
        duration = time.time() - start_time
        metrics.api_call_duration_seconds.labels(resource=resource, operation=operation).observe(duration)


def to_dict(obj: Any) -> dict[str, Any]:
    """Return a wire-format (camelCase) dict for an API response object."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    return client.ApiClient().sanitize_for_serialization(obj)


def read_object(api: ObjectClient, name: str, namespace: str) -> dict[str, Any] | None:
    """Read an object, returning None when it does not exist."""
    try:
        with api_call(api.resource, "read"):
            return to_dict(api.read(name, namespace))
    except client.exceptions.ApiException as e:
        if is_not_found(e):
            return None
        raise


def delete_object(api: ObjectClient, name: str, namespace: str) -> bool:
    """Delete an object; returns False when it was already absent."""
    try:
        with api_call(api.resource, "delete"):
            api.delete(name, namespace)
    except client.exceptions.ApiException as e:
        if is_not_found(e):
            return False
        raise
    return True


def apply_object(
    api: ObjectClient,
    manifest: dict[str, Any],
    finalizer: str | None = None,
) -> tuple[dict[str, Any], bool]:
    """Create or patch an object to match a manifest.

    The manifest is hashed into the ``spec-hash`` annotation. When the live
    object already carries the same hash (and the finalizer, if one is
    required) nothing is written, so repeated calls with the same manifest
    have no further effect.

    Args:
        api: Client for the object's resource type
        manifest: Desired object
        finalizer: Finalizer the object must carry, if any

    Returns:
        The live object and whether a write happened
    """
    metadata = manifest["metadata"]
    name = metadata["name"]
    namespace = metadata["namespace"]
    spec_hash = object_hash(manifest)

    body = copy.deepcopy(manifest)
    body["metadata"].setdefault("annotations", {})[ANNOTATION_SPEC_HASH] = spec_hash

    existing = read_object(api, name, namespace)
    if existing is None:
        if finalizer:
            body["metadata"]["finalizers"] = [finalizer]
        with api_call(api.resource, "create"):
            created = api.create(namespace, body)
        logger.info(f"Created {api.resource} {namespace}/{name}")
        return to_dict(created), True

    live_meta = existing.get("metadata") or {}
    live_hash = (live_meta.get("annotations") or {}).get(ANNOTATION_SPEC_HASH)
    finalizers = list(live_meta.get("finalizers") or [])
    if live_hash == spec_hash and (finalizer is None or finalizer in finalizers):
        return existing, False

    if finalizer and finalizer not in finalizers:
        body["metadata"]["finalizers"] = finalizers + [finalizer]
    body["metadata"]["resourceVersion"] = live_meta.get("resourceVersion")
    with api_call(api.resource, "patch"):
        patched = api.patch(name, namespace, body)
    logger.info(f"Updated {api.resource} {namespace}/{name}")
    return to_dict(patched), True


def release_finalizer(api: ObjectClient, name: str, namespace: str, finalizer: str) -> bool:
    """Remove a finalizer from an object.

    The patch carries the read resourceVersion, so a concurrent writer
    makes it fail with a conflict instead of being overwritten. A missing
    object counts as released.

    Returns:
        True if the finalizer was removed by this call
    """
    existing = read_object(api, name, namespace)
    if existing is None:
        logger.info(f"{api.resource} {namespace}/{name} already absent")
        return False

    live_meta = existing.get("metadata") or {}
    finalizers = list(live_meta.get("finalizers") or [])
    if finalizer not in finalizers:
        return False

    finalizers.remove(finalizer)
    body = {
        "metadata": {
            "finalizers": finalizers,
            "resourceVersion": live_meta.get("resourceVersion"),
        }
    }
    try:
        with api_call(api.resource, "patch"):
            api.patch(name, namespace, body)
    except client.exceptions.ApiException as e:
        if is_not_found(e):
            return False
        raise
    logger.info(f"Removed finalizer from {api.resource} {namespace}/{name}")
    return True
