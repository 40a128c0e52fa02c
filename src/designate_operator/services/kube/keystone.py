"""Keystone service and endpoint registration drivers."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client

from ...builders.collaborators import create_keystone_endpoint, create_keystone_service
from ...constants import (
    COND_READY,
    ENDPOINT_INTERNAL,
    ENDPOINT_PUBLIC,
    FINALIZER,
    KEYSTONE_API_PLURAL,
    KEYSTONE_ENDPOINT_PLURAL,
    KEYSTONE_GROUP,
    KEYSTONE_SERVICE_PLURAL,
    KEYSTONE_VERSION,
    SERVICE_NAME,
    STATUS_TRUE,
)
from ...models import DesignateAPI, Result
from ...utils.conditions import find_condition
from ...utils.errors import DependencyNotReadyError
from .objects import api_call, apply_object, custom_object_client, release_finalizer

logger = logging.getLogger(__name__)


def _is_ready(obj: dict[str, Any]) -> bool:
    ready = find_condition((obj.get("status") or {}).get("conditions") or [], COND_READY)
    return ready is not None and ready.get("status") == STATUS_TRUE


class _KeystoneRegistration:
    """Shared apply/poll logic for the two Keystone registration kinds."""

    plural: str = ""

    def __init__(self, api: client.CustomObjectsApi, instance: DesignateAPI, requeue_seconds: float) -> None:
        self.instance = instance
        self.requeue_seconds = requeue_seconds
        self.objects = custom_object_client(api, KEYSTONE_GROUP, KEYSTONE_VERSION, self.plural)
        self._observed: dict[str, Any] = {}

    @property
    def conditions(self) -> list[dict[str, Any]]:
        return list((self._observed.get("status") or {}).get("conditions") or [])

    def _apply(self, manifest: dict[str, Any]) -> Result:
        self._observed, _ = apply_object(self.objects, manifest, finalizer=FINALIZER)
        if not _is_ready(self._observed):
            logger.info(f"{self.plural} {self.instance.namespace}/{SERVICE_NAME} not ready yet")
            return Result.after(self.requeue_seconds)
        return Result()

    def release_finalizer(self) -> None:
        release_finalizer(self.objects, SERVICE_NAME, self.instance.namespace, FINALIZER)


class KubeKeystoneService(_KeystoneRegistration):
    """Registers the DNS service in Keystone via a ``KeystoneService``."""

    plural = KEYSTONE_SERVICE_PLURAL

    @property
    def service_id(self) -> str | None:
        return (self._observed.get("status") or {}).get("serviceID")

    def create_or_update(self) -> Result:
        return self._apply(create_keystone_service(self.instance))


class KubeKeystoneEndpoint(_KeystoneRegistration):
    """Registers the API endpoints in Keystone via a ``KeystoneEndpoint``."""

    plural = KEYSTONE_ENDPOINT_PLURAL

    def create_or_update(self, endpoints: dict[str, str]) -> Result:
        return self._apply(create_keystone_endpoint(self.instance, endpoints))


def get_keystone_api_endpoints(api: client.CustomObjectsApi, namespace: str) -> dict[str, str]:
    """Return the internal and public URLs of the namespace's KeystoneAPI.

    Raises:
        DependencyNotReadyError: If there is no KeystoneAPI or it has no endpoints yet
    """
    with api_call(KEYSTONE_API_PLURAL, "list"):
        result = api.list_namespaced_custom_object(KEYSTONE_GROUP, KEYSTONE_VERSION, namespace, KEYSTONE_API_PLURAL)
    items = result.get("items") or []
    if not items:
        raise DependencyNotReadyError(f"KeystoneAPI in namespace {namespace}")
    if len(items) > 1:
        logger.warning(f"Found {len(items)} KeystoneAPIs in {namespace}, using the first")

    api_endpoints = (items[0].get("status") or {}).get("apiEndpoints") or {}
    endpoints = {}
    for endpoint in (ENDPOINT_INTERNAL, ENDPOINT_PUBLIC):
        url = api_endpoints.get(endpoint)
        if not url:
            raise DependencyNotReadyError(f"KeystoneAPI {endpoint} endpoint")
        endpoints[endpoint] = url
    return endpoints
