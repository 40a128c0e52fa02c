"""Load and save of DesignateAPI resources."""

from __future__ import annotations

import logging

from kubernetes import client

from ...constants import API_GROUP, API_VERSION, PLURAL_DESIGNATE_API
from ...models import DesignateAPI
from .objects import api_call

logger = logging.getLogger(__name__)


class KubeInstanceStore:
    """Reads instances fresh each pass and writes them back conflict-checked."""

    def __init__(self, api: client.CustomObjectsApi) -> None:
        self.api = api

    def get(self, namespace: str, name: str) -> DesignateAPI:
        """Load an instance.

        Raises:
            client.exceptions.ApiException: 404 when the instance is gone
        """
        with api_call(PLURAL_DESIGNATE_API, "read"):
            body = self.api.get_namespaced_custom_object(API_GROUP, API_VERSION, namespace, PLURAL_DESIGNATE_API, name)
        return DesignateAPI(body)

    def persist(self, instance: DesignateAPI) -> None:
        """Write status, then finalizers if they changed during the pass.

        Both writes carry the resourceVersion the pass worked from, so a
        concurrent change surfaces as a 409 instead of being overwritten.
        """
        namespace, name = instance.namespace, instance.name
        with api_call(PLURAL_DESIGNATE_API, "replace_status"):
            updated = self.api.replace_namespaced_custom_object_status(
                API_GROUP, API_VERSION, namespace, PLURAL_DESIGNATE_API, name, instance.body
            )
        resource_version = (updated.get("metadata") or {}).get("resourceVersion")
        if resource_version:
            instance.metadata["resourceVersion"] = resource_version

        if not instance.finalizers_changed:
            return

        body = {
            "metadata": {
                "finalizers": list(instance.finalizers),
                "resourceVersion": instance.resource_version,
            }
        }
        with api_call(PLURAL_DESIGNATE_API, "patch"):
            self.api.patch_namespaced_custom_object(API_GROUP, API_VERSION, namespace, PLURAL_DESIGNATE_API, name, body)
        logger.info(f"Updated finalizers of {namespace}/{name}: {instance.finalizers}")
