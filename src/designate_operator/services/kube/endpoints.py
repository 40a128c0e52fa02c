"""Service and Route exposure of the API endpoints."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client

from ...builders.collaborators import (
    create_endpoint_route,
    create_endpoint_service,
    endpoint_service_name,
)
from ...constants import ENDPOINT_CLASSES, ENDPOINT_PUBLIC, ROUTE_GROUP, ROUTE_PLURAL, ROUTE_VERSION
from ...models import DesignateAPI, Result
from .objects import apply_object, custom_object_client, service_client

logger = logging.getLogger(__name__)


def route_host(route: dict[str, Any]) -> str | None:
    """Host of the first ingress that admitted the route."""
    for ingress in (route.get("status") or {}).get("ingress") or []:
        admitted = any(
            cond.get("type") == "Admitted" and cond.get("status") == "True"
            for cond in ingress.get("conditions") or []
        )
        if admitted and ingress.get("host"):
            return ingress["host"]
    return None


class KubeEndpointExposer:
    """Creates one Service per endpoint class and a Route for public.

    Admin and internal URLs use the cluster DNS name of their Service. The
    public URL uses the Route host, or the Service DNS name when routes
    are disabled.
    """

    def __init__(
        self,
        api: client.CoreV1Api,
        custom_api: client.CustomObjectsApi,
        instance: DesignateAPI,
        expose_routes: bool,
        requeue_seconds: float,
    ) -> None:
        self.instance = instance
        self.expose_routes = expose_routes
        self.requeue_seconds = requeue_seconds
        self.services = service_client(api)
        self.routes = custom_object_client(custom_api, ROUTE_GROUP, ROUTE_VERSION, ROUTE_PLURAL)
        self._endpoints: dict[str, str] = {}

    @property
    def endpoints(self) -> dict[str, str]:
        return dict(self._endpoints)

    def expose(self) -> Result:
        ports = self.instance.spec.ports
        namespace = self.instance.namespace
        endpoints = {}
        for endpoint in ENDPOINT_CLASSES:
            port = ports[endpoint]
            apply_object(self.services, create_endpoint_service(self.instance, endpoint, port))
            endpoints[endpoint] = f"http://{endpoint_service_name(endpoint)}.{namespace}.svc:{port}"

        if self.expose_routes:
            route, _ = apply_object(self.routes, create_endpoint_route(self.instance, ENDPOINT_PUBLIC))
            host = route_host(route)
            if host is None:
                logger.info(f"Route {namespace}/{endpoint_service_name(ENDPOINT_PUBLIC)} not admitted yet")
                return Result.after(self.requeue_seconds)
            endpoints[ENDPOINT_PUBLIC] = f"http://{host}"

        self._endpoints = endpoints
        return Result()
