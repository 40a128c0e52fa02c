"""Builders for collaborator resources owned by a DesignateAPI."""

from __future__ import annotations

from typing import Any

from ..constants import (
    DATABASE_NAME,
    KEYSTONE_ENDPOINT_KIND,
    KEYSTONE_GROUP,
    KEYSTONE_SERVICE_KIND,
    KEYSTONE_VERSION,
    LABEL_DB_NAME,
    LABEL_ENDPOINT,
    MARIADB_DATABASE_KIND,
    MARIADB_GROUP,
    MARIADB_VERSION,
    ROUTE_GROUP,
    ROUTE_VERSION,
    SERVICE_DESCRIPTION,
    SERVICE_NAME,
    SERVICE_TYPE,
)
from ..models import DesignateAPI
from .designateapi import owned_labels, service_labels


def _metadata(instance: DesignateAPI, name: str, labels: dict[str, str]) -> dict[str, Any]:
    return {
        "name": name,
        "namespace": instance.namespace,
        "labels": labels,
        "ownerReferences": [instance.owner_reference()],
    }


def create_mariadb_database(instance: DesignateAPI) -> dict[str, Any]:
    """Create the MariaDBDatabase manifest requesting the service database."""
    spec = instance.spec
    return {
        "apiVersion": f"{MARIADB_GROUP}/{MARIADB_VERSION}",
        "kind": MARIADB_DATABASE_KIND,
        "metadata": _metadata(
            instance,
            instance.name,
            owned_labels(instance, {LABEL_DB_NAME: spec.database_instance}),
        ),
        "spec": {
            "name": DATABASE_NAME,
            "secret": spec.secret,
        },
    }


def create_keystone_service(instance: DesignateAPI) -> dict[str, Any]:
    """Create the KeystoneService manifest registering the DNS service."""
    spec = instance.spec
    return {
        "apiVersion": f"{KEYSTONE_GROUP}/{KEYSTONE_VERSION}",
        "kind": KEYSTONE_SERVICE_KIND,
        "metadata": _metadata(instance, SERVICE_NAME, owned_labels(instance)),
        "spec": {
            "serviceType": SERVICE_TYPE,
            "serviceName": SERVICE_NAME,
            "serviceDescription": SERVICE_DESCRIPTION,
            "enabled": True,
            "serviceUser": spec.service_user,
            "secret": spec.secret,
            "passwordSelector": spec.password_selectors.service,
        },
    }


def create_keystone_endpoint(instance: DesignateAPI, endpoints: dict[str, str]) -> dict[str, Any]:
    """Create the KeystoneEndpoint manifest for the resolved endpoint URLs."""
    return {
        "apiVersion": f"{KEYSTONE_GROUP}/{KEYSTONE_VERSION}",
        "kind": KEYSTONE_ENDPOINT_KIND,
        "metadata": _metadata(instance, SERVICE_NAME, owned_labels(instance)),
        "spec": {
            "serviceName": SERVICE_NAME,
            "endpoints": dict(endpoints),
        },
    }


def endpoint_service_name(endpoint: str) -> str:
    return f"{SERVICE_NAME}-{endpoint}"


def create_endpoint_service(instance: DesignateAPI, endpoint: str, port: int) -> dict[str, Any]:
    """Create the Service manifest exposing one endpoint class."""
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": _metadata(
            instance,
            endpoint_service_name(endpoint),
            owned_labels(instance, {LABEL_ENDPOINT: endpoint}),
        ),
        "spec": {
            "selector": service_labels(instance),
            "ports": [
                {
                    "name": f"{SERVICE_NAME}-{endpoint}",
                    "port": port,
                    "targetPort": port,
                    "protocol": "TCP",
                }
            ],
        },
    }


def create_endpoint_route(instance: DesignateAPI, endpoint: str) -> dict[str, Any]:
    """Create the OpenShift Route manifest for an endpoint Service."""
    service = endpoint_service_name(endpoint)
    return {
        "apiVersion": f"{ROUTE_GROUP}/{ROUTE_VERSION}",
        "kind": "Route",
        "metadata": _metadata(instance, service, owned_labels(instance, {LABEL_ENDPOINT: endpoint})),
        "spec": {
            "to": {"kind": "Service", "name": service},
            "port": {"targetPort": f"{SERVICE_NAME}-{endpoint}"},
        },
    }


def create_configmap(
    instance: DesignateAPI,
    name: str,
    data: dict[str, str],
    config_type: str,
) -> dict[str, Any]:
    """Create a ConfigMap manifest holding rendered files."""
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": _metadata(instance, name, owned_labels(instance, {"config-type": config_type})),
        "data": dict(data),
    }
