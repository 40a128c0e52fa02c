"""Builder for DesignateAPI spec and shared labels."""

from __future__ import annotations

from typing import Any

from ..constants import (
    ENDPOINT_CLASSES,
    LABEL_APP_SELECTOR,
    LABEL_OWNER_NAME,
    LABEL_OWNER_UID,
    SERVICE_NAME,
)
from ..models import DesignateAPI, DesignateAPISpec, PasswordSelectors


def create_spec_from_dict(spec: dict[str, Any]) -> DesignateAPISpec:
    """Create a DesignateAPISpec from the CRD spec.

    Args:
        spec: DesignateAPI CRD spec

    Returns:
        Parsed spec with defaults applied

    Raises:
        ValueError: If a required field is missing or a value is out of range
    """
    database_instance = spec.get("databaseInstance")
    if not database_instance:
        raise ValueError("databaseInstance is required")

    secret = spec.get("secret")
    if not secret:
        raise ValueError("secret is required")

    defaults = DesignateAPISpec(database_instance=database_instance, secret=secret)

    selectors = spec.get("passwordSelectors") or {}
    password_selectors = PasswordSelectors(
        database=selectors.get("database", defaults.password_selectors.database),
        service=selectors.get("service", defaults.password_selectors.service),
    )

    ports = dict(defaults.ports)
    for endpoint, port in (spec.get("ports") or {}).items():
        if endpoint not in ENDPOINT_CLASSES:
            raise ValueError(f"unknown endpoint class {endpoint!r} in ports")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ValueError(f"port for {endpoint} endpoint must be between 1 and 65535")
        ports[endpoint] = port

    replicas = spec.get("replicas", defaults.replicas)
    if isinstance(replicas, bool) or not isinstance(replicas, int) or replicas < 0:
        raise ValueError("replicas must be a non-negative integer")

    return DesignateAPISpec(
        database_instance=database_instance,
        secret=secret,
        database_user=spec.get("databaseUser") or defaults.database_user,
        service_user=spec.get("serviceUser") or defaults.service_user,
        password_selectors=password_selectors,
        ports=ports,
        custom_service_config=spec.get("customServiceConfig", ""),
        default_config_overwrite=dict(spec.get("defaultConfigOverwrite") or {}),
        preserve_jobs=bool(spec.get("preserveJobs", False)),
        container_image=spec.get("containerImage"),
        replicas=replicas,
        node_selector=dict(spec.get("nodeSelector") or {}),
    )


def service_labels(instance: DesignateAPI) -> dict[str, str]:
    """Labels selecting the workload pods of an instance."""
    return {
        LABEL_APP_SELECTOR: SERVICE_NAME,
        LABEL_OWNER_NAME: instance.name,
    }


def owned_labels(instance: DesignateAPI, extra: dict[str, str] | None = None) -> dict[str, str]:
    """Labels put on every object the operator creates for an instance."""
    labels = {
        **service_labels(instance),
        LABEL_OWNER_UID: instance.uid,
    }
    labels.update(extra or {})
    return labels
