"""Runtime configuration for the Designate Operator."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CONTAINER_IMAGE = "quay.io/podified-antelope-centos9/openstack-designate-api:current-podified"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class OperatorConfig:
    """Operator settings read from the environment."""

    metrics_port: int = 8080
    log_level: str = "INFO"
    max_workers: int = 4
    request_timeout: float = 30.0
    default_container_image: str = DEFAULT_CONTAINER_IMAGE
    expose_routes: bool = True
    requeue_short_seconds: float = 5.0
    requeue_input_seconds: float = 10.0
    requeue_keystone_seconds: float = 10.0
    requeue_immediate_seconds: float = 1.0
    drift_check_interval_seconds: float = 300.0

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Build configuration from environment variables.

        Environment Variables:
            METRICS_PORT: Port of the metrics and health server (default: 8080)
            LOG_LEVEL: Root log level (default: INFO)
            MAX_WORKERS: Kopf sync handler worker count (default: 4)
            K8S_REQUEST_TIMEOUT: Kubernetes API request timeout in seconds (default: 30)
            DEFAULT_CONTAINER_IMAGE: Image used when the resource does not set one
            EXPOSE_ROUTES: Create an OpenShift Route for the public endpoint (default: true)
            REQUEUE_SHORT_SECONDS: Delay while collaborators provision (default: 5)
            REQUEUE_INPUT_SECONDS: Delay while the input secret is missing (default: 10)
            REQUEUE_KEYSTONE_SECONDS: Delay while Keystone registration settles (default: 10)
            REQUEUE_IMMEDIATE_SECONDS: Delay used for "reconcile again now" (default: 1)
            DRIFT_CHECK_INTERVAL_SECONDS: Period of the resync timer (default: 300)
        """
        return cls(
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            max_workers=int(os.getenv("MAX_WORKERS", "4")),
            request_timeout=float(os.getenv("K8S_REQUEST_TIMEOUT", "30.0")),
            default_container_image=os.getenv("DEFAULT_CONTAINER_IMAGE", DEFAULT_CONTAINER_IMAGE),
            expose_routes=_env_bool("EXPOSE_ROUTES", True),
            requeue_short_seconds=float(os.getenv("REQUEUE_SHORT_SECONDS", "5.0")),
            requeue_input_seconds=float(os.getenv("REQUEUE_INPUT_SECONDS", "10.0")),
            requeue_keystone_seconds=float(os.getenv("REQUEUE_KEYSTONE_SECONDS", "10.0")),
            requeue_immediate_seconds=float(os.getenv("REQUEUE_IMMEDIATE_SECONDS", "1.0")),
            drift_check_interval_seconds=float(os.getenv("DRIFT_CHECK_INTERVAL_SECONDS", "300")),
        )
