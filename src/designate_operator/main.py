"""Main entry point for the Designate Operator.

Run with ``kopf run -m designate_operator.main --all-namespaces``.
"""

from __future__ import annotations

import logging
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from . import handlers  # noqa: F401
from .config import OperatorConfig
from .reconciler import ReconcileContext, ReconcileDispatcher
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    config = OperatorConfig.from_env()

    # Set up structured JSON logging
    structured_logging.setup_structured_logging(config.log_level)

    # Configure persistence
    # Use AnnotationsProgressStorage to avoid conflicts with status updates
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = logging.INFO
    settings.networking.request_timeout = config.request_timeout
    settings.execution.max_workers = config.max_workers

    initialize_tracing()

    # Build the cluster context once; every pass gets it through memo
    context = ReconcileContext.from_cluster(config)
    memo.config = config
    memo.dispatcher = ReconcileDispatcher(context)

    # Start metrics HTTP server with health check endpoints
    health.start_http_server(config.metrics_port)
    logger.info(f"Operator configured, metrics on port {config.metrics_port}")
