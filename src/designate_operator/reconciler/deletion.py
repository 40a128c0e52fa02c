"""Ordered release of finalizers when a DesignateAPI is deleted."""

from __future__ import annotations

import logging

from ..constants import FINALIZER
from ..models import DesignateAPI, Result
from ..services.base import DriverFactory
from ..utils.events import emit_deletion_completed

logger = logging.getLogger(__name__)


class DeletionOrchestrator:
    """Releases this operator's finalizers on collaborators, then its own.

    Every step treats an absent object as released, so the sequence can be
    rerun from any partial state. An error stops it before the instance's
    own finalizer is removed.
    """

    def __init__(self, drivers: DriverFactory):
        self.drivers = drivers

    def run(self, instance: DesignateAPI) -> Result:
        self.drivers.database(instance).release_finalizer()
        logger.info(f"Released database finalizer of {instance.namespace}/{instance.name}")

        # Keystone registration happens only after endpoints are recorded
        if instance.api_endpoints:
            self.drivers.keystone_endpoint(instance).release_finalizer()
            self.drivers.keystone_service(instance).release_finalizer()
            logger.info(f"Released Keystone finalizers of {instance.namespace}/{instance.name}")

        if instance.remove_finalizer(FINALIZER):
            emit_deletion_completed(instance.body)
        logger.info(f"Reconciled deletion of {instance.namespace}/{instance.name}")
        return Result()
