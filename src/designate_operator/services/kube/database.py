"""MariaDB database driver."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client

from ...builders.collaborators import create_mariadb_database
from ...constants import (
    FINALIZER,
    MARIADB_DATABASE_PLURAL,
    MARIADB_GROUP,
    MARIADB_PLURAL,
    MARIADB_VERSION,
)
from ...models import DesignateAPI, Result
from .objects import apply_object, custom_object_client, read_object, release_finalizer

logger = logging.getLogger(__name__)


class MariaDBDatabaseDriver:
    """Requests the service database from the MariaDB controller.

    The database is a ``MariaDBDatabase`` named after the instance and
    labelled with the hosting ``MariaDB``; the MariaDB controller creates
    the schema and user and reports ``status.completed``.
    """

    def __init__(
        self,
        api: client.CustomObjectsApi,
        instance: DesignateAPI,
        requeue_seconds: float,
    ) -> None:
        self.instance = instance
        self.requeue_seconds = requeue_seconds
        self.mariadbs = custom_object_client(api, MARIADB_GROUP, MARIADB_VERSION, MARIADB_PLURAL)
        self.databases = custom_object_client(api, MARIADB_GROUP, MARIADB_VERSION, MARIADB_DATABASE_PLURAL)
        self._hostname: str | None = None

    @property
    def hostname(self) -> str | None:
        return self._hostname

    def create_or_update(self) -> Result:
        instance_name = self.instance.spec.database_instance
        mariadb = read_object(self.mariadbs, instance_name, self.instance.namespace)
        if mariadb is None:
            logger.info(f"MariaDB {self.instance.namespace}/{instance_name} not found")
            return Result.after(self.requeue_seconds)

        hostname = (mariadb.get("status") or {}).get("dbHostname")
        if not hostname:
            logger.info(f"MariaDB {self.instance.namespace}/{instance_name} has no hostname yet")
            return Result.after(self.requeue_seconds)
        self._hostname = hostname

        apply_object(self.databases, create_mariadb_database(self.instance), finalizer=FINALIZER)
        return Result()

    def wait_until_ready(self) -> Result:
        database = read_object(self.databases, self.instance.name, self.instance.namespace)
        status: dict[str, Any] = (database or {}).get("status") or {}
        if not status.get("completed"):
            return Result.after(self.requeue_seconds)
        return Result()

    def release_finalizer(self) -> None:
        release_finalizer(self.databases, self.instance.name, self.instance.namespace, FINALIZER)
