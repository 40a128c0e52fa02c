"""Database schema sync job."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client

from ...builders.workload import create_db_sync_job, db_sync_job_name
from ...constants import ANNOTATION_SPEC_HASH
from ...models import DesignateAPI, Result
from ...utils.errors import CollaboratorError
from ...utils.hashing import object_hash
from .objects import api_call, delete_object, job_client, read_object

logger = logging.getLogger(__name__)


def _job_condition(job: dict[str, Any], condition_type: str) -> bool:
    for cond in (job.get("status") or {}).get("conditions") or []:
        if cond.get("type") == condition_type and cond.get("status") == "True":
            return True
    return False


class KubeDbSyncJob:
    """Runs ``designate-manage database sync`` at most once per job hash.

    The job hash covers the whole job spec, which embeds the input hash,
    so a new job runs whenever the inputs change. Nothing happens while
    the hash matches the db-sync hash recorded in the instance status.
    """

    def __init__(
        self,
        api: client.BatchV1Api,
        instance: DesignateAPI,
        input_hash: str,
        default_image: str,
        requeue_seconds: float,
    ) -> None:
        self.instance = instance
        self.requeue_seconds = requeue_seconds
        self.jobs = job_client(api)
        self.manifest = create_db_sync_job(instance, input_hash, default_image)
        self.name = db_sync_job_name(instance)
        self._hash = object_hash(self.manifest["spec"])
        self._changed = False

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def changed(self) -> bool:
        return self._changed

    def run(self) -> Result:
        if self.instance.db_sync_hash == self._hash:
            return Result()

        namespace = self.instance.namespace
        job = read_object(self.jobs, self.name, namespace)
        if job is not None:
            job_hash = ((job.get("metadata") or {}).get("annotations") or {}).get(ANNOTATION_SPEC_HASH)
            if job_hash != self._hash:
                logger.info(f"Deleting stale job {namespace}/{self.name}")
                delete_object(self.jobs, self.name, namespace)
                return Result.after(self.requeue_seconds)

        if job is None:
            body = dict(self.manifest)
            body["metadata"] = {
                **self.manifest["metadata"],
                "annotations": {ANNOTATION_SPEC_HASH: self._hash},
            }
            with api_call(self.jobs.resource, "create"):
                self.jobs.create(namespace, body)
            logger.info(f"Created job {namespace}/{self.name} for hash {self._hash}")
            return Result.after(self.requeue_seconds)

        if _job_condition(job, "Failed"):
            raise CollaboratorError(f"job {self.name} failed")

        if not _job_condition(job, "Complete") and not (job.get("status") or {}).get("succeeded"):
            return Result.after(self.requeue_seconds)

        logger.info(f"Job {namespace}/{self.name} completed")
        self._changed = True
        if not self.instance.spec.preserve_jobs:
            delete_object(self.jobs, self.name, namespace)
        return Result()
