"""Models for DesignateAPI reconciliation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    API_GROUP_VERSION,
    DESIGNATE_API_PORT,
    ENDPOINT_ADMIN,
    ENDPOINT_INTERNAL,
    ENDPOINT_PUBLIC,
    HASH_DB_SYNC,
    HASH_INPUT,
    KIND_DESIGNATE_API,
)
from .utils.conditions import ConditionLedger


@dataclass(frozen=True)
class Result:
    """Outcome of a reconcile step.

    The zero value means "done". ``requeue`` without ``requeue_after`` asks
    for another pass as soon as possible; with ``requeue_after`` it asks for
    one after that many seconds. Neither is an error.
    """

    requeue: bool = False
    requeue_after: float | None = None

    @classmethod
    def after(cls, seconds: float) -> Result:
        return cls(requeue=True, requeue_after=seconds)

    @classmethod
    def immediately(cls) -> Result:
        return cls(requeue=True)

    @property
    def is_done(self) -> bool:
        return not self.requeue


@dataclass
class PasswordSelectors:
    """Keys of the input secret holding the service passwords."""

    database: str = "DesignateDatabasePassword"
    service: str = "DesignatePassword"


@dataclass
class DesignateAPISpec:
    """Desired state of a DesignateAPI resource, with defaults applied."""

    database_instance: str
    secret: str
    database_user: str = "designate"
    service_user: str = "designate"
    password_selectors: PasswordSelectors = field(default_factory=PasswordSelectors)
    ports: dict[str, int] = field(
        default_factory=lambda: {
            ENDPOINT_ADMIN: DESIGNATE_API_PORT,
            ENDPOINT_INTERNAL: DESIGNATE_API_PORT,
            ENDPOINT_PUBLIC: DESIGNATE_API_PORT,
        }
    )
    custom_service_config: str = ""
    default_config_overwrite: dict[str, str] = field(default_factory=dict)
    preserve_jobs: bool = False
    container_image: str | None = None
    replicas: int = 1
    node_selector: dict[str, str] = field(default_factory=dict)


class DesignateAPI:
    """A DesignateAPI resource as loaded for one reconcile pass.

    Holds a private copy of the body; the status and finalizer list are
    mutated during the pass and written back by the instance store.
    """

    def __init__(self, body: dict[str, Any]):
        self.body = copy.deepcopy(body)
        self.body.setdefault("apiVersion", API_GROUP_VERSION)
        self.body.setdefault("kind", KIND_DESIGNATE_API)
        metadata = self.body.setdefault("metadata", {})
        if metadata.get("finalizers") is None:
            metadata["finalizers"] = []
        if self.body.get("status") is None:
            self.body["status"] = {}
        self._loaded_finalizers = list(metadata["finalizers"])
        self._spec: DesignateAPISpec | None = None

    @property
    def metadata(self) -> dict[str, Any]:
        return self.body["metadata"]

    @property
    def name(self) -> str:
        return self.metadata["name"]

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace", "default")

    @property
    def uid(self) -> str:
        return self.metadata.get("uid", "")

    @property
    def generation(self) -> int:
        return self.metadata.get("generation", 0)

    @property
    def observed_generation(self) -> int | None:
        return self.status.get("observedGeneration")

    @property
    def has_new_generation(self) -> bool:
        """True when a generation was rolled out before and the spec changed since."""
        observed = self.observed_generation
        return observed is not None and observed != self.generation

    @property
    def resource_version(self) -> str | None:
        return self.metadata.get("resourceVersion")

    @property
    def is_deleting(self) -> bool:
        return bool(self.metadata.get("deletionTimestamp"))

    @property
    def raw_spec(self) -> dict[str, Any]:
        return self.body.get("spec") or {}

    @property
    def spec(self) -> DesignateAPISpec:
        """Parsed spec; raises ValueError when it is invalid."""
        if self._spec is None:
            from .builders.designateapi import create_spec_from_dict

            self._spec = create_spec_from_dict(self.raw_spec)
        return self._spec

    @property
    def status(self) -> dict[str, Any]:
        return self.body["status"]

    # Finalizers

    @property
    def finalizers(self) -> list[str]:
        return self.metadata["finalizers"]

    def add_finalizer(self, finalizer: str) -> bool:
        if finalizer in self.finalizers:
            return False
        self.finalizers.append(finalizer)
        return True

    def remove_finalizer(self, finalizer: str) -> bool:
        if finalizer not in self.finalizers:
            return False
        self.finalizers.remove(finalizer)
        return True

    @property
    def finalizers_changed(self) -> bool:
        return self.finalizers != self._loaded_finalizers

    # Status views

    @property
    def conditions_initialized(self) -> bool:
        return bool(self.status.get("conditions"))

    @property
    def conditions(self) -> ConditionLedger:
        if self.status.get("conditions") is None:
            self.status["conditions"] = []
        return ConditionLedger(self.status["conditions"])

    @property
    def hashes(self) -> dict[str, str]:
        if self.status.get("hash") is None:
            self.status["hash"] = {}
        return self.status["hash"]

    @property
    def input_hash(self) -> str | None:
        return self.hashes.get(HASH_INPUT)

    @property
    def db_sync_hash(self) -> str | None:
        return self.hashes.get(HASH_DB_SYNC)

    @property
    def api_endpoints(self) -> dict[str, str]:
        if self.status.get("apiEndpoints") is None:
            self.status["apiEndpoints"] = {}
        return self.status["apiEndpoints"]

    def owner_reference(self) -> dict[str, Any]:
        """Controller owner reference so owned objects are garbage collected."""
        return {
            "apiVersion": self.body["apiVersion"],
            "kind": self.body["kind"],
            "name": self.name,
            "uid": self.uid,
            "controller": True,
            "blockOwnerDeletion": True,
        }
