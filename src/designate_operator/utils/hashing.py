"""Content hashing and drift detection for reconcile inputs."""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)


def object_hash(data: Any) -> str:
    """Compute a stable SHA-256 checksum of JSON-serialisable data.

    Keys are sorted when dumping so dict ordering never changes the result.
    """
    if not isinstance(data, str):
        data = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def set_hash(hashes: dict[str, str], key: str, value: str) -> bool:
    """Store ``value`` under ``key`` if it differs from the recorded one.

    Returns:
        True if the recorded value changed
    """
    if hashes.get(key) == value:
        return False
    hashes[key] = value
    return True


class InputHashTracker:
    """Fingerprints environment-affecting inputs against ``status.hash``.

    The wrapped mapping is updated in place, so a change is visible in the
    owning status as soon as it is recorded.
    """

    def __init__(self, hashes: dict[str, str]):
        self.hashes = hashes

    def compute(self, inputs: Mapping[str, str]) -> str:
        """Hash a set of name/value pairs; ordering of the pairs is irrelevant."""
        return object_hash(sorted(inputs.items()))

    def compute_and_record(self, key: str, inputs: Mapping[str, str]) -> tuple[str, bool]:
        """Hash ``inputs`` and record the result under ``key``.

        Args:
            key: Hash key in ``status.hash`` (e.g. "input")
            inputs: Mapping of input name to content hash

        Returns:
            The hash and whether it differs from the previously recorded one
        """
        value = self.compute(inputs)
        changed = set_hash(self.hashes, key, value)
        if changed:
            logger.info("Input hash %s changed to %s", key, value)
        return value, changed

    def record(self, key: str, value: str) -> bool:
        """Record a precomputed hash, returning whether it changed."""
        return set_hash(self.hashes, key, value)

    def get(self, key: str) -> str | None:
        return self.hashes.get(key)
