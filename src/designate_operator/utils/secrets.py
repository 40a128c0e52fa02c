"""Utilities for reading the input Kubernetes secret."""

from __future__ import annotations

from typing import Iterable

from kubernetes import client

from .hashing import object_hash


def get_secret_with_hash(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
) -> tuple[client.V1Secret, str]:
    """Read a secret and hash its data.

    The hash is taken over the encoded data as stored, so any change to a
    key or value changes it.

    Args:
        api: Kubernetes API client
        namespace: Namespace of the secret
        secret_name: Name of the secret

    Returns:
        The secret and a hash of its data

    Raises:
        client.exceptions.ApiException: If the secret cannot be read (404 when absent)
    """
    secret = api.read_namespaced_secret(name=secret_name, namespace=namespace)
    return secret, object_hash(secret.data or {})


def missing_secret_keys(secret: client.V1Secret, keys: Iterable[str]) -> list[str]:
    """Return the keys not present in the secret's data."""
    data = secret.data or {}
    return [key for key in keys if key not in data]
