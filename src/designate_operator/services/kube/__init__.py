"""Kubernetes-backed resource drivers."""

from .factory import KubeDriverFactory
from .instances import KubeInstanceStore

__all__ = ["KubeDriverFactory", "KubeInstanceStore"]
