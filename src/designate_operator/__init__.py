"""Kubernetes operator for the OpenStack Designate API service."""

__version__ = "0.1.0"
