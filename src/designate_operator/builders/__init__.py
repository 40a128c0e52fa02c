"""Builders for Kubernetes manifests."""
