"""Shared helpers for the kubeview CLI."""
