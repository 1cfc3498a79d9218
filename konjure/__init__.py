"""Filters, readers and writers for pipelines of Kubernetes resource documents."""

__version__ = "0.1.0"