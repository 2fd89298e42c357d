"""Tenant-configurable password validation service."""

__version__ = "0.1.0"
