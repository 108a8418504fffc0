"""Storefront configuration, settings and navigation services."""

__version__ = "1.0.0"
