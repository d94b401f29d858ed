"""Storefront client: event channel, persisted state, resilient API access and background sync."""

__version__ = "0.1.0"
