"""Enumeration types for the docserv server."""

from enum import StrEnum


class ServingSuffix(StrEnum):
    """File suffix of a redirect target."""

    HTML = ".html"
    RAW = ".gz"  # gzip-compressed roff source


class ServiceStatus(StrEnum):
    """Health and readiness states."""

    HEALTHY = "healthy"
    READY = "ready"
    NOT_READY = "not_ready"
