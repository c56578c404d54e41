"""Pydantic models for docserv response schemas.

This module re-exports all models. Import from submodules directly for
cleaner imports:

    from docserv.models.enums import ServingSuffix
    from docserv.models.responses import NotFoundResponse
"""

# ============ ENUMS ============
from .enums import ServiceStatus, ServingSuffix

# ============ RESPONSE MODELS ============
from .responses import (
    HealthResponse,
    IndexStatsResponse,
    ManpageChoice,
    NotFoundResponse,
    ReadyResponse,
    ReloadResponse,
)

__all__ = [
    # Enums
    "ServiceStatus",
    "ServingSuffix",
    # Responses
    "HealthResponse",
    "ReadyResponse",
    "IndexStatsResponse",
    "ReloadResponse",
    "ManpageChoice",
    "NotFoundResponse",
]
