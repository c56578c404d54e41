"""Response models for the docserv HTTP endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from ..engine.core.entries import IndexEntry
from .enums import ServiceStatus

# ============ HEALTH MODELS ============


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: ServiceStatus = Field(..., description="Service status")
    version: str = Field(..., description="docserv version")
    timestamp: datetime = Field(..., description="Server time")


class ReadyResponse(BaseModel):
    """Readiness check response."""

    status: ServiceStatus = Field(..., description="ready or not_ready")
    version: str = Field(..., description="docserv version")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual check results")


# ============ INDEX MODELS ============


class IndexStatsResponse(BaseModel):
    """Size of the loaded index."""

    manpages: int = Field(..., ge=0, description="Distinct manpage names")
    entries: int = Field(..., ge=0, description="Manpage variants")
    products: list[str] = Field(default_factory=list, description="Known product names")
    languages: int = Field(..., ge=0, description="Distinct languages")
    sections: int = Field(..., ge=0, description="Distinct sections")


class ReloadResponse(BaseModel):
    """Result of an index reload."""

    success: bool = Field(..., description="Whether the new index is in use")
    stats: IndexStatsResponse | None = Field(default=None, description="Stats of the index in use")
    error: str | None = Field(default=None, description="Why the reload failed")


# ============ REDIRECT MODELS ============


class ManpageChoice(BaseModel):
    """One variant offered on a not-found page."""

    name: str = Field(..., description="Manpage name")
    product: str = Field(..., description="Product/suite")
    binarypkg: str = Field(..., description="Binary package")
    section: str = Field(..., description="Manual section")
    language: str = Field(..., description="Locale")
    url: str = Field(..., description="Serving path of the rendered page")

    @classmethod
    def from_entry(cls, entry: IndexEntry) -> "ManpageChoice":
        return cls(
            name=entry.name,
            product=entry.product,
            binarypkg=entry.binarypkg,
            section=entry.section,
            language=entry.language,
            url=entry.serving_path(".html"),
        )


class NotFoundResponse(BaseModel):
    """Body of a 404 answer for an unresolvable manpage reference."""

    success: bool = Field(default=False)
    error: str = Field(default="No such man page")
    manpage: str = Field(default="", description="Requested manpage name")
    choices: list[ManpageChoice] = Field(default_factory=list, description="Variants to pick from")
    products: list[str] = Field(default_factory=list, description="Known product names")
