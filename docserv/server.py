"""FastAPI server for the manpage mirror.

Serves rendered files from the serving directory and redirects manpage
references that do not name an existing file (``/i3(1)``, ``/jump?q=ls``)
to the best matching rendered page.
"""

import gzip
import logging
import mimetypes
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from . import __version__
from . import index_store
from .config import settings
from .engine.errors import IndexLoadError, IndexNotLoaded, ManpageNotFound, NotApplicable
from .engine.redirect import RedirectRequest, Redirector
from .middleware import PathGuardMiddleware
from .models import (
    HealthResponse,
    IndexStatsResponse,
    ManpageChoice,
    NotFoundResponse,
    ReadyResponse,
    ReloadResponse,
    ServiceStatus,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info(f"Starting docserv v{__version__}, serving {str(settings.serving_dir)!r}")

    # Refuse to start without a complete index
    await index_store.load_index()

    yield
    # Shutdown
    index_store.close_index()


app = FastAPI(
    title="docserv",
    description="Redirects manpage references to rendered manpages",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(PathGuardMiddleware)


# ============ EXCEPTION HANDLERS ============


@app.exception_handler(ManpageNotFound)
async def manpage_not_found_handler(request: Request, exc: ManpageNotFound):
    """Offer the other variants of the requested manpage."""
    body = NotFoundResponse(
        manpage=exc.manpage,
        choices=[ManpageChoice.from_entry(e) for e in exc.choices],
        products=exc.products,
    )
    return JSONResponse(status_code=404, content=body.model_dump(mode="json"))


@app.exception_handler(NotApplicable)
async def not_applicable_handler(request: Request, exc: NotApplicable):
    return JSONResponse(status_code=404, content={"success": False, "error": "File not found"})


@app.exception_handler(IndexNotLoaded)
async def index_not_loaded_handler(request: Request, exc: IndexNotLoaded):
    return JSONResponse(status_code=503, content={"success": False, "error": "Index not loaded"})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent response format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with sanitized error messages."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An internal server error occurred."},
    )


def _stats(redirector: Redirector) -> IndexStatsResponse:
    index = redirector.index
    return IndexStatsResponse(
        manpages=len(index.entries),
        entries=index.entry_count,
        products=index.product_names,
        languages=len(index.langs),
        sections=len(index.sections),
    )


# ============ HEALTH ENDPOINTS ============


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint (lightweight liveness check)."""
    return HealthResponse(
        status=ServiceStatus.HEALTHY,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """Readiness check - verifies an index is loaded and the serving directory exists."""
    checks = {
        "index": index_store.is_loaded(),
        "serving_dir": settings.serving_dir.is_dir(),
    }
    all_ok = all(checks.values())

    response = ReadyResponse(
        status=ServiceStatus.READY if all_ok else ServiceStatus.NOT_READY,
        version=__version__,
        checks=checks,
    )
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=200 if all_ok else 503,
    )


# ============ INDEX ENDPOINTS ============


@app.get("/-/stats", response_model=IndexStatsResponse, tags=["Index"])
async def index_stats() -> IndexStatsResponse:
    """Size of the loaded index."""
    return _stats(index_store.get_redirector())


@app.post("/-/reload", response_model=ReloadResponse, tags=["Index"])
async def reload_endpoint():
    """Atomically replace the index with a fresh load of the index files."""
    if not settings.allow_reload:
        raise HTTPException(status_code=404, detail="Not Found")

    try:
        redirector = await index_store.reload_index()
    except IndexLoadError as e:
        response = ReloadResponse(success=False, error=str(e))
        if index_store.is_loaded():
            response.stats = _stats(index_store.get_redirector())
        return JSONResponse(content=response.model_dump(mode="json"), status_code=500)

    return ReloadResponse(success=True, stats=_stats(redirector))


# ============ REDIRECT ENDPOINTS ============


def _redirect(path: str, request: Request, accept_language: str | None) -> RedirectResponse:
    params = request.query_params
    target = index_store.get_redirector().resolve(
        RedirectRequest(
            path=path,
            accept_language=accept_language or "",
            suite=params.get("suite", ""),
            binarypkg=params.get("binarypkg", ""),
            section=params.get("section", ""),
            language=params.get("language", ""),
        )
    )
    return RedirectResponse(url=target, status_code=302)


@app.get("/jump", tags=["Redirect"])
def jump(
    request: Request,
    q: Annotated[str, Query()] = "",
    accept_language: Annotated[str | None, Header()] = None,
):
    """Redirect a free-form manpage reference, e.g. ``?q=i3(1)``."""
    if not q.strip():
        raise HTTPException(status_code=400, detail="No q= query parameter specified")
    return _redirect("/" + q.strip().lstrip("/"), request, accept_language)


def _file_response(path: str) -> Response | None:
    """Serve a file below the serving directory, possibly from its .gz."""
    root = settings.serving_dir
    target = root / path.lstrip("/")
    if path.endswith("/") and target.is_dir():
        target = target / "index.html"

    if target.is_file():
        return FileResponse(target)

    compressed = Path(f"{target}.gz")
    if not compressed.is_file():
        return None

    media_type, _ = mimetypes.guess_type(target.name)
    with gzip.open(compressed, "rb") as f:
        content = f.read()
    return Response(content=content, media_type=media_type or "text/html")


@app.api_route("/{path:path}", methods=["GET", "HEAD"], tags=["Redirect"])
def serve(
    request: Request,
    path: str,
    accept_language: Annotated[str | None, Header()] = None,
):
    """
    Serve a rendered file, or redirect a manpage reference.

    Existing files (or their gzip-compressed variant) are returned as-is.
    Anything else is resolved against the index: a match redirects to the
    rendered page, a miss answers 404 with the available choices.
    """
    url_path = request.scope["path"]
    response = _file_response(url_path)
    if response is not None:
        return response
    return _redirect(url_path, request, accept_language)
