"""Process-wide index holder with atomic reload."""

import asyncio
import logging
import os
from collections.abc import Sequence

from .config import settings
from .engine.core.ordering import PrecedenceOrder
from .engine.errors import IndexLoadError, IndexNotLoaded
from .engine.index.codec import load_index_files
from .engine.redirect import Redirector

logger = logging.getLogger(__name__)

# Global redirector; replaced as a whole, never mutated
_redirector: Redirector | None = None
_lock = asyncio.Lock()


async def _load(
    paths: Sequence[str | os.PathLike],
    section_order: PrecedenceOrder,
    timeout: float,
) -> Redirector:
    """Read and decode index files off the event loop."""
    try:
        index = await asyncio.wait_for(asyncio.to_thread(load_index_files, paths), timeout=timeout)
    except TimeoutError as e:
        raise IndexLoadError("#".join(str(p) for p in paths), f"timed out after {timeout}s") from e
    return Redirector(index, section_order=section_order)


async def load_index(
    paths: Sequence[str | os.PathLike] | None = None,
    section_order: PrecedenceOrder | None = None,
    timeout: float | None = None,
) -> Redirector:
    """
    Load index files and make them the current index.

    The current index is only replaced once the new one loaded completely;
    on failure the previous index stays in force and the error propagates.

    Args:
        paths: Index files to merge (default: settings.index_path_list)
        section_order: Section precedence (default: from settings)
        timeout: Seconds to wait for the load (default: from settings)

    Returns:
        The new redirector

    Raises:
        IndexLoadError: If a file cannot be read, decoded or in time
    """
    global _redirector

    paths = list(paths) if paths is not None else settings.index_path_list
    section_order = section_order or settings.section_precedence
    timeout = timeout if timeout is not None else settings.index_load_timeout

    async with _lock:
        redirector = await _load(paths, section_order, timeout)
        _redirector = redirector
        return redirector


async def reload_index() -> Redirector:
    """Reload the configured index files, keeping the old index on failure."""
    try:
        return await load_index()
    except IndexLoadError as e:
        logger.error(f"Index reload failed, keeping previous index: {e}")
        raise


def get_redirector() -> Redirector:
    """Return the current redirector.

    Raises:
        IndexNotLoaded: If no index was loaded yet
    """
    if _redirector is None:
        raise IndexNotLoaded("No index loaded")
    return _redirector


def is_loaded() -> bool:
    return _redirector is not None


def close_index() -> None:
    """Drop the current index."""
    global _redirector
    if _redirector is not None:
        logger.info("Index released")
    _redirector = None
