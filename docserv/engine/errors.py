"""Exception types raised by the redirect engine.

Only I/O and parsing can fail: narrowing and path splitting are pure and
represent "nothing matched" as an empty result. The redirect orchestrator
turns an empty result into ``ManpageNotFound`` so callers can render a
disambiguation page from the attached choices.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core.entries import IndexEntry

__all__ = [
    "DocservError",
    "InvalidLocale",
    "NotApplicable",
    "ManpageNotFound",
    "IndexLoadError",
    "IndexNotLoaded",
]


class DocservError(RuntimeError):
    """Base exception for index and redirect failures."""


class InvalidLocale(DocservError, ValueError):
    """Raised when a locale string cannot be converted to a language tag."""

    def __init__(self, locale: str, reason: str = "") -> None:
        message = f"Cannot get language tag from locale {locale!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.locale = locale


class NotApplicable(DocservError):
    """Raised for paths that are not single-manpage requests.

    Directory listings, index pages and contents pages fall through to
    ordinary file serving.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a manpage request: {path!r}")
        self.path = path


class ManpageNotFound(DocservError):
    """Raised when no candidate survives narrowing or the name is unknown.

    Attributes:
        manpage: The requested manpage name
        choices: Alternative entries the client may pick from
        products: All known product names, for building a choice page
    """

    def __init__(
        self,
        manpage: str,
        choices: Sequence["IndexEntry"] = (),
        products: Sequence[str] = (),
    ) -> None:
        super().__init__("No such man page")
        self.manpage = manpage
        self.choices = list(choices)
        self.products = list(products)


class IndexLoadError(DocservError):
    """Raised when an index file cannot be read or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not load index {path!r}: {reason}")
        self.path = path


class IndexNotLoaded(DocservError):
    """Raised when the index store is queried before an index was loaded."""
