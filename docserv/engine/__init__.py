"""Redirect engine for the manpage mirror.

- core: index structures, language tags, path splitting
- index: building, (de)serializing and merging index files
- narrowing: picking one variant of an ambiguous manpage reference
- redirect: request path to serving path
"""

from .errors import (
    DocservError,
    IndexLoadError,
    IndexNotLoaded,
    InvalidLocale,
    ManpageNotFound,
    NotApplicable,
)
from .redirect import Redirector, RedirectRequest

__all__ = [
    "Redirector",
    "RedirectRequest",
    "DocservError",
    "InvalidLocale",
    "NotApplicable",
    "ManpageNotFound",
    "IndexLoadError",
    "IndexNotLoaded",
]
