"""Engine core module.

This module contains core data structures and utilities for the redirect engine:
- Index entries, queries and the index itself
- Language tags and Accept-Language negotiation
- Precedence tables for sections and products
- Request path splitting
"""

from .entries import EntryQuery, Index, IndexEntry, contains_sorted
from .language import (
    DEFAULT_LANGUAGE,
    MAX_LANGUAGE_DISTANCE,
    best_language_match,
    from_locale,
    locale_tag,
    parse_accept_language,
)
from .ordering import PrecedenceOrder
from .paths import SplitPath, normalize_parens, split_path

__all__ = [
    # Index structures
    "IndexEntry",
    "EntryQuery",
    "Index",
    "contains_sorted",
    # Language utilities
    "from_locale",
    "locale_tag",
    "parse_accept_language",
    "best_language_match",
    "DEFAULT_LANGUAGE",
    "MAX_LANGUAGE_DISTANCE",
    # Ordering
    "PrecedenceOrder",
    # Paths
    "SplitPath",
    "split_path",
    "normalize_parens",
]
