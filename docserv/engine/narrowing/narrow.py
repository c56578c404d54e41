"""Narrowing of ambiguous manpage references to a single variant.

Given every variant sharing a manpage name, a (partial) query and hints
from the referring page and the client's Accept-Language header, the
candidates are filtered in four stages: product, section, language and
binary package. Each stage applies the query's constraint, or picks a
preferred value when the query leaves it open, and filters by it.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace

from ..core.entries import EntryQuery, IndexEntry
from ..core.language import best_language_match, parse_accept_language
from ..core.ordering import PrecedenceOrder
from .constants import DEFAULT_SECTION_ORDER

logger = logging.getLogger(__name__)


def _same_main_section(section: str, wanted: str) -> bool:
    # "1" matches "1x", "1ssl", ...
    return section[:1] == wanted[:1]


def _keep(entries: list[IndexEntry], keep: Callable[[IndexEntry], bool]) -> list[IndexEntry]:
    return [e for e in entries if keep(e)]


def _fully_qualified(query: EntryQuery, candidates: Sequence[IndexEntry]) -> bool:
    """True if every field is set and names one of the given candidates."""
    if not query.fully_specified:
        return False
    return any(e.matches(query) for e in candidates)


def narrow(
    accept_language: str | None,
    query: EntryQuery,
    referrer: EntryQuery,
    candidates: Sequence[IndexEntry],
    section_order: PrecedenceOrder = DEFAULT_SECTION_ORDER,
) -> list[IndexEntry]:
    """Narrow candidates down to the variant the client most likely wants.

    Args:
        accept_language: Raw Accept-Language header (may be empty)
        query: Constraints parsed from the request path
        referrer: Fields of the page the client came from
        candidates: All variants sharing the requested name
        section_order: Precedence table used to pick a section

    Returns:
        The surviving entries, best first. Empty if a constraint excluded
        every candidate; callers treat that as not found.
    """
    q = query

    # Narrow down as much as possible upfront
    filtered = _keep(
        list(candidates),
        lambda e: (not q.product or e.product == q.product)
        and (not q.section or _same_main_section(e.section, q.section))
        and (not q.language or e.language == q.language)
        and (not q.binarypkg or e.binarypkg == q.binarypkg),
    )
    if not filtered:
        return []

    # ============ PRODUCT ============

    if not q.product and referrer.product:
        # Prefer staying in the product the client came from
        if any(e.product == referrer.product for e in filtered):
            q = replace(q, product=referrer.product)

    filtered = _keep(filtered, lambda e: not q.product or e.product == q.product)
    if not filtered:
        return []
    if _fully_qualified(q, candidates):
        return filtered

    # ============ SECTION ============

    filtered = section_order.sorted(filtered, key=lambda e: e.section)

    if not q.section:
        if referrer.section and any(e.section == referrer.section for e in filtered):
            q = replace(q, section=referrer.section)
        else:
            q = replace(q, section=filtered[0].section)

    filtered = _keep(filtered, lambda e: not q.section or _same_main_section(e.section, q.section))
    if not filtered:
        return []
    if _fully_qualified(q, candidates):
        return filtered

    # ============ LANGUAGE ============

    if not q.language:
        preferred = parse_accept_language(accept_language)
        q = replace(q, language=best_language_match(preferred, filtered).language)

    filtered = _keep(filtered, lambda e: not q.language or e.language == q.language)
    if not filtered:
        return []
    if _fully_qualified(q, candidates):
        return filtered

    # ============ BINARY PACKAGE ============

    if not q.binarypkg:
        q = replace(q, binarypkg=filtered[0].binarypkg)

    filtered = _keep(filtered, lambda e: not q.binarypkg or e.binarypkg == q.binarypkg)
    logger.debug(f"Narrowed {len(candidates)} candidates to {len(filtered)} for {q}")
    return filtered
