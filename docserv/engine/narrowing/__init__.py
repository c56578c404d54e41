"""Narrowing engine for ambiguous manpage references.

This package picks one concrete manpage variant for a partially specified
request:
- Section search order (man(1) default)
- Four-stage narrowing: product, section, language, binary package

Usage:
    from docserv.engine.narrowing import narrow, DEFAULT_SECTION_ORDER
"""

from .constants import DEFAULT_SECTION_ORDER, MAN_SECTION_ORDER, NO_CHOICE_NAMES
from .narrow import narrow

__all__ = [
    # Constants
    "DEFAULT_SECTION_ORDER",
    "MAN_SECTION_ORDER",
    "NO_CHOICE_NAMES",
    # Narrowing
    "narrow",
]
