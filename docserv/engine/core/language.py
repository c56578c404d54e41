"""Language tags for manpage locales and Accept-Language negotiation.

Manpage directories use glibc locale names (``pt_BR``, ``de.UTF-8``,
``sr@latin``); browsers send BCP 47 tags in ``Accept-Language``. Both are
converted to ``langcodes.Language`` so they can be compared with
langcodes' language distance.
"""

import logging
import re
from collections.abc import Sequence
from functools import lru_cache
from typing import TYPE_CHECKING

import langcodes

from ..errors import InvalidLocale

if TYPE_CHECKING:
    from .entries import IndexEntry

logger = logging.getLogger(__name__)

# Preferred language when the client sent no usable Accept-Language header
DEFAULT_LANGUAGE = "en"

# Largest distance still accepted as a partial match. Same threshold as
# langcodes.closest_match; anything above means "different language".
MAX_LANGUAGE_DISTANCE = 25

# glibc locale modifiers with a BCP 47 script equivalent
LOCALE_MODIFIER_SCRIPTS = {
    "latin": "Latn",
    "cyrillic": "Cyrl",
    "devanagari": "Deva",
    "arabic": "Arab",
}

_LOCALE_RE = re.compile(r"^[A-Za-z]{2,8}(?:-[A-Za-z0-9]{1,8})*$")
_QUALITY_RE = re.compile(r"^q\s*=\s*([0-9](?:\.[0-9]{0,3})?)$", re.IGNORECASE)
# BCP 47 variant subtag, e.g. "valencia" or "1901"
_VARIANT_RE = re.compile(r"^(?:[A-Za-z0-9]{5,8}|[0-9][A-Za-z0-9]{3})$")


@lru_cache(maxsize=1024)
def from_locale(locale: str) -> langcodes.Language:
    """Convert a locale string into a language tag.

    Args:
        locale: Locale such as "de", "pt_BR", "de.UTF-8" or "sr@latin"

    Returns:
        The parsed langcodes.Language

    Raises:
        InvalidLocale: If the locale is empty or not a valid language tag
    """
    tag = locale.strip()
    modifier = ""
    if "@" in tag:
        tag, modifier = tag.split("@", 1)
    # Drop the encoding ("de_DE.UTF-8")
    tag = tag.split(".", 1)[0].replace("_", "-")

    if modifier:
        script = LOCALE_MODIFIER_SCRIPTS.get(modifier.lower())
        if script:
            language, _, region = tag.partition("-")
            tag = f"{language}-{script}-{region}" if region else f"{language}-{script}"
        elif _VARIANT_RE.match(modifier):
            tag = f"{tag}-{modifier.lower()}"
        # Other modifiers ("@euro") do not change the language

    if not _LOCALE_RE.match(tag):
        raise InvalidLocale(locale, "not a language tag")
    try:
        return langcodes.Language.get(tag)
    except ValueError as e:
        raise InvalidLocale(locale, str(e)) from e


@lru_cache(maxsize=1024)
def locale_tag(locale: str) -> langcodes.Language | None:
    """Like from_locale, but logs and returns None for invalid locales."""
    try:
        return from_locale(locale)
    except InvalidLocale as e:
        logger.warning(f"{e}; falling back to exact matching")
        return None


def parse_accept_language(header: str | None) -> list[langcodes.Language]:
    """Parse an Accept-Language header into tags ordered by preference.

    Wildcards, items with q=0 and unparseable items are dropped. Items with
    equal weight keep their header order.

    Args:
        header: Raw header value, e.g. "de-CH, de;q=0.9, en;q=0.5"

    Returns:
        Language tags, most preferred first (empty if nothing usable)
    """
    if not header:
        return []

    weighted: list[tuple[float, int, langcodes.Language]] = []
    for position, item in enumerate(header.split(",")):
        tag, *params = [part.strip() for part in item.split(";")]
        if not tag or tag == "*":
            continue

        quality = 1.0
        valid = True
        for param in params:
            match = _QUALITY_RE.match(param)
            if match is None:
                valid = False
                break
            quality = float(match.group(1))
        if not valid or quality <= 0 or quality > 1:
            continue

        try:
            language = from_locale(tag)
        except InvalidLocale:
            logger.debug(f"Ignoring Accept-Language item {item.strip()!r}")
            continue
        weighted.append((-quality, position, language))

    weighted.sort(key=lambda w: (w[0], w[1]))
    return [language for _, _, language in weighted]


def _distance(wanted: langcodes.Language, option: "IndexEntry") -> int:
    tag = locale_tag(option.language)
    if tag is None:
        # Without a tag only an exact string match counts
        normalized = option.language.replace("_", "-").lower()
        return 0 if normalized == wanted.to_tag().lower() else MAX_LANGUAGE_DISTANCE + 1
    return langcodes.tag_distance(wanted.to_tag(), tag.to_tag())


def best_language_match(
    preferred: Sequence[langcodes.Language],
    options: Sequence["IndexEntry"],
) -> "IndexEntry":
    """Pick the entry whose language best fits the client's preferences.

    Preferences are tried in order. For each one the exact match wins,
    else the closest option within MAX_LANGUAGE_DISTANCE (first option on
    ties). If no preference comes close enough, the first option is used.

    Args:
        preferred: Client languages, most preferred first (empty = English)
        options: Candidate entries; must not be empty

    Returns:
        The chosen entry
    """
    if not preferred:
        preferred = [from_locale(DEFAULT_LANGUAGE)]

    for wanted in preferred:
        best: "IndexEntry | None" = None
        best_distance = MAX_LANGUAGE_DISTANCE + 1
        for option in options:
            distance = _distance(wanted, option)
            if distance == 0:
                return option
            if distance < best_distance:
                best, best_distance = option, distance
        if best is not None:
            return best

    return options[0]
