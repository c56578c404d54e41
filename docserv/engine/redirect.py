"""Redirect decisions for manpage references.

Resolves request paths such as ``/i3(1)``, ``/Tumbleweed/i3.1.de.html`` or
``/systemd.service.5.gz`` to the serving path of one rendered manpage.
"""

import logging
from dataclasses import dataclass

from ..models.enums import ServingSuffix
from .core.entries import EntryQuery, Index, IndexEntry
from .core.ordering import PrecedenceOrder
from .core.paths import normalize_parens, split_path
from .errors import ManpageNotFound, NotApplicable
from .narrowing import DEFAULT_SECTION_ORDER, NO_CHOICE_NAMES, narrow

logger = logging.getLogger(__name__)

# Generated listing pages that are never manpages
CONTENTS_PREFIX = "/contents-"


@dataclass(frozen=True)
class RedirectRequest:
    """One incoming redirect request.

    Attributes:
        path: Request path, e.g. "/i3(1)"
        accept_language: Accept-Language header value
        suite, binarypkg, section, language: Fields of the referring page
    """

    path: str
    accept_language: str = ""
    suite: str = ""
    binarypkg: str = ""
    section: str = ""
    language: str = ""

    @property
    def referrer(self) -> EntryQuery:
        return EntryQuery(
            product=self.suite,
            binarypkg=self.binarypkg,
            section=self.section,
            language=self.language,
        )


def serving_suffix(path: str) -> ServingSuffix:
    """Raw manpage requests redirect to the raw manpage, all others to HTML."""
    if path.endswith(".gz") and not path.endswith(".html.gz"):
        return ServingSuffix.RAW
    return ServingSuffix.HTML


def strip_suffixes(path: str) -> str:
    while path.endswith((".html", ".gz")):
        path = path.removesuffix(".gz").removesuffix(".html")
    return path


class Redirector:
    """Resolves request paths against an immutable index.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(self, index: Index, section_order: PrecedenceOrder = DEFAULT_SECTION_ORDER) -> None:
        self.index = index
        self.section_order = section_order

    def lookup(self, name: str) -> list[IndexEntry] | None:
        """Find all variants of a name.

        Falls back to joining words that were whitespace-separated in the
        request with dashes, then underscores, like man(1) does.
        """
        for key in (name, name.replace(".", "-"), name.replace(".", "_")):
            entries = self.index.lookup(key)
            if entries:
                return entries
        return None

    def resolve(self, request: RedirectRequest) -> str:
        """Resolve a request to the serving path of one manpage.

        Args:
            request: The incoming request

        Returns:
            Serving path including the .html or .gz suffix

        Raises:
            NotApplicable: The path is a directory, index or contents page
            ManpageNotFound: The name is unknown or no variant fits
        """
        path = request.path
        if path.endswith(("/", "/index.html")) or path.startswith(CONTENTS_PREFIX):
            raise NotApplicable(path)

        suffix = serving_suffix(path)
        path = normalize_parens(strip_suffixes(path))

        product, binarypkg, name, section, lang = split_path(path, self.index)
        product = self.index.canonical_product(product)

        entries = self.lookup(name)
        if entries is None:
            logger.info(f"Not found: Url {request.path!r}, path {path!r}")
            raise ManpageNotFound(manpage=name)

        logger.info(
            f"Query {request.path!r}, path {path!r} -> suite = {product!r}, "
            f"binarypkg = {binarypkg!r}, name = {name!r}, section = {section!r}, lang = {lang!r}"
        )

        query = EntryQuery(product=product, binarypkg=binarypkg, section=section, language=lang)
        filtered = narrow(
            request.accept_language,
            query,
            request.referrer,
            entries,
            section_order=self.section_order,
        )

        if not filtered:
            # Present the user with the other variants of this manpage
            choices = [] if name in NO_CHOICE_NAMES else list(entries)
            logger.info(f"Not found: Url {request.path!r}, suggesting {len(choices)} choices")
            raise ManpageNotFound(manpage=name, choices=choices, products=self.index.product_names)

        target = filtered[0].serving_path(suffix)
        logger.info(f"Found: Query {request.path!r} -> Url {target!r}")
        return target
