"""Request path parsing for manpage redirects.

Turns a normalized request path such as ``/Tumbleweed/i3wm/i3.1.de`` into
its product, binary package, name, section and language components, using
the index's known languages, sections and products to decide what each
path segment means.
"""

import posixpath
import re
from typing import NamedTuple

from .entries import Index

_DOT_RUN_RE = re.compile(r"\.{2,}")


class SplitPath(NamedTuple):
    """Components of a request path; empty strings mean "not given"."""

    product: str
    binarypkg: str
    name: str
    section: str
    lang: str


def normalize_parens(path: str) -> str:
    """Turn parenthesized section notation into dots.

    "i3(1)" becomes "i3.1": parens are converted to dots, runs of dots
    collapse to one and a trailing dot is dropped.
    """
    path = path.replace("(", ".").replace(")", ".")
    path = _DOT_RUN_RE.sub(".", path)
    return path.removesuffix(".")


def split_path(path: str, index: Index) -> SplitPath:
    """Split a request path into its manpage components.

    Directory segments:
        - one segment: a known product, else (when the base name is a known
          section, as in man.freebsd.org style ``/i3/1``) the manpage name,
          else a binary package
        - two segments: product and binary package

    The base name is split from the right: its last dot-separated part is
    a language if known, else a section if known; after a language, the
    part before it may still be a section. Languages are checked first, so
    a page literally named ``foo.fr`` reads as the French ``foo``.

    Args:
        path: Request path with suffixes stripped and parens normalized
        index: Index providing the known languages, sections and products

    Returns:
        SplitPath with empty strings for components not present
    """
    product = binarypkg = section = lang = ""

    directory = posixpath.dirname(path)
    # "/Tumbleweed//i3wm/i3.1" names the same directory as "/Tumbleweed/i3wm/i3.1"
    directory = posixpath.normpath(directory).lstrip("/") if directory else ""
    base = posixpath.basename(path).strip().replace(" ", ".")

    segments = directory.split("/")
    if len(segments) == 1:
        if index.has_product(segments[0]):
            product = segments[0]
        elif index.has_section(base):
            section = base
            base = segments[0]
        else:
            binarypkg = segments[0]
    elif len(segments) == 2:
        product, binarypkg = segments

    # The name itself may contain dots
    parts = base.split(".")
    if len(parts) == 1:
        return SplitPath(product, binarypkg, base, section, lang)

    consumed = 0
    last = parts[-1]
    if index.has_lang(last):
        lang = last
        consumed += 1
    elif index.has_section(last):
        section = last
        consumed += 1

    if len(parts) > 1 + consumed:
        candidate = parts[-1 - consumed]
        if index.has_section(candidate):
            section = candidate
            consumed += 1

    name = ".".join(parts[: len(parts) - consumed])
    return SplitPath(product, binarypkg, name, section, lang)
