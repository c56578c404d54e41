"""Index construction from package manpage listings.

Reading package caches and file lists happens elsewhere (it shells out to
rpm); this module turns the resulting listings into an Index, keeping only
the newest version of every package and collapsing encoding duplicates.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import cmp_to_key

from ..core.entries import Index, IndexEntry
from ..core.language import locale_tag
from ..core.ordering import PrecedenceOrder
from .manpath import from_man_path, split_rpm_name
from .versions import compare_evr

logger = logging.getLogger(__name__)


@dataclass
class Product:
    """A distribution product and the codenames that refer to it."""

    name: str
    aliases: list[str] = field(default_factory=list)


@dataclass
class PackageManpages:
    """Manpage file list of one binary package build.

    Attributes:
        product: Product the package was taken from
        binarypkg: Binary package name
        version: "[epoch:]version-release" of the build
        manpages: Manpage paths shipped by the package
    """

    product: str
    binarypkg: str
    version: str
    manpages: list[str] = field(default_factory=list)

    @classmethod
    def from_rpm_filename(
        cls, product: str, filename: str, manpages: Iterable[str] = ()
    ) -> "PackageManpages":
        rpm = split_rpm_name(filename)
        return cls(
            product=product,
            binarypkg=rpm.name,
            version=f"{rpm.version}-{rpm.release}",
            manpages=list(manpages),
        )

    @property
    def key(self) -> str:
        return f"{self.product}/{self.binarypkg}"


def _sort_packages(
    packages: Iterable[PackageManpages], product_order: PrecedenceOrder
) -> list[PackageManpages]:
    """Order by product precedence, then package name, newest version first."""

    def compare(a: PackageManpages, b: PackageManpages) -> int:
        if a.product != b.product:
            return -1 if product_order.key(a.product) < product_order.key(b.product) else 1
        if a.binarypkg != b.binarypkg:
            return -1 if a.binarypkg < b.binarypkg else 1
        return compare_evr(b.version, a.version)

    return sorted(packages, key=cmp_to_key(compare))


def build_index(
    products: Sequence[Product],
    packages: Iterable[PackageManpages],
    product_order: PrecedenceOrder | None = None,
) -> Index:
    """Build the cross-reference index.

    Args:
        products: Known products with their aliases
        packages: Manpage listings of all package builds found
        product_order: Product precedence; defaults to the order of products

    Returns:
        The new Index
    """
    if product_order is None:
        product_order = PrecedenceOrder(p.name for p in products)

    product_mapping: dict[str, str] = {}
    for product in products:
        product_mapping[product.name] = product.name
        for alias in product.aliases:
            product_mapping[alias] = product.name

    latest: dict[str, PackageManpages] = {}
    for pkg in _sort_packages(packages, product_order):
        if pkg.key in latest:
            logger.debug(f"Ignoring {pkg.key} {pkg.version}, {latest[pkg.key].version} is newer")
            continue
        latest[pkg.key] = pkg

    entries: dict[str, list[IndexEntry]] = {}
    seen: set[tuple[str, str, str, str, str]] = set()
    known_issues: dict[str, list[str]] = defaultdict(list)
    for pkg in latest.values():
        for path in pkg.manpages:
            try:
                man = from_man_path(path)
            except ValueError as e:
                known_issues[pkg.key].append(str(e))
                continue

            entry = IndexEntry(
                name=man.name,
                product=pkg.product,
                binarypkg=pkg.binarypkg,
                section=man.section,
                language=man.language,
            )
            # The same manpage can ship in several encodings
            identity = (entry.name.lower(), entry.product, entry.binarypkg, entry.section, entry.language)
            if identity in seen:
                continue
            seen.add(identity)
            entries.setdefault(entry.name.lower(), []).append(entry)

    for key, issues in known_issues.items():
        logger.warning(f"package {key!r} has errors: {issues}")

    langs: set[str] = set()
    sections: set[str] = set()
    for variants in entries.values():
        for entry in variants:
            langs.add(entry.language)
            sections.add(entry.section)
            sections.add(entry.main_section)

    for lang in sorted(langs):
        # Logs locales that cannot be negotiated
        locale_tag(lang)

    product_names = product_order.sort_values(list(dict.fromkeys(p.name for p in products)))

    index = Index(
        entries=entries,
        product_names=product_names,
        langs=sorted(langs),
        sections=sorted(sections),
        product_mapping=product_mapping,
    )
    logger.info(
        f"Built index with {len(index.entries)} manpages ({index.entry_count} variants) "
        f"from {len(latest)} packages"
    )
    return index
