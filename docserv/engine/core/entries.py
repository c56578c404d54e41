"""Index data structures for the redirect engine.

This module contains the value types that describe one concrete manpage
variant, a (partial) query for such a variant, and the process-wide index
mapping manpage names to all known variants.
"""

from bisect import bisect_left
from dataclasses import dataclass, field


@dataclass(frozen=True)
class IndexEntry:
    """One fully-qualified manpage variant.

    Attributes:
        name: Manpage name as shipped by the package (case-preserved)
        product: Product/suite the variant belongs to, e.g. "Tumbleweed"
        binarypkg: Binary package providing the manpage
        section: Manual section, possibly multi-character ("3posix")
        language: Locale string ("en", "pt_BR", ...)
    """

    name: str
    product: str
    binarypkg: str
    section: str
    language: str

    @property
    def main_section(self) -> str:
        """Numeric section id, e.g. "3" for "3posix"."""
        return self.section[:1]

    def serving_path(self, suffix: str) -> str:
        return f"/{self.product}/{self.binarypkg}/{self.name}.{self.section}.{self.language}{suffix}"

    def matches(self, query: "EntryQuery") -> bool:
        """True if all four identifying fields equal the query's."""
        return (
            self.product == query.product
            and self.binarypkg == query.binarypkg
            and self.section == query.section
            and self.language == query.language
        )


@dataclass(frozen=True)
class EntryQuery:
    """Identifying fields of an entry, each possibly empty (unconstrained)."""

    product: str = ""
    binarypkg: str = ""
    section: str = ""
    language: str = ""

    @property
    def fully_specified(self) -> bool:
        return bool(self.product and self.binarypkg and self.section and self.language)


def contains_sorted(values: list[str], lookup: str) -> bool:
    """Binary-search membership test; ``values`` must be sorted."""
    idx = bisect_left(values, lookup)
    return idx < len(values) and values[idx] == lookup


@dataclass
class Index:
    """All known manpages, read-only after construction.

    Attributes:
        entries: Lowercase manpage name → every variant providing it
        product_names: De-duplicated product names for choice lists
        langs: Sorted distinct languages (binary-searched by the splitter)
        sections: Sorted distinct sections, including main sections
        product_mapping: Alias/codename → canonical product (identity included)
    """

    entries: dict[str, list[IndexEntry]] = field(default_factory=dict)
    product_names: list[str] = field(default_factory=list)
    langs: list[str] = field(default_factory=list)
    sections: list[str] = field(default_factory=list)
    product_mapping: dict[str, str] = field(default_factory=dict)

    def has_lang(self, lang: str) -> bool:
        return contains_sorted(self.langs, lang)

    def has_section(self, section: str) -> bool:
        return contains_sorted(self.sections, section)

    def has_product(self, product: str) -> bool:
        return product in self.product_mapping

    def canonical_product(self, product: str) -> str:
        """Rewrite an alias to its canonical product, leaving unknown names as-is."""
        return self.product_mapping.get(product, product)

    def lookup(self, name: str) -> list[IndexEntry] | None:
        return self.entries.get(name.lower())

    @property
    def entry_count(self) -> int:
        return sum(len(variants) for variants in self.entries.values())

    def iter_entries(self):
        for variants in self.entries.values():
            yield from variants
