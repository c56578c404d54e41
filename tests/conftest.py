"""Shared fixtures for docserv tests."""

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from docserv.engine.core.entries import Index, IndexEntry
from docserv.engine.index.codec import write_index

PRODUCT_MAPPING = {
    "Tumbleweed": "Tumbleweed",
    "MicroOS": "Tumbleweed",
    "Leap": "Leap",
    "15.6": "Leap",
}

MIRROR_ENTRIES = [
    IndexEntry("i3", "Tumbleweed", "i3wm", "1", "en"),
    IndexEntry("i3", "Tumbleweed", "i3wm", "1", "de"),
    IndexEntry("crontab", "Tumbleweed", "cronie", "5", "en"),
    IndexEntry("crontab", "Tumbleweed", "cronie", "1", "en"),
    IndexEntry("crontab", "Leap", "cronie", "1", "en"),
    IndexEntry("crontab", "Tumbleweed", "cronie", "1", "fr"),
    IndexEntry("printf", "Tumbleweed", "man-pages", "3", "en"),
    IndexEntry("printf", "Tumbleweed", "man-pages-posix", "3p", "en"),
    IndexEntry("printf", "Tumbleweed", "coreutils", "1", "en"),
    IndexEntry("systemd.service", "Tumbleweed", "systemd", "5", "en"),
    IndexEntry("git-commit", "Tumbleweed", "git-core", "1", "en"),
    IndexEntry("pam_unix", "Tumbleweed", "pam", "8", "en"),
    IndexEntry("open", "Tumbleweed", "man-pages", "2", "en"),
    IndexEntry("open", "Tumbleweed", "man-pages", "2", "pt_BR"),
    IndexEntry("index", "Tumbleweed", "libindex", "3", "en"),
]


def make_index(
    entries: Iterable[IndexEntry],
    product_mapping: dict[str, str] | None = None,
    product_names: list[str] | None = None,
) -> Index:
    """Build an Index the way the index builder would lay it out."""
    grouped: dict[str, list[IndexEntry]] = {}
    langs: set[str] = set()
    sections: set[str] = set()
    for entry in entries:
        grouped.setdefault(entry.name.lower(), []).append(entry)
        langs.add(entry.language)
        sections.update((entry.section, entry.main_section))

    if product_mapping is None:
        product_mapping = {e.product: e.product for v in grouped.values() for e in v}
    if product_names is None:
        product_names = sorted(set(product_mapping.values()))

    return Index(
        entries=grouped,
        product_names=product_names,
        langs=sorted(langs),
        sections=sorted(sections),
        product_mapping=dict(product_mapping),
    )


@pytest.fixture
def index_factory() -> Callable[..., Index]:
    return make_index


@pytest.fixture
def mirror_index() -> Index:
    """A small mirror with two products, aliases and several ambiguities."""
    return make_index(
        MIRROR_ENTRIES,
        product_mapping=PRODUCT_MAPPING,
        product_names=["Tumbleweed", "Leap"],
    )


@pytest.fixture
def i3_index() -> Index:
    """The English and German i3(1) pages only."""
    return make_index(
        [
            IndexEntry("i3", "Tumbleweed", "i3wm", "1", "en"),
            IndexEntry("i3", "Tumbleweed", "i3wm", "1", "de"),
        ]
    )


@pytest.fixture
def index_file(tmp_path: Path, mirror_index: Index) -> Path:
    path = tmp_path / "auxserver.idx"
    write_index(path, mirror_index)
    return path
