"""Tests for the protobuf index format."""

import os
import stat
from pathlib import Path

import pytest

from docserv.engine.core.entries import Index, IndexEntry
from docserv.engine.errors import IndexLoadError
from docserv.engine.index.codec import (
    IndexMessage,
    deserialize,
    load_index_files,
    merge,
    serialize,
    write_index,
)


def _blob(entries=(), languages=(), sections=(), suite=None, products=()) -> bytes:
    msg = IndexMessage()
    for name, product, binarypkg, section, language in entries:
        msg.entry.add(name=name, suite=product, binarypkg=binarypkg, section=section, language=language)
    msg.language.extend(languages)
    msg.section.extend(sections)
    msg.suite.update(suite or {})
    msg.products.extend(products)
    return msg.SerializeToString()


class TestRoundTrip:
    def test_round_trip(self, mirror_index: Index):
        assert deserialize(serialize(mirror_index)) == mirror_index

    def test_deterministic(self, mirror_index: Index):
        assert serialize(mirror_index) == serialize(mirror_index)

    def test_empty(self):
        index = deserialize(b"")
        assert index.entries == {}
        assert index.product_names == []


class TestWireFormat:
    def test_entry_fields(self):
        # Index.entry (1) holding IndexEntry.name (1) = "ls"
        index = deserialize(b"\x0a\x04\x0a\x02ls")
        assert index.entries == {"ls": [IndexEntry("ls", "", "", "", "")]}

    def test_list_fields(self):
        # language (2) = "en", section (3) = "1", products (5) = "Leap"
        index = deserialize(b"\x12\x02en\x1a\x011\x2a\x04Leap")
        assert index.langs == ["en"]
        assert index.sections == ["1"]
        assert index.product_names == ["Leap"]

    def test_all_entry_fields(self):
        data = _blob(entries=[("Foo", "Tumbleweed", "foo-doc", "3", "de")])
        assert deserialize(data).entries["foo"] == [IndexEntry("Foo", "Tumbleweed", "foo-doc", "3", "de")]


class TestDecoding:
    def test_unsorted_lists_are_sorted(self):
        index = deserialize(_blob(languages=["fr", "de", "en", "de"], sections=["5", "1", "1"]))
        assert index.langs == ["de", "en", "fr"]
        assert index.sections == ["1", "5"]

    def test_products_regenerated_from_mapping(self):
        index = deserialize(_blob(suite={"MicroOS": "Tumbleweed", "Tumbleweed": "Tumbleweed", "15.6": "Leap"}))
        assert index.product_names == ["Leap", "Tumbleweed"]

    def test_names_grouped_case_insensitively(self):
        data = _blob(entries=[("Foo", "a", "p", "1", "en"), ("foo", "a", "q", "3", "en")])
        assert [e.binarypkg for e in deserialize(data).entries["foo"]] == ["p", "q"]

    def test_malformed(self):
        with pytest.raises(IndexLoadError):
            deserialize(b"\x0a\x05ab")


class TestMerge:
    def test_merge_appends_and_unions(self):
        first = _blob(
            entries=[("i3", "Tumbleweed", "i3wm", "1", "en")],
            languages=["en"],
            sections=["1"],
            suite={"Tumbleweed": "Tumbleweed", "stable": "Tumbleweed"},
            products=["Tumbleweed"],
        )
        second = _blob(
            entries=[("i3", "Leap", "i3", "1", "de")],
            languages=["de", "en"],
            sections=["1", "5"],
            suite={"Leap": "Leap", "stable": "Leap"},
            products=["Leap"],
        )
        index = merge(first, second)

        assert [e.product for e in index.entries["i3"]] == ["Tumbleweed", "Leap"]
        assert index.langs == ["de", "en"]
        assert index.sections == ["1", "5"]
        assert index.product_names == ["Tumbleweed", "Leap"]
        # Later files win for aliases
        assert index.product_mapping["stable"] == "Leap"

    def test_merge_rejects_malformed_blob(self):
        with pytest.raises(IndexLoadError):
            merge(_blob(languages=["en"]), b"\x0a\x05ab")


class TestFiles:
    def test_write_and_load(self, tmp_path: Path, mirror_index: Index):
        path = tmp_path / "auxserver.idx"
        written = write_index(path, mirror_index)

        assert written == path.stat().st_size
        assert stat.S_IMODE(path.stat().st_mode) == 0o644
        assert load_index_files([path]) == mirror_index

    def test_write_leaves_no_temp_files(self, tmp_path: Path, mirror_index: Index):
        write_index(tmp_path / "auxserver.idx", mirror_index)
        write_index(tmp_path / "auxserver.idx", mirror_index)
        assert os.listdir(tmp_path) == ["auxserver.idx"]

    def test_load_merges_in_order(self, tmp_path: Path):
        (tmp_path / "a.idx").write_bytes(_blob(suite={"x": "A"}, products=["A"]))
        (tmp_path / "b.idx").write_bytes(_blob(suite={"x": "B"}, products=["B"]))
        index = load_index_files([tmp_path / "a.idx", tmp_path / "b.idx"])
        assert index.product_mapping == {"x": "B"}
        assert index.product_names == ["A", "B"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(IndexLoadError) as exc_info:
            load_index_files([tmp_path / "missing.idx"])
        assert exc_info.value.path == str(tmp_path / "missing.idx")

    def test_malformed_file(self, tmp_path: Path):
        path = tmp_path / "broken.idx"
        path.write_bytes(b"\x0a\x05ab")
        with pytest.raises(IndexLoadError):
            load_index_files([path])

    def test_no_files(self):
        with pytest.raises(IndexLoadError):
            load_index_files([])
