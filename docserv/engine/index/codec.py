"""Binary (de)serialization of the index.

The persisted index is a protobuf (proto3) message, wire-compatible with
the index files written by rpm2docserv:

    message IndexEntry {
      string name = 1;
      string suite = 2;
      string binarypkg = 3;
      string section = 4;
      string language = 5;
    }

    message Index {
      repeated IndexEntry entry = 1;
      repeated string language = 2;
      repeated string section = 3;
      map<string, string> suite = 4;
      repeated string products = 5;
    }

The message classes are created at import time from a descriptor built in
code, so no protoc-generated module is needed.
"""

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from ..core.entries import Index, IndexEntry
from ..errors import IndexLoadError

logger = logging.getLogger(__name__)

PROTO_PACKAGE = "docserv"

_FieldProto = descriptor_pb2.FieldDescriptorProto


def _string_field(message: descriptor_pb2.DescriptorProto, name: str, number: int, repeated: bool = False) -> None:
    message.field.add(
        name=name,
        number=number,
        type=_FieldProto.TYPE_STRING,
        label=_FieldProto.LABEL_REPEATED if repeated else _FieldProto.LABEL_OPTIONAL,
    )


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="docserv/index.proto",
        package=PROTO_PACKAGE,
        syntax="proto3",
    )

    entry = file_proto.message_type.add(name="IndexEntry")
    for number, name in enumerate(("name", "suite", "binarypkg", "section", "language"), start=1):
        _string_field(entry, name, number)

    index = file_proto.message_type.add(name="Index")
    suite_entry = index.nested_type.add(name="SuiteEntry")
    suite_entry.options.map_entry = True
    _string_field(suite_entry, "key", 1)
    _string_field(suite_entry, "value", 2)

    index.field.add(
        name="entry",
        number=1,
        type=_FieldProto.TYPE_MESSAGE,
        label=_FieldProto.LABEL_REPEATED,
        type_name=f".{PROTO_PACKAGE}.IndexEntry",
    )
    _string_field(index, "language", 2, repeated=True)
    _string_field(index, "section", 3, repeated=True)
    index.field.add(
        name="suite",
        number=4,
        type=_FieldProto.TYPE_MESSAGE,
        label=_FieldProto.LABEL_REPEATED,
        type_name=f".{PROTO_PACKAGE}.Index.SuiteEntry",
    )
    _string_field(index, "products", 5, repeated=True)
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

IndexMessage = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.Index"))
IndexEntryMessage = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.IndexEntry")
)


# ============ ENCODING ============


def to_message(index: Index):
    """Convert an Index into its protobuf message."""
    msg = IndexMessage()
    for entry in index.iter_entries():
        msg.entry.add(
            name=entry.name,
            suite=entry.product,
            binarypkg=entry.binarypkg,
            section=entry.section,
            language=entry.language,
        )
    msg.language.extend(index.langs)
    msg.section.extend(index.sections)
    msg.suite.update(index.product_mapping)
    msg.products.extend(index.product_names)
    return msg


def serialize(index: Index) -> bytes:
    """Encode an index; map fields are written in a deterministic order."""
    return to_message(index).SerializeToString(deterministic=True)


# ============ DECODING ============


def from_message(msg) -> Index:
    """Convert a (possibly merged) protobuf message into an Index.

    Languages and sections are sorted and de-duplicated since older index
    files are not sorted. Missing product names are regenerated from the
    product mapping.
    """
    entries: dict[str, list[IndexEntry]] = {}
    for e in msg.entry:
        entries.setdefault(e.name.lower(), []).append(
            IndexEntry(
                name=e.name,
                product=e.suite,
                binarypkg=e.binarypkg,
                section=e.section,
                language=e.language,
            )
        )

    product_mapping = dict(msg.suite)
    if msg.products:
        product_names = list(dict.fromkeys(msg.products))
    else:
        product_names = sorted(set(product_mapping.values()))

    return Index(
        entries=entries,
        product_names=product_names,
        langs=sorted(set(msg.language)),
        sections=sorted(set(msg.section)),
        product_mapping=product_mapping,
    )


def _merge_into(msg, data: bytes, source: str) -> None:
    try:
        msg.MergeFromString(data)
    except DecodeError as e:
        raise IndexLoadError(source, f"malformed index data: {e}") from e


def deserialize(data: bytes) -> Index:
    msg = IndexMessage()
    _merge_into(msg, data, "<bytes>")
    return from_message(msg)


def merge(*blobs: bytes) -> Index:
    """Decode several index blobs into one index.

    Entries of later blobs are appended under the same names, list fields
    are unioned and product aliases of later blobs win.
    """
    msg = IndexMessage()
    for number, data in enumerate(blobs):
        _merge_into(msg, data, f"<bytes #{number}>")
    return from_message(msg)


# ============ FILES ============


def load_index_files(paths: Iterable[str | os.PathLike]) -> Index:
    """Load and merge index files.

    All files are read and decoded before an Index is returned, so a
    failure never yields a partial index.

    Raises:
        IndexLoadError: If a file cannot be read or decoded
    """
    msg = IndexMessage()
    loaded: list[str] = []
    for path in paths:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise IndexLoadError(str(path), e.strerror or str(e)) from e
        _merge_into(msg, data, str(path))
        loaded.append(str(path))

    if not loaded:
        raise IndexLoadError("", "no index files given")

    index = from_message(msg)
    logger.info(
        f"Loaded {len(index.entries)} manpage entries, {len(index.product_names)} products, "
        f"{len(index.langs)} languages, {len(index.sections)} sections from index {'#'.join(loaded)!r}"
    )
    return index


def write_index(path: str | os.PathLike, index: Index) -> int:
    """Write an index file atomically.

    The data goes to a temporary file in the target directory which then
    replaces the destination, so readers see either the old or the new file.

    Returns:
        Number of bytes written
    """
    dest = Path(path)
    data = serialize(index)
    fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; the index is read by the serving process
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, dest)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info(f"Wrote {len(data)} index bytes to {str(dest)!r}")
    return len(data)
