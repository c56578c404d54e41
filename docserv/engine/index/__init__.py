"""Index construction and persistence.

This package provides:
- Building the index from package manpage listings (newest version wins)
- RPM version comparison and file name parsing
- Protobuf (de)serialization, merging and atomic writing of index files
"""

from .build import PackageManpages, Product, build_index
from .codec import (
    deserialize,
    load_index_files,
    merge,
    serialize,
    write_index,
)
from .manpath import ManPath, RpmName, from_man_path, split_rpm_name
from .versions import compare_evr, rpmvercmp

__all__ = [
    # Build
    "Product",
    "PackageManpages",
    "build_index",
    # Paths and versions
    "ManPath",
    "RpmName",
    "from_man_path",
    "split_rpm_name",
    "compare_evr",
    "rpmvercmp",
    # Codec
    "serialize",
    "deserialize",
    "merge",
    "load_index_files",
    "write_index",
]
