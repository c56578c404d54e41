"""Interpretation of manpage file paths and RPM file names."""

from typing import NamedTuple

# Manpage directory inside packages
MAN_PREFIX = "/usr/share/man/"

# Language of manpages outside a locale directory
DEFAULT_MANPAGE_LANGUAGE = "en"

COMPRESSION_SUFFIXES = (".gz", ".bz2", ".xz", ".zst")


class ManPath(NamedTuple):
    name: str
    section: str
    language: str


class RpmName(NamedTuple):
    name: str
    version: str
    release: str
    arch: str


def from_man_path(path: str) -> ManPath:
    """Interpret a manpage path relative to /usr/share/man/.

    Accepted layouts are ``man<s>/<name>.<section>[.gz]`` and
    ``<lang>[.<encoding>]/man<s>/<name>.<section>[.gz]``, where ``<s>`` is
    the main section.

    Raises:
        ValueError: If the path does not follow either layout
    """
    parts = path.removeprefix(MAN_PREFIX).strip("/").split("/")
    if len(parts) not in (2, 3):
        raise ValueError(f"unexpected manpage path {path!r}")

    base = parts[-1]
    for suffix in COMPRESSION_SUFFIXES:
        if base.endswith(suffix):
            base = base[: -len(suffix)]
            break

    name, dot, section = base.rpartition(".")
    if not dot or not name or not section:
        raise ValueError(f"no section in manpage file name {parts[-1]!r}")

    directory = parts[-2]
    if not directory.startswith("man") or directory[3:4] != section[:1]:
        raise ValueError(f"section {section!r} does not match directory {directory!r}")

    language = DEFAULT_MANPAGE_LANGUAGE
    if len(parts) == 3:
        # Drop the encoding ("de.UTF-8"), keep modifiers ("sr@latin")
        locale, _, rest = parts[0].partition(".")
        modifier = rest.partition("@")[2]
        language = f"{locale}@{modifier}" if modifier and "@" not in locale else locale
        if not language:
            raise ValueError(f"empty language in manpage path {path!r}")

    return ManPath(name, section, language)


def split_rpm_name(filename: str) -> RpmName:
    """Split "name-version-release.arch.rpm" into its components.

    Raises:
        ValueError: If the file name is not a full RPM name
    """
    if not filename.endswith(".rpm"):
        raise ValueError(f"not an RPM file name: {filename!r}")
    rest = filename.removesuffix(".rpm")

    rest, dot, arch = rest.rpartition(".")
    if not dot:
        raise ValueError(f"no architecture in RPM name {filename!r}")
    rest, dash, release = rest.rpartition("-")
    if not dash:
        raise ValueError(f"no release in RPM name {filename!r}")
    name, dash, version = rest.rpartition("-")
    if not dash:
        raise ValueError(f"no version in RPM name {filename!r}")

    return RpmName(name, version, release, arch)
