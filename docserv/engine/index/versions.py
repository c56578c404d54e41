"""RPM version comparison.

Implements rpm's ``rpmvercmp`` segment comparison (including ``~`` for
pre-releases and ``^`` for post-release snapshots) and epoch:version-release
comparison on top of it. Used to keep only the newest build of a package
when several versions sit in the package cache.
"""

from typing import NamedTuple


def _isalnum(c: str) -> bool:
    return c.isascii() and c.isalnum()


def rpmvercmp(a: str, b: str) -> int:
    """Compare two version (or release) strings the way rpm does.

    Returns:
        -1 if a is older than b, 0 if equal, 1 if a is newer
    """
    if a == b:
        return 0

    i = j = 0
    while i < len(a) or j < len(b):
        while i < len(a) and not _isalnum(a[i]) and a[i] not in "~^":
            i += 1
        while j < len(b) and not _isalnum(b[j]) and b[j] not in "~^":
            j += 1

        # Tilde sorts before everything, even the end of the string
        a_tilde = i < len(a) and a[i] == "~"
        b_tilde = j < len(b) and b[j] == "~"
        if a_tilde or b_tilde:
            if not a_tilde:
                return 1
            if not b_tilde:
                return -1
            i += 1
            j += 1
            continue

        # Caret sorts after the end of the string but before anything else
        a_caret = i < len(a) and a[i] == "^"
        b_caret = j < len(b) and b[j] == "^"
        if a_caret or b_caret:
            if i >= len(a):
                return -1
            if j >= len(b):
                return 1
            if not a_caret:
                return 1
            if not b_caret:
                return -1
            i += 1
            j += 1
            continue

        if i >= len(a) or j >= len(b):
            break

        numeric = a[i].isdigit()
        match = str.isdigit if numeric else str.isalpha
        start_a, start_b = i, j
        while i < len(a) and a[i].isascii() and match(a[i]):
            i += 1
        while j < len(b) and b[j].isascii() and match(b[j]):
            j += 1
        seg_a, seg_b = a[start_a:i], b[start_b:j]

        if not seg_b:
            # Numeric segments are newer than alpha segments
            return 1 if numeric else -1

        if numeric:
            seg_a = seg_a.lstrip("0")
            seg_b = seg_b.lstrip("0")
            if len(seg_a) != len(seg_b):
                return 1 if len(seg_a) > len(seg_b) else -1
        if seg_a != seg_b:
            return 1 if seg_a > seg_b else -1

    if i >= len(a) and j >= len(b):
        return 0
    return -1 if i >= len(a) else 1


class EVR(NamedTuple):
    """Epoch, version and release of a package."""

    epoch: int
    version: str
    release: str

    @classmethod
    def parse(cls, evr: str) -> "EVR":
        """Parse "[epoch:]version[-release]"."""
        epoch = 0
        if ":" in evr:
            head, evr = evr.split(":", 1)
            epoch = int(head) if head.isdigit() else 0
        version, _, release = evr.rpartition("-") if "-" in evr else (evr, "", "")
        return cls(epoch, version, release)


def compare_evr(a: str, b: str) -> int:
    """Compare two "[epoch:]version[-release]" strings.

    Returns:
        -1, 0 or 1 like rpmvercmp
    """
    left, right = EVR.parse(a), EVR.parse(b)
    if left.epoch != right.epoch:
        return 1 if left.epoch > right.epoch else -1
    result = rpmvercmp(left.version, right.version)
    if result != 0:
        return result
    # A missing release compares equal to any release
    if not left.release or not right.release:
        return 0
    return rpmvercmp(left.release, right.release)

