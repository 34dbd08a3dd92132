"""
Path Utils
==========
Path normalisation and glob matching helpers.

Responsibilities:
    - Normalise path separators to forward slashes
    - Reduce a trace path (absolute, URL, Windows) to its base name
    - Match workspace-relative paths against `**`-style globs
"""
import fnmatch
import posixpath


def to_posix(path: str) -> str:
    """Replace backslashes with forward slashes and strip surrounding quotes."""
    return path.strip().strip("'\"").replace("\\", "/")


def base_name(path: str) -> str:
    """Return the final path component of any slash style."""
    return posixpath.basename(to_posix(path))


def glob_match(rel_path: str, pattern: str) -> bool:
    """
    Match a workspace-relative posix path against a glob pattern.

    fnmatch's `*` already crosses `/`, so `**/` only needs special handling
    for files at the workspace root (`**/*.py` must match `main.py`).
    """
    path = to_posix(rel_path)
    if fnmatch.fnmatchcase(path, pattern):
        return True
    if pattern.startswith("**/"):
        return fnmatch.fnmatchcase(path, pattern[3:])
    return False


def matches_any(rel_path: str, patterns: list[str]) -> bool:
    """Return True if the path matches at least one pattern."""
    return any(glob_match(rel_path, p) for p in patterns)
