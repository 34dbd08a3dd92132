"""
Source Tree
===========
Read-only access to the workspace being analysed.

Every analysis stage that touches files goes through a SourceTreeReader, so
the engine can run against a real checkout (LocalSourceTree) or a virtual
file set (InMemorySourceTree) without changes.

Philosophy:
    - Read-only: nothing here writes, creates or deletes files.
    - Deterministic enumeration: directories are walked in sorted order, so
      "first 50 files" and "first file named X" are stable across runs.
    - Ignored directories (node_modules, .git, build output...) are pruned.
"""
import asyncio
import logging
import os
from typing import Optional, Protocol

from buglocator.core.errors import WorkspaceAccessError
from buglocator.utils.ignore_rules import is_ignored_dir, should_ignore
from buglocator.utils.path_utils import matches_any, to_posix

logger = logging.getLogger(__name__)


class SourceTreeReader(Protocol):
    """Capability boundary for read-only workspace access."""

    async def list_files(
        self,
        include_globs: list[str],
        exclude_globs: list[str],
        limit: Optional[int] = None,
    ) -> list[str]:
        ...

    async def read_text(self, rel_path: str) -> str:
        ...

    async def find_by_name(self, file_name: str) -> Optional[str]:
        ...


def _select(
    paths: list[str],
    include_globs: list[str],
    exclude_globs: list[str],
    limit: Optional[int],
) -> list[str]:
    selected: list[str] = []
    for path in paths:
        if not matches_any(path, include_globs) or matches_any(path, exclude_globs):
            continue
        selected.append(path)
        if limit is not None and len(selected) >= limit:
            break
    return selected


# ---------------------------------------------------------------------------
# Filesystem implementation
# ---------------------------------------------------------------------------
class LocalSourceTree:
    """
    SourceTreeReader over a directory on disk.

    Raises WorkspaceAccessError on construction if the root is not a
    readable directory; that is the only fatal error this class produces.
    """

    def __init__(self, root: str) -> None:
        self.root = os.path.abspath(root)
        if not os.path.isdir(self.root):
            raise WorkspaceAccessError(f"Workspace root is not a directory: {root}")
        try:
            os.listdir(self.root)
        except OSError as e:
            raise WorkspaceAccessError(f"Workspace root is not readable: {root} ({e})") from e

    def _walk(self) -> list[str]:
        paths: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if not is_ignored_dir(d))
            rel_dir = os.path.relpath(dirpath, self.root)
            for name in sorted(filenames):
                rel = name if rel_dir == "." else os.path.join(rel_dir, name)
                paths.append(to_posix(rel))
        return paths

    def _resolve(self, rel_path: str) -> str:
        abs_path = os.path.normpath(os.path.join(self.root, rel_path))
        if abs_path != self.root and not abs_path.startswith(self.root + os.sep):
            raise PermissionError(f"Path escapes workspace: {rel_path}")
        return abs_path

    def _read(self, rel_path: str) -> str:
        with open(self._resolve(rel_path), "r", encoding="utf-8") as f:
            content = f.read()
        if "\x00" in content:
            raise ValueError(f"Binary content in {rel_path}")
        return content

    async def list_files(
        self,
        include_globs: list[str],
        exclude_globs: list[str],
        limit: Optional[int] = None,
    ) -> list[str]:
        paths = await asyncio.to_thread(self._walk)
        return _select(paths, include_globs, exclude_globs, limit)

    async def read_text(self, rel_path: str) -> str:
        return await asyncio.to_thread(self._read, rel_path)

    async def find_by_name(self, file_name: str) -> Optional[str]:
        paths = await asyncio.to_thread(self._walk)
        for path in paths:
            if path.rsplit("/", 1)[-1] == file_name:
                return path
        return None


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------
class InMemorySourceTree:
    """
    SourceTreeReader over a dict of path → content.

    A value of None marks a file that exists but cannot be read
    (read_text raises PermissionError), mimicking permission-denied files.
    """

    def __init__(self, files: dict[str, Optional[str]]) -> None:
        self._files = {to_posix(p): c for p, c in files.items()}

    def _paths(self) -> list[str]:
        return sorted(p for p in self._files if not should_ignore(p))

    async def list_files(
        self,
        include_globs: list[str],
        exclude_globs: list[str],
        limit: Optional[int] = None,
    ) -> list[str]:
        return _select(self._paths(), include_globs, exclude_globs, limit)

    async def read_text(self, rel_path: str) -> str:
        path = to_posix(rel_path)
        if path not in self._files:
            raise FileNotFoundError(path)
        content = self._files[path]
        if content is None:
            raise PermissionError(path)
        return content

    async def find_by_name(self, file_name: str) -> Optional[str]:
        for path in self._paths():
            if path.rsplit("/", 1)[-1] == file_name:
                return path
        return None
