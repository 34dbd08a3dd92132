"""
Commit Log Providers
====================
Read-only access to per-file version-control history.

A provider returns raw log lines in the field-delimited format

    <hash>|<author>|<date>|<subject>

most recent first. Parsing and classification happen in the history
correlator, so any backend that can produce these lines is substitutable.
"""
import asyncio
import logging
import subprocess
from typing import Optional, Protocol

from buglocator.core.config import GIT_LOG_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

LOG_FORMAT = "%H|%an|%ad|%s"


class CommitLogProvider(Protocol):
    """Capability boundary for history queries."""

    async def log(self, file_path: str, limit: int) -> list[str]:
        ...


class GitCommitLog:
    """
    Runs `git log` in the workspace for one file at a time.

    Parameters
    ----------
    workspace_path : str
        Repository working directory (cwd for git).
    timeout_seconds : float
        Hard bound for one git invocation.
    git_executable : str
        Command used to invoke git; injected rather than probed.
    """

    def __init__(
        self,
        workspace_path: str,
        timeout_seconds: float = GIT_LOG_TIMEOUT_SECONDS,
        git_executable: str = "git",
    ) -> None:
        self.workspace_path = workspace_path
        self.timeout_seconds = timeout_seconds
        self.git_executable = git_executable

    def _run_log(self, file_path: str, limit: int) -> list[str]:
        res = subprocess.run(
            [
                self.git_executable, "log", f"-{limit}",
                f"--pretty=format:{LOG_FORMAT}", "--date=short",
                "--", file_path,
            ],
            cwd=self.workspace_path,
            check=True,
            capture_output=True,
            text=True,
            timeout=self.timeout_seconds,
        )
        return [line for line in res.stdout.splitlines() if line.strip()]

    async def log(self, file_path: str, limit: int) -> list[str]:
        """Raises CalledProcessError / TimeoutExpired / OSError on failure."""
        return await asyncio.to_thread(self._run_log, file_path, limit)


class InMemoryCommitLog:
    """Canned history: file path → log lines (most recent first)."""

    def __init__(self, history: Optional[dict[str, list[str]]] = None) -> None:
        self._history = dict(history or {})

    async def log(self, file_path: str, limit: int) -> list[str]:
        return list(self._history.get(file_path, []))[:limit]
