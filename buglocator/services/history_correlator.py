"""
History Correlator
==================
Cross-references recent version-control history for candidate files and
flags suspicious commits.

Pipeline:
    1. Take the first 5 distinct candidate file paths (cost bound)
    2. Query the 10 most recent commits per file (bounded to 5s each)
    3. Normalise each "hash|author|date|subject" line into a CommitRecord
    4. Classify: suspicious iff the subject contains a fix-related keyword
    5. A commit found for several files becomes one record listing them all

Fault Tolerance:
    A failed or timed-out query (file not tracked, git missing, slow repo)
    yields zero records for THAT file only; the other files still correlate.
"""
import asyncio
import logging
from typing import Optional, Sequence

from buglocator.core.config import FILE_CONCURRENCY, GIT_LOG_TIMEOUT_SECONDS
from buglocator.core.constants import MAX_COMMITS_PER_FILE, MAX_HISTORY_FILES, SUSPICIOUS_KEYWORDS
from buglocator.models.commit_record import CommitRecord
from buglocator.services.commit_log import CommitLogProvider

logger = logging.getLogger(__name__)


def classify_commit_message(message: str) -> tuple[bool, Optional[str]]:
    """
    Decide whether a commit subject looks like a fix.

    Returns
    -------
    tuple[bool, str | None]
        (suspicious, reason). The reason names the first matched keyword.
    """
    lowered = message.lower()
    for keyword in SUSPICIOUS_KEYWORDS:
        if keyword in lowered:
            return True, f"Commit message contains suspicious keyword '{keyword}'"
    return False, None


def parse_log_line(line: str, file_path: str) -> Optional[CommitRecord]:
    """Parse one `hash|author|date|subject` line. Returns None if malformed."""
    parts = line.split("|", 3)
    if len(parts) < 4 or not parts[0].strip():
        return None
    commit_hash, author, date, message = (p.strip() for p in parts)
    suspicious, reason = classify_commit_message(message)
    return CommitRecord(
        hash=commit_hash,
        author=author,
        date=date,
        message=message,
        files=[file_path],
        suspicious=suspicious,
        reason=reason,
    )


class HistoryCorrelator:
    """
    Correlates candidate files with their recent commits.

    Parameters
    ----------
    commit_log : CommitLogProvider
        Source of raw log lines.
    timeout_seconds : float
        Bound for one per-file query.
    concurrency : int
        Max queries in flight (results are still emitted in file order).
    """

    def __init__(
        self,
        commit_log: CommitLogProvider,
        timeout_seconds: float = GIT_LOG_TIMEOUT_SECONDS,
        concurrency: int = FILE_CONCURRENCY,
        max_files: int = MAX_HISTORY_FILES,
        max_commits: int = MAX_COMMITS_PER_FILE,
    ) -> None:
        self.commit_log = commit_log
        self.timeout_seconds = timeout_seconds
        self.concurrency = max(1, concurrency)
        self.max_files = max_files
        self.max_commits = max_commits

    async def _records_for(self, file_path: str) -> list[CommitRecord]:
        try:
            lines = await asyncio.wait_for(
                self.commit_log.log(file_path, self.max_commits),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("History query timed out for %s after %.1fs", file_path, self.timeout_seconds)
            return []
        except Exception as e:
            logger.warning("History query failed for %s: %s", file_path, e)
            return []

        records: list[CommitRecord] = []
        for line in lines[:self.max_commits]:
            record = parse_log_line(line, file_path)
            if record is not None:
                records.append(record)
        return records

    async def correlate(self, candidate_files: Sequence[str]) -> list[CommitRecord]:
        """
        Collect and classify recent commits for the candidate files.

        Returns
        -------
        list[CommitRecord]
            Records grouped by file (in candidate order), newest first
            within each file. Never raises for per-file failures.
        """
        files = list(dict.fromkeys(f for f in candidate_files if f))[:self.max_files]
        if not files:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(path: str) -> list[CommitRecord]:
            async with semaphore:
                return await self._records_for(path)

        per_file = await asyncio.gather(*[_bounded(f) for f in files])

        by_hash: dict[str, CommitRecord] = {}
        for records in per_file:
            for record in records:
                existing = by_hash.get(record.hash)
                if existing is None:
                    by_hash[record.hash] = record
                else:
                    for path in record.files:
                        if path not in existing.files:
                            existing.files.append(path)

        commits = list(by_hash.values())
        logger.info(
            "History correlation: %d file(s), %d commit(s), %d suspicious",
            len(files), len(commits), sum(1 for c in commits if c.suspicious),
        )
        return commits
