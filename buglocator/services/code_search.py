"""
Code Search Engine
==================
Scans workspace files for keyword matches and ranks the matching lines.

Pipeline:
    1. Enumerate files matching include/exclude globs (first 50 only)
    2. Read each file as text (unreadable / binary files are skipped)
    3. For every line containing ANY keyword (case-insensitive substring)
       emit a CandidateLocation scored by the number of DISTINCT keywords
       on that line
    4. Attach 2 lines of context before and 3 after
    5. Stable-sort by score and keep the top 20

Scoring is raw substring counting: no word boundaries, no stemming
("class" matches "classic"). This is the documented behaviour.

Concurrency:
    Files are read under a small semaphore, but results are reassembled in
    enumeration order so the ranking never depends on I/O completion order.
"""
import asyncio
import logging
from typing import Optional

from buglocator.core.config import FILE_CONCURRENCY, SEARCH_EXCLUDE_GLOBS, SEARCH_INCLUDE_GLOBS
from buglocator.core.constants import (
    MAX_CANDIDATES,
    MAX_SEARCH_FILES,
    SEARCH_CONTEXT_AFTER,
    SEARCH_CONTEXT_BEFORE,
)
from buglocator.models.candidate_location import CandidateLocation
from buglocator.services.ranking import rank_candidates
from buglocator.services.source_tree import LocalSourceTree, SourceTreeReader

logger = logging.getLogger(__name__)


def score_line(line: str, keywords: list[str]) -> int:
    """Number of distinct keywords present in the line as substrings."""
    lowered = line.lower()
    return sum(1 for kw in keywords if kw in lowered)


def scan_content(
    file_path: str,
    content: str,
    keywords: list[str],
) -> list[CandidateLocation]:
    """Emit one candidate per matching line of a single file, in line order."""
    lines = [line.rstrip("\r") for line in content.split("\n")]
    hits: list[CandidateLocation] = []
    for index, line in enumerate(lines):
        score = score_line(line, keywords)
        if score == 0:
            continue
        hits.append(CandidateLocation(
            file_path=file_path,
            line_number=index + 1,
            snippet=line.strip(),
            relevance_score=score,
            context_before=lines[max(0, index - SEARCH_CONTEXT_BEFORE):index],
            context_after=lines[index + 1:index + 1 + SEARCH_CONTEXT_AFTER],
        ))
    return hits


class CodeSearchEngine:
    """
    Keyword relevance search over a SourceTreeReader.

    Parameters
    ----------
    source_tree : SourceTreeReader
        Read-only workspace access.
    concurrency : int
        Max files read at once (default: FILE_CONCURRENCY).
    max_files : int
        Enumeration bound (default: 50).
    max_results : int
        Output cap (default: 20).
    """

    def __init__(
        self,
        source_tree: SourceTreeReader,
        concurrency: int = FILE_CONCURRENCY,
        max_files: int = MAX_SEARCH_FILES,
        max_results: int = MAX_CANDIDATES,
    ) -> None:
        self.source_tree = source_tree
        self.concurrency = max(1, concurrency)
        self.max_files = max_files
        self.max_results = max_results

    async def search(
        self,
        keywords: list[str],
        include_globs: Optional[list[str]] = None,
        exclude_globs: Optional[list[str]] = None,
    ) -> list[CandidateLocation]:
        """
        Find and rank lines mentioning any keyword.

        Returns
        -------
        list[CandidateLocation]
            At most 20 candidates, descending by score. Empty if there are
            no keywords or no matches. Per-file read failures never abort.
        """
        terms = list(dict.fromkeys(k.lower() for k in keywords if k))
        if not terms:
            return []

        files = await self.source_tree.list_files(
            include_globs if include_globs is not None else SEARCH_INCLUDE_GLOBS,
            exclude_globs if exclude_globs is not None else SEARCH_EXCLUDE_GLOBS,
            limit=self.max_files,
        )

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _scan_one(path: str) -> list[CandidateLocation]:
            async with semaphore:
                try:
                    content = await self.source_tree.read_text(path)
                except (OSError, ValueError) as e:
                    logger.debug("Skipping unreadable file %s: %s", path, e)
                    return []
            return scan_content(path, content, terms)

        per_file = await asyncio.gather(*[_scan_one(p) for p in files])
        hits = [hit for file_hits in per_file for hit in file_hits]
        ranked = rank_candidates(hits, limit=self.max_results)

        logger.info(
            "Code search: %d keyword(s), %d file(s) scanned, %d hit(s), %d kept",
            len(terms), len(files), len(hits), len(ranked),
        )
        return ranked


async def search_workspace(
    keywords: list[str],
    workspace_root: str,
    include_globs: Optional[list[str]] = None,
    exclude_globs: Optional[list[str]] = None,
) -> list[CandidateLocation]:
    """Search a directory on disk. Raises WorkspaceAccessError if it is unusable."""
    engine = CodeSearchEngine(LocalSourceTree(workspace_root))
    return await engine.search(keywords, include_globs, exclude_globs)
