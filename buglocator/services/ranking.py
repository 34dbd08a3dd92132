"""
Candidate Ranking
=================
Ordering and merging rules shared by every stage that emits
CandidateLocations.

Rules:
    - Sort descending by relevance_score; ties keep encounter order (stable).
    - Cap at 20 entries.
    - Merging puts stack-frame hits before keyword hits, so on equal scores
      the trace-derived location ranks first.
    - Duplicate (file_path, line_number) pairs keep the first (highest
      ranked) occurrence.
"""
from typing import Iterable

from buglocator.core.constants import MAX_CANDIDATES
from buglocator.models.candidate_location import CandidateLocation


def rank_candidates(
    candidates: Iterable[CandidateLocation],
    limit: int = MAX_CANDIDATES,
) -> list[CandidateLocation]:
    """Stable-sort by score (descending) and truncate."""
    return sorted(candidates, key=lambda c: -c.relevance_score)[:limit]


def merge_candidates(
    frame_hits: list[CandidateLocation],
    keyword_hits: list[CandidateLocation],
    limit: int = MAX_CANDIDATES,
) -> list[CandidateLocation]:
    """Merge both search branches into one ranked, de-duplicated list."""
    ranked = rank_candidates([*frame_hits, *keyword_hits], limit=len(frame_hits) + len(keyword_hits))

    seen: set[tuple[str, int]] = set()
    merged: list[CandidateLocation] = []
    for candidate in ranked:
        key = (candidate.file_path, candidate.line_number)
        if key in seen:
            continue
        seen.add(key)
        merged.append(candidate)
        if len(merged) >= limit:
            break
    return merged


def distinct_files(candidates: Iterable[CandidateLocation]) -> list[str]:
    """File paths in first-seen order, without repeats."""
    files: list[str] = []
    for candidate in candidates:
        if candidate.file_path not in files:
            files.append(candidate.file_path)
    return files
