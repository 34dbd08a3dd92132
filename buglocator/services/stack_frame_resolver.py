"""
Stack Frame Resolver
====================
Maps parsed StackFrames onto workspace files and extracts code context.

Rules:
    - A frame resolves to the FIRST workspace file (sorted walk order) whose
      base name equals frame.file_name. Same-named files in other packages
      are not disambiguated.
    - The frame's line must lie within the file; otherwise it is dropped.
    - Resolved frames get a fixed relevance score of 10 and 5 lines of
      context on each side, so once merged they outrank keyword hits.
    - Unresolvable frames are dropped silently (no partial results).
"""
import logging
from typing import Optional

from buglocator.core.constants import FRAME_CONTEXT_LINES, STACK_FRAME_SCORE
from buglocator.models.candidate_location import CandidateLocation
from buglocator.models.stack_frame import StackFrame
from buglocator.services.source_tree import LocalSourceTree, SourceTreeReader

logger = logging.getLogger(__name__)


class StackFrameResolver:
    """Resolves frames against a SourceTreeReader."""

    def __init__(self, source_tree: SourceTreeReader) -> None:
        self.source_tree = source_tree

    async def _lines_for(self, file_name: str, cache: dict) -> Optional[tuple[str, list[str]]]:
        if file_name in cache:
            return cache[file_name]

        resolved: Optional[tuple[str, list[str]]] = None
        path = await self.source_tree.find_by_name(file_name)
        if path is not None:
            try:
                content = await self.source_tree.read_text(path)
                resolved = (path, [line.rstrip("\r") for line in content.split("\n")])
            except (OSError, ValueError) as e:
                logger.debug("Cannot read %s for frame resolution: %s", path, e)

        cache[file_name] = resolved
        return resolved

    async def resolve(self, frames: list[StackFrame]) -> list[CandidateLocation]:
        """
        Turn frames into candidates, keeping frame order.

        Returns
        -------
        list[CandidateLocation]
            One candidate per resolvable frame, each scored 10.
        """
        cache: dict[str, Optional[tuple[str, list[str]]]] = {}
        hits: list[CandidateLocation] = []

        for frame in frames:
            resolved = await self._lines_for(frame.file_name, cache)
            if resolved is None:
                logger.debug("Frame file not found in workspace: %s", frame.file_name)
                continue

            path, lines = resolved
            index = frame.line_number - 1
            if index >= len(lines):
                logger.debug(
                    "Frame line %d out of range for %s (%d lines)",
                    frame.line_number, path, len(lines),
                )
                continue

            hits.append(CandidateLocation(
                file_path=path,
                line_number=frame.line_number,
                snippet=lines[index].strip(),
                relevance_score=STACK_FRAME_SCORE,
                context_before=lines[max(0, index - FRAME_CONTEXT_LINES):index],
                context_after=lines[index + 1:index + 1 + FRAME_CONTEXT_LINES],
            ))

        logger.info("Resolved %d of %d stack frame(s) to workspace files", len(hits), len(frames))
        return hits


async def resolve_frames(frames: list[StackFrame], workspace_root: str) -> list[CandidateLocation]:
    """Resolve against a directory on disk. Raises WorkspaceAccessError if unusable."""
    return await StackFrameResolver(LocalSourceTree(workspace_root)).resolve(frames)
