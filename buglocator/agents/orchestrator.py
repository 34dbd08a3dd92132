"""
Orchestrator
============
Drives one bug analysis end to end:

    Extract → Keywords → Code search ──┐
    Trace parse → Frame resolution ────┴→ Merge → History → Notes → Suggestion

Core Features:
    - Keyword search and stack-frame resolution run concurrently
    - Merged candidates: stack hits first on ties, de-duplicated, top 20
    - History correlation over the first 5 distinct candidate files
    - Possible-cause notes (degrade gracefully) + fix suggestion (fatal on
      reasoning failure only)

Fault Tolerance:
    Every per-file / per-line / per-frame problem is absorbed by the stage
    that meets it. Only WorkspaceAccessError and ReasoningError escape.

State:
    Nothing is shared between runs; each analyze() call builds its own
    source tree and commit log unless they were injected.
"""
import asyncio
import logging
import time
from typing import Optional

from buglocator.agents.fix_suggestion_assembler import FixSuggestionAssembler
from buglocator.core.config import load_workspace_settings
from buglocator.core.errors import WorkspaceAccessError
from buglocator.llm.client import ReasoningClient
from buglocator.models.analysis_result import AnalysisResult
from buglocator.models.bug_report import BugReport
from buglocator.parser.keyword_extractor import extract_keywords
from buglocator.parser.stack_trace_parser import StackTraceParser
from buglocator.services.code_search import CodeSearchEngine
from buglocator.services.commit_log import CommitLogProvider, GitCommitLog, InMemoryCommitLog
from buglocator.services.history_correlator import HistoryCorrelator
from buglocator.services.ranking import distinct_files, merge_candidates
from buglocator.services.source_tree import LocalSourceTree, SourceTreeReader
from buglocator.services.stack_frame_resolver import StackFrameResolver

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Runs the bug-localization pipeline.

    Parameters
    ----------
    reasoning_client : ReasoningClient
        Text-completion collaborator used for notes and the fix suggestion.
    source_tree : SourceTreeReader or None
        Injected workspace reader (e.g. InMemorySourceTree). When None, a
        LocalSourceTree is built per call from `workspace_root`.
    commit_log : CommitLogProvider or None
        Injected history backend. When None, GitCommitLog(workspace_root).
    trace_parser : StackTraceParser or None
        Parser with the grammar list to use (default: Java + JS/TS).
    include_notes : bool
        Run the auxiliary possible-cause analysis (default: True).
    """

    def __init__(
        self,
        reasoning_client: ReasoningClient,
        source_tree: Optional[SourceTreeReader] = None,
        commit_log: Optional[CommitLogProvider] = None,
        trace_parser: Optional[StackTraceParser] = None,
        include_notes: bool = True,
    ) -> None:
        self.assembler = FixSuggestionAssembler(reasoning_client)
        self.source_tree = source_tree
        self.commit_log = commit_log
        self.trace_parser = trace_parser or StackTraceParser()
        self.include_notes = include_notes

    async def analyze(
        self,
        report: BugReport,
        workspace_root: str = "",
        include_globs: Optional[list[str]] = None,
        exclude_globs: Optional[list[str]] = None,
    ) -> AnalysisResult:
        """
        Analyse one bug report against a workspace.

        Raises
        ------
        WorkspaceAccessError
            The workspace root is missing or unreadable.
        ReasoningError
            The fix-suggestion call failed or timed out.
        """
        start = time.time()
        logger.info("Analyzing bug %s", report.issue_key)

        if self.source_tree is None and not workspace_root:
            raise WorkspaceAccessError("No workspace root given")
        source_tree = self.source_tree or LocalSourceTree(workspace_root)
        commit_log = self.commit_log
        if commit_log is None:
            commit_log = GitCommitLog(workspace_root) if workspace_root else InMemoryCommitLog()

        if workspace_root and (include_globs is None or exclude_globs is None):
            settings = await asyncio.to_thread(load_workspace_settings, workspace_root)
            if include_globs is None:
                include_globs = settings.include_globs
            if exclude_globs is None:
                exclude_globs = settings.exclude_globs

        # --- Branch inputs ---
        keywords = extract_keywords(report)
        frames = self.trace_parser.parse(report.stack_trace_text)
        if not frames:
            # Frames pasted outside a trace section still count
            frames = self.trace_parser.parse(report.description)

        # --- Both search branches ---
        keyword_hits, frame_hits = await asyncio.gather(
            CodeSearchEngine(source_tree).search(keywords, include_globs, exclude_globs),
            StackFrameResolver(source_tree).resolve(frames),
        )
        candidates = merge_candidates(frame_hits, keyword_hits)

        # --- History ---
        commits = await HistoryCorrelator(commit_log).correlate(distinct_files(candidates))

        # --- Reasoning ---
        notes: list[str] = []
        if self.include_notes:
            notes = await self.assembler.analyze_causes(report, candidates, commits)
        outcome = await self.assembler.assemble_outcome(report, candidates, commits)

        logger.info(
            "Bug analysis completed for %s in %.1fs | keywords=%d frames=%d "
            "candidates=%d commits=%d suggestion=%s",
            report.issue_key, time.time() - start, len(keywords), len(frames),
            len(candidates), len(commits), outcome.source,
        )

        return AnalysisResult(
            report=report,
            keywords=keywords,
            frames=frames,
            candidates=candidates,
            commits=commits,
            analysis_notes=notes,
            suggestion=outcome.suggestion,
            suggestion_source=outcome.source,
        )
