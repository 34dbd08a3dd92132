"""
Analysis Errors
===============
The only errors that escape an analysis run. Everything else (unreadable
files, unknown trace lines, unmapped frames, failed log queries, malformed
AI output) is absorbed by the stage that meets it.

Each error names the top-level stage that failed.
"""


class AnalysisError(Exception):
    """Fatal analysis failure attributed to a single pipeline stage."""

    stage = "analysis"

    def __init__(self, message: str) -> None:
        super().__init__(f"[{self.stage}] {message}")
        self.detail = message


class WorkspaceAccessError(AnalysisError):
    """The workspace root does not exist or cannot be listed."""

    stage = "workspace"


class ReasoningError(AnalysisError):
    """The reasoning collaborator call failed or timed out."""

    stage = "reasoning"
