"""
Candidate Location Model
========================
A ranked source line suspected to be relevant to a bug.

Fields:
    file_path        — workspace-relative, forward slashes
    line_number      — 1-based
    snippet          — the matched line, stripped
    relevance_score  — distinct keyword hits, or the fixed stack-frame score
    context_before   — raw lines preceding the match
    context_after    — raw lines following the match
"""
from pydantic import BaseModel, Field


class CandidateLocation(BaseModel):
    file_path: str
    line_number: int = Field(ge=1)
    snippet: str = ""
    relevance_score: int = Field(default=0, ge=0)
    context_before: list[str] = Field(default_factory=list)
    context_after: list[str] = Field(default_factory=list)

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line_number}"
