"""
Analysis Result Model
=====================
Everything one analysis run produced, as plain serialisable data for UI or
automation consumers.

Fields:
    report            — the analysed BugReport
    keywords          — search terms derived from summary + description
    frames            — parsed stack frames, top first
    candidates        — merged, ranked CandidateLocations (max 20)
    commits           — correlated CommitRecords
    analysis_notes    — free-text possible-cause notes from the reasoning step
    suggestion        — the terminal FixSuggestion
    suggestion_source — "parsed" or "fallback"
"""
from typing import Literal

from pydantic import BaseModel, Field

from buglocator.models.bug_report import BugReport
from buglocator.models.candidate_location import CandidateLocation
from buglocator.models.commit_record import CommitRecord
from buglocator.models.fix_suggestion import FixSuggestion
from buglocator.models.stack_frame import StackFrame


class AnalysisResult(BaseModel):
    report: BugReport
    keywords: list[str] = Field(default_factory=list)
    frames: list[StackFrame] = Field(default_factory=list)
    candidates: list[CandidateLocation] = Field(default_factory=list)
    commits: list[CommitRecord] = Field(default_factory=list)
    analysis_notes: list[str] = Field(default_factory=list)
    suggestion: FixSuggestion
    suggestion_source: Literal["parsed", "fallback"] = "parsed"

    @property
    def suspicious_commits(self) -> list[CommitRecord]:
        return [c for c in self.commits if c.suspicious]
