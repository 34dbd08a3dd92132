"""
Bug Report Model
================
Pydantic model for the structured form of an issue-tracker defect ticket.
This is the input contract of every analysis stage.

Fields:
    issue_key           — tracker key, e.g. "PROJ-123" (required)
    summary             — one-line title (required)
    description         — raw free-text body (required)
    steps_to_reproduce  — list-style lines kept verbatim ("- open page", "1. click")
    expected_behavior   — text under an "Expected" heading
    actual_behavior     — text under an "Actual" heading
    environment         — text under an "Environment" heading
    stack_trace_text    — raw text under a "Stack trace" heading, None if absent
    severity            — tracker priority / severity label

Missing textual fields default to "" / [] and are never None.
Instances are immutable.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class BugReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    issue_key: str
    summary: str
    description: str
    steps_to_reproduce: tuple[str, ...] = ()
    expected_behavior: str = ""
    actual_behavior: str = ""
    environment: str = ""
    stack_trace_text: Optional[str] = None
    severity: str = ""

    @field_validator(
        "summary", "description", "expected_behavior",
        "actual_behavior", "environment", "severity",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("steps_to_reproduce", mode="before")
    @classmethod
    def _none_to_empty_steps(cls, value):
        return () if value is None else value
