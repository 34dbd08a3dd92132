"""
Fix Suggestion Model
====================
Pydantic models for the terminal recommendation of an analysis.

FixSuggestion fields:
    type              — "simple" or "complex"
    description       — free-text summary of the proposed fix
    root_cause        — best explanation of why the bug happens
    fix_steps         — ordered manual steps
    code_changes      — optional concrete edits (never applied by this engine)
    test_suggestions  — tests that would catch a regression
    risks             — what could go wrong with the fix

A FixSuggestion is always fully populated. The reasoning response is first
validated into one of two tagged outcomes:

    ParsedSuggestion    — source="parsed", the response matched the schema
    FallbackSuggestion  — source="fallback", deterministic defaults were used

SuggestionOutcome is the discriminated union of both.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CodeChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    change_type: Literal["modify", "add", "delete"] = Field(default="modify", alias="changeType")
    original_code: Optional[str] = Field(default=None, alias="originalCode")
    suggested_code: Optional[str] = Field(default=None, alias="suggestedCode")
    line_number: Optional[int] = Field(default=None, alias="lineNumber")

    @field_validator("change_type", mode="before")
    @classmethod
    def _normalize_change_type(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class FixSuggestion(BaseModel):
    type: Literal["simple", "complex"] = "complex"
    description: str = ""
    root_cause: str
    fix_steps: list[str]
    code_changes: Optional[list[CodeChange]] = None
    test_suggestions: list[str]
    risks: list[str]


class ParsedSuggestion(BaseModel):
    source: Literal["parsed"] = "parsed"
    suggestion: FixSuggestion


class FallbackSuggestion(BaseModel):
    source: Literal["fallback"] = "fallback"
    suggestion: FixSuggestion
    error: str = ""


SuggestionOutcome = Annotated[
    Union[ParsedSuggestion, FallbackSuggestion],
    Field(discriminator="source"),
]
