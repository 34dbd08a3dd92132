"""
Fix Suggestion Assembler
========================
Terminal stage: turns the merged findings into a structured FixSuggestion
using the reasoning collaborator.

Steps:
    1. Build one prompt (bug summary/description, top 5 locations,
       top 3 commits) asking for a single JSON object
    2. Call the reasoning client (bounded by LLM_TIMEOUT_SECONDS)
    3. Validate the response against the suggestion schema
       → ParsedSuggestion on success
       → FallbackSuggestion on ANY parse / validation failure
    4. Fill missing fields from the fallback values, so the returned
       FixSuggestion is always complete

Fatal vs absorbed:
    - A malformed response is NEVER an error (fallback suggestion).
    - The reasoning call itself failing or timing out raises ReasoningError.

The assembler also runs the auxiliary possible-cause analysis; unlike the
fix call, a failure there degrades to a fixed "unavailable" note.
"""
import asyncio
import json
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from buglocator.core.config import LLM_TIMEOUT_SECONDS
from buglocator.core.constants import (
    ANALYSIS_UNAVAILABLE_NOTE,
    FALLBACK_FIX_STEPS,
    FALLBACK_RISKS,
    FALLBACK_TEST_SUGGESTIONS,
    UNKNOWN_ROOT_CAUSE,
)
from buglocator.core.errors import ReasoningError
from buglocator.llm.client import ReasoningClient, strip_code_fences
from buglocator.llm.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    FIX_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_fix_prompt,
)
from buglocator.models.bug_report import BugReport
from buglocator.models.candidate_location import CandidateLocation
from buglocator.models.commit_record import CommitRecord
from buglocator.models.fix_suggestion import (
    CodeChange,
    FallbackSuggestion,
    FixSuggestion,
    ParsedSuggestion,
    SuggestionOutcome,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response Schema
# ---------------------------------------------------------------------------
class _SuggestionPayload(BaseModel):
    """What a well-formed reasoning response may contain (camel or snake case)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = "complex"
    description: str = ""
    root_cause: str = Field(default="", alias="rootCause")
    fix_steps: list[str] = Field(default_factory=list, alias="fixSteps")
    code_changes: Optional[list[CodeChange]] = Field(default=None, alias="codeChanges")
    test_suggestions: list[str] = Field(default_factory=list, alias="testSuggestions")
    risks: list[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        text = str(value or "").strip().lower()
        return text if text in ("simple", "complex") else "complex"

    @field_validator("description", "root_cause", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("fix_steps", "test_suggestions", "risks", mode="before")
    @classmethod
    def _as_text_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, list):
            return [str(item) for item in value if item not in (None, "")]
        return value


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------
# A reply must carry at least one of these to count as parsed
SUGGESTION_KEYS = frozenset({
    "description", "rootCause", "root_cause", "fixSteps", "fix_steps",
    "codeChanges", "code_changes", "testSuggestions", "test_suggestions", "risks",
})


def fallback_root_cause(locations: list[CandidateLocation]) -> str:
    """Describe the best candidate, or "Unknown" if there is none."""
    if not locations:
        return UNKNOWN_ROOT_CAUSE
    top = locations[0]
    return f"{top.file_path}:{top.line_number} {top.snippet}".strip()


def build_fallback(raw: str, root_cause: str, error: str) -> FallbackSuggestion:
    return FallbackSuggestion(
        suggestion=FixSuggestion(
            type="complex",
            description=raw.strip() if raw else "",
            root_cause=root_cause or UNKNOWN_ROOT_CAUSE,
            fix_steps=list(FALLBACK_FIX_STEPS),
            test_suggestions=list(FALLBACK_TEST_SUGGESTIONS),
            risks=list(FALLBACK_RISKS),
        ),
        error=error,
    )


def _load_json_object(raw: str):
    cleaned = strip_code_fences(raw)
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, ValueError):
        pass

    # Prose around the object: try the outermost brace span
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start != -1 and end > start:
        return json.loads(cleaned[start:end + 1])
    raise ValueError("no JSON object in response")


def parse_fix_suggestion(
    raw: Optional[str],
    root_cause: str = UNKNOWN_ROOT_CAUSE,
) -> SuggestionOutcome:
    """
    Validate a reasoning response into a tagged suggestion outcome.

    Parameters
    ----------
    raw : str | None
        Completion text from the reasoning collaborator.
    root_cause : str
        Root cause to use when the response does not provide one.

    Returns
    -------
    ParsedSuggestion | FallbackSuggestion
        Never raises.
    """
    if not raw or not raw.strip():
        return build_fallback("", root_cause, "Empty response")

    try:
        data = _load_json_object(raw)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning("Fix suggestion is not valid JSON, using fallback: %s", e)
        return build_fallback(raw, root_cause, f"Invalid JSON: {e}")

    if not isinstance(data, dict):
        return build_fallback(raw, root_cause, "Expected JSON object, got other type")

    if not SUGGESTION_KEYS.intersection(data):
        logger.warning("Fix suggestion has no recognised fields, using fallback: %s", sorted(data)[:5])
        return build_fallback(raw, root_cause, "No suggestion fields in response")

    try:
        payload = _SuggestionPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Fix suggestion failed schema validation, using fallback: %s", e)
        return build_fallback(raw, root_cause, f"Schema validation failed: {e.error_count()} error(s)")

    return ParsedSuggestion(
        suggestion=FixSuggestion(
            type=payload.type,
            description=payload.description,
            root_cause=payload.root_cause.strip() or root_cause or UNKNOWN_ROOT_CAUSE,
            fix_steps=payload.fix_steps or list(FALLBACK_FIX_STEPS),
            code_changes=payload.code_changes,
            test_suggestions=payload.test_suggestions or list(FALLBACK_TEST_SUGGESTIONS),
            risks=payload.risks or list(FALLBACK_RISKS),
        )
    )


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------
class FixSuggestionAssembler:
    """
    Drives the reasoning collaborator for one analysis.

    Parameters
    ----------
    client : ReasoningClient
        Anything with `async complete(user_prompt, system_prompt) -> str`.
    timeout_seconds : float
        Hard bound per reasoning call (default: 60).
    """

    def __init__(self, client: ReasoningClient, timeout_seconds: float = LLM_TIMEOUT_SECONDS) -> None:
        self.client = client
        self.timeout_seconds = timeout_seconds

    async def _complete(self, prompt: str, system_prompt: str) -> str:
        try:
            return await asyncio.wait_for(
                self.client.complete(prompt, system_prompt),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ReasoningError(f"Reasoning call timed out after {self.timeout_seconds:.0f}s") from e
        except ReasoningError:
            raise
        except Exception as e:
            raise ReasoningError(f"Reasoning call failed: {e}") from e

    async def analyze_causes(
        self,
        report: BugReport,
        locations: list[CandidateLocation],
        commits: list[CommitRecord],
    ) -> list[str]:
        """Free-text possible causes. Degrades to a fixed note on failure."""
        try:
            text = await self._complete(
                build_analysis_prompt(report, locations, commits),
                ANALYSIS_SYSTEM_PROMPT,
            )
        except ReasoningError as e:
            logger.warning("Possible-cause analysis unavailable for %s: %s", report.issue_key, e)
            return [ANALYSIS_UNAVAILABLE_NOTE]
        return [text.strip()]

    async def assemble_outcome(
        self,
        report: BugReport,
        locations: list[CandidateLocation],
        commits: list[CommitRecord],
    ) -> SuggestionOutcome:
        """Like assemble(), but keeps the parsed/fallback tag."""
        logger.info("Generating fix suggestion for %s", report.issue_key)
        raw = await self._complete(build_fix_prompt(report, locations, commits), FIX_SYSTEM_PROMPT)
        outcome = parse_fix_suggestion(raw, fallback_root_cause(locations))
        logger.info(
            "Fix suggestion for %s: type=%s source=%s",
            report.issue_key, outcome.suggestion.type, outcome.source,
        )
        return outcome

    async def assemble(
        self,
        report: BugReport,
        locations: list[CandidateLocation],
        commits: list[CommitRecord],
    ) -> FixSuggestion:
        """
        Produce a complete FixSuggestion.

        Raises
        ------
        ReasoningError
            Only if the reasoning call itself fails or times out.
        """
        outcome = await self.assemble_outcome(report, locations, commits)
        return outcome.suggestion
