"""
LLM Prompts
===========
Centralised store for the reasoning prompts.

Two prompts are sent per analysis:
    - ANALYSIS: free-text possible causes (becomes AnalysisResult.analysis_notes)
    - FIX:      one JSON object parsed into a FixSuggestion

Context Included:
    - Bug summary and description in full
    - Top 5 candidate locations as "path:line"
    - Top 3 commits as "date author: message" (fix prompt adds short hashes)
"""
import json
import logging

from buglocator.core.constants import PROMPT_MAX_COMMITS, PROMPT_MAX_LOCATIONS
from buglocator.models.bug_report import BugReport
from buglocator.models.candidate_location import CandidateLocation
from buglocator.models.commit_record import CommitRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# System Prompts
# ---------------------------------------------------------------------------
ANALYSIS_SYSTEM_PROMPT = (
    "You are a bug analysis expert. Given a defect report, the source "
    "locations most likely involved and recent commits touching them, list "
    "the most plausible causes, most likely first. Be concrete and brief."
)

FIX_SYSTEM_PROMPT = (
    "You are a bug fixing expert. You propose fixes; you never claim a fix "
    "is verified.\n"
    "\n"
    "RESPONSE FORMAT — you MUST respond with ONLY one valid JSON object:\n"
    "No other text. No markdown code fences."
)

FIX_RESPONSE_SCHEMA = {
    "type": "simple | complex",
    "description": "one-paragraph summary of the fix",
    "rootCause": "why the bug happens",
    "fixSteps": ["step 1", "step 2"],
    "codeChanges": [
        {
            "filePath": "path/to/file",
            "changeType": "modify | add | delete",
            "lineNumber": 42,
            "originalCode": "code before",
            "suggestedCode": "code after",
        }
    ],
    "testSuggestions": ["test that would catch a regression"],
    "risks": ["what could break"],
}


# ---------------------------------------------------------------------------
# Context Formatting
# ---------------------------------------------------------------------------
def format_locations(locations: list[CandidateLocation], limit: int = PROMPT_MAX_LOCATIONS) -> str:
    if not locations:
        return "- (none found)"
    return "\n".join(f"- {loc.file_path}:{loc.line_number}" for loc in locations[:limit])


def format_commits(
    commits: list[CommitRecord],
    limit: int = PROMPT_MAX_COMMITS,
    with_hash: bool = False,
) -> str:
    if not commits:
        return "- (no recent changes)"
    lines = []
    for c in commits[:limit]:
        prefix = f"{c.short_hash} " if with_hash else ""
        lines.append(f"- {prefix}{c.date} {c.author}: {c.message}")
    return "\n".join(lines)


def _bug_block(report: BugReport) -> str:
    return (
        f"Bug: {report.issue_key} - {report.summary}\n"
        f"Description:\n{report.description}"
    )


# ---------------------------------------------------------------------------
# Prompt Builders
# ---------------------------------------------------------------------------
def build_analysis_prompt(
    report: BugReport,
    locations: list[CandidateLocation],
    commits: list[CommitRecord],
) -> str:
    """Prompt asking for possible causes in free text."""
    return (
        "Analyse the following bug and list its possible causes.\n\n"
        f"{_bug_block(report)}\n\n"
        f"Related code locations ({len(locations)}):\n"
        f"{format_locations(locations)}\n\n"
        f"Recent related changes ({len(commits)}):\n"
        f"{format_commits(commits)}"
    )


def build_fix_prompt(
    report: BugReport,
    locations: list[CandidateLocation],
    commits: list[CommitRecord],
) -> str:
    """Prompt asking for one structured fix-suggestion object."""
    prompt = (
        "Based on the following bug analysis, produce a fix suggestion.\n\n"
        f"{_bug_block(report)}\n\n"
        "Locations to check:\n"
        f"{format_locations(locations)}\n\n"
        "Related changes:\n"
        f"{format_commits(commits, with_hash=True)}\n\n"
        "Provide: 1. root cause analysis 2. fix steps 3. code changes "
        "4. test suggestions 5. potential risks.\n"
        "Return them as a single JSON object shaped like:\n"
        f"{json.dumps(FIX_RESPONSE_SCHEMA, indent=2)}"
    )
    logger.debug("Built fix prompt for %s (%d chars)", report.issue_key, len(prompt))
    return prompt
