"""
Issue Intake
============
Turns an issue-tracker record into a BugReport.

Accepted input shapes (keys are looked up in this order):
    issue key    — "issueKey", "issue_key", "key"
    summary      — "summary"
    description  — "description"
    severity     — "severity", "priority"
    issue type   — "type", "issueType", "issue_type"

Structured fields present on the record (e.g. "stepsToReproduce") win over
the ones extracted from the description; everything else comes from
extract_sections(). Only key, summary and description are required.
"""
import logging
from typing import Any, Mapping, Optional

from buglocator.models.bug_report import BugReport
from buglocator.parser.issue_text_extractor import extract_sections

logger = logging.getLogger(__name__)

BUG_ISSUE_TYPES = frozenset({"bug", "defect", "缺陷"})


def _first(issue: Mapping[str, Any], *keys: str) -> Optional[Any]:
    for key in keys:
        value = issue.get(key)
        if value not in (None, ""):
            return value
    return None


def _label(value: Any) -> str:
    """Tracker fields like priority may be {"name": "High"} objects."""
    if isinstance(value, Mapping):
        value = value.get("name")
    return str(value or "").strip()


def is_bug_issue(issue: Mapping[str, Any]) -> bool:
    """True if the record's issue type names a defect."""
    issue_type = _first(issue, "type", "issueType", "issue_type")
    return _label(issue_type).lower() in BUG_ISSUE_TYPES


def bug_report_from_issue(issue: Mapping[str, Any]) -> BugReport:
    """
    Build a BugReport from a tracker-shaped record.

    Raises
    ------
    ValueError
        If the issue key or summary is missing.
    """
    issue_key = _first(issue, "issueKey", "issue_key", "key")
    summary = _first(issue, "summary")
    if not issue_key or summary is None:
        raise ValueError("Issue record requires a key and a summary")

    description = str(issue.get("description") or "")
    sections = extract_sections(description)

    steps = _first(issue, "stepsToReproduce", "steps_to_reproduce")
    if isinstance(steps, str):
        steps = [s.strip() for s in steps.splitlines() if s.strip()]
    report = BugReport(
        issue_key=str(issue_key),
        summary=str(summary),
        description=description,
        steps_to_reproduce=tuple(steps) if steps else sections.steps_to_reproduce,
        expected_behavior=_first(issue, "expectedBehavior", "expected_behavior") or sections.expected_behavior,
        actual_behavior=_first(issue, "actualBehavior", "actual_behavior") or sections.actual_behavior,
        environment=_first(issue, "environment") or sections.environment,
        stack_trace_text=_first(issue, "stackTrace", "stack_trace", "stack_trace_text") or sections.stack_trace_text,
        severity=_label(_first(issue, "severity", "priority")),
    )

    logger.info(
        "Bug information extracted for %s (steps=%d, stack trace=%s)",
        report.issue_key, len(report.steps_to_reproduce), report.stack_trace_text is not None,
    )
    return report
