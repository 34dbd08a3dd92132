"""
Unit Tests — Issue Intake
=========================
"""
import pytest

from buglocator.services.issue_intake import bug_report_from_issue, is_bug_issue


def test_sections_extracted_from_description():
    report = bug_report_from_issue({
        "key": "PROJ-1",
        "summary": "Login fails",
        "description": "Steps to Reproduce:\n- step1\n- step2\n\nExpected: X\nActual: Y",
        "priority": {"name": "High"},
    })
    assert report.issue_key == "PROJ-1"
    assert report.steps_to_reproduce == ("- step1", "- step2")
    assert report.expected_behavior == "X"
    assert report.actual_behavior == "Y"
    assert report.environment == ""
    assert report.stack_trace_text is None
    assert report.severity == "High"


def test_explicit_fields_win():
    report = bug_report_from_issue({
        "issueKey": "PROJ-2",
        "summary": "Crash",
        "description": "Expected: from text",
        "expectedBehavior": "from field",
        "stepsToReproduce": ["1. open app"],
        "severity": "critical",
    })
    assert report.expected_behavior == "from field"
    assert report.steps_to_reproduce == ("1. open app",)
    assert report.severity == "critical"


def test_missing_description_defaults_empty():
    report = bug_report_from_issue({"key": "PROJ-3", "summary": "Crash"})
    assert report.description == ""
    assert report.steps_to_reproduce == ()


@pytest.mark.parametrize("issue", [
    {"summary": "no key"},
    {"key": "PROJ-4"},
    {},
])
def test_key_and_summary_required(issue):
    with pytest.raises(ValueError):
        bug_report_from_issue(issue)


@pytest.mark.parametrize("issue,expected", [
    ({"type": "Bug"}, True),
    ({"issueType": {"name": "Defect"}}, True),
    ({"issue_type": "缺陷"}, True),
    ({"type": "Story"}, False),
    ({}, False),
])
def test_is_bug_issue(issue, expected):
    assert is_bug_issue(issue) is expected


def test_steps_given_as_single_string():
    report = bug_report_from_issue({
        "key": "PROJ-5",
        "summary": "Crash",
        "stepsToReproduce": "1. open app\n2. tap login\n",
    })
    assert report.steps_to_reproduce == ("1. open app", "2. tap login")


def test_single_line_steps_string_kept_whole():
    report = bug_report_from_issue({"key": "PROJ-6", "summary": "Crash", "steps_to_reproduce": "open the app"})
    assert report.steps_to_reproduce == ("open the app",)
