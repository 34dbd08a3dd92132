"""
Unit Tests — Keyword Extractor
==============================
"""
from buglocator.models.bug_report import BugReport
from buglocator.parser.keyword_extractor import extract_keywords, keywords_from_text


def _report(summary: str, description: str = "") -> BugReport:
    return BugReport(issue_key="PROJ-1", summary=summary, description=description)


def test_encounter_order_and_dedup():
    report = _report(
        "Login fails with NullPointerException",
        "When the user clicks login the page crashes.",
    )
    assert extract_keywords(report) == [
        "login", "fails", "nullpointerexception", "user", "clicks", "page", "crashes",
    ]


def test_short_tokens_and_stopwords_dropped():
    keywords = keywords_from_text("The API bug with this token")
    assert keywords == ["token"]


def test_truncated_to_ten():
    text = " ".join(f"word{i:02d}" for i in range(25))
    keywords = keywords_from_text(text)
    assert len(keywords) == 10
    assert keywords[0] == "word00"
    assert keywords[-1] == "word09"


def test_lowercased_and_split_on_punctuation():
    keywords = keywords_from_text("UserService.authenticate() threw TOKEN_EXPIRED")
    assert keywords == ["userservice", "authenticate", "threw", "token_expired"]


def test_empty_report_yields_no_keywords():
    assert extract_keywords(_report("", "")) == []


def test_custom_limit():
    assert keywords_from_text("alpha bravo charlie delta", limit=2) == ["alpha", "bravo"]
