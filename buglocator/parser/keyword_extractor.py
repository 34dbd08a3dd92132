"""
Keyword Extractor
=================
Derives a bounded list of search terms from a BugReport.

Heuristic (intentionally simple, not frequency-ranked):
    1. Concatenate summary and description
    2. Lower-case and split on non-word characters
    3. Keep tokens longer than 3 characters
    4. Drop a fixed stopword list
    5. De-duplicate, keeping first-seen order
    6. Truncate to the first 10 tokens
"""
import re

from buglocator.core.constants import MAX_KEYWORDS, MIN_KEYWORD_LENGTH, STOPWORDS
from buglocator.models.bug_report import BugReport

_NON_WORD = re.compile(r"\W+")


def keywords_from_text(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    seen: set[str] = set()
    keywords: list[str] = []
    for token in _NON_WORD.split(text.lower()):
        if len(token) < MIN_KEYWORD_LENGTH or token in STOPWORDS or token in seen:
            continue
        seen.add(token)
        keywords.append(token)
        if len(keywords) >= limit:
            break
    return keywords


def extract_keywords(report: BugReport) -> list[str]:
    """Return up to 10 distinct search terms in encounter order."""
    return keywords_from_text(f"{report.summary} {report.description}")
