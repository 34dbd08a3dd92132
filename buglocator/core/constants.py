"""
Constants
Centralised storage for analysis bounds, scoring constants and keyword sets.
"""
# Keyword extraction
MAX_KEYWORDS = 10
MIN_KEYWORD_LENGTH = 4
STOPWORDS = frozenset({
    "the", "and", "for", "with", "this", "that", "when", "then",
    "from", "have", "into", "after", "before", "there", "were", "will",
})

# Code search
MAX_SEARCH_FILES = 50
MAX_CANDIDATES = 20
SEARCH_CONTEXT_BEFORE = 2
SEARCH_CONTEXT_AFTER = 3

# Stack frame resolution
STACK_FRAME_SCORE = 10
FRAME_CONTEXT_LINES = 5

# History correlation
MAX_HISTORY_FILES = 5
MAX_COMMITS_PER_FILE = 10
SUSPICIOUS_KEYWORDS = ("fix", "bug", "issue", "hotfix", "patch", "修复", "问题", "缺陷")

# Prompt assembly
PROMPT_MAX_LOCATIONS = 5
PROMPT_MAX_COMMITS = 3

# Fallback suggestion values
UNKNOWN_ROOT_CAUSE = "Unknown"
FALLBACK_FIX_STEPS = ["manual investigation required"]
FALLBACK_TEST_SUGGESTIONS = ["add regression test"]
FALLBACK_RISKS = ["needs human review"]
ANALYSIS_UNAVAILABLE_NOTE = "AI analysis unavailable"
