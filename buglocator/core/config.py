"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    LLM_PROVIDER             — "openai" (any OpenAI-compatible endpoint) or "gemini"
    LLM_API_KEY              — API key for the reasoning provider
    LLM_BASE_URL             — Provider base URL (default depends on provider)
    LLM_MODEL                — Model name (default depends on provider)
    LLM_TIMEOUT_SECONDS      — Hard bound on one reasoning call (default: 60)
    GIT_LOG_TIMEOUT_SECONDS  — Bound on one per-file `git log` query (default: 5)
    FILE_CONCURRENCY         — Max concurrent file reads / log queries (default: 5)
    SEARCH_INCLUDE_GLOBS     — Comma-separated include globs for code search
    SEARCH_EXCLUDE_GLOBS     — Comma-separated exclude globs for code search
    ANALYSIS_TIMEOUT_SECONDS — Cap for one whole analysis behind the HTTP API

Workspace Overrides:
    A `.buglocator.yml` at the workspace root may override the search globs:

        search:
          include: ["**/*.java"]
          exclude: ["**/generated/**"]

    A missing or broken file is ignored (logged) and the env defaults apply.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _split_globs(raw: Optional[str], default: list[str]) -> list[str]:
    if not raw:
        return list(default)
    return [g.strip() for g in raw.split(",") if g.strip()]


LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").lower()
LLM_API_KEY = os.getenv("LLM_API_KEY", "")
LLM_BASE_URL = os.getenv(
    "LLM_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta"
    if LLM_PROVIDER == "gemini"
    else "https://api.openai.com/v1",
)
LLM_MODEL = os.getenv(
    "LLM_MODEL",
    "gemini-2.0-flash" if LLM_PROVIDER == "gemini" else "gpt-4o-mini",
)

# Reasoning call bound in seconds; exceeding it is a fatal analysis error
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", 60))

# Per-file history query bound; exceeding it yields zero commits for that file
GIT_LOG_TIMEOUT_SECONDS = float(os.getenv("GIT_LOG_TIMEOUT_SECONDS", 5))

FILE_CONCURRENCY = int(os.getenv("FILE_CONCURRENCY", 5))

ANALYSIS_TIMEOUT_SECONDS = float(os.getenv("ANALYSIS_TIMEOUT_SECONDS", 180))

DEFAULT_INCLUDE_GLOBS: list[str] = [
    "**/*.ts",
    "**/*.js",
    "**/*.tsx",
    "**/*.jsx",
    "**/*.java",
    "**/*.py",
]
DEFAULT_EXCLUDE_GLOBS: list[str] = ["**/node_modules/**"]

SEARCH_INCLUDE_GLOBS = _split_globs(os.getenv("SEARCH_INCLUDE_GLOBS"), DEFAULT_INCLUDE_GLOBS)
SEARCH_EXCLUDE_GLOBS = _split_globs(os.getenv("SEARCH_EXCLUDE_GLOBS"), DEFAULT_EXCLUDE_GLOBS)

WORKSPACE_CONFIG_FILE = ".buglocator.yml"


# ---------------------------------------------------------------------------
# Per-workspace search settings
# ---------------------------------------------------------------------------
@dataclass
class SearchSettings:
    """Include/exclude globs used by the code search stage."""
    include_globs: list[str] = field(default_factory=lambda: list(SEARCH_INCLUDE_GLOBS))
    exclude_globs: list[str] = field(default_factory=lambda: list(SEARCH_EXCLUDE_GLOBS))


def load_workspace_settings(workspace_root: str) -> SearchSettings:
    """
    Build SearchSettings for a workspace, applying `.buglocator.yml` overrides.

    Never raises: unreadable or malformed files fall back to the defaults.
    """
    settings = SearchSettings()
    config_path = os.path.join(workspace_root, WORKSPACE_CONFIG_FILE)
    if not os.path.isfile(config_path):
        return settings

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f.read())
    except Exception as e:
        logger.warning("Failed to parse YAML %s: %s", config_path, e)
        return settings

    if not isinstance(data, dict):
        return settings

    search = data.get("search")
    if not isinstance(search, dict):
        return settings

    include = search.get("include")
    if isinstance(include, list) and include:
        settings.include_globs = [str(g) for g in include]
    exclude = search.get("exclude")
    if isinstance(exclude, list):
        settings.exclude_globs = [str(g) for g in exclude]

    logger.info(
        "Loaded workspace search settings from %s (%d include, %d exclude)",
        config_path, len(settings.include_globs), len(settings.exclude_globs),
    )
    return settings
