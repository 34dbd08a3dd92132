"""
Ignore Rules
============
Rules for ignoring generated files, dependencies, and non-source artifacts
while walking a workspace.

Ignored directories:
    - node_modules/
    - __pycache__/
    - .git/
    - .venv/ / venv/
    - dist/ / build/ / target/
    - tool caches (.tox, .mypy_cache, .pytest_cache)

These directories are pruned before any include/exclude glob is evaluated,
so neither code search nor stack-frame resolution descends into them.
"""

IGNORED_DIRS: frozenset[str] = frozenset({
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    "target",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    "site-packages",
    ".git",
})


def is_ignored_dir(name: str) -> bool:
    """Return True if a directory with this name should never be walked."""
    return name in IGNORED_DIRS


def should_ignore(file_path: str) -> bool:
    """Return True if any directory component of the path is ignored."""
    normalized = file_path.replace("\\", "/")
    parts = normalized.split("/")[:-1]
    return any(is_ignored_dir(p) for p in parts)
