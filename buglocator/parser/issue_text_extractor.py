"""
Issue Text Extractor
====================
Splits the free-text body of a defect ticket into structured sections.

Pipeline:
    1. Split description into lines
    2. Detect section headings (bilingual synonyms, case-insensitive substring)
    3. Collect the lines that follow a heading as that section's content
    4. Keep list-style lines ("- x", "3. y") verbatim as list entries

Contract:
    - PURE: no I/O, same text → same sections, always.
    - First matching heading wins; headings are tried in a fixed field order.
    - Tolerant: missing or unmatched sections yield empty defaults, never raises.

Heading Rules:
    - A heading may carry inline content after ":" or "：" ("Expected: X").
    - List-style lines and stack-frame lines ("at ...") are never headings,
      so a step that mentions "expected" stays a step.
    - Any other markdown heading ("## Notes") closes the current section.
    - Scalar sections end at the first blank line after their content.
    - A stack-trace section is only closed by a markdown heading; its lines
      are never tested as headings (exception messages mention "expected").
"""
import re
from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# Section Headings
# ---------------------------------------------------------------------------
STEPS = "steps_to_reproduce"
EXPECTED = "expected_behavior"
ACTUAL = "actual_behavior"
ENVIRONMENT = "environment"
STACK_TRACE = "stack_trace_text"

# Order matters: the first field whose synonym appears in a line wins.
SECTION_HEADINGS: list[tuple[str, tuple[str, ...]]] = [
    (STEPS,       ("steps to reproduce", "reproduction steps", "重现步骤", "复现步骤")),
    (EXPECTED,    ("expected", "期望", "预期")),
    (ACTUAL,      ("actual", "实际")),
    (ENVIRONMENT, ("environment", "环境")),
    (STACK_TRACE, ("stack trace", "stacktrace", "traceback", "堆栈")),
]

_LIST_ITEM = re.compile(r"^(?:-|\d+\.)")
_FRAME_LINE = re.compile(r"^at\s", re.IGNORECASE)
_INLINE_SEPARATOR = re.compile(r"[:：]")


@dataclass(frozen=True)
class IssueSections:
    """Immutable result of splitting an issue description."""
    steps_to_reproduce: tuple[str, ...] = ()
    expected_behavior: str = ""
    actual_behavior: str = ""
    environment: str = ""
    stack_trace_text: Optional[str] = None


def is_list_item(line: str) -> bool:
    return bool(_LIST_ITEM.match(line.strip()))


def match_heading(line: str) -> Optional[str]:
    """Return the section a line opens, or None if it is not a known heading."""
    stripped = line.strip()
    if not stripped or is_list_item(stripped) or _FRAME_LINE.match(stripped):
        return None
    lowered = stripped.lower()
    for section, synonyms in SECTION_HEADINGS:
        if any(s in lowered for s in synonyms):
            return section
    return None


def _inline_content(line: str) -> str:
    """Text after the first ':' / '：' of a heading line, markdown emphasis removed."""
    parts = _INLINE_SEPARATOR.split(line, maxsplit=1)
    if len(parts) < 2:
        return ""
    return parts[1].strip(" \t*_")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def extract_sections(raw_description: Optional[str]) -> IssueSections:
    """
    Split a raw issue description into its known sections.

    Parameters
    ----------
    raw_description : str | None
        The ticket body as typed by the reporter.

    Returns
    -------
    IssueSections
        Extracted sections; absent ones are empty (stack trace: None).
    """
    if not raw_description:
        return IssueSections()

    steps: list[str] = []
    scalars: dict[str, list[str]] = {EXPECTED: [], ACTUAL: [], ENVIRONMENT: []}
    trace_lines: list[str] = []
    seen_trace = False

    current: Optional[str] = None
    for raw_line in raw_description.split("\n"):
        line = raw_line.rstrip("\r")
        stripped = line.strip()

        # Exception messages ("AssertionError: expected:<1>") must not end a trace
        if current == STACK_TRACE and not stripped.startswith("#"):
            trace_lines.append(line)
            continue

        heading = match_heading(line)
        if heading is not None:
            current = heading
            inline = _inline_content(stripped)
            if heading == STEPS:
                if inline and is_list_item(inline):
                    steps.append(inline)
            elif heading == STACK_TRACE:
                seen_trace = True
                if inline:
                    trace_lines.append(inline)
            elif inline:
                scalars[heading].append(inline)
            continue

        if stripped.startswith("#"):
            current = None
            continue

        if current == STEPS:
            if is_list_item(stripped):
                steps.append(stripped)
        elif current is not None:
            if stripped:
                scalars[current].append(stripped)
            elif scalars[current]:
                current = None

    trace_text = "\n".join(trace_lines).strip("\n") if seen_trace else None

    return IssueSections(
        steps_to_reproduce=tuple(steps),
        expected_behavior="\n".join(scalars[EXPECTED]),
        actual_behavior="\n".join(scalars[ACTUAL]),
        environment="\n".join(scalars[ENVIRONMENT]),
        stack_trace_text=trace_text or None,
    )
