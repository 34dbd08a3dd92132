"""
Stack Trace Parser
==================
Converts raw stack-trace text into structured StackFrame objects.

Recognised grammars (tried in order, first match wins per line):
    1. Java     — at com.acme.Foo.bar(Foo.java:42)
                  class = qualified prefix, function = last segment
    2. JS / TS  — at doThing (src/utils.js:10:5)
                  file reduced to its base name

Contract:
    - DETERMINISTIC: frames come out in input order (top frame first).
    - Lines matching no grammar are skipped without error.
    - Zero recognised frames is a valid result (empty list).
    - Frames with a line number below 1 are dropped.

Grammars are plain registered entries; a parser can be built with a
different list (e.g. to add a Python traceback dialect) without touching
the defaults.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from buglocator.models.stack_frame import StackFrame
from buglocator.utils.path_utils import base_name

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Grammar Registry
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FrameGrammar:
    """A named line pattern plus the builder that turns a match into a frame."""
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match], Optional[StackFrame]]


def _line_number(match: re.Match) -> Optional[int]:
    line = int(match.group("line"))
    return line if line >= 1 else None


def _build_java_frame(match: re.Match) -> Optional[StackFrame]:
    line = _line_number(match)
    if line is None:
        return None
    qualified = match.group("method")
    sep = qualified.rfind(".")
    return StackFrame(
        file_name=match.group("file"),
        line_number=line,
        function_name=qualified[sep + 1:],
        class_name=qualified[:sep] if sep > 0 else None,
    )


def _build_js_frame(match: re.Match) -> Optional[StackFrame]:
    line = _line_number(match)
    if line is None:
        return None
    return StackFrame(
        file_name=base_name(match.group("file")),
        line_number=line,
        function_name=match.group("function").strip(),
    )


# at com.acme.Foo.bar(Foo.java:42)
JAVA_GRAMMAR = FrameGrammar(
    name="java",
    pattern=re.compile(
        r"\bat\s+(?P<method>[\w$.<>/]+)\((?P<file>[^():\s]+):(?P<line>\d+)\)"
    ),
    build=_build_java_frame,
)

# at doThing (/abs/path/utils.js:10:5)
JS_GRAMMAR = FrameGrammar(
    name="javascript",
    pattern=re.compile(
        r"\bat\s+(?P<function>.+?)\s+\((?P<file>.+?):(?P<line>\d+):(?P<col>\d+)\)"
    ),
    build=_build_js_frame,
)

DEFAULT_GRAMMARS: tuple[FrameGrammar, ...] = (JAVA_GRAMMAR, JS_GRAMMAR)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------
class StackTraceParser:
    """
    Line-oriented stack-trace parser over an ordered grammar list.

    Usage:
        frames = StackTraceParser().parse(trace_text)
    """

    def __init__(self, grammars: Optional[Sequence[FrameGrammar]] = None) -> None:
        self.grammars: tuple[FrameGrammar, ...] = tuple(grammars or DEFAULT_GRAMMARS)

    def parse_line(self, line: str) -> Optional[StackFrame]:
        """Return the frame for one line, or None if no grammar matches."""
        for grammar in self.grammars:
            match = grammar.pattern.search(line)
            if match:
                return grammar.build(match)
        return None

    def parse(self, trace_text: Optional[str]) -> list[StackFrame]:
        """
        Parse a whole trace into frames.

        Parameters
        ----------
        trace_text : str | None
            Raw trace, possibly embedded in surrounding prose.

        Returns
        -------
        list[StackFrame]
            Frames in input order. Empty list if nothing was recognised.
        """
        if not trace_text or not trace_text.strip():
            return []

        frames: list[StackFrame] = []
        for line in trace_text.split("\n"):
            frame = self.parse_line(line)
            if frame is not None:
                frames.append(frame)

        logger.info("Parsed %d stack frame(s) from trace (%d chars)", len(frames), len(trace_text))
        return frames


def parse_stack_trace(trace_text: Optional[str]) -> list[StackFrame]:
    """Parse with the default Java + JS/TS grammars."""
    return StackTraceParser().parse(trace_text)
