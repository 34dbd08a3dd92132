"""
Unit Tests — Stack Frame Resolver
=================================
"""
import asyncio

from buglocator.models.stack_frame import StackFrame
from buglocator.services.source_tree import InMemorySourceTree
from buglocator.services.stack_frame_resolver import StackFrameResolver, resolve_frames

AUTH_JAVA = "\n".join(f"// line {i}" for i in range(1, 100))


def _frame(file_name: str, line: int) -> StackFrame:
    return StackFrame(file_name=file_name, line_number=line, function_name="fn")


def test_resolved_frame_scored_ten_with_five_lines_context():
    tree = InMemorySourceTree({"src/main/java/com/acme/Auth.java": AUTH_JAVA})
    hits = asyncio.run(StackFrameResolver(tree).resolve([_frame("Auth.java", 50)]))

    assert len(hits) == 1
    hit = hits[0]
    assert hit.file_path == "src/main/java/com/acme/Auth.java"
    assert hit.line_number == 50
    assert hit.relevance_score == 10
    assert hit.snippet == "// line 50"
    assert hit.context_before == [f"// line {i}" for i in range(45, 50)]
    assert hit.context_after == [f"// line {i}" for i in range(51, 56)]


def test_unknown_file_dropped():
    tree = InMemorySourceTree({"Auth.java": AUTH_JAVA})
    assert asyncio.run(StackFrameResolver(tree).resolve([_frame("Missing.java", 3)])) == []


def test_out_of_range_line_dropped():
    tree = InMemorySourceTree({"Auth.java": "one\ntwo"})
    assert asyncio.run(StackFrameResolver(tree).resolve([_frame("Auth.java", 40)])) == []


def test_unreadable_file_dropped():
    tree = InMemorySourceTree({"Auth.java": None})
    assert asyncio.run(StackFrameResolver(tree).resolve([_frame("Auth.java", 1)])) == []


def test_first_match_in_walk_order_wins():
    tree = InMemorySourceTree({
        "z/Util.java": "z-side",
        "a/Util.java": "a-side",
    })
    hits = asyncio.run(StackFrameResolver(tree).resolve([_frame("Util.java", 1)]))
    assert hits[0].file_path == "a/Util.java"
    assert hits[0].snippet == "a-side"


def test_frame_order_preserved():
    tree = InMemorySourceTree({"A.java": "a1\na2\na3", "B.java": "b1\nb2"})
    frames = [_frame("B.java", 2), _frame("A.java", 3), _frame("Nope.java", 1), _frame("A.java", 1)]
    hits = asyncio.run(StackFrameResolver(tree).resolve(frames))
    assert [h.location for h in hits] == ["B.java:2", "A.java:3", "A.java:1"]


def test_resolve_on_disk(tmp_path):
    (tmp_path / "utils.js").write_text("function doThing() {\n  return x.id;\n}\n", encoding="utf-8")
    hits = asyncio.run(resolve_frames([_frame("utils.js", 2)], str(tmp_path)))
    assert hits[0].snippet == "return x.id;"
    assert hits[0].context_before == ["function doThing() {"]
