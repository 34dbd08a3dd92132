"""
Unit Tests — History Correlator & Commit Log
============================================
Commit classification, per-file fault isolation, file bound, merging of
shared commits, and the git-backed provider (subprocess mocked).
"""
import asyncio
import subprocess
from unittest.mock import AsyncMock, MagicMock, patch

from buglocator.services.commit_log import GitCommitLog, InMemoryCommitLog
from buglocator.services.history_correlator import (
    HistoryCorrelator,
    classify_commit_message,
    parse_log_line,
)


class TestClassification:

    def test_fix_message_is_suspicious(self):
        suspicious, reason = classify_commit_message("fix: null pointer in parser")
        assert suspicious is True
        assert reason is not None
        assert "fix" in reason

    def test_refactor_message_is_not_suspicious(self):
        assert classify_commit_message("refactor: rename variable") == (False, None)

    def test_chinese_keyword(self):
        suspicious, reason = classify_commit_message("修复登录问题")
        assert suspicious is True
        assert "修复" in reason

    def test_case_insensitive(self):
        assert classify_commit_message("HOTFIX for release")[0] is True


class TestParseLogLine:

    def test_full_line(self):
        record = parse_log_line("abc123def456|Alice|2024-03-01|fix: null pointer in parser", "src/Auth.java")
        assert record.hash == "abc123def456"
        assert record.short_hash == "abc123d"
        assert record.author == "Alice"
        assert record.date == "2024-03-01"
        assert record.files == ["src/Auth.java"]
        assert record.suspicious is True

    def test_pipe_in_subject_kept(self):
        record = parse_log_line("h1|Bob|2024-01-01|docs: a | b", "x.py")
        assert record.message == "docs: a | b"
        assert record.suspicious is False
        assert record.reason is None

    def test_malformed_line(self):
        assert parse_log_line("not a log line", "x.py") is None
        assert parse_log_line("|a|b|c", "x.py") is None


class TestCorrelator:

    def test_records_in_file_order(self):
        log = InMemoryCommitLog({
            "A.java": ["h1|Alice|2024-03-02|fix: login", "h2|Bob|2024-03-01|refactor: rename variable"],
            "B.java": ["h3|Carol|2024-02-01|feat: add endpoint"],
        })
        commits = asyncio.run(HistoryCorrelator(log).correlate(["A.java", "B.java"]))
        assert [c.hash for c in commits] == ["h1", "h2", "h3"]
        assert [c.suspicious for c in commits] == [True, False, False]

    def test_failing_file_does_not_abort_others(self):
        log = MagicMock()

        async def fake_log(file_path, limit):
            if file_path == "A.java":
                raise subprocess.CalledProcessError(128, ["git", "log"])
            return ["h9|Dan|2024-01-01|bug: off by one"]

        log.log = AsyncMock(side_effect=fake_log)
        commits = asyncio.run(HistoryCorrelator(log).correlate(["A.java", "B.java"]))
        assert [c.hash for c in commits] == ["h9"]
        assert commits[0].files == ["B.java"]

    def test_timed_out_file_yields_nothing(self):
        class SlowLog:
            async def log(self, file_path, limit):
                if file_path == "Slow.java":
                    await asyncio.sleep(1)
                return [f"{file_path}-h|Eve|2024-01-01|patch"]

        correlator = HistoryCorrelator(SlowLog(), timeout_seconds=0.05)
        commits = asyncio.run(correlator.correlate(["Slow.java", "Fast.java"]))
        assert [c.files for c in commits] == [["Fast.java"]]

    def test_only_first_five_distinct_files_queried(self):
        log = MagicMock()
        log.log = AsyncMock(return_value=[])
        files = ["A", "A", "B", "C", "D", "E", "F", "G"]
        asyncio.run(HistoryCorrelator(log).correlate(files))
        queried = [call.args[0] for call in log.log.call_args_list]
        assert sorted(queried) == ["A", "B", "C", "D", "E"]

    def test_at_most_ten_commits_per_file(self):
        lines = [f"h{i}|Al|2024-01-01|chore {i}" for i in range(15)]
        commits = asyncio.run(HistoryCorrelator(InMemoryCommitLog({"A": lines})).correlate(["A"]))
        assert len(commits) == 10

    def test_shared_commit_merged(self):
        log = InMemoryCommitLog({
            "A.java": ["same|Alice|2024-03-02|fix: both files"],
            "B.java": ["same|Alice|2024-03-02|fix: both files", "other|Bob|2024-03-01|docs"],
        })
        commits = asyncio.run(HistoryCorrelator(log).correlate(["A.java", "B.java"]))
        assert [c.hash for c in commits] == ["same", "other"]
        assert commits[0].files == ["A.java", "B.java"]

    def test_no_files(self):
        assert asyncio.run(HistoryCorrelator(InMemoryCommitLog()).correlate([])) == []


class TestGitCommitLog:

    def test_runs_git_log_with_bounds(self):
        completed = MagicMock(stdout="h1|Alice|2024-03-01|fix: x\nh2|Bob|2024-02-01|feat: y\n")
        with patch("buglocator.services.commit_log.subprocess.run", return_value=completed) as mock_run:
            lines = asyncio.run(GitCommitLog("/repo", timeout_seconds=5).log("src/A.java", 10))

        assert lines == ["h1|Alice|2024-03-01|fix: x", "h2|Bob|2024-02-01|feat: y"]
        args, kwargs = mock_run.call_args
        cmd = args[0]
        assert cmd[:3] == ["git", "log", "-10"]
        assert "--pretty=format:%H|%an|%ad|%s" in cmd
        assert cmd[-2:] == ["--", "src/A.java"]
        assert kwargs["cwd"] == "/repo"
        assert kwargs["timeout"] == 5

    def test_git_failure_propagates_to_correlator_as_empty(self):
        with patch(
            "buglocator.services.commit_log.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["git"], 5),
        ):
            commits = asyncio.run(HistoryCorrelator(GitCommitLog("/repo")).correlate(["A.java"]))
        assert commits == []

    def test_git_missing(self):
        with patch("buglocator.services.commit_log.subprocess.run", side_effect=FileNotFoundError("git")):
            commits = asyncio.run(HistoryCorrelator(GitCommitLog("/repo")).correlate(["A.java"]))
        assert commits == []
