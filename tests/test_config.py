"""
Unit Tests — Configuration, Paths & Ranking Helpers
===================================================
"""
from buglocator.core.config import SEARCH_EXCLUDE_GLOBS, SEARCH_INCLUDE_GLOBS, load_workspace_settings
from buglocator.core.errors import AnalysisError, ReasoningError, WorkspaceAccessError
from buglocator.models.candidate_location import CandidateLocation
from buglocator.services.ranking import distinct_files, merge_candidates, rank_candidates
from buglocator.utils.ignore_rules import should_ignore
from buglocator.utils.path_utils import base_name, glob_match, matches_any


class TestWorkspaceSettings:

    def test_defaults_without_file(self, tmp_path):
        settings = load_workspace_settings(str(tmp_path))
        assert settings.include_globs == SEARCH_INCLUDE_GLOBS
        assert settings.exclude_globs == SEARCH_EXCLUDE_GLOBS

    def test_yaml_overrides(self, tmp_path):
        (tmp_path / ".buglocator.yml").write_text(
            "search:\n  include:\n    - '**/*.kt'\n  exclude: []\n", encoding="utf-8"
        )
        settings = load_workspace_settings(str(tmp_path))
        assert settings.include_globs == ["**/*.kt"]
        assert settings.exclude_globs == []

    def test_broken_yaml_ignored(self, tmp_path):
        (tmp_path / ".buglocator.yml").write_text("search: [unclosed\n", encoding="utf-8")
        settings = load_workspace_settings(str(tmp_path))
        assert settings.include_globs == SEARCH_INCLUDE_GLOBS

    def test_non_mapping_yaml_ignored(self, tmp_path):
        (tmp_path / ".buglocator.yml").write_text("- just\n- a list\n", encoding="utf-8")
        assert load_workspace_settings(str(tmp_path)).exclude_globs == SEARCH_EXCLUDE_GLOBS


class TestPaths:

    def test_root_file_matches_double_star(self):
        assert glob_match("main.py", "**/*.py")
        assert glob_match("src/pkg/mod.py", "**/*.py")
        assert not glob_match("src/mod.pyc", "**/*.py")

    def test_excluded_dependency_dir(self):
        assert matches_any("node_modules/x/index.js", ["**/node_modules/**"])
        assert matches_any("web/node_modules/x/index.js", ["**/node_modules/**"])

    def test_base_name_of_any_style(self):
        assert base_name("/srv/app/utils.js") == "utils.js"
        assert base_name("C:\\work\\app\\utils.js") == "utils.js"
        assert base_name("utils.js") == "utils.js"

    def test_should_ignore_directories_only(self):
        assert should_ignore("build/gen/A.java")
        assert should_ignore(".git/config")
        assert not should_ignore("src/build.gradle")


class TestRanking:

    @staticmethod
    def _c(path, line, score):
        return CandidateLocation(file_path=path, line_number=line, relevance_score=score)

    def test_rank_is_stable(self):
        ranked = rank_candidates([self._c("a", 1, 1), self._c("b", 1, 2), self._c("c", 1, 1)])
        assert [c.file_path for c in ranked] == ["b", "a", "c"]

    def test_merge_prefers_frame_hits_and_dedupes(self):
        frame_hits = [self._c("Auth.java", 88, 10)]
        keyword_hits = [self._c("Auth.java", 88, 2), self._c("Web.java", 3, 10), self._c("Util.java", 1, 1)]
        merged = merge_candidates(frame_hits, keyword_hits)
        assert [(c.location, c.relevance_score) for c in merged] == [
            ("Auth.java:88", 10),
            ("Web.java:3", 10),
            ("Util.java:1", 1),
        ]

    def test_merge_capped(self):
        keyword_hits = [self._c(f"F{i}.java", 1, 1) for i in range(30)]
        assert len(merge_candidates([], keyword_hits)) == 20

    def test_distinct_files(self):
        cands = [self._c("a", 1, 3), self._c("b", 1, 2), self._c("a", 5, 1)]
        assert distinct_files(cands) == ["a", "b"]


class TestErrors:

    def test_stage_prefix(self):
        err = WorkspaceAccessError("root missing")
        assert isinstance(err, AnalysisError)
        assert str(err) == "[workspace] root missing"
        assert err.detail == "root missing"
        assert str(ReasoningError("timeout")) == "[reasoning] timeout"
