"""Tests for per-source ignore parsers and the combined filter."""

import os
from pathlib import Path

import pytest

from utils.errors import IgnoreFileError
from utils.git_ignore_parser import (
    CombinedIgnoreFilter,
    FileIgnoreParser,
    GitIgnoreParser,
    IgnoreParser,
    PatternSource,
)


class TestFileIgnoreParser:
    """Single ignore file, default and custom names."""

    def test_default_geminiignore(self, project_root, create_file):
        create_file(".geminiignore", "*.log\n/build")
        parser = FileIgnoreParser(project_root)

        assert parser.is_ignored("debug.log")
        assert parser.is_ignored("build/app.js")
        assert not parser.is_ignored("src/index.js")

    def test_custom_ignore_file_name(self, project_root, create_file):
        create_file(".my-ignore", "temp/\ndocs/")
        parser = FileIgnoreParser(project_root, ".my-ignore")

        assert parser.is_ignored("temp/file.tmp")
        assert parser.is_ignored("docs/guide.md")
        assert not parser.is_ignored("src/index.js")

    def test_custom_name_replaces_geminiignore(self, project_root, create_file):
        create_file(".geminiignore", "*.log")
        create_file(".my-ignore", "temp/")
        parser = FileIgnoreParser(project_root, ".my-ignore")

        assert parser.is_ignored("temp/file.tmp")
        assert not parser.is_ignored("debug.log")

    def test_missing_file_is_empty(self, project_root):
        parser = FileIgnoreParser(project_root)
        assert parser.get_patterns() == []
        assert not parser.is_ignored("anything.txt")

    def test_get_patterns_returns_raw_lines_in_order(self, project_root, create_file):
        create_file(".geminiignore", "# comment\n\n*.log\n   \n!keep.log\nbuild/\n")
        parser = FileIgnoreParser(project_root)
        assert parser.get_patterns() == ["*.log", "!keep.log", "build/"]

    def test_additional_patterns_come_after_file(self, project_root, create_file):
        create_file(".geminiignore", "*.log")
        parser = FileIgnoreParser(project_root, additional_patterns=["!keep.log"])

        assert parser.get_patterns() == ["*.log", "!keep.log"]
        assert parser.is_ignored("debug.log")
        assert not parser.is_ignored("keep.log")

    def test_directory_only_pattern(self, project_root, create_file):
        create_file(".geminiignore", "build/")
        parser = FileIgnoreParser(project_root)

        assert parser.is_ignored("build/app.js")
        assert parser.is_ignored("build/sub/x.ts")
        assert parser.is_ignored("build/")
        assert not parser.is_ignored("build")
        assert not parser.is_ignored("buildx.js")

    def test_anchored_and_unanchored(self, project_root, create_file):
        create_file(".geminiignore", "/secrets.txt\n")
        anchored = FileIgnoreParser(project_root)
        create_file(".other-ignore", "secrets.txt\n")
        unanchored = FileIgnoreParser(project_root, ".other-ignore")

        assert anchored.is_ignored("secrets.txt")
        assert not anchored.is_ignored("nested/secrets.txt")
        assert unanchored.is_ignored("secrets.txt")
        assert unanchored.is_ignored("nested/secrets.txt")

    def test_path_forms(self, project_root, create_file):
        create_file(".geminiignore", "build/\n*.log\n")
        parser = FileIgnoreParser(project_root)

        assert parser.is_ignored(project_root / "build" / "app.js")
        assert parser.is_ignored(str(project_root / "debug.log"))
        assert parser.is_ignored("build\\app.js")
        assert parser.is_ignored("./build/app.js")
        assert parser.is_ignored(Path("logs") / "debug.log")

    def test_paths_outside_root_are_not_ignored(self, project_root, create_file, tmp_path):
        create_file(".geminiignore", "*.log\n*\n")
        parser = FileIgnoreParser(project_root)

        assert not parser.is_ignored(tmp_path / "elsewhere" / "debug.log")
        assert not parser.is_ignored("../debug.log")
        assert not parser.is_ignored(project_root)
        assert not parser.is_ignored("")

    def test_undecodable_file_raises(self, project_root, create_file):
        path = create_file(".geminiignore", b"\xff\xfe*.log\n")
        with pytest.raises(IgnoreFileError) as excinfo:
            FileIgnoreParser(project_root)
        assert excinfo.value.path == path

    def test_directory_named_like_ignore_file_is_treated_as_missing(self, project_root):
        (project_root / ".geminiignore").mkdir()
        assert FileIgnoreParser(project_root).get_patterns() == []


class TestGitIgnoreParser:
    """Version-control sources."""

    def test_loads_gitignore_and_exclude(self, git_project_root, create_file):
        create_file(".gitignore", "*.tmp\n")
        create_file(".git/info/exclude", "# local\nsecret/\n")
        parser = GitIgnoreParser(git_project_root)

        assert parser.get_patterns() == [".git", "*.tmp", "secret/"]
        assert parser.is_ignored("a.tmp")
        assert parser.is_ignored("secret/key.pem")
        assert not parser.is_ignored("src/main.py")

    def test_git_directory_is_always_ignored(self, git_project_root):
        parser = GitIgnoreParser(git_project_root)
        assert parser.is_ignored(".git/config")
        assert parser.is_ignored("vendor/lib/.git/HEAD")
        assert not parser.is_ignored(".gitignore")

    def test_additional_patterns(self, git_project_root, create_file):
        create_file(".gitignore", "*.log\n")
        parser = GitIgnoreParser(git_project_root, ["!important.log"])
        assert parser.get_patterns()[-1] == "!important.log"
        assert not parser.is_ignored("important.log")


class TestIgnoreParserSources:
    """Generic ordered sources."""

    def test_sources_are_applied_in_order(self, project_root, create_file):
        create_file("first-ignore", "*.log\n")
        create_file("third-ignore", "*.log\n")
        parser = IgnoreParser(project_root, [
            PatternSource.from_file("first-ignore"),
            PatternSource.inline(["!keep.log"]),
            PatternSource.from_file("third-ignore"),
        ])

        assert parser.get_patterns() == ["*.log", "!keep.log", "*.log"]
        assert parser.is_ignored("keep.log")

    def test_project_root_is_normalized(self, project_root):
        parser = IgnoreParser(project_root / "sub" / "..")
        assert parser.project_root == project_root

    def test_symlinked_root(self, project_root, create_file, tmp_path):
        create_file(".geminiignore", "*.log\n")
        link = tmp_path / "linked"
        os.symlink(project_root, link, target_is_directory=True)
        parser = FileIgnoreParser(link)

        assert parser.project_root == link
        assert parser.is_ignored(link / "logs" / "debug.log")
        assert parser.is_ignored(str(link) + "/debug.log")
        assert parser.is_ignored(project_root / "debug.log")
        assert not parser.is_ignored(link / "main.py")


class TestCombinedIgnoreFilter:
    """Supplementary patterns layered on top of git rules."""

    def test_supplement_negation_overrides_git_exclusion(self, git_project_root, create_file):
        create_file(".gitignore", "dist/\n")
        combined = CombinedIgnoreFilter(GitIgnoreParser(git_project_root), ["!dist/bundle.js"])

        assert not combined.is_ignored("dist/bundle.js")
        assert combined.is_ignored("dist/other.js")

    def test_git_negation_is_overridden_by_later_supplement(self, git_project_root, create_file):
        create_file(".gitignore", "*.log\n!important.log\n")
        combined = CombinedIgnoreFilter(GitIgnoreParser(git_project_root), ["important.log"])
        assert combined.is_ignored("important.log")

    def test_from_filters_keeps_source_order(self, git_project_root, create_file):
        create_file(".gitignore", "*.log\n")
        create_file(".geminiignore", "!keep.log\n")
        create_file(".my-ignore", "keep.log\n")
        git = GitIgnoreParser(git_project_root)
        gemini = FileIgnoreParser(git_project_root)
        custom = FileIgnoreParser(git_project_root, ".my-ignore")

        combined = CombinedIgnoreFilter.from_filters(git, [gemini, custom])

        assert combined.get_patterns() == [".git", "*.log", "!keep.log", "keep.log"]
        assert combined.is_ignored("keep.log")
        assert not CombinedIgnoreFilter.from_filters(git, [gemini]).is_ignored("keep.log")

    def test_reuses_base_root(self, git_project_root, tmp_path):
        base = GitIgnoreParser(git_project_root)
        combined = CombinedIgnoreFilter(base, ["*"])

        assert combined.project_root == base.project_root
        assert combined.is_ignored("anything")
        assert not combined.is_ignored(tmp_path / "outside.txt")
