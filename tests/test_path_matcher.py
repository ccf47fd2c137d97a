"""Tests for filesystem matching and ignore rules."""

import re
import shutil
import subprocess

import pytest

from depgraph.scanner import GitIgnore, PathMatcher, expand_braces


def _touch(root, *rels):
    for rel in rels:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("// " + rel)


@pytest.fixture
def matcher(tmp_path):
    # A git executable that cannot exist keeps ignore rules out of the way
    return PathMatcher(tmp_path, ignore=GitIgnore(tmp_path, executable="git-not-installed-here"))


def _rel(root, paths):
    return sorted(p.relative_to(root.resolve()).as_posix() for p in paths)


class TestExpandBraces:
    def test_no_braces(self):
        assert expand_braces("src/*.js") == ["src/*.js"]

    def test_alternatives(self):
        assert expand_braces("*.{js,jsx}") == ["*.js", "*.jsx"]

    def test_multiple_groups(self):
        assert sorted(expand_braces("{a,b}/*.{js,ts}")) == ["a/*.js", "a/*.ts", "b/*.js", "b/*.ts"]


class TestSourceFiles:
    def test_lists_matching_extensions(self, tmp_path, matcher):
        _touch(tmp_path, "pkg/index.js", "pkg/src/a.JS", "pkg/src/b.ts", "pkg/readme.md")
        files = matcher.source_files(tmp_path / "pkg", ["js"])
        assert _rel(tmp_path, files) == ["pkg/index.js", "pkg/src/a.JS"]

    def test_skips_vendored_and_hidden(self, tmp_path, matcher):
        _touch(
            tmp_path,
            "pkg/index.js",
            "pkg/node_modules/dep/index.js",
            "pkg/.cache/x.js",
            "pkg/.eslintrc.js",
        )
        files = matcher.source_files(tmp_path / "pkg", ["js"])
        assert _rel(tmp_path, files) == ["pkg/index.js"]


class TestImportGlob:
    def test_relative_glob(self, tmp_path, matcher):
        _touch(tmp_path, "a/src/index.js", "b/lib/one.js", "b/lib/two.js", "b/lib/style.css")
        files = matcher.match_import_glob("../../b/lib/*.js", tmp_path / "a" / "src", ["js"])
        assert _rel(tmp_path, files) == ["b/lib/one.js", "b/lib/two.js"]

    def test_extension_filter(self, tmp_path, matcher):
        _touch(tmp_path, "b/one.js", "b/two.jsx", "b/three.ts")
        files = matcher.match_import_glob("../b/*", tmp_path / "a", ["js", "jsx"])
        assert _rel(tmp_path, files) == ["b/one.js", "b/two.jsx"]

    def test_recursive_and_braces(self, tmp_path, matcher):
        _touch(tmp_path, "b/x/one.js", "b/x/y/two.ts", "b/x/y/three.css")
        files = matcher.match_import_glob("./b/**/*.{js,ts}", tmp_path, ["js", "ts"])
        assert _rel(tmp_path, files) == ["b/x/one.js", "b/x/y/two.ts"]

    def test_excludes_vendored_and_escaping_paths(self, tmp_path, matcher):
        _touch(tmp_path, "a/node_modules/b/index.js", "a/ok.js")
        outside = tmp_path.parent / (tmp_path.name + "-outside")
        _touch(outside, "x.js")
        try:
            files = matcher.match_import_glob("./*/**/*.js", tmp_path, ["js"])
            assert _rel(tmp_path, files) == ["a/ok.js"]
            escaped = matcher.match_import_glob(f"../{outside.name}/*.js", tmp_path, ["js"])
            assert escaped == []
        finally:
            shutil.rmtree(outside)

    def test_reference_directory_with_glob_characters(self, tmp_path, matcher):
        _touch(tmp_path, "a/pages/[id]/view.js", "b/lib/x.js")
        ref_dir = tmp_path / "a" / "pages" / "[id]"
        files = matcher.match_import_glob("../../../b/lib/*.js", ref_dir, ["js"])
        assert _rel(tmp_path, files) == ["b/lib/x.js"]

    def test_directories_not_matched(self, tmp_path, matcher):
        (tmp_path / "b" / "dir.js").mkdir(parents=True)
        assert matcher.match_import_glob("./b/*.js", tmp_path, ["js"]) == []


class TestDirectoryImport:
    def test_non_recursive(self, tmp_path, matcher):
        _touch(tmp_path, "views/a.js", "views/nested/b.js")
        files = matcher.match_directory_import(tmp_path / "views", False, re.compile(r"^\./.*$"))
        assert _rel(tmp_path, files) == ["views/a.js"]

    def test_recursive(self, tmp_path, matcher):
        _touch(tmp_path, "views/a.js", "views/nested/b.js", "views/node_modules/c.js")
        files = matcher.match_directory_import(tmp_path / "views", True, re.compile(r"^\./.*$"))
        assert _rel(tmp_path, files) == ["views/a.js", "views/nested/b.js"]

    def test_filter_pattern(self, tmp_path, matcher):
        _touch(tmp_path, "views/a.js", "views/b.vue", "views/c.css")
        files = matcher.match_directory_import(tmp_path / "views", True, re.compile(r"\.(js|vue)$"))
        assert _rel(tmp_path, files) == ["views/a.js", "views/b.vue"]

    def test_filter_matches_without_extension(self, tmp_path, matcher):
        _touch(tmp_path, "views/page.js", "views/other.js")
        files = matcher.match_directory_import(tmp_path / "views", False, re.compile(r"/page$"))
        assert _rel(tmp_path, files) == ["views/page.js"]

    def test_missing_directory(self, tmp_path, matcher):
        assert matcher.match_directory_import(tmp_path / "nope", True, re.compile(".*")) == []


class TestGitIgnore:
    def test_missing_git_ignores_nothing(self, tmp_path):
        ignore = GitIgnore(tmp_path, executable="git-not-installed-here")
        paths = [tmp_path / "a.js"]
        assert ignore.filter(paths) == paths
        assert ignore.available is False

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_not_a_repository(self, tmp_path):
        ignore = GitIgnore(tmp_path)
        paths = [tmp_path / "a.js"]
        assert ignore.filter(paths) == paths

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_ignored_paths_removed(self, tmp_path):
        subprocess.run(["git", "init", "-q", str(tmp_path)], check=True)
        (tmp_path / ".gitignore").write_text("dist/\n*.gen.js\n")
        _touch(tmp_path, "src/a.js", "dist/b.js", "src/c.gen.js")
        ignore = GitIgnore(tmp_path)
        paths = [tmp_path / "src/a.js", tmp_path / "dist/b.js", tmp_path / "src/c.gen.js"]
        assert ignore.filter(paths) == [tmp_path / "src/a.js"]
        assert ignore.available is True

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_non_ascii_ignored_paths_removed(self, tmp_path):
        subprocess.run(["git", "init", "-q", str(tmp_path)], check=True)
        (tmp_path / ".gitignore").write_text("gen/\n")
        paths = [tmp_path / "gen" / "café.js", tmp_path / "gen" / "plain.js", tmp_path / "src" / "naïve.js"]
        for path in paths:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        assert GitIgnore(tmp_path).filter(paths) == [tmp_path / "src" / "naïve.js"]

    def test_paths_outside_root_never_ignored(self, tmp_path):
        ignore = GitIgnore(tmp_path / "repo")
        assert ignore.ignored([tmp_path / "elsewhere.js"]) == set()
