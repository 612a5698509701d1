"""Unit tests for glob, directory and literal pattern matching."""

from __future__ import annotations

import logging

import pytest

from cargo_affected.core.patterns import (
    PatternShape,
    classify,
    compile_pattern,
    compile_patterns,
    glob_to_regex,
    matches_any,
    split_pattern_list,
)
from cargo_affected.errors import ConfigError
from cargo_affected.models import PatternPurpose

FORCE = PatternPurpose.FORCE_TRIGGER
EXCLUDE = PatternPurpose.EXCLUDE


class TestClassify:
    def test_literal(self) -> None:
        assert classify("Cargo.lock") is PatternShape.LITERAL

    def test_directory(self) -> None:
        assert classify("infra/") is PatternShape.DIRECTORY

    @pytest.mark.parametrize("raw", ["*.toml", ".github/**", "ci/?.yml", "[ab].rs", "{a,b}.rs"])
    def test_glob(self, raw: str) -> None:
        assert classify(raw) is PatternShape.GLOB


class TestLiteral:
    def test_exact_path_matches(self) -> None:
        assert compile_pattern("Cargo.lock", FORCE).matches("Cargo.lock")

    def test_different_path_does_not_match(self) -> None:
        pattern = compile_pattern("Cargo.lock", FORCE)
        assert not pattern.matches("lib-core/Cargo.lock")
        assert not pattern.matches("Cargo.lock.bak")

    def test_case_sensitive(self) -> None:
        assert not compile_pattern("Cargo.lock", FORCE).matches("cargo.lock")


class TestDirectoryPrefix:
    def test_matches_nested_file(self) -> None:
        assert compile_pattern("infra/", FORCE).matches("infra/nested/deep/file.yml")

    def test_matches_directory_itself(self) -> None:
        assert compile_pattern("infra/", FORCE).matches("infra")

    def test_sibling_with_shared_prefix_does_not_match(self) -> None:
        assert not compile_pattern("infra/", FORCE).matches("infrastructure/file.yml")

    def test_wildcard_directory(self) -> None:
        pattern = compile_pattern("crates/*/", FORCE)
        assert pattern.matches("crates/a/src/lib.rs")
        assert pattern.matches("crates/a")
        assert not pattern.matches("crates")

    def test_bare_separator_is_rejected(self) -> None:
        with pytest.raises(ConfigError):
            compile_pattern("/", FORCE)


class TestGlob:
    def test_single_star_stays_in_segment(self) -> None:
        pattern = compile_pattern("ci/*.yml", FORCE)
        assert pattern.matches("ci/workflow.yml")
        assert not pattern.matches("ci/nested/workflow.yml")

    def test_double_star_crosses_segments(self) -> None:
        pattern = compile_pattern(".github/**", FORCE)
        assert pattern.matches(".github/workflows/ci.yml")
        assert pattern.matches(".github/CODEOWNERS")

    def test_leading_double_star_matches_zero_segments(self) -> None:
        pattern = compile_pattern("**/*.sql", FORCE)
        assert pattern.matches("schema.sql")
        assert pattern.matches("db/migrations/001.sql")
        assert not pattern.matches("db/schema.sqlx")

    def test_inner_double_star(self) -> None:
        pattern = compile_pattern("a/**/b", FORCE)
        assert pattern.matches("a/b")
        assert pattern.matches("a/x/y/b")
        assert not pattern.matches("a/xb")

    def test_question_mark_is_one_non_separator_char(self) -> None:
        pattern = compile_pattern("v?.txt", FORCE)
        assert pattern.matches("v1.txt")
        assert not pattern.matches("v10.txt")
        assert not compile_pattern("a?b", FORCE).matches("a/b")

    def test_anchored(self) -> None:
        assert not compile_pattern("*.toml", FORCE).matches("lib-core/Cargo.toml")
        assert compile_pattern("*.toml", FORCE).matches("Cargo.toml")

    def test_character_class(self) -> None:
        pattern = compile_pattern("[ab].rs", FORCE)
        assert pattern.matches("a.rs")
        assert not pattern.matches("c.rs")
        assert compile_pattern("[!ab].rs", FORCE).matches("c.rs")

    def test_alternation(self) -> None:
        pattern = compile_pattern("*.{yml,yaml}", FORCE)
        assert pattern.matches("ci.yml")
        assert pattern.matches("ci.yaml")
        assert not pattern.matches("ci.json")

    def test_character_class_never_matches_separator(self) -> None:
        assert not compile_pattern("a[/]b", FORCE).matches("a/b")
        range_pattern = compile_pattern("a[+-0]b", FORCE)
        assert range_pattern.matches("a.b")
        assert not range_pattern.matches("a/b")

    def test_comma_inside_class_does_not_split_alternatives(self) -> None:
        pattern = compile_pattern("{x[,]y,z}.rs", FORCE)
        assert pattern.matches("x,y.rs")
        assert pattern.matches("z.rs")
        assert not pattern.matches("x[.rs")

    def test_escaped_comma_does_not_split_alternatives(self) -> None:
        pattern = compile_pattern("{a\\,b,c}.rs", FORCE)
        assert pattern.matches("a,b.rs")
        assert pattern.matches("c.rs")
        assert not pattern.matches("a.rs")

    def test_regex_metacharacters_are_literal(self) -> None:
        assert compile_pattern("a+b.*", FORCE).matches("a+b.rs")
        assert not compile_pattern("a+b.*", FORCE).matches("aab.rs")

    @pytest.mark.parametrize(
        "raw",
        ["src/[abc", "*.{yml,yaml", "a}b*", "a**/b", "**b", "a/***", "x*\\", "{a,{b,c}}*"],
    )
    def test_malformed_globs(self, raw: str) -> None:
        with pytest.raises(ConfigError):
            glob_to_regex(raw)


class TestExclusionEntries:
    def test_entry_without_separator_matches_identity(self) -> None:
        pattern = compile_pattern("lib-core", EXCLUDE)
        assert pattern.on_identity is True
        assert pattern.matches("lib-core")
        assert not pattern.matches("lib-core-ext")

    def test_entry_with_separator_matches_path(self) -> None:
        pattern = compile_pattern("tools/", EXCLUDE)
        assert pattern.on_identity is False
        assert pattern.matches("tools/tool-alpha")


class TestCompilePatterns:
    def test_invalid_pattern_is_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="cargo_affected.core.patterns"):
            patterns = compile_patterns(["infra/", "src/[abc", "Cargo.lock"], FORCE)
        assert [p.raw for p in patterns] == ["infra/", "Cargo.lock"]
        assert "src/[abc" in caplog.text

    def test_matches_any(self) -> None:
        patterns = compile_patterns(["infra/", "Cargo.lock"], FORCE)
        assert matches_any(patterns, "Cargo.lock")
        assert not matches_any(patterns, "README.md")


class TestSplitPatternList:
    def test_space_and_newline_separated(self) -> None:
        assert split_pattern_list("infra/ Cargo.lock\n.github/**\n\n") == ["infra/", "Cargo.lock", ".github/**"]

    def test_empty(self) -> None:
        assert split_pattern_list(None) == []
        assert split_pattern_list("  \n ") == []
