from __future__ import annotations

from result import is_err

from dirmark.store import MatchKind, PatternError, SearchOptions, build_search_mode
from dirmark.store.matching import GlobMatch, RegexMatch, SubstringMatch, match_record


def test_substring_is_case_insensitive() -> None:
    mode = build_search_mode("PRO").unwrap()

    assert isinstance(mode, SubstringMatch)
    assert mode.matches("my-project")
    assert not mode.matches("docs")


def test_glob_matches_whole_string_case_sensitively() -> None:
    mode = build_search_mode("pro*", MatchKind.GLOB).unwrap()

    assert isinstance(mode, GlobMatch)
    assert mode.matches("proj")
    assert not mode.matches("my-proj")
    assert not mode.matches("Proj")


def test_glob_star_spans_path_separators() -> None:
    mode = build_search_mode("/home/*/client-?", MatchKind.GLOB).unwrap()

    assert mode.matches("/home/user/work/client-a")


def test_regex_is_case_insensitive_search() -> None:
    mode = build_search_mode(r"^api-\d+$", MatchKind.REGEX).unwrap()

    assert isinstance(mode, RegexMatch)
    assert mode.matches("API-42")
    assert not mode.matches("api-x")


def test_malformed_patterns_are_pattern_errors() -> None:
    bad_regex = build_search_mode("(unclosed", MatchKind.REGEX)
    bad_glob = build_search_mode("proj[ab", MatchKind.GLOB)

    assert is_err(bad_regex)
    assert isinstance(bad_regex.unwrap_err(), PatternError)
    assert is_err(bad_glob)
    assert bad_glob.unwrap_err().pattern == "proj[ab"


def test_glob_accepts_bracket_classes() -> None:
    mode = build_search_mode("item[]1-3]", MatchKind.GLOB).unwrap()

    assert mode.matches("item2")
    assert mode.matches("item]")


def test_default_fields_search_both() -> None:
    options = SearchOptions(mode=SubstringMatch("x"))

    assert options.searched_fields == (True, True)
    assert match_record(options, "x-ray", "/nothing")
    assert match_record(options, "none", "/x")


def test_keyword_only_ignores_path_matches() -> None:
    options = SearchOptions(mode=SubstringMatch("x"), match_keyword=True)

    assert not match_record(options, "none", "/x")


def test_require_both_needs_keyword_and_path() -> None:
    options = SearchOptions(mode=SubstringMatch("app"), require_both=True)

    assert match_record(options, "app", "/srv/app")
    assert not match_record(options, "app", "/srv/web")


def test_require_both_is_ignored_when_only_one_field_is_searched() -> None:
    options = SearchOptions(mode=SubstringMatch("app"), match_path=True, require_both=True)

    assert match_record(options, "web", "/srv/app")
