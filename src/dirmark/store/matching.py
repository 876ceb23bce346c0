"""Search predicates used by search and listing."""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeAlias

from result import Err, Ok, Result

from .models import PatternError


class MatchKind(str, Enum):
    SUBSTRING = "substring"
    GLOB = "glob"
    REGEX = "regex"


@dataclass(frozen=True, slots=True)
class SubstringMatch:
    """Case-insensitive containment."""

    needle: str

    def matches(self, value: str) -> bool:
        return self.needle.lower() in value.lower()


@dataclass(frozen=True, slots=True)
class GlobMatch:
    """Shell glob matched against the whole string; `*` also spans `/`."""

    pattern: str
    compiled: re.Pattern[str]

    def matches(self, value: str) -> bool:
        return self.compiled.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class RegexMatch:
    """Case-insensitive regular expression search."""

    pattern: str
    compiled: re.Pattern[str]

    def matches(self, value: str) -> bool:
        return self.compiled.search(value) is not None


SearchMode: TypeAlias = SubstringMatch | GlobMatch | RegexMatch


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Options for `ShortcutStore.search`.

    When neither `match_keyword` nor `match_path` is set both fields are searched.
    `within` restricts results to paths under that directory, and `max_depth`
    caps how many components below `within` a path may have.
    """

    mode: SearchMode
    match_keyword: bool = False
    match_path: bool = False
    require_both: bool = False
    limit: int | None = None
    within: Path | None = None
    max_depth: int | None = None

    @property
    def searched_fields(self) -> tuple[bool, bool]:
        if not self.match_keyword and not self.match_path:
            return True, True
        return self.match_keyword, self.match_path


def build_search_mode(query: str, kind: MatchKind = MatchKind.SUBSTRING) -> Result[SearchMode, PatternError]:
    match kind:
        case MatchKind.SUBSTRING:
            return Ok(SubstringMatch(query))
        case MatchKind.GLOB:
            return compile_glob(query).map(lambda compiled: GlobMatch(query, compiled))
        case MatchKind.REGEX:
            try:
                return Ok(RegexMatch(query, re.compile(query, re.IGNORECASE)))
            except re.error as e:
                return Err(PatternError(pattern=query, message=f"Invalid regular expression '{query}': {e}"))


def compile_glob(pattern: str) -> Result[re.Pattern[str], PatternError]:
    """Compile a shell glob, rejecting unterminated character classes."""
    if _has_unclosed_bracket(pattern):
        return Err(PatternError(pattern=pattern, message=f"Invalid glob pattern '{pattern}': unclosed '['"))
    return Ok(re.compile(fnmatch.translate(pattern)))


def match_record(options: SearchOptions, keyword: str, path: str) -> bool:
    search_keyword, search_path = options.searched_fields

    keyword_matches = search_keyword and options.mode.matches(keyword)
    path_matches = search_path and options.mode.matches(path)

    if options.require_both and search_keyword and search_path:
        return keyword_matches and path_matches
    return keyword_matches or path_matches


def _has_unclosed_bracket(pattern: str) -> bool:
    index = 0
    while index < len(pattern):
        if pattern[index] == "[":
            # "]" right after "[" or "[!" is a literal member of the class
            close_from = index + 1
            if close_from < len(pattern) and pattern[close_from] == "!":
                close_from += 1
            if close_from < len(pattern) and pattern[close_from] == "]":
                close_from += 1
            close = pattern.find("]", close_from)
            if close == -1:
                return True
            index = close
        index += 1
    return False
