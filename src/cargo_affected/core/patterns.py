"""Glob matching shared by force-trigger detection and member exclusion.

A raw pattern takes one of three shapes:

* literal (no wildcard, no trailing ``/``): exact string equality;
* directory prefix (trailing ``/``): the directory itself or anything below it;
* glob (contains ``*``, ``**``, ``?``, ``[...]`` or ``{a,b}``): anchored,
  case-sensitive match where ``*`` and ``?`` never cross ``/`` and ``**``
  spans zero or more whole path segments.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from cargo_affected.errors import ConfigError
from cargo_affected.models import PatternPurpose

logger = logging.getLogger(__name__)

SEPARATOR = "/"
_WILDCARD_CHARS = frozenset("*?[{")


class PatternShape(str, Enum):
    LITERAL = "literal"
    DIRECTORY = "directory"
    GLOB = "glob"


@dataclass(frozen=True)
class Pattern:
    raw: str
    purpose: PatternPurpose
    shape: PatternShape
    # Exclusion entries without a separator name a package, not a path.
    on_identity: bool = False
    _regex: re.Pattern[str] | None = field(default=None, repr=False, compare=False)

    def matches(self, candidate: str) -> bool:
        if self.shape is PatternShape.LITERAL:
            return candidate == self.raw
        if self._regex is not None:
            return self._regex.fullmatch(candidate) is not None
        directory = self.raw.rstrip(SEPARATOR)
        return candidate == directory or candidate.startswith(directory + SEPARATOR)


def has_wildcard(value: str) -> bool:
    return any(ch in _WILDCARD_CHARS for ch in value)


def classify(raw: str) -> PatternShape:
    if raw.endswith(SEPARATOR):
        return PatternShape.DIRECTORY
    if has_wildcard(raw):
        return PatternShape.GLOB
    return PatternShape.LITERAL


def glob_to_regex(glob: str) -> str:
    """Translate *glob* into an (unanchored) regular expression string.

    Raises ``ConfigError`` for unclosed ``[``/``{``, nested alternations, a
    trailing escape, or a ``**`` that does not form a whole path segment.
    """
    return _translate(glob, glob)


def _translate(glob: str, raw: str) -> str:
    out: list[str] = []
    i = 0
    n = len(glob)
    while i < n:
        ch = glob[i]
        if ch == "*":
            if i + 1 < n and glob[i + 1] == "*":
                before_ok = i == 0 or glob[i - 1] == SEPARATOR
                after = i + 2
                after_ok = after == n or glob[after] == SEPARATOR
                if not (before_ok and after_ok):
                    raise ConfigError(raw, "'**' must be a whole path segment")
                if after == n:
                    out.append(".*")
                    i = after
                else:
                    out.append(f"(?:.*{SEPARATOR})?")
                    i = after + 1
                continue
            out.append(f"[^{SEPARATOR}]*")
        elif ch == "?":
            out.append(f"[^{SEPARATOR}]")
        elif ch == "[":
            i = _translate_class(glob, i, raw, out)
            continue
        elif ch == "{":
            alternatives, i = _split_alternatives(glob, i, raw)
            out.append("(?:" + "|".join(_translate(alt, raw) for alt in alternatives) + ")")
            continue
        elif ch == "}":
            raise ConfigError(raw, "unmatched '}'")
        elif ch == "\\":
            if i + 1 == n:
                raise ConfigError(raw, "dangling escape")
            out.append(re.escape(glob[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def _class_end(glob: str, start: int, raw: str) -> int:
    """Index of the ``]`` closing the class opened at *start*."""
    i = start + 1
    if i < len(glob) and glob[i] in "!^":
        i += 1
    # A leading ']' is literal.
    if i < len(glob) and glob[i] == "]":
        i += 1
    while i < len(glob) and glob[i] != "]":
        i += 1
    if i >= len(glob):
        raise ConfigError(raw, "unclosed '['")
    return i


def _split_alternatives(glob: str, start: int, raw: str) -> tuple[list[str], int]:
    """Split the ``{...}`` opened at *start* on top-level commas.

    Returns the alternatives and the index just past the closing ``}``.
    Commas inside ``[...]`` or escaped with ``\\`` do not split.
    """
    alternatives: list[str] = []
    current_start = start + 1
    i = start + 1
    while i < len(glob):
        ch = glob[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            i = _class_end(glob, i, raw) + 1
            continue
        if ch == "{":
            raise ConfigError(raw, "nested '{' is not supported")
        if ch == ",":
            alternatives.append(glob[current_start:i])
            current_start = i + 1
        elif ch == "}":
            alternatives.append(glob[current_start:i])
            return alternatives, i + 1
        i += 1
    raise ConfigError(raw, "unclosed '{'")


def _translate_class(glob: str, start: int, raw: str, out: list[str]) -> int:
    end = _class_end(glob, start, raw)
    body_start = start + 1
    negate = glob[body_start] in "!^"
    if negate:
        body_start += 1
    body = glob[body_start:end]
    if not body:
        raise ConfigError(raw, "empty character class")
    escaped = "".join(c if c == "-" else re.escape(c) for c in body)
    if negate:
        out.append(f"[^{SEPARATOR}{escaped}]")
    else:
        # Ranges such as [+-0] can include the separator.
        out.append(f"(?!{SEPARATOR})[{escaped}]")
    return end + 1


def compile_pattern(raw: str, purpose: PatternPurpose) -> Pattern:
    raw = raw.strip()
    if not raw:
        raise ConfigError(raw, "empty pattern")
    if purpose is PatternPurpose.EXCLUDE and SEPARATOR not in raw:
        return Pattern(raw=raw, purpose=purpose, shape=PatternShape.LITERAL, on_identity=True)

    shape = classify(raw)
    regex: re.Pattern[str] | None = None
    if shape is PatternShape.DIRECTORY:
        directory = raw.rstrip(SEPARATOR)
        if not directory:
            raise ConfigError(raw, "directory pattern names no directory")
        if has_wildcard(directory):
            regex = re.compile(f"{glob_to_regex(directory)}(?:{SEPARATOR}.*)?", re.DOTALL)
    elif shape is PatternShape.GLOB:
        regex = re.compile(glob_to_regex(raw), re.DOTALL)
    return Pattern(raw=raw, purpose=purpose, shape=shape, _regex=regex)


def compile_patterns(raws: Iterable[str], purpose: PatternPurpose) -> tuple[Pattern, ...]:
    """Compile every pattern, dropping (and warning about) the invalid ones."""
    compiled: list[Pattern] = []
    for raw in raws:
        try:
            compiled.append(compile_pattern(raw, purpose))
        except ConfigError as exc:
            logger.warning("Ignoring %s pattern: %s", purpose.value, exc)
    return tuple(compiled)


def split_pattern_list(value: str | None) -> list[str]:
    """Split a newline- or space-separated list, collapsing runs of whitespace."""
    if not value:
        return []
    return value.split()


def matches_any(patterns: Iterable[Pattern], candidate: str) -> bool:
    return any(p.matches(candidate) for p in patterns)
