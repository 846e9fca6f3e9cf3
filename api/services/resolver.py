"""Redirect resolution over an immutable snapshot of URI mappings.

Standard (exact) mappings always win over pattern mappings; patterns are
tried in their load order and the first match wins. Resolution is pure: the
same path against the same snapshot always yields the same outcome.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from services.uri_template import MatchCaptures, expand_template

# Whitespace and control characters cannot appear in a Location header target.
_invalid_uri_chars_re = re.compile(r"[\x00-\x20\x7f]")

NotFoundReason = Literal["no_match", "invalid_target"]


def is_valid_target(url: str) -> bool:
    """True when ``url`` can be sent as a redirect target."""
    return bool(url) and _invalid_uri_chars_re.search(url) is None


def normalize_path(path: str) -> str:
    """Strip a single leading slash so paths compare against mapping keys."""
    return path[1:] if path.startswith("/") else path


@dataclass(frozen=True, slots=True)
class Redirect:
    url: str


@dataclass(frozen=True, slots=True)
class NotFound:
    reason: NotFoundReason = "no_match"


Outcome = Redirect | NotFound


@dataclass(frozen=True, slots=True)
class PatternMapping:
    """A compiled regex paired with its destination template."""

    place: str
    regex: re.Pattern[str]
    template: str


@dataclass(frozen=True)
class UriMappings:
    """Immutable lookup tables used to answer every redirect request.

    Args:
        standard: Exact path -> destination URL. Copied into a read-only view.
        patterns: Pattern entries in evaluation order.
        full_match: When True a pattern must match the whole path; otherwise
            anchoring is left to the regex author.
    """

    standard: Mapping[str, str] = field(default_factory=dict)
    patterns: tuple[PatternMapping, ...] = ()
    full_match: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "standard", MappingProxyType(dict(self.standard)))
        object.__setattr__(self, "patterns", tuple(self.patterns))

    @classmethod
    def from_pairs(
        cls,
        standard: Mapping[str, str] | None = None,
        patterns: Iterable[tuple[str, str]] = (),
        *,
        full_match: bool = False,
    ) -> UriMappings:
        """Build mappings from plain strings, compiling each regex.

        Convenient for tests and the CLI; ``re.error`` propagates.
        """
        compiled = tuple(
            PatternMapping(place=str(i), regex=re.compile(regex), template=template)
            for i, (regex, template) in enumerate(patterns)
        )
        return cls(standard=standard or {}, patterns=compiled, full_match=full_match)

    def match_standard(self, path: str) -> str | None:
        return self.standard.get(normalize_path(path))

    def _first_match(self, path: str) -> tuple[PatternMapping, re.Match[str]] | None:
        path = normalize_path(path)
        for entry in self.patterns:
            if self.full_match:
                match = entry.regex.fullmatch(path)
            else:
                match = entry.regex.search(path)
            if match is not None:
                return entry, match
        return None

    def match_pattern(self, path: str) -> str | None:
        """Return the substituted template of the first matching pattern."""
        found = self._first_match(path)
        if found is None:
            return None
        entry, match = found
        return expand_template(entry.template, MatchCaptures(match))

    def resolve(self, path: str) -> Outcome:
        """Resolve a request path to a redirect target.

        Standard mappings are consulted first, then patterns in order. A
        pattern that matches but expands to an unusable URI ends the search
        with ``NotFound("invalid_target")``.
        """
        target = self.match_standard(path)
        if target is not None:
            return Redirect(target)

        target = self.match_pattern(path)
        if target is None:
            return NotFound("no_match")
        if not is_valid_target(target):
            return NotFound("invalid_target")
        return Redirect(target)
