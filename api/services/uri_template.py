"""Placeholder substitution for redirect templates.

Templates reference regex captures with ``$name``, ``$N`` or the braced
forms ``${name}`` / ``${N}``. Expansion works over the small ``Captures``
protocol rather than ``re.Match`` directly, so the substitution rules do not
depend on the regex engine that produced the match.

Rules:
    - a named placeholder takes the text of that named group
    - a numeric placeholder takes positional group N (``$0`` is the whole match)
    - a group that did not participate expands to ""
    - a placeholder that names no known group is left untouched
    - ``$$`` is a literal ``$``
"""

from __future__ import annotations

import re
from typing import Protocol

_placeholder_re = re.compile(
    r"\$(?:"
    r"(?P<escaped>\$)"
    r"|\{(?P<braced>\w+)\}"
    r"|(?P<index>\d+)"
    r"|(?P<name>[^\W\d]\w*)"
    r")"
)


def _token(match: re.Match[str]) -> str:
    return match.group("braced") or match.group("index") or match.group("name")


class Captures(Protocol):
    """Read access to the groups captured by a single match."""

    def has_named(self, name: str) -> bool: ...

    def has_positional(self, index: int) -> bool: ...

    def named(self, name: str) -> str | None: ...

    def positional(self, index: int) -> str | None: ...


class MatchCaptures:
    """``Captures`` adapter over a stdlib ``re.Match``."""

    __slots__ = ("_match",)

    def __init__(self, match: re.Match[str]) -> None:
        self._match = match

    def has_named(self, name: str) -> bool:
        return name in self._match.re.groupindex

    def has_positional(self, index: int) -> bool:
        return 0 <= index <= self._match.re.groups

    def named(self, name: str) -> str | None:
        return self._match.group(name)

    def positional(self, index: int) -> str | None:
        return self._match.group(index)


def _lookup(token: str, captures: Captures) -> str | None:
    """Return the replacement for ``token``, or None when it names no group."""
    if token.isdecimal():
        index = int(token)
        if not captures.has_positional(index):
            return None
        return captures.positional(index) or ""
    if not captures.has_named(token):
        return None
    return captures.named(token) or ""


def expand_template(template: str, captures: Captures) -> str:
    """Substitute every known placeholder in ``template``.

    Example:
        >>> m = re.search(r"^i(?P<index>\\d+)$", "i42")
        >>> expand_template("https://example.com/$index", MatchCaptures(m))
        'https://example.com/42'
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group("escaped"):
            return "$"
        replacement = _lookup(_token(match), captures)
        if replacement is None:
            return match.group(0)
        return replacement

    return _placeholder_re.sub(_replace, template)


def template_placeholders(template: str) -> list[str]:
    """List placeholder tokens in order of appearance (duplicates kept)."""
    return [
        _token(m) for m in _placeholder_re.finditer(template) if not m.group("escaped")
    ]


def unknown_placeholders(template: str, pattern: re.Pattern[str]) -> list[str]:
    """Return placeholders in ``template`` that ``pattern`` cannot satisfy."""
    unknown: list[str] = []
    for token in template_placeholders(template):
        if token.isdecimal():
            known = int(token) <= pattern.groups
        else:
            known = token in pattern.groupindex
        if not known and token not in unknown:
            unknown.append(token)
    return unknown
