"""Build the redirect snapshot from environment variables.

Recognized names, for a prefix such as ``URSHORT``:

    URSHORT_STANDARD_URI_<key>       exact path <key> -> destination URL
    URSHORT_PATTERN_REGEX_<place>    regex for pattern <place>
    URSHORT_PATTERN_URI_<place>      destination template for pattern <place>

The listening port is a ``core.config.Settings`` field, not a mapping.

A malformed entry never stops loading: it is logged, recorded as a
``LoadIssue`` and left out of the snapshot.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from services.resolver import PatternMapping, UriMappings, is_valid_target
from services.uri_template import unknown_placeholders

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "URSHORT"

EnvironLike = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True, slots=True)
class LoadIssue:
    """An environment entry that was skipped while loading."""

    variable: str
    reason: str


@dataclass(frozen=True, slots=True)
class LoadResult:
    mappings: UriMappings
    issues: tuple[LoadIssue, ...]


@dataclass(frozen=True, slots=True)
class EnvNames:
    """Variable-name prefixes derived from a single service prefix."""

    standard: str
    pattern_regex: str
    pattern_uri: str

    @classmethod
    def for_prefix(cls, prefix: str = DEFAULT_PREFIX) -> EnvNames:
        return cls(
            standard=f"{prefix}_STANDARD_URI_",
            pattern_regex=f"{prefix}_PATTERN_REGEX_",
            pattern_uri=f"{prefix}_PATTERN_URI_",
        )


def _pairs(environ: EnvironLike) -> list[tuple[str, str]]:
    if isinstance(environ, Mapping):
        return list(environ.items())
    return list(environ)


def _report(issues: list[LoadIssue], variable: str, reason: str) -> None:
    logger.warning(
        "mappings.entry_skipped", extra={"variable": variable, "reason": reason}
    )
    issues.append(LoadIssue(variable=variable, reason=reason))


def _place_sort_key(place: str) -> tuple[int, int, str]:
    """Numeric places first in numeric order, then the rest lexicographically."""
    if place.isdecimal():
        return (0, int(place), place)
    return (1, 0, place)


def extract_standard_uris(
    environ: EnvironLike,
    prefix: str,
    issues: list[LoadIssue] | None = None,
) -> dict[str, str]:
    """Collect exact path mappings; later duplicates overwrite earlier ones."""
    issues = issues if issues is not None else []
    standard: dict[str, str] = {}
    for key, value in _pairs(environ):
        if not key.startswith(prefix):
            continue
        if not is_valid_target(value):
            _report(issues, key, "destination is not a valid URI")
            continue
        standard[key[len(prefix) :]] = value
    return standard


def extract_pattern_uris(
    environ: EnvironLike,
    uri_prefix: str,
    regex_prefix: str,
    issues: list[LoadIssue] | None = None,
    *,
    strict_templates: bool = False,
) -> list[PatternMapping]:
    """Pair regexes with templates by place and compile them in place order."""
    issues = issues if issues is not None else []
    regexes: dict[str, str] = {}
    templates: dict[str, str] = {}

    # First pass: partial records keyed by place.
    for key, value in _pairs(environ):
        if key.startswith(regex_prefix):
            regexes[key[len(regex_prefix) :]] = value
        elif key.startswith(uri_prefix):
            templates[key[len(uri_prefix) :]] = value

    for place in sorted(regexes.keys() - templates.keys(), key=_place_sort_key):
        _report(issues, f"{regex_prefix}{place}", "regex has no matching template")
    for place in sorted(templates.keys() - regexes.keys(), key=_place_sort_key):
        _report(issues, f"{uri_prefix}{place}", "template has no matching regex")

    # Second pass: complete records only, in deterministic order.
    patterns: list[PatternMapping] = []
    for place in sorted(regexes.keys() & templates.keys(), key=_place_sort_key):
        template = templates[place]
        if not is_valid_target(template):
            _report(issues, f"{uri_prefix}{place}", "template is not a valid URI")
            continue
        try:
            regex = re.compile(regexes[place])
        except re.error as e:
            _report(issues, f"{regex_prefix}{place}", f"invalid regex: {e}")
            continue
        if strict_templates:
            unknown = unknown_placeholders(template, regex)
            if unknown:
                names = ", ".join(f"${token}" for token in unknown)
                _report(
                    issues,
                    f"{uri_prefix}{place}",
                    f"template references unknown groups: {names}",
                )
                continue
        patterns.append(PatternMapping(place=place, regex=regex, template=template))
    return patterns


def load_uri_mappings(
    environ: EnvironLike,
    prefix: str = DEFAULT_PREFIX,
    *,
    full_match: bool = False,
    strict_templates: bool = False,
) -> LoadResult:
    """Scan ``environ`` once and build the immutable redirect snapshot.

    Args:
        environ: Environment variables, as a mapping or (name, value) pairs.
        prefix: Service prefix shared by every recognized variable.
        full_match: Require patterns to match the whole request path.
        strict_templates: Skip patterns whose template names unknown groups.

    Returns:
        The snapshot together with every entry that was skipped.
    """
    pairs = _pairs(environ)
    names = EnvNames.for_prefix(prefix)
    issues: list[LoadIssue] = []

    standard = extract_standard_uris(pairs, names.standard, issues)
    patterns = extract_pattern_uris(
        pairs,
        names.pattern_uri,
        names.pattern_regex,
        issues,
        strict_templates=strict_templates,
    )

    mappings = UriMappings(
        standard=standard, patterns=tuple(patterns), full_match=full_match
    )
    logger.info(
        "mappings.loaded",
        extra={
            "standard_count": len(mappings.standard),
            "pattern_count": len(mappings.patterns),
            "skipped_count": len(issues),
        },
    )
    for key, url in sorted(mappings.standard.items()):
        logger.debug("mappings.standard", extra={"key": key, "url": url})
    for entry in mappings.patterns:
        logger.debug(
            "mappings.pattern",
            extra={
                "place": entry.place,
                "regex": entry.regex.pattern,
                "template": entry.template,
            },
        )
    return LoadResult(mappings=mappings, issues=tuple(issues))
