"""
Attribute exclusion rules.

Operators declare attributes that carry no structural signal (volatile IDs,
tracking parameters, framework markers). Two kinds of rules are supported:

    TAG:ATTR            always drop ATTR on TAG, whatever its value
    TAG:ATTR:PATTERN    drop ATTR on TAG (or on any tag for "*") when the
                        element's own value matches PATTERN

Attributes named ``data-*`` or ``aria-*`` are always dropped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

ALWAYS_EXCLUDED_PREFIXES = ("data-", "aria-")
ANY_TAG = "*"

Attribute = tuple[str, str]


@dataclass(frozen=True)
class RegexRule:
    """Drop an attribute when its own value matches ``pattern``."""

    tag: str  # uppercased tag name, or "*"
    attribute: str
    pattern: re.Pattern[str]

    def matches(self, tag: str, name: str, value: str) -> bool:
        if self.tag != ANY_TAG and self.tag != tag.upper():
            return False
        if self.attribute != name:
            return False
        return self.pattern.search(value) is not None


@dataclass(frozen=True)
class ExclusionRuleSet:
    """Immutable predicate over (tag, attribute name, attribute value)."""

    exact: Mapping[str, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))
    regex: tuple[RegexRule, ...] = ()

    @classmethod
    def build(
        cls,
        exact_spec: str | None = None,
        regex_specs: Iterable[str] | None = None,
    ) -> ExclusionRuleSet:
        """Compile operator configuration. Bad entries are dropped, never fatal."""
        return cls(exact=_parse_exact(exact_spec), regex=_parse_regex(regex_specs))

    def is_excluded(self, tag: str, name: str, value: str) -> bool:
        if name.startswith(ALWAYS_EXCLUDED_PREFIXES):
            return True
        if name in self.exact.get(tag.upper(), ()):
            return True
        return any(rule.matches(tag, name, value) for rule in self.regex)

    def filter_attributes(
        self,
        tag: str,
        attributes: Iterable[Attribute],
        drop_empty: bool = False,
    ) -> list[Attribute]:
        """Return the surviving attributes sorted by name.

        ``drop_empty`` additionally removes attributes with an empty value;
        the canonical dump uses it, the structural comparison does not.
        """
        kept = [
            (name, value)
            for name, value in attributes
            if not self.is_excluded(tag, name, value) and not (drop_empty and value == "")
        ]
        return sorted(kept)

    def describe(self) -> str:
        parts = [f"{tag}:{attr}" for tag in sorted(self.exact) for attr in sorted(self.exact[tag])]
        parts.extend(f"{r.tag}:{r.attribute}:{r.pattern.pattern}" for r in self.regex)
        return ", ".join(parts) if parts else "(none)"


def _parse_exact(exact_spec: str | None) -> Mapping[str, frozenset[str]]:
    if not exact_spec:
        return MappingProxyType({})

    collected: dict[str, set[str]] = {}
    for pair in exact_spec.split(","):
        pair = pair.strip()
        if not pair:
            continue
        tag, sep, attr = pair.partition(":")
        # "A:b:c" keeps "b", same as taking the first two fields
        attr = attr.split(":", 1)[0].strip()
        tag = tag.strip()
        if not sep or not tag or not attr:
            logger.debug("Ignoring malformed exclusion pair %r", pair)
            continue
        collected.setdefault(tag.upper(), set()).add(attr)

    return MappingProxyType({tag: frozenset(attrs) for tag, attrs in collected.items()})


def _parse_regex(regex_specs: Iterable[str] | None) -> tuple[RegexRule, ...]:
    if not regex_specs:
        return ()

    rules = []
    for entry in regex_specs:
        parts = entry.split(":", 2)
        if len(parts) != 3 or not parts[0].strip() or not parts[1].strip():
            logger.warning("Ignoring regex exclusion rule %r: expected TAG:ATTR:PATTERN", entry)
            continue
        tag, attr, pattern = parts[0].strip(), parts[1].strip(), parts[2]
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            logger.warning("Ignoring regex exclusion rule %r: invalid pattern (%s)", entry, e)
            continue
        rules.append(RegexRule(tag=tag if tag == ANY_TAG else tag.upper(), attribute=attr, pattern=compiled))

    return tuple(rules)
