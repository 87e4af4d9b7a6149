"""
Positional structural comparison of two element trees.

Children are aligned strictly by index. When two elements have a different
number of element children, the mismatch is recorded at that element and its
children are not compared at all. Otherwise each child pair is checked for
tag name and filtered attributes, and then descended into whether or not it
matched, so deeper differences are still found.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .exclusions import ExclusionRuleSet
from .tree import ElementNode, parse_fragment


class DivergenceKind(enum.Enum):
    CHILD_COUNT = "child_count"
    TAG = "tag"
    ATTRIBUTE_COUNT = "attribute_count"
    ATTRIBUTE_VALUE = "attribute_value"


@dataclass(frozen=True)
class Divergence:
    """One mismatch between the two trees at ``path``.

    ``detail_a``/``detail_b`` hold the conflicting values of each side:
    child or attribute counts, tag names, or ``(name, value)`` pairs.
    """

    path: str
    kind: DivergenceKind
    detail_a: Any
    detail_b: Any
    attribute_index: int | None = None


@dataclass
class ComparisonResult:
    root_label: str
    divergences: list[Divergence] = field(default_factory=list)
    nodes_compared: int = 0

    @property
    def identical(self) -> bool:
        return not self.divergences

    def paths(self) -> list[str]:
        """Distinct divergence paths, in report order."""
        return list(dict.fromkeys(d.path for d in self.divergences))


def child_path(parent: str, tag: str, index: int) -> str:
    """Path segment for the ``index``-th (1-based) element child."""
    return f"{parent} > {tag.lower()}:nth-child({index})"


def compare_attributes(
    node_a: ElementNode,
    node_b: ElementNode,
    path: str,
    rules: ExclusionRuleSet,
) -> list[Divergence]:
    """Compare the filtered, name-sorted attributes of two elements.

    Both sides are filtered under side A's tag, the one that labels the
    path. Values are still checked per side, so a regex rule only suppresses
    the side whose value actually matches.
    """
    attrs_a = rules.filter_attributes(node_a.tag, node_a.attributes)
    attrs_b = rules.filter_attributes(node_a.tag, node_b.attributes)

    if len(attrs_a) != len(attrs_b):
        return [Divergence(path, DivergenceKind.ATTRIBUTE_COUNT, len(attrs_a), len(attrs_b))]

    return [
        Divergence(path, DivergenceKind.ATTRIBUTE_VALUE, pair_a, pair_b, attribute_index=i)
        for i, (pair_a, pair_b) in enumerate(zip(attrs_a, attrs_b))
        if pair_a != pair_b
    ]


def compare(
    root_a: ElementNode,
    root_b: ElementNode,
    root_label: str,
    rules: ExclusionRuleSet,
) -> ComparisonResult:
    """Compare the subtrees below ``root_a`` and ``root_b``.

    The roots' own tags and attributes are not compared; ``root_label`` names
    them in reported paths. Divergences come out in the order a recursive
    depth-first walk would find them.
    """
    result = ComparisonResult(root_label=root_label)
    # (node_a, node_b, path, is_root)
    stack: list[tuple[ElementNode, ElementNode, str, bool]] = [(root_a, root_b, root_label, True)]

    while stack:
        node_a, node_b, path, is_root = stack.pop()
        result.nodes_compared += 1

        if not is_root:
            if node_a.tag.lower() != node_b.tag.lower():
                result.divergences.append(
                    Divergence(path, DivergenceKind.TAG, node_a.tag.lower(), node_b.tag.lower())
                )
            result.divergences.extend(compare_attributes(node_a, node_b, path, rules))

        children_a = node_a.children
        children_b = node_b.children
        if len(children_a) != len(children_b):
            result.divergences.append(
                Divergence(path, DivergenceKind.CHILD_COUNT, len(children_a), len(children_b))
            )
            continue

        pairs = [
            (child_a, child_b, child_path(path, child_a.tag, i), False)
            for i, (child_a, child_b) in enumerate(zip(children_a, children_b), start=1)
        ]
        stack.extend(reversed(pairs))

    return result


def compare_fragments(
    html_a: str,
    html_b: str,
    selector: str,
    rules: ExclusionRuleSet,
) -> ComparisonResult:
    """Parse two fragments and compare them, labelling paths with ``selector``."""
    return compare(parse_fragment(html_a), parse_fragment(html_b), selector, rules)
