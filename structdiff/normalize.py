"""
Canonical text dump of an element tree.

One line per element, indented by depth, with the filtered attributes sorted
by name. Two trees with equal dumps have the same structure as far as the
exclusion rules are concerned, and the dumps can be fed to any line diff.
"""

from __future__ import annotations

import html

from .exclusions import ExclusionRuleSet
from .tree import ElementNode


def format_attributes(attributes: list[tuple[str, str]]) -> str:
    return " ".join(f'{name}="{html.escape(value, quote=True)}"' for name, value in attributes)


def render_canonical(root: ElementNode, rules: ExclusionRuleSet, indent: str = "  ") -> str:
    """Render the element children of ``root`` depth-first, in document order.

    Attributes with an empty value are left out, on top of the exclusion rules.
    The root itself is not emitted.
    """
    lines: list[str] = []
    stack: list[tuple[ElementNode, int]] = [(child, 0) for child in reversed(root.children)]

    while stack:
        node, depth = stack.pop()
        attributes = rules.filter_attributes(node.tag, node.attributes, drop_empty=True)
        line = indent * depth + node.tag.lower()
        if attributes:
            line += " " + format_attributes(attributes)
        lines.append(line)
        stack.extend((child, depth + 1) for child in reversed(node.children))

    return "".join(line + "\n" for line in lines)
