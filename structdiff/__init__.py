"""Structural comparison of rendered HTML fragments."""

from .compare import ComparisonResult, Divergence, DivergenceKind, compare, compare_fragments
from .exceptions import RetrievalError, SelectorNotFound, StructDiffError
from .exclusions import ExclusionRuleSet
from .normalize import render_canonical
from .tree import Element, ElementNode, parse_fragment

__all__ = [
    "ComparisonResult",
    "Divergence",
    "DivergenceKind",
    "Element",
    "ElementNode",
    "ExclusionRuleSet",
    "RetrievalError",
    "SelectorNotFound",
    "StructDiffError",
    "compare",
    "compare_fragments",
    "parse_fragment",
    "render_canonical",
]
