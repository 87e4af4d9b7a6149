"""
Operator-facing output for a comparison.

Two strategies share the same core:

* inline: print every divergence with its path and both sides' values, then
  a pass/fail line;
* canonical dump: write each side's canonical text to ``{prefix}_a`` and
  ``{prefix}_b`` and compare the texts, leaving the detailed diff to an
  external line diff tool.
"""

from __future__ import annotations

import difflib
import sys
from pathlib import Path

from .compare import ComparisonResult, Divergence, DivergenceKind

# ANSI color codes for TTY output
IS_TTY = sys.stdout.isatty()
RED = "\033[91m" if IS_TTY else ""
GREEN = "\033[92m" if IS_TTY else ""
RESET = "\033[0m" if IS_TTY else ""
BOLD = "\033[1m" if IS_TTY else ""


def log(msg: str = "") -> None:
    """Print a message and flush stdout immediately."""
    print(msg, flush=True)


def err(msg: str = "") -> None:
    print(msg, file=sys.stderr, flush=True)


# =============================================================================
# Inline verdict
# =============================================================================


def _format_pair(pair: tuple[str, str]) -> str:
    name, value = pair
    return f'{name}="{value}"'


def format_divergence(div: Divergence) -> list[str]:
    """Describe a divergence as a headline plus one line per side."""
    if div.kind is DivergenceKind.CHILD_COUNT:
        return [
            f'Different number of child elements at path "{div.path}".',
            f"   - A has {div.detail_a} children, B has {div.detail_b}.",
        ]
    if div.kind is DivergenceKind.TAG:
        return [
            f'Different tag names at path "{div.path}".',
            f"   - A: <{div.detail_a}>, B: <{div.detail_b}>",
        ]
    if div.kind is DivergenceKind.ATTRIBUTE_COUNT:
        return [
            f'Different number of attributes at path "{div.path}".',
            f"   - A has {div.detail_a}, B has {div.detail_b}.",
        ]
    return [
        f'Different attributes at path "{div.path}".',
        f"   - A: {_format_pair(div.detail_a)}",
        f"   - B: {_format_pair(div.detail_b)}",
    ]


def print_inline_report(result: ComparisonResult, selector: str) -> int:
    """Print each divergence to stderr and a final verdict. Returns the exit status."""
    for div in result.divergences:
        headline, *details = format_divergence(div)
        err(f"{RED}Difference found:{RESET} {headline}")
        for line in details:
            err(line)

    if result.identical:
        log(f'{GREEN}PASS{RESET}: The HTML structure inside "{selector}" is identical (with specified exclusions).')
        return 0

    err()
    err(
        f"{RED}FAIL{RESET}: {len(result.divergences)} structural difference(s) found "
        f"at {len(result.paths())} path(s) ({result.nodes_compared} nodes compared)."
    )
    return 1


# =============================================================================
# Canonical dump
# =============================================================================


def write_canonical_dumps(text_a: str, text_b: str, prefix: str | Path) -> tuple[Path, Path]:
    """Write both canonical texts next to each other and return their paths."""
    prefix = Path(prefix)
    path_a = prefix.with_name(f"{prefix.name}_a")
    path_b = prefix.with_name(f"{prefix.name}_b")
    path_a.parent.mkdir(parents=True, exist_ok=True)
    path_a.write_text(text_a, encoding="utf-8")
    path_b.write_text(text_b, encoding="utf-8")
    return path_a, path_b


def diff_summary(text_a: str, text_b: str) -> str:
    diff = list(difflib.unified_diff(text_a.splitlines(), text_b.splitlines(), lineterm="", n=0))
    additions = sum(1 for line in diff if line.startswith("+") and not line.startswith("+++"))
    deletions = sum(1 for line in diff if line.startswith("-") and not line.startswith("---"))
    return f"+{additions}/-{deletions} lines"


def print_dump_report(text_a: str, text_b: str, paths: tuple[Path, Path]) -> int:
    """Report the canonical-dump verdict. Returns the exit status."""
    path_a, path_b = paths
    log(f"Wrote canonical structure of A to {path_a}")
    log(f"Wrote canonical structure of B to {path_b}")

    if text_a == text_b:
        log(f"{GREEN}PASS{RESET}: Canonical structures are identical.")
        return 0

    err(f"{RED}FAIL{RESET}: Canonical structures differ ({diff_summary(text_a, text_b)}).")
    err("Inspect the differences with:")
    err(f"  {BOLD}diff -u {path_a} {path_b}{RESET}")
    return 1
