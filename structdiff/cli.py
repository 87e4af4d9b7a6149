"""
Compare the HTML structure inside a selector on two pages.

Usage:
    structdiff URL_A URL_B [-s SELECTOR] [-e TAG:ATTR,...] [-r TAG:ATTR:PATTERN ...]
    structdiff URL_A URL_B --dump out/home      # writes out/home_a, out/home_b
    structdiff a.html b.html --local            # compare local files, no browser

Exit status: 0 identical, 1 differences found, 2 the fragments could not be
obtained.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .compare import compare
from .exceptions import RetrievalError, SelectorNotFound
from .exclusions import ExclusionRuleSet
from .normalize import render_canonical
from .renderer import DEFAULT_TIMEOUT_MS, fetch_fragments
from .report import err, log, print_dump_report, print_inline_report, write_canonical_dumps
from .tree import parse_fragment, select_fragment

logger = logging.getLogger(__name__)

DEFAULT_SELECTOR = "body"
EXIT_RETRIEVAL_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structdiff",
        description="Compare the DOM structure inside a selector on two pages.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url_a", help="First page (or file with --local)")
    parser.add_argument("url_b", help="Second page (or file with --local)")
    parser.add_argument(
        "-s",
        "--selector",
        default=DEFAULT_SELECTOR,
        help=f"CSS selector of the element to compare (default: {DEFAULT_SELECTOR})",
    )
    parser.add_argument(
        "-e",
        "--exclude-attrs",
        metavar="TAG:ATTR[,TAG:ATTR...]",
        default=None,
        help="Attributes to ignore on a tag, e.g. 'IMG:src,A:href'",
    )
    parser.add_argument(
        "-r",
        "--exclude-regex",
        metavar="TAG:ATTR:PATTERN",
        action="append",
        default=[],
        help="Ignore ATTR on TAG ('*' for any tag) when its value matches PATTERN (repeatable)",
    )
    parser.add_argument(
        "--dump",
        metavar="PREFIX",
        type=Path,
        default=None,
        help="Write canonical structure dumps to PREFIX_a / PREFIX_b instead of reporting inline",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        help="Treat the two arguments as local HTML files instead of URLs",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT_MS,
        help=f"Navigation and selector timeout in ms (default: {DEFAULT_TIMEOUT_MS})",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_local_fragments(path_a: str, path_b: str, selector: str) -> tuple[str, str]:
    fragments = []
    for path in (path_a, path_b):
        try:
            document = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise RetrievalError(path, str(e)) from e
        try:
            fragments.append(select_fragment(document, selector))
        except SelectorNotFound as e:
            raise SelectorNotFound(selector, path) from e
    return fragments[0], fragments[1]


def obtain_fragments(args: argparse.Namespace) -> tuple[str, str]:
    if args.local:
        return read_local_fragments(args.url_a, args.url_b, args.selector)
    return asyncio.run(
        fetch_fragments(
            args.url_a,
            args.url_b,
            args.selector,
            timeout_ms=args.timeout,
            headless=not args.headed,
        )
    )


def run(args: argparse.Namespace) -> int:
    rules = ExclusionRuleSet.build(args.exclude_attrs, args.exclude_regex)

    log(f'Comparing HTML structure inside selector "{args.selector}" of:')
    log(f"- {args.url_a}")
    log(f"- {args.url_b}")
    log()
    if args.exclude_attrs or args.exclude_regex:
        log(f"Excluding attributes: {rules.describe()}")

    try:
        html_a, html_b = obtain_fragments(args)
    except SelectorNotFound as e:
        err(f'Error: The selector "{e.selector}" was not found on {e.source}.')
        return EXIT_RETRIEVAL_FAILED
    except RetrievalError as e:
        err(f"An error occurred while loading {e.source}: {e.message}")
        return EXIT_RETRIEVAL_FAILED

    root_a = parse_fragment(html_a)
    root_b = parse_fragment(html_b)

    if args.dump is not None:
        text_a = render_canonical(root_a, rules)
        text_b = render_canonical(root_b, rules)
        paths = write_canonical_dumps(text_a, text_b, args.dump)
        return print_dump_report(text_a, text_b, paths)

    result = compare(root_a, root_b, args.selector, rules)
    logger.debug("Compared %d node pairs", result.nodes_compared)
    return print_inline_report(result, args.selector)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        return run(args)
    except KeyboardInterrupt:
        log("\n\nInterrupted!")
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
