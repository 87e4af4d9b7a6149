"""Errors raised while obtaining the fragments to compare."""

from __future__ import annotations


class StructDiffError(Exception):
    pass


class RetrievalError(StructDiffError):
    """A page or file could not be loaded. Aborts the run before comparison."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class SelectorNotFound(RetrievalError):
    """The selector matched nothing once the page had settled."""

    def __init__(self, selector: str, source: str | None = None):
        super().__init__(source or "(document)", f"selector {selector!r} not found")
        self.selector = selector
