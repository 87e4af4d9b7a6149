"""Tests for page retrieval error mapping, using fake Playwright objects."""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from structdiff.exceptions import RetrievalError, SelectorNotFound
from structdiff.renderer import fetch_fragment


class FakePage:
    def __init__(self, html="<p></p>", goto_error=None, inner_error=None):
        self.html = html
        self.goto_error = goto_error
        self.inner_error = inner_error
        self.closed = False
        self.calls = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.calls.append(("goto", url, wait_until))
        if self.goto_error:
            raise self.goto_error

    async def inner_html(self, selector, timeout=None):
        self.calls.append(("inner_html", selector))
        if self.inner_error:
            raise self.inner_error
        return self.html

    async def close(self):
        self.closed = True


class FakeContext:
    def __init__(self, page):
        self.page = page

    async def new_page(self):
        return self.page


def run(coro):
    return asyncio.run(coro)


def test_returns_inner_html_after_network_idle():
    page = FakePage(html="<div id='x'></div>")
    html = run(fetch_fragment(FakeContext(page), "https://a.test", "#main"))
    assert html == "<div id='x'></div>"
    assert page.calls == [("goto", "https://a.test", "networkidle"), ("inner_html", "#main")]
    assert page.closed is True


def test_selector_timeout_is_selector_not_found():
    page = FakePage(inner_error=PlaywrightTimeoutError("Timeout 30000ms exceeded. waiting for selector"))
    with pytest.raises(SelectorNotFound) as excinfo:
        run(fetch_fragment(FakeContext(page), "https://a.test", "#main"))
    assert excinfo.value.selector == "#main"
    assert excinfo.value.source == "https://a.test"
    assert page.closed is True


def test_navigation_failure_is_generic():
    page = FakePage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
    with pytest.raises(RetrievalError) as excinfo:
        run(fetch_fragment(FakeContext(page), "https://nope.test", "body"))
    assert not isinstance(excinfo.value, SelectorNotFound)
    assert "ERR_NAME_NOT_RESOLVED" in excinfo.value.message
    assert isinstance(excinfo.value.__cause__, PlaywrightError)
    assert page.closed is True


def test_navigation_timeout_is_generic():
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout exceeded"))
    with pytest.raises(RetrievalError) as excinfo:
        run(fetch_fragment(FakeContext(page), "https://slow.test", "body"))
    assert not isinstance(excinfo.value, SelectorNotFound)
