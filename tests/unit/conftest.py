"""
Browser-free fakes for the Playwright page, used by the unit tests.
"""
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from unittest.mock import patch

import pytest
from playwright.sync_api import Error as PlaywrightError

from dashboard_e2e.config import HarnessConfig


class FakeElement:
    """Stands in for Locator.first."""

    def __init__(self, page: "FakePage", text: str = "", href: Optional[str] = None):
        self.page = page
        self.text = text
        self.href = href

    def click(self, **kwargs) -> None:
        self.page.clicks.append((self.text or self.href, kwargs))
        if self.href and self.href.startswith("#"):
            self.page.url = self.page.url.split("#")[0] + self.href


class FakeLocator:
    def __init__(self, page: "FakePage", elements: Sequence[FakeElement] = ()):
        self.page = page
        self.elements = list(elements)

    def count(self) -> int:
        return len(self.elements)

    @property
    def first(self):
        return self.elements[0] if self.elements else FakeLocator(self.page)

    def filter(self, has_text=None) -> "FakeLocator":
        if has_text is None:
            return self
        if isinstance(has_text, str):
            return FakeLocator(self.page, [e for e in self.elements if has_text in e.text])
        return FakeLocator(self.page, [e for e in self.elements if has_text.search(e.text)])

    def text_content(self, timeout=None) -> str:
        return self.page.current_text()


class FakePage:
    """Minimal sync Page: navigation, body text, links, events."""

    HREF_SELECTOR = re.compile(r'^\[href\*="(.*)"\]$')

    def __init__(
        self,
        body_text: str = "",
        children: int = 1,
        links: Sequence[Tuple[str, Optional[str]]] = (),
        texts: Sequence[str] = (),
    ):
        self.url = "about:blank"
        self.body_texts: List[str] = [body_text]
        self.children = children
        self.links = [FakeElement(self, text, href) for text, href in links]
        self.texts = list(texts)
        self.visits: List[Tuple[str, int]] = []
        self.waits: List[int] = []
        self.clicks: List[Tuple[str, dict]] = []
        self.listeners: Dict[str, List[Callable]] = {}
        self.goto_error: Optional[Exception] = None
        self.screenshots: List[str] = []
        self.reads = 0
        self.expectations: List[Tuple[str, Optional[str], Optional[int]]] = []

    # navigation
    def goto(self, url: str, timeout: int = None):
        self.visits.append((url, timeout))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url
        return None

    def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)

    # content
    def current_text(self) -> str:
        """Each read advances through body_texts, then sticks on the last one."""
        text = self.body_texts[min(self.reads, len(self.body_texts) - 1)]
        self.reads += 1
        return text

    def locator(self, selector: str) -> FakeLocator:
        if selector == "body":
            return FakeLocator(self, [FakeElement(self)])
        if selector == "body > *":
            return FakeLocator(self, [FakeElement(self)] * self.children)
        if selector == "a, button":
            return FakeLocator(self, [e for e in self.links if e.text])
        match = self.HREF_SELECTOR.match(selector)
        if match:
            needle = match.group(1)
            return FakeLocator(self, [e for e in self.links if e.href and needle in e.href])
        return FakeLocator(self)

    def get_by_text(self, text: str) -> FakeLocator:
        return FakeLocator(self, [FakeElement(self, t) for t in self.texts if text in t])

    def screenshot(self, path: str = None, full_page: bool = False) -> bytes:
        self.screenshots.append(path)
        return b""

    # events
    def on(self, event: str, handler: Callable) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable) -> None:
        self.listeners.get(event, []).remove(handler)

    def emit(self, event: str, payload) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(payload)


class FakeAssertions:
    """Stands in for expect(); retries by re-reading the fake body texts."""

    def __init__(self, actual):
        self.actual = actual
        self.page = actual.page

    def to_contain_text(self, text: str, timeout: int = None) -> None:
        self.page.expectations.append(("to_contain_text", text, timeout))
        for _ in self.page.body_texts:
            if text in (self.actual.text_content() or ""):
                return
        raise AssertionError(f"Locator expected to contain text '{text}'")

    def to_be_attached(self, timeout: int = None) -> None:
        self.page.expectations.append(("to_be_attached", None, timeout))
        if isinstance(self.actual, FakeLocator) and self.actual.count() == 0:
            raise AssertionError("Locator expected to be attached")


@pytest.fixture(autouse=True)
def fake_expect():
    with patch("dashboard_e2e.pages.base_page.expect", FakeAssertions):
        yield


@pytest.fixture
def fast_config(tmp_path) -> HarnessConfig:
    """Config with a short command timeout."""
    return HarnessConfig(
        base_url="http://proxy.test:8080",
        default_command_timeout=100,
        settle_delay=2000,
        click_settle_delay=500,
        artifacts_dir=tmp_path / "artifacts",
    )


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage(body_text="Traefik Proxy waf@docker geoblock@docker")


@pytest.fixture
def unreachable_error() -> PlaywrightError:
    return PlaywrightError("net::ERR_CONNECTION_REFUSED at http://proxy.test:8080/dashboard/")
