"""
Base Page Object

Navigation, settling and snapshots shared by all dashboard page objects.
"""
import logging
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, expect

from ..catalog import PageSnapshot
from ..config.env_config import HarnessConfig
from ..errors import NavigationError
from ..exception_filter import ExceptionFilter
from .targets import NavigationTarget

logger = logging.getLogger(__name__)


class BasePage:
    """Base class for all page objects."""

    BODY = "body"
    BODY_CHILDREN = "body > *"

    def __init__(
        self,
        page: Page,
        config: Optional[HarnessConfig] = None,
        exception_filter: Optional[ExceptionFilter] = None,
    ):
        self.page = page
        self.config = config or HarnessConfig()
        self.exception_filter = exception_filter

    @property
    def base_url(self) -> str:
        return self.config.base_url

    # =========================================================================
    # Navigation
    # =========================================================================

    def goto(self, target: NavigationTarget, settle: Optional[int] = None) -> None:
        """
        Navigate to a dashboard view and wait for client-side rendering.

        The dashboard gives no "ready" signal, so a fixed settle delay is
        used instead of polling.

        Raises:
            NavigationError: the target system is unreachable or too slow.
            UnhandledPageError: an unsuppressed page error occurred.
        """
        if target.base_path != self.config.dashboard_path:
            target = target.with_base_path(self.config.dashboard_path)
        url = target.url(self.base_url)
        logger.debug(f"Navigating to {url}")

        try:
            self.page.goto(url, timeout=self.config.navigation_timeout)
        except PlaywrightError as e:
            raise NavigationError(url, e.message) from e

        self.settle(self.config.settle_delay if settle is None else settle)
        self.check_page_errors()

    def settle(self, milliseconds: int) -> None:
        if milliseconds > 0:
            self.page.wait_for_timeout(milliseconds)

    def current_url(self) -> str:
        return self.page.url

    def check_page_errors(self) -> None:
        if self.exception_filter is not None:
            self.exception_filter.raise_if_triggered(url=self.current_url())

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> PageSnapshot:
        """Read the live body text; never cached between assertions."""
        body = self.page.locator(self.BODY)
        text = body.text_content(timeout=self.config.default_command_timeout) or ""
        return PageSnapshot(
            url=self.current_url(),
            text=text,
            child_count=self.page.locator(self.BODY_CHILDREN).count(),
        )

    def wait_for_text(self, text: str, timeout: Optional[int] = None) -> bool:
        """Wait for text to appear in the body; False once the timeout elapses."""
        timeout = self.config.default_command_timeout if timeout is None else timeout
        try:
            expect(self.page.locator(self.BODY)).to_contain_text(text, timeout=timeout)
        except AssertionError:
            return False
        return True

    def wait_for_content(self, timeout: Optional[int] = None) -> bool:
        """Wait for the body to get at least one child element."""
        timeout = self.config.default_command_timeout if timeout is None else timeout
        try:
            expect(self.page.locator(self.BODY_CHILDREN).first).to_be_attached(timeout=timeout)
        except AssertionError:
            return False
        return True

    # =========================================================================
    # Screenshots and Debugging
    # =========================================================================

    def screenshot(self, path: str = None, full_page: bool = True) -> bytes:
        """Take a screenshot."""
        return self.page.screenshot(path=path, full_page=full_page)
