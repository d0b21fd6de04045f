"""
Dashboard Page Object

Encapsulates the Traefik dashboard views and the checks run against them.
"""
import logging
from typing import Iterable, Optional, Sequence, Union

from playwright.sync_api import Page

from ..catalog import (
    ExpectedCatalog,
    ForbiddenPattern,
    PageSnapshot,
    assert_contains_all,
    assert_contains_none,
)
from ..config.env_config import HarnessConfig
from ..errors import LocatorNotFound
from ..exception_filter import ExceptionFilter
from .base_page import BasePage
from .locator import ENTITY_STRATEGIES, ResilientLocator
from .targets import DASHBOARD_ROOT, MIDDLEWARES, ROUTERS, SERVICES, VIEW_TARGETS, NavigationTarget

logger = logging.getLogger(__name__)


class DashboardPage(BasePage):
    """Page object for the embedded Traefik dashboard."""

    NAV_LABELS = {
        "middlewares": "Middleware",
        "routers": "Router",
        "services": "Service",
    }

    def __init__(
        self,
        page: Page,
        config: Optional[HarnessConfig] = None,
        exception_filter: Optional[ExceptionFilter] = None,
        catalog: Optional[ExpectedCatalog] = None,
    ):
        super().__init__(page, config, exception_filter)
        self.catalog = catalog or ExpectedCatalog()
        self.locator = ResilientLocator(self)

    # =========================================================================
    # Navigation
    # =========================================================================

    def open_root(self) -> "DashboardPage":
        self.goto(DASHBOARD_ROOT)
        return self

    def open_middlewares(self) -> "DashboardPage":
        self.goto(MIDDLEWARES)
        return self

    def open_routers(self) -> "DashboardPage":
        self.goto(ROUTERS)
        return self

    def open_services(self) -> "DashboardPage":
        self.goto(SERVICES)
        return self

    def open_view(self, view: str) -> "DashboardPage":
        if view not in VIEW_TARGETS:
            raise KeyError(f"Unknown view: {view}")
        self.goto(VIEW_TARGETS[view])
        return self

    def navigate_via_menu(self, view: str) -> str:
        """
        Reach a view the way a user would, by clicking its menu entry.

        Falls back to the view's hash route when no menu entry is found.
        Returns the strategy that was used.
        """
        return self.locator.open(self.NAV_LABELS[view], fallback=VIEW_TARGETS[view])

    def open_entity(self, identifier: str, required: bool = False) -> bool:
        """
        Force-click the first element showing identifier to open its details.

        An absent entity is tolerated unless required; returns whether a click
        happened.
        """
        name, element = self.locator.find(identifier, ENTITY_STRATEGIES)
        if element is None:
            if required:
                raise LocatorNotFound(identifier, [s.name for s in ENTITY_STRATEGIES])
            logger.info(f"{identifier} not shown on {self.current_url()}, skipping details")
            return False
        self.locator.click(element)
        return True

    # =========================================================================
    # Assertions
    # =========================================================================

    def expect_entities(self, ids: Sequence[str], timeout: Optional[int] = None) -> PageSnapshot:
        """
        Assert every identifier is rendered, waiting up to the command timeout.

        Identifiers are awaited in order. After the first one times out, a
        single snapshot is used to report every identifier still missing.
        """
        for identifier in ids:
            if not self.wait_for_text(identifier, timeout=timeout):
                break
        snapshot = self.snapshot()
        assert_contains_all(snapshot, ids)
        return snapshot

    def expect_view_entities(self, view: str) -> PageSnapshot:
        return self.expect_entities(self.catalog.expected(view))

    def expect_no_errors(
        self, patterns: Optional[Iterable[Union[ForbiddenPattern, str]]] = None
    ) -> PageSnapshot:
        """Assert no forbidden pattern appears in the settled page."""
        snapshot = self.snapshot()
        assert_contains_none(snapshot, self.catalog.forbidden if patterns is None else patterns)
        return snapshot

    def expect_rendered(self) -> PageSnapshot:
        """Assert the real dashboard rendered instead of the placeholder page."""
        self.wait_for_content()
        snapshot = self.snapshot()
        assert_contains_none(snapshot, self.catalog.forbidden_in("placeholder"))
        assert snapshot.child_count > 0, f"Dashboard body is empty on {snapshot.url}"
        return snapshot

    def visit_and_check(self, target: NavigationTarget, ids: Sequence[str] = ()) -> PageSnapshot:
        """Navigate, then assert expected ids and absence of forbidden patterns."""
        self.goto(target)
        if ids:
            self.expect_entities(ids)
        return self.expect_no_errors()
