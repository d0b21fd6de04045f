"""
Resilient element location.

The dashboard markup is not ours and changes between releases, so elements
are found by trying an ordered list of selector strategies. The first one
that matches anything wins. New strategies are added to the list without
touching the existing ones.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from playwright.sync_api import Locator, Page

from ..errors import LocatorNotFound
from .targets import NavigationTarget

logger = logging.getLogger(__name__)

FALLBACK = "fallback"


@dataclass(frozen=True)
class SelectorStrategy:
    """A named way of turning a label into a Playwright locator."""

    name: str
    build: Callable[[Page, str], Locator]

    def locate(self, page: Page, label: str) -> Optional[Locator]:
        candidates = self.build(page, label)
        if candidates.count() > 0:
            return candidates.first
        return None


def _by_text(page: Page, label: str) -> Locator:
    """Links and buttons whose visible text contains the label, any case."""
    pattern = re.compile(re.escape(label), re.IGNORECASE)
    return page.locator("a, button").filter(has_text=pattern)


def _by_href(page: Page, label: str) -> Locator:
    """Elements whose href contains the label."""
    needle = label.lower().replace('"', '\\"')
    return page.locator(f'[href*="{needle}"]')


def _by_exact_text(page: Page, label: str) -> Locator:
    """Any element containing the label verbatim, e.g. an entity row."""
    return page.get_by_text(label)


TEXT_STRATEGY = SelectorStrategy("text", _by_text)
HREF_STRATEGY = SelectorStrategy("href", _by_href)
ENTITY_TEXT_STRATEGY = SelectorStrategy("entity-text", _by_exact_text)

NAVIGATION_STRATEGIES = (TEXT_STRATEGY, HREF_STRATEGY)
ENTITY_STRATEGIES = (ENTITY_TEXT_STRATEGY,)


class ResilientLocator:
    """Find and click dashboard elements, degrading to direct navigation."""

    def __init__(self, dashboard, strategies: Sequence[SelectorStrategy] = NAVIGATION_STRATEGIES):
        self.dashboard = dashboard
        self.strategies = tuple(strategies)

    @property
    def page(self) -> Page:
        return self.dashboard.page

    def find(self, label: str, strategies: Optional[Sequence[SelectorStrategy]] = None):
        """
        Return (strategy name, element) for the first strategy that matches,
        or (None, None) if none do.
        """
        for strategy in strategies or self.strategies:
            element = strategy.locate(self.page, label)
            if element is not None:
                logger.debug(f"Located {label!r} with strategy {strategy.name}")
                return strategy.name, element
        return None, None

    def click(self, element: Locator, force: bool = True) -> None:
        """Click, forcing through overlay animations that may obscure the element."""
        element.click(force=force, timeout=self.dashboard.config.default_command_timeout)
        self.dashboard.settle(self.dashboard.config.click_settle_delay)
        self.dashboard.check_page_errors()

    def open(
        self,
        label: str,
        fallback: Optional[NavigationTarget] = None,
        required: bool = False,
        strategies: Optional[Sequence[SelectorStrategy]] = None,
    ) -> str:
        """
        Find the element for label and click it.

        If nothing matches, either raise LocatorNotFound (required=True) or
        navigate straight to the fallback target, guessed from the label when
        not given. Returns the winning strategy name, or "fallback".
        """
        name, element = self.find(label, strategies)
        if element is not None:
            self.click(element)
            return name

        tried = [s.name for s in strategies or self.strategies]
        if required:
            raise LocatorNotFound(label, tried)

        target = fallback or NavigationTarget.from_label(label, self.dashboard.config.dashboard_path)
        logger.info(f"No element for {label!r} (tried: {', '.join(tried)}), navigating to {target}")
        self.dashboard.goto(target)
        return FALLBACK
