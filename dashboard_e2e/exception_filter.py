"""
Uncaught page error filtering.

Playwright reports uncaught client-side errors as "pageerror" events instead
of failing the test. The filter decides per error whether it is a known
third-party defect (suppressed) or a real failure (queued and raised at the
next checkpoint as UnhandledPageError).
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from .errors import UnhandledPageError

logger = logging.getLogger(__name__)


class FilterState(Enum):
    ARMED = "armed"
    TRIGGERED = "triggered"


@dataclass(frozen=True)
class SuppressionRule:
    """String-contains match against an error message, plus a verdict."""

    marker: str
    suppress: bool = True
    reason: str = ""

    def matches(self, message: str) -> bool:
        return self.marker in message


# Traefik Hub button web component fails to register its custom element.
HUB_BUTTON_RULE = SuppressionRule(
    marker="hub-button-app",
    reason="Traefik Hub button custom element registration error",
)

DEFAULT_RULES: Tuple[SuppressionRule, ...] = (HUB_BUTTON_RULE,)


def _error_message(error: Any) -> str:
    """Playwright passes an Error with .message; tests may pass plain strings."""
    message = getattr(error, "message", None)
    if message is None:
        return str(error)
    name = getattr(error, "name", "")
    return f"{name}: {message}" if name and name not in message else message


class ExceptionFilter:
    """Per-scenario filter for uncaught page errors, first matching rule wins."""

    def __init__(self, rules: Optional[Iterable[SuppressionRule]] = None):
        self._defaults = tuple(rules) if rules is not None else DEFAULT_RULES
        self.rules: List[SuppressionRule] = list(self._defaults)
        self.state = FilterState.ARMED
        self.suppressed: List[str] = []
        self.unhandled: List[str] = []

    def reset(self) -> None:
        """Restore the configured rule set and re-arm."""
        self.rules = list(self._defaults)
        self.state = FilterState.ARMED
        self.suppressed = []
        self.unhandled = []

    def match(self, message: str) -> Optional[SuppressionRule]:
        for rule in self.rules:
            if rule.matches(message):
                return rule
        return None

    def on_page_error(self, error: Any) -> bool:
        """
        Handle one uncaught page error.

        Returns True if the error was suppressed. Unsuppressed errors move the
        filter to TRIGGERED; they are raised by raise_if_triggered().
        """
        message = _error_message(error)
        rule = self.match(message)
        if rule is not None and rule.suppress:
            logger.info(f"Suppressed known page error ({rule.marker}): {message}")
            self.suppressed.append(message)
            return True

        logger.error(f"Uncaught page error: {message}")
        self.unhandled.append(message)
        self.state = FilterState.TRIGGERED
        return False

    @property
    def triggered(self) -> bool:
        return self.state is FilterState.TRIGGERED

    def raise_if_triggered(self, url: Optional[str] = None) -> None:
        if self.unhandled:
            raise UnhandledPageError(self.unhandled[0], url=url)

    def attach(self, page) -> None:
        """Register with a Playwright page's "pageerror" event."""
        page.on("pageerror", self.on_page_error)

    def detach(self, page) -> None:
        page.remove_listener("pageerror", self.on_page_error)
