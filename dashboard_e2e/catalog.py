"""
Assertion Catalog

Expected entity identifiers per dashboard view, forbidden error strings by
category, and the two pure checks that compare them to a page snapshot.
Identifiers are opaque tokens; only substring presence is checked.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .config.config_loader import ConfigLoader
from .errors import ForbiddenContentError, MissingEntityError
from .exception_filter import DEFAULT_RULES, SuppressionRule

logger = logging.getLogger(__name__)

VIEWS = ("middlewares", "routers", "services")


@dataclass(frozen=True)
class PageSnapshot:
    """Rendered page text at the moment an assertion runs."""

    url: str
    text: str
    child_count: int = 0

    def contains(self, value: str) -> bool:
        return value in self.text


@dataclass(frozen=True)
class ForbiddenPattern:
    text: str
    category: str


@dataclass(frozen=True)
class ExpectedCatalog:
    """Ground truth for one run; never mutated by the harness."""

    middlewares: Tuple[str, ...] = ()
    routers: Tuple[str, ...] = ()
    services: Tuple[str, ...] = ()
    forbidden: Tuple[ForbiddenPattern, ...] = ()
    suppression_rules: Tuple[SuppressionRule, ...] = DEFAULT_RULES

    def expected(self, view: str) -> Tuple[str, ...]:
        if view not in VIEWS:
            raise KeyError(f"Unknown view: {view}")
        return getattr(self, view)

    def forbidden_in(self, *categories: str) -> Tuple[ForbiddenPattern, ...]:
        """Forbidden patterns, optionally restricted to some categories."""
        if not categories:
            return self.forbidden
        return tuple(p for p in self.forbidden if p.category in categories)

    @property
    def categories(self) -> List[str]:
        seen: List[str] = []
        for pattern in self.forbidden:
            if pattern.category not in seen:
                seen.append(pattern.category)
        return seen

    @classmethod
    def from_dict(cls, data: Mapping) -> "ExpectedCatalog":
        expected = data.get("expected") or {}
        forbidden = data.get("forbidden") or {}
        patterns = [
            ForbiddenPattern(text=str(text), category=category)
            for category, texts in forbidden.items()
            for text in texts or ()
        ]
        rules = data.get("suppressed_page_errors")
        if rules is None:
            suppression = DEFAULT_RULES
        else:
            suppression = tuple(
                SuppressionRule(
                    marker=rule["marker"],
                    suppress=rule.get("suppress", True),
                    reason=rule.get("reason", ""),
                )
                for rule in rules
            )
        return cls(
            middlewares=tuple(str(i) for i in expected.get("middlewares") or ()),
            routers=tuple(str(i) for i in expected.get("routers") or ()),
            services=tuple(str(i) for i in expected.get("services") or ()),
            forbidden=tuple(patterns),
            suppression_rules=suppression,
        )


def load_catalog(override_path: Optional[Path] = None, loader: Optional[ConfigLoader] = None) -> ExpectedCatalog:
    """Load the packaged catalog, merged with an optional override YAML."""
    loader = loader or ConfigLoader()
    data = loader.load("catalog", override_path=override_path)
    catalog = ExpectedCatalog.from_dict(data)
    logger.debug(
        f"Catalog: {len(catalog.middlewares)} middlewares, {len(catalog.routers)} routers, "
        f"{len(catalog.services)} services, {len(catalog.forbidden)} forbidden patterns"
    )
    return catalog


# =============================================================================
# Checks
# =============================================================================


def missing_ids(snapshot: PageSnapshot, ids: Iterable[str]) -> List[str]:
    return [i for i in ids if not snapshot.contains(i)]


def assert_contains_all(snapshot: PageSnapshot, ids: Sequence[str]) -> None:
    """Every identifier must appear in the snapshot; all absent ones are reported."""
    missing = missing_ids(snapshot, ids)
    if missing:
        raise MissingEntityError(missing, url=snapshot.url)


def assert_contains_none(
    snapshot: PageSnapshot, patterns: Iterable[Union[ForbiddenPattern, str]]
) -> None:
    """No forbidden pattern may appear in the snapshot; fails on the first match."""
    for pattern in patterns:
        if isinstance(pattern, ForbiddenPattern):
            text, category = pattern.text, pattern.category
        else:
            text, category = pattern, ""
        if snapshot.contains(text):
            raise ForbiddenContentError(text, category=category, url=snapshot.url)
