"""
Page Object Models for the dashboard harness.

This package provides page objects that encapsulate navigation, element
location and content checks for test code.
"""

from .base_page import BasePage
from .dashboard_page import DashboardPage
from .locator import (
    ENTITY_STRATEGIES,
    FALLBACK,
    HREF_STRATEGY,
    NAVIGATION_STRATEGIES,
    TEXT_STRATEGY,
    ResilientLocator,
    SelectorStrategy,
)
from .targets import DASHBOARD_ROOT, MIDDLEWARES, ROUTERS, SERVICES, VIEW_TARGETS, NavigationTarget

__all__ = [
    "BasePage",
    "DashboardPage",
    "ResilientLocator",
    "SelectorStrategy",
    "NavigationTarget",
    "TEXT_STRATEGY",
    "HREF_STRATEGY",
    "NAVIGATION_STRATEGIES",
    "ENTITY_STRATEGIES",
    "FALLBACK",
    "DASHBOARD_ROOT",
    "MIDDLEWARES",
    "ROUTERS",
    "SERVICES",
    "VIEW_TARGETS",
]
