"""
Playwright E2E Test Configuration and Fixtures

Shared fixtures for the dashboard scenarios. Every scenario gets its own
browser context, page and ScenarioContext; nothing is shared between them.
"""
import logging
from typing import Any, Dict, Generator

import pytest

# Skip entire module if playwright not installed
pytest.importorskip("playwright")

from playwright.sync_api import Browser, BrowserContext, Page

from dashboard_e2e.catalog import ExpectedCatalog, load_catalog
from dashboard_e2e.config import HarnessConfig
from dashboard_e2e.scenario import ScenarioContext

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture(scope="session")
def harness_config() -> HarnessConfig:
    """DASHBOARD_* settings for this run."""
    config = HarnessConfig.from_env()
    logger.info(f"[E2E] Target: {config.base_url}{config.dashboard_path}")
    return config


@pytest.fixture(scope="session")
def catalog(harness_config: HarnessConfig) -> ExpectedCatalog:
    return load_catalog(harness_config.catalog_path)


# =============================================================================
# Browser Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def browser_type_launch_args(harness_config: HarnessConfig) -> Dict[str, Any]:
    """Browser launch arguments."""
    return {"headless": harness_config.headless}


@pytest.fixture(scope="session")
def browser_context_args(harness_config: HarnessConfig) -> Dict[str, Any]:
    """Browser context arguments."""
    args = {
        "viewport": {"width": 1280, "height": 720},
        "ignore_https_errors": True,
    }

    if harness_config.video:
        harness_config.artifacts_dir.mkdir(parents=True, exist_ok=True)
        args["record_video_dir"] = str(harness_config.artifacts_dir / "videos")

    return args


@pytest.fixture
def context(
    browser: Browser, browser_context_args: Dict, harness_config: HarnessConfig
) -> Generator[BrowserContext, None, None]:
    """Create a new browser context for each test."""
    context = browser.new_context(**browser_context_args)
    context.set_default_timeout(harness_config.default_command_timeout)
    context.set_default_navigation_timeout(harness_config.navigation_timeout)

    yield context

    context.close()


@pytest.fixture
def page(context: BrowserContext) -> Generator[Page, None, None]:
    """Create a new page for each test."""
    page = context.new_page()

    yield page

    page.close()


# =============================================================================
# Scenario Fixtures
# =============================================================================


@pytest.fixture
def scenario(
    request, page: Page, harness_config: HarnessConfig, catalog: ExpectedCatalog
) -> Generator[ScenarioContext, None, None]:
    """
    Per-scenario context with a freshly armed exception filter.

    Captures a screenshot when the scenario fails and raises any uncaught
    page error that arrived after the last checkpoint, unless the scenario
    already failed.
    """
    ctx = ScenarioContext(page, harness_config, catalog, name=request.node.name).attach()

    yield ctx

    rep_call = getattr(request.node, "rep_call", None)
    ctx.close(failed=rep_call is not None and rep_call.failed)


@pytest.fixture
def dashboard(scenario: ScenarioContext):
    return scenario.dashboard


# =============================================================================
# Hooks
# =============================================================================


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Store test results for use in fixtures."""
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "e2e: browser scenarios against a live proxy")
    config.addinivalue_line("markers", "smoke: marks tests as smoke tests")
