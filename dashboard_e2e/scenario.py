"""
Per-scenario execution context.

Each scenario gets its own context: one page, one exception filter, one
dashboard page object. Nothing is shared between scenarios or between
browser contexts running in parallel.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from playwright.sync_api import Page

from .catalog import ExpectedCatalog
from .config.env_config import HarnessConfig
from .errors import UnhandledPageError
from .exception_filter import ExceptionFilter
from .network import ApiCallRecorder
from .pages.dashboard_page import DashboardPage

logger = logging.getLogger(__name__)


@dataclass
class ScenarioContext:
    page: Page
    config: HarnessConfig
    catalog: ExpectedCatalog
    exception_filter: Optional[ExceptionFilter] = None
    name: str = "scenario"

    def __post_init__(self):
        if self.exception_filter is None:
            self.exception_filter = ExceptionFilter(self.catalog.suppression_rules)
        self.dashboard = DashboardPage(self.page, self.config, self.exception_filter, self.catalog)
        self._recorder: Optional[ApiCallRecorder] = None

    def attach(self) -> "ScenarioContext":
        """Arm the exception filter for this scenario's page."""
        self.exception_filter.reset()
        self.exception_filter.attach(self.page)
        return self

    def record_api_calls(self) -> ApiCallRecorder:
        if self._recorder is None:
            self._recorder = ApiCallRecorder().attach(self.page)
        return self._recorder

    def capture_failure(self) -> Optional[Path]:
        """Save a diagnostic screenshot; never masks the original failure."""
        if not self.config.screenshot_on_failure:
            return None
        self.config.artifacts_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_name = self.name.replace("/", "_").replace(":", "_").replace("[", "_").replace("]", "")
        path = self.config.artifacts_dir / f"failure_{safe_name}_{timestamp}.png"
        try:
            self.dashboard.screenshot(path=str(path))
        except Exception as e:
            logger.warning(f"Could not capture screenshot for {self.name}: {e}")
            return None
        logger.info(f"Screenshot saved: {path}")
        return path

    def close(self, failed: bool = False) -> None:
        """
        Detach listeners and finish the scenario.

        A scenario that already failed gets its screenshot here and any late
        page error is only logged, so one defect is reported once. Otherwise a
        page error that arrived after the last checkpoint is raised, with a
        screenshot taken first.
        """
        if self._recorder is not None:
            self._recorder.log_summary()
            self._recorder.detach(self.page)
        self.exception_filter.detach(self.page)
        if failed:
            self.capture_failure()
            for message in self.exception_filter.unhandled:
                logger.warning(f"Uncaught page error in failed scenario {self.name}: {message}")
            return
        try:
            self.exception_filter.raise_if_triggered(url=self.page.url)
        except UnhandledPageError:
            self.capture_failure()
            raise
