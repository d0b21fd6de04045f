"""
Advisory recording of dashboard API calls.

Used for triage only: when a forbidden error string shows up, the recorded
calls point at the request that produced it. Nothing here asserts on status
codes.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiCall:
    method: str
    url: str
    status: Optional[int] = None
    failure: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.failure is not None or (self.status is not None and self.status >= 400)

    def __str__(self) -> str:
        outcome = self.failure if self.failure is not None else self.status
        return f"{self.method} {self.url} -> {outcome}"


class ApiCallRecorder:
    """Collects /api/ responses and transport failures seen by a page."""

    def __init__(self, path_fragment: str = "/api/"):
        self.path_fragment = path_fragment
        self.calls: List[ApiCall] = []

    def attach(self, page) -> "ApiCallRecorder":
        page.on("response", self._on_response)
        page.on("requestfailed", self._on_request_failed)
        return self

    def detach(self, page) -> None:
        page.remove_listener("response", self._on_response)
        page.remove_listener("requestfailed", self._on_request_failed)

    def _matches(self, url: str) -> bool:
        return self.path_fragment in url

    def _on_response(self, response) -> None:
        if not self._matches(response.url):
            return
        self.calls.append(ApiCall(response.request.method, response.url, status=response.status))

    def _on_request_failed(self, request) -> None:
        if not self._matches(request.url):
            return
        self.calls.append(ApiCall(request.method, request.url, failure=request.failure or "failed"))

    def failed(self) -> List[ApiCall]:
        return [call for call in self.calls if call.failed]

    def log_summary(self) -> None:
        failures = self.failed()
        logger.info(f"Observed {len(self.calls)} API calls, {len(failures)} failed")
        for call in failures:
            logger.warning(f"API call failed: {call}")
