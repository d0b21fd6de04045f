"""
Navigation targets: a dashboard base path plus an optional in-app hash route.
"""
from dataclasses import dataclass
from typing import Optional

DEFAULT_DASHBOARD_PATH = "/dashboard/"


@dataclass(frozen=True)
class NavigationTarget:
    """One dashboard view, built per scenario and consumed once."""

    base_path: str = DEFAULT_DASHBOARD_PATH
    hash_route: Optional[str] = None

    def url(self, base_url: str) -> str:
        url = f"{base_url.rstrip('/')}{self.base_path}"
        if self.hash_route:
            url = f"{url}{self.hash_route}"
        return url

    def with_base_path(self, base_path: str) -> "NavigationTarget":
        return NavigationTarget(base_path=base_path, hash_route=self.hash_route)

    @classmethod
    def from_label(cls, label: str, base_path: str = DEFAULT_DASHBOARD_PATH) -> "NavigationTarget":
        """
        Guess a hash route from a navigation label.

        "Middleware" -> "#/http/middlewares". Labels that already look like a
        route ("#/..." or "/...") are used as given.
        """
        label = label.strip()
        if label.startswith("#/"):
            return cls(base_path, label)
        if label.startswith("/"):
            return cls(base_path, f"#{label}")

        segment = label.lower().replace(" ", "-")
        if not segment.endswith("s"):
            segment = f"{segment}s"
        return cls(base_path, f"#/http/{segment}")

    def __str__(self) -> str:
        return f"{self.base_path}{self.hash_route or ''}"


DASHBOARD_ROOT = NavigationTarget()
MIDDLEWARES = NavigationTarget(hash_route="#/http/middlewares")
ROUTERS = NavigationTarget(hash_route="#/http/routers")
SERVICES = NavigationTarget(hash_route="#/http/services")

VIEW_TARGETS = {
    "root": DASHBOARD_ROOT,
    "middlewares": MIDDLEWARES,
    "routers": ROUTERS,
    "services": SERVICES,
}
