"""
Read-only probe of the proxy's REST introspection API.

Used as a preflight before launching a browser and for triage when a
dashboard check fails: the API tells whether an entity is missing from the
live configuration or merely missing from the rendered page.
"""
import logging
import os
import time
from typing import Dict, Iterable, List, Optional

import requests

from .catalog import VIEWS, ExpectedCatalog
from .errors import NavigationError

logger = logging.getLogger(__name__)

# Plugins compiled into the proxy build, keyed by their default plugin name.
EMBEDDED_PLUGINS = ("modsecurity", "realip", "crowdsec", "geoblock", "sablier")


def embedded_plugin_keys(env: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Map each embedded plugin to the key it is registered under.

    TRAEFIK_EMBEDDED_<NAME>_KEY renames a plugin, e.g.
    TRAEFIK_EMBEDDED_CROWDSEC_KEY=bouncer registers crowdsec as "bouncer".
    """
    env = os.environ if env is None else env
    keys = {}
    for name in EMBEDDED_PLUGINS:
        custom = (env.get(f"TRAEFIK_EMBEDDED_{name.upper()}_KEY") or "").strip()
        keys[name] = custom or name
    return keys


class ApiProbe:
    """Thin requests client for /api/http/{middlewares,routers,services}."""

    PER_PAGE = 100

    def __init__(self, base_url: str, dashboard_path: str = "/dashboard/", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.dashboard_path = dashboard_path
        self.timeout = timeout
        self.session = requests.Session()

    def _get(self, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise NavigationError(url, str(e)) from e

    def wait_until_ready(self, timeout: float = 30.0, interval: float = 0.5) -> None:
        """Poll the dashboard root until the proxy answers without a 5xx."""
        url = f"{self.base_url}{self.dashboard_path}"
        deadline = time.monotonic() + timeout
        last_error = "no response"
        while True:
            try:
                resp = self.session.get(url, timeout=self.timeout)
                if resp.status_code < 500:
                    logger.info(f"Target ready: {url} ({resp.status_code})")
                    return
                last_error = f"HTTP {resp.status_code}"
            except requests.exceptions.RequestException as e:
                last_error = str(e)
            if time.monotonic() >= deadline:
                raise NavigationError(url, f"not ready after {timeout}s: {last_error}")
            time.sleep(interval)

    def entities(self, kind: str) -> List[Dict]:
        """All entities of one kind, following the API's pagination."""
        if kind not in VIEWS:
            raise KeyError(f"Unknown entity kind: {kind}")

        results: List[Dict] = []
        page = 1
        while True:
            resp = self._get(f"/api/http/{kind}", params={"page": page, "per_page": self.PER_PAGE})
            if resp.status_code >= 400:
                raise NavigationError(resp.url, f"HTTP {resp.status_code}")
            results.extend(resp.json() or [])

            next_page = int(resp.headers.get("X-Next-Page", "1") or 1)
            if next_page <= page:
                return results
            page = next_page

    def entity_names(self, kind: str) -> List[str]:
        return [entity.get("name", "") for entity in self.entities(kind)]

    def entity_errors(self, kind: str) -> Dict[str, List[str]]:
        """Entities that are not enabled or report configuration errors."""
        problems: Dict[str, List[str]] = {}
        for entity in self.entities(kind):
            errors = list(entity.get("error") or [])
            status = entity.get("status", "enabled")
            if status != "enabled" and not errors:
                errors.append(f"status: {status}")
            if errors:
                problems[entity.get("name", "?")] = errors
        return problems

    def missing(self, catalog: ExpectedCatalog, kinds: Iterable[str] = VIEWS) -> Dict[str, List[str]]:
        """Catalog identifiers the live API does not know about, by kind."""
        result = {}
        for kind in kinds:
            names = set(self.entity_names(kind))
            absent = [i for i in catalog.expected(kind) if i not in names]
            if absent:
                result[kind] = absent
        return result

    def unknown_plugins(self, plugin_keys: Optional[Dict[str, str]] = None) -> Dict[str, List[str]]:
        """Plugin middlewares whose plugin key is not an embedded plugin."""
        known = set((plugin_keys or embedded_plugin_keys()).values())
        unknown = {}
        for entity in self.entities("middlewares"):
            plugin = entity.get("plugin")
            if not isinstance(plugin, dict):
                continue
            keys = [key for key in plugin if key not in known]
            if keys:
                unknown[entity.get("name", "?")] = keys
        return unknown

    def report(self, catalog: ExpectedCatalog) -> bool:
        """Log a triage report; returns True when the API looks healthy."""
        healthy = True
        for kind, absent in self.missing(catalog).items():
            healthy = False
            logger.error(f"API is missing {kind}: {', '.join(absent)}")
        for kind in VIEWS:
            for name, errors in self.entity_errors(kind).items():
                healthy = False
                logger.error(f"{kind[:-1]} {name}: {'; '.join(errors)}")
        for name, keys in self.unknown_plugins().items():
            healthy = False
            logger.error(f"middleware {name} uses non-embedded plugin(s): {', '.join(keys)}")
        return healthy

    def close(self) -> None:
        self.session.close()
