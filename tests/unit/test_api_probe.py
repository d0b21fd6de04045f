"""Unit tests for the REST API probe."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from dashboard_e2e.api_probe import EMBEDDED_PLUGINS, ApiProbe, embedded_plugin_keys
from dashboard_e2e.catalog import load_catalog
from dashboard_e2e.errors import NavigationError

MIDDLEWARES = [
    {"name": "waf@docker", "status": "enabled", "plugin": {"modsecurity": {}}},
    {"name": "geoblock@docker", "status": "enabled", "plugin": {"geoblock": {}}},
    {
        "name": "crowdsec@docker",
        "status": "disabled",
        "error": ["unknown plugin type: bouncer"],
        "plugin": {"bouncer": {}},
    },
    {"name": "realip@docker", "status": "warning"},
]


def make_response(payload, status=200, headers=None, url="http://p/api"):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    response.headers = headers or {}
    response.url = url
    return response


@pytest.fixture
def probe():
    return ApiProbe("http://proxy.test:8080/")


class TestEmbeddedPluginKeys:
    def test_defaults(self):
        assert embedded_plugin_keys({}) == {name: name for name in EMBEDDED_PLUGINS}

    def test_remapped_key(self):
        keys = embedded_plugin_keys({"TRAEFIK_EMBEDDED_CROWDSEC_KEY": " bouncer "})
        assert keys["crowdsec"] == "bouncer"
        assert keys["geoblock"] == "geoblock"


class TestEntities:
    def test_entity_names(self, probe):
        with patch.object(probe.session, "get", return_value=make_response(MIDDLEWARES)) as get:
            names = probe.entity_names("middlewares")

        assert names == ["waf@docker", "geoblock@docker", "crowdsec@docker", "realip@docker"]
        url = get.call_args[0][0]
        assert url == "http://proxy.test:8080/api/http/middlewares"

    def test_pagination(self, probe):
        pages = [
            make_response([{"name": "a@docker"}], headers={"X-Next-Page": "2"}),
            make_response([{"name": "b@docker"}], headers={"X-Next-Page": "1"}),
        ]
        with patch.object(probe.session, "get", side_effect=pages) as get:
            assert probe.entity_names("routers") == ["a@docker", "b@docker"]

        assert get.call_args_list[1][1]["params"]["page"] == 2

    def test_unknown_kind(self, probe):
        with pytest.raises(KeyError):
            probe.entities("entrypoints")

    def test_http_error(self, probe):
        with patch.object(probe.session, "get", return_value=make_response({}, status=500)):
            with pytest.raises(NavigationError, match="HTTP 500"):
                probe.entities("services")

    def test_unreachable(self, probe):
        error = requests.exceptions.ConnectionError("refused")
        with patch.object(probe.session, "get", side_effect=error):
            with pytest.raises(NavigationError, match="refused"):
                probe.entities("services")


class TestTriage:
    def test_entity_errors(self, probe):
        with patch.object(probe.session, "get", return_value=make_response(MIDDLEWARES)):
            problems = probe.entity_errors("middlewares")

        assert problems == {
            "crowdsec@docker": ["unknown plugin type: bouncer"],
            "realip@docker": ["status: warning"],
        }

    def test_missing(self, probe):
        catalog = load_catalog()
        with patch.object(probe.session, "get", return_value=make_response(MIDDLEWARES[:2])):
            missing = probe.missing(catalog, kinds=["middlewares"])

        assert missing == {"middlewares": ["crowdsec@docker", "realip@docker"]}

    def test_unknown_plugins(self, probe):
        with patch.object(probe.session, "get", return_value=make_response(MIDDLEWARES)):
            assert probe.unknown_plugins({"crowdsec": "crowdsec"}) == {
                "waf@docker": ["modsecurity"],
                "geoblock@docker": ["geoblock"],
                "crowdsec@docker": ["bouncer"],
            }

        with patch.object(probe.session, "get", return_value=make_response(MIDDLEWARES)):
            remapped = embedded_plugin_keys({"TRAEFIK_EMBEDDED_CROWDSEC_KEY": "bouncer"})
            assert probe.unknown_plugins(remapped) == {}

    def test_report_healthy(self, probe):
        catalog = load_catalog()
        healthy = {
            "middlewares": [{"name": n, "status": "enabled"} for n in catalog.middlewares],
            "routers": [{"name": n, "status": "enabled"} for n in catalog.routers],
            "services": [{"name": n, "status": "enabled"} for n in catalog.services],
        }

        def fake_get(url, **kwargs):
            return make_response(healthy[url.rsplit("/", 1)[1]])

        with patch.object(probe.session, "get", side_effect=fake_get):
            assert probe.report(catalog) is True

    def test_report_unhealthy(self, probe):
        with patch.object(probe.session, "get", return_value=make_response(MIDDLEWARES)):
            assert probe.report(load_catalog()) is False


class TestWaitUntilReady:
    def test_ready(self, probe):
        with patch.object(probe.session, "get", return_value=make_response(None, status=200)) as get:
            probe.wait_until_ready(timeout=1)
        assert get.call_args[0][0] == "http://proxy.test:8080/dashboard/"

    def test_retries_then_ready(self, probe):
        responses = [requests.exceptions.ConnectionError("refused"), make_response(None, status=200)]
        with patch.object(probe.session, "get", side_effect=responses), patch("time.sleep"):
            probe.wait_until_ready(timeout=5)

    def test_never_ready(self, probe):
        with patch.object(probe.session, "get", return_value=make_response(None, status=502)):
            with pytest.raises(NavigationError, match="HTTP 502"):
                probe.wait_until_ready(timeout=0)
