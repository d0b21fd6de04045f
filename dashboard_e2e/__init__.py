"""
Embedded Dashboard Verification Harness

Browser checks that a proxy build serves its embedded dashboard and that the
dashboard shows the routers, middlewares and services contributed by the
embedded plugins, without error strings or uncaught page errors.

Structure:
    config/            - DASHBOARD_* settings and the YAML entity catalog
    catalog.py         - Expected entities, forbidden patterns, content checks
    exception_filter.py - Suppression of known third-party page errors
    pages/             - Page objects: navigation, resilient locator, views
    scenario.py        - Per-scenario context passed to each test
    network.py         - Advisory API call recording
    api_probe.py       - REST API preflight and triage
    runner.py          - CLI that runs the scenario suite
    scenarios/         - Browser scenarios run by the CLI

Running:
    pip install -e ".[test]"
    playwright install chromium
    dashboard-e2e --base-url http://localhost:8080
"""

__version__ = "0.1.0"
