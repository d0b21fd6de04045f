"""
Embedded Dashboard E2E Suite

Browser scenarios against a running proxy.

Structure:
    conftest.py        - Fixtures and configuration
    test_dashboard.py  - Scenarios grouped by dashboard view

Running Tests:
    # Install dependencies
    pip install -e .
    playwright install chromium

    # Run all scenarios against a proxy on localhost:8080
    DASHBOARD_E2E=1 pytest dashboard_e2e/scenarios/

    # Or use the runner
    dashboard-e2e --base-url http://localhost:8080

    # Run smoke scenarios only
    dashboard-e2e -m smoke
"""
