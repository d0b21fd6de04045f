"""
Dashboard Harness Test Suite

Test categories:
- unit/ - Harness logic against a fake page (no browser needed)

The browser scenarios ship with the package in dashboard_e2e/scenarios/.
"""
