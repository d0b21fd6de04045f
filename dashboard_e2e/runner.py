#!/usr/bin/env python3
"""
Dashboard E2E Runner

Command-line entry point: exports harness options into the DASHBOARD_*
environment, optionally probes the proxy's API, then runs the scenario suite
with pytest and exits with its status (non-zero when any scenario failed).
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import pytest

from .api_probe import ApiProbe
from .catalog import VIEWS, ExpectedCatalog, load_catalog
from .config.env_config import ConfigError, HarnessConfig, validate_config

logger = logging.getLogger(__name__)

DEFAULT_SUITE = Path(__file__).resolve().parent / "scenarios"

# Exit code for configuration and preflight failures, outside pytest's range.
EXIT_PREFLIGHT_FAILED = 6


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dashboard-e2e",
        description="Verify the embedded proxy dashboard renders the expected entities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   Run the suite against localhost:8080
  %(prog)s --base-url http://proxy:8080      Run against another proxy
  %(prog)s -m smoke                          Run smoke scenarios only
  %(prog)s --probe-only                      Only check the REST API
  %(prog)s --list-catalog                    Show expected entities and error strings
        """,
    )
    parser.add_argument("--base-url", help="Root address of the proxy (DASHBOARD_BASE_URL)")
    parser.add_argument("--catalog", type=Path, help="Catalog YAML merged over the defaults")
    parser.add_argument("--artifacts-dir", type=Path, help="Screenshot/video directory")
    parser.add_argument("--suite", type=Path, default=DEFAULT_SUITE, help="Scenario directory")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--video", action="store_true", help="Record run video")
    parser.add_argument("-k", dest="keyword", help="Only run scenarios matching the expression")
    parser.add_argument("-m", "--marker", help="Only run scenarios with this marker")
    parser.add_argument("--probe", action="store_true", help="Check the REST API before the suite")
    parser.add_argument("--probe-only", action="store_true", help="Check the REST API and exit")
    parser.add_argument("--list-catalog", action="store_true", help="Print the catalog and exit")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Harness log level (DASHBOARD_LOG_LEVEL)",
    )
    return parser


def export_options(args: argparse.Namespace) -> None:
    """Publish CLI options to the environment the suite's conftest reads."""
    if args.base_url:
        os.environ["DASHBOARD_BASE_URL"] = args.base_url.rstrip("/")
    if args.catalog:
        os.environ["DASHBOARD_CATALOG"] = str(args.catalog)
    if args.artifacts_dir:
        os.environ["DASHBOARD_ARTIFACTS_DIR"] = str(args.artifacts_dir)
    if args.headed:
        os.environ["DASHBOARD_HEADLESS"] = "false"
    if args.video:
        os.environ["DASHBOARD_VIDEO"] = "true"
    if args.log_level:
        os.environ["DASHBOARD_LOG_LEVEL"] = args.log_level
    os.environ["DASHBOARD_E2E"] = "1"


def pytest_args(args: argparse.Namespace) -> List[str]:
    argv = [str(args.suite), "-p", "no:cacheprovider", "-rfE"]
    if args.keyword:
        argv += ["-k", args.keyword]
    if args.marker:
        argv += ["-m", args.marker]
    return argv


def print_catalog(catalog: ExpectedCatalog) -> None:
    """Print expected identifiers per view and forbidden strings per category."""
    for view in VIEWS:
        print(f"{view}:")
        for identifier in catalog.expected(view):
            print(f"  {identifier}")
    for category in catalog.categories:
        print(f"forbidden ({category}):")
        for pattern in catalog.forbidden_in(category):
            print(f"  {pattern.text}")


def run_probe(config: HarnessConfig) -> bool:
    probe = ApiProbe(config.base_url, config.dashboard_path, timeout=config.request_timeout / 1000)
    try:
        probe.wait_until_ready(timeout=config.response_timeout / 1000)
        return probe.report(load_catalog(config.catalog_path))
    finally:
        probe.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    export_options(args)

    errors = validate_config()
    if errors:
        for error in errors:
            print(f"Configuration error: {error}", file=sys.stderr)
        return EXIT_PREFLIGHT_FAILED

    try:
        config = HarnessConfig.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_PREFLIGHT_FAILED

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Harness configuration: {config.to_dict()}")

    if args.list_catalog:
        print_catalog(load_catalog(config.catalog_path))
        return 0

    if args.probe or args.probe_only:
        try:
            healthy = run_probe(config)
        except Exception as e:
            logger.error(f"API probe failed: {e}")
            return EXIT_PREFLIGHT_FAILED
        if args.probe_only:
            return 0 if healthy else 1
        if not healthy:
            logger.warning("API probe reported problems, running the suite for details")

    if not args.suite.exists():
        print(f"Scenario suite not found: {args.suite}", file=sys.stderr)
        return EXIT_PREFLIGHT_FAILED

    return int(pytest.main(pytest_args(args)))


if __name__ == "__main__":
    sys.exit(main())
