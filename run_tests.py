#!/usr/bin/env python3
# ================================================================================
# Test Runner Script
# ================================================================================
#
# Main entry point for executing the juku site test suites.
#
# Suites:
#   unit  - framework and page objects against the in-memory fake DOM
#   ui    - page objects against local HTML fixtures in a real browser
#   live  - read-only checks against the deployed site (opt-in)
#   all   - unit and ui
#
# Usage:
#   python run_tests.py --suite unit
#   python run_tests.py --suite ui --browser firefox --no-headless
#   python run_tests.py --suite live --base-url https://staging.example.com
#
# ================================================================================

import argparse
import os
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger


# Configure logging
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    level="INFO"
)


SUITE_PATHS: Dict[str, List[str]] = {
    "unit": ["juku_suites/unit"],
    "ui": ["juku_suites/ui_testing/tests"],
    "live": ["juku_suites/ui_testing/tests/test_live_site.py"],
    "all": ["juku_suites/unit", "juku_suites/ui_testing/tests"],
}


class TestRunner:
    """
    Orchestrates a pytest run for one suite and the Allure report after it.
    """

    def __init__(
        self,
        suite: str = "all",
        tags: List[str] = None,
        browser: str = "chromium",
        headless: bool = True,
        base_url: Optional[str] = None,
        allure_report: bool = True,
        verbose: bool = False
    ):
        """
        Initialize test runner.

        Args:
            suite: Test suite to run - "unit", "ui", "live", "all"
            tags: List of pytest markers to filter tests
            browser: Browser for UI tests - "chromium", "firefox", "webkit"
            headless: Run browser in headless mode
            base_url: Site root for live tests (overrides ui.base_url)
            allure_report: Generate Allure report
            verbose: Enable verbose output
        """
        self.suite = suite
        self.tags = tags or []
        self.browser = browser
        self.headless = headless
        self.base_url = base_url
        self.allure_report = allure_report
        self.verbose = verbose

        # Paths
        self.root_dir = Path(__file__).parent
        self.reports_dir = self.root_dir / "reports"
        self.allure_results = self.reports_dir / "allure-results"
        self.allure_report_dir = self.reports_dir / "allure-report"

    def run(self) -> int:
        """
        Execute the test run.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        logger.info("=" * 60)
        logger.info("Starting Test Execution")
        logger.info("=" * 60)
        logger.info(f"Suite: {self.suite}")
        logger.info(f"Tags: {self.tags or 'All'}")
        if self.suite != "unit":
            logger.info(f"Browser: {self.browser}")
            logger.info(f"Headless: {self.headless}")
        if self.suite == "live":
            logger.info(f"Base URL: {self.base_url or '(config)'}")
        logger.info("=" * 60)

        env = self._prepare_environment()
        cmd = self._build_pytest_command()
        logger.info(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, cwd=str(self.root_dir), env=env)
            exit_code = result.returncode
        except OSError as e:
            logger.error(f"Test execution failed: {e}")
            exit_code = 1

        if self.allure_report:
            self._generate_allure_report()

        self._print_summary(exit_code)
        return exit_code

    def _prepare_environment(self) -> Dict[str, str]:
        """Create report folders and build the child environment."""
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        if self.allure_results.exists():
            shutil.rmtree(self.allure_results)
        self.allure_results.mkdir(parents=True, exist_ok=True)

        # Browser settings reach the suites through ConfigLoader env overrides
        env = dict(os.environ)
        env["UI_BROWSER"] = self.browser
        env["UI_HEADLESS"] = "true" if self.headless else "false"
        if self.base_url:
            env["UI_BASE_URL"] = self.base_url
        if self.suite == "live":
            env["JUKU_LIVE_TESTS"] = "1"

        logger.debug("Environment prepared")
        return env

    def _build_pytest_command(self) -> List[str]:
        """Build the pytest command with all options."""
        cmd = [sys.executable, "-m", "pytest"]
        cmd.extend(SUITE_PATHS[self.suite])

        if self.tags:
            cmd.extend(["-m", " or ".join(self.tags)])

        if self.allure_report:
            cmd.extend(["--alluredir", str(self.allure_results)])

        cmd.append("-v" if self.verbose else "-q")
        return cmd

    def _generate_allure_report(self) -> None:
        """Generate Allure HTML report."""
        logger.info("Generating Allure report...")

        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            report_path = self.reports_dir / f"allure-report-{timestamp}"

            subprocess.run([
                "allure", "generate",
                str(self.allure_results),
                "-o", str(report_path),
                "--clean"
            ], check=True)

            # Create/update latest symlink
            latest_link = self.allure_report_dir
            if latest_link.is_symlink():
                latest_link.unlink()
            elif latest_link.exists():
                shutil.rmtree(latest_link)

            latest_link.symlink_to(report_path.name)

            logger.info(f"Report generated: {report_path}")
            logger.info(f"Latest report: {self.allure_report_dir}")

        except FileNotFoundError:
            logger.warning("Allure CLI not found. Please install Allure to generate reports.")
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to generate Allure report: {e}")

    def _print_summary(self, exit_code: int) -> None:
        """Print test execution summary."""
        logger.info("=" * 60)
        if exit_code == 0:
            logger.info("✅ TEST EXECUTION COMPLETED SUCCESSFULLY")
        else:
            logger.error(f"❌ TEST EXECUTION FAILED (exit code: {exit_code})")

        if self.allure_report:
            logger.info(f"📊 Report available at: {self.allure_report_dir}")

        logger.info("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Juku Site UI Automation Test Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the fast unit suite
  python run_tests.py --suite unit

  # Run P0 tab and station checks in a real browser
  python run_tests.py --suite ui --tags P0 tabs stations

  # Run UI tests with visible browser
  python run_tests.py --suite ui --no-headless --browser firefox

  # Run the live checks against another deployment
  python run_tests.py --suite live --base-url https://staging.example.com
        """
    )

    parser.add_argument(
        "--suite",
        choices=sorted(SUITE_PATHS),
        default="all",
        help="Test suite to run (default: all)"
    )

    parser.add_argument(
        "--tags",
        nargs="+",
        default=[],
        help="Pytest markers to filter tests (e.g., P0 smoke tabs)"
    )

    parser.add_argument(
        "--browser",
        choices=["chromium", "firefox", "webkit"],
        default="chromium",
        help="Browser for UI tests (default: chromium)"
    )

    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in headed mode (visible)"
    )

    parser.add_argument(
        "--base-url",
        default=None,
        help="Site root for live tests (default: ui.base_url from config)"
    )

    parser.add_argument(
        "--no-allure",
        action="store_true",
        help="Disable Allure report generation"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    runner = TestRunner(
        suite=args.suite,
        tags=args.tags,
        browser=args.browser,
        headless=not args.no_headless,
        base_url=args.base_url,
        allure_report=not args.no_allure,
        verbose=args.verbose
    )

    exit_code = runner.run()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
