"""Pytest integration: command line options, fixtures and the run listener.

Enable it from a conftest with ``pytest_plugins = ["mercury_qa.plugin"]``.
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, Optional

import pytest

from mercury_qa.api.auth_client import AuthClient
from mercury_qa.api.client import ApiClient
from mercury_qa.browser.session import DriverManager
from mercury_qa.config import Config, load_config
from mercury_qa.data import TestResult, TestRunSession, TestStatus
from mercury_qa.exceptions import ConfigurationError
from mercury_qa.executor.result_aggregator import ResultAggregator, default_report_dir
from mercury_qa.utils.data_reader import DataReader
from mercury_qa.utils.get_log import GetLog

LISTENER_NAME = "mercury-listener"
RESULT_KEY = pytest.StashKey[TestResult]()

BANNER = "=" * 60


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("mercury", "ClaimCenter test framework")
    group.addoption("--run-e2e", action="store_true", default=False, help="Run tests marked e2e against live systems")
    group.addoption("--config", action="store", default=None, help="Path of the config.properties file to use")
    group.addoption("--browser-kind", action="store", default=None, help="Browser kind (overrides config): chrome, firefox, edge")
    group.addoption("--env", action="store", default=None, help="Environment name (overrides config)")
    group.addoption("--headless", action="store_const", const="true", default=None, help="Run browsers headless")
    group.addoption("--report-dir", action="store", default=None, help="Directory for JSON/HTML reports")


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "e2e: end-to-end scenario against a live ClaimCenter or API")
    listener = RunListener(config)
    if config.getoption("--run-e2e"):
        GetLog.get_log(session_id=listener.run.session_id)
    config.pluginmanager.register(listener, LISTENER_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    if config.getoption("--run-e2e"):
        GetLog.shutdown()


def pytest_collection_modifyitems(config: pytest.Config, items) -> None:
    if config.getoption("--run-e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="needs --run-e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


class RunListener:
    """Logs the run as it happens and collects per-test report records."""

    def __init__(self, config: pytest.Config):
        self.config = config
        self.run = TestRunSession(session_id=str(uuid.uuid4()))
        self.outcomes: Dict[str, TestStatus] = {}
        # set once the mercury_config fixture has loaded the configuration
        self.mercury_config: Optional[Config] = None

    def result_for(self, item: pytest.Item) -> TestResult:
        result = item.stash.get(RESULT_KEY, None)
        if result is None:
            result = TestResult(test_id=item.nodeid, test_name=item.name)
            item.stash[RESULT_KEY] = result
            self.run.add_result(result)
        return result

    def _count(self, status: TestStatus) -> int:
        return sum(1 for outcome in self.outcomes.values() if outcome == status)

    @pytest.hookimpl(trylast=True)
    def pytest_sessionstart(self, session):
        logging.info(BANNER)
        logging.info("TEST SUITE STARTED")
        logging.info(BANNER)

    def pytest_runtest_logstart(self, nodeid, location):
        logging.info(f">>> Test started: {nodeid}")

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item, call):
        outcome = yield
        report = outcome.get_result()
        result = self.result_for(item)

        if report.when == "setup":
            result.start_time = datetime.now()
            result.status = TestStatus.RUNNING
        if report.failed:
            result.status = TestStatus.FAILED
            result.error_message = str(report.longrepr)
            if report.when == "call":
                self._capture_failure_screenshot(item, result)
        elif report.skipped:
            result.status = TestStatus.SKIPPED
            result.skip_reason = _skip_reason(report)
        elif report.when == "call" and result.status != TestStatus.FAILED:
            result.status = TestStatus.PASSED
            result.duration = report.duration

        if report.when == "teardown":
            result.end_time = datetime.now()
            if result.duration is None and result.start_time is not None:
                result.duration = (result.end_time - result.start_time).total_seconds()

    def _capture_failure_screenshot(self, item, result: TestResult):
        """Best effort: a failing capture is logged and never changes the test outcome."""
        manager = item.funcargs.get("driver_manager")
        mercury_config = item.funcargs.get("mercury_config") or self.mercury_config
        if not isinstance(manager, DriverManager) or not manager.is_initialized():
            return
        if mercury_config is not None and not mercury_config.screenshot_on_failure:
            return
        try:
            session = manager.get()
            result.attach_png(f"Screenshot on failure ({session.session_id})", session.screenshot())
            logging.info(f"Screenshot captured for failed test: {item.name}")
        except Exception as e:
            logging.error(f"Failed to capture screenshot for {item.name}: {e}")

    def pytest_runtest_logreport(self, report):
        if report.failed:
            self.outcomes[report.nodeid] = TestStatus.FAILED
            logging.error(f"<<< Test FAILED ({report.when}): {report.nodeid}")
            logging.error(f"Failure reason: {_failure_reason(report)}")
        elif report.skipped:
            self.outcomes[report.nodeid] = TestStatus.SKIPPED
            logging.warning(f"<<< Test SKIPPED: {report.nodeid} - {_skip_reason(report)}")
        elif report.when == "call":
            self.outcomes.setdefault(report.nodeid, TestStatus.PASSED)
            duration_ms = int(report.duration * 1000)
            logging.info(f"<<< Test PASSED: {report.nodeid} ({duration_ms} ms)")

    def pytest_sessionfinish(self, session, exitstatus):
        self.run.complete_session()
        logging.info(BANNER)
        logging.info("TEST SUITE FINISHED")
        logging.info(f"Total tests: {len(self.outcomes)}")
        logging.info(f"Passed: {self._count(TestStatus.PASSED)}")
        logging.info(f"Failed: {self._count(TestStatus.FAILED)}")
        logging.info(f"Skipped: {self._count(TestStatus.SKIPPED)}")
        logging.info(BANNER)
        self.write_reports()

    def write_reports(self):
        report_dir = self.config.getoption("--report-dir")
        if not report_dir and not self.config.getoption("--run-e2e"):
            return
        if not self.run.test_results:
            return
        if not report_dir:
            base_dir = self.mercury_config.report_dir if self.mercury_config else "reports"
            report_dir = default_report_dir(base_dir)
        aggregator = ResultAggregator()
        aggregator.generate_json_report(self.run, report_dir)
        aggregator.generate_html_report(self.run, report_dir)


def _failure_reason(report) -> str:
    lines = (report.longreprtext or "").strip().splitlines()
    return (lines or [""])[-1]


def _skip_reason(report) -> str:
    if isinstance(report.longrepr, tuple) and len(report.longrepr) == 3:
        return str(report.longrepr[2])
    return str(report.longrepr or "")


@pytest.fixture(scope="session")
def mercury_config(pytestconfig: pytest.Config) -> Config:
    overrides = {
        "browser": pytestconfig.getoption("--browser-kind"),
        "environment": pytestconfig.getoption("--env"),
        "headless": pytestconfig.getoption("--headless"),
    }
    config = load_config(pytestconfig.getoption("--config"), overrides)
    config.print_all_properties()
    listener = pytestconfig.pluginmanager.get_plugin(LISTENER_NAME)
    if listener is not None:
        listener.mercury_config = config
    return config


@pytest.fixture(scope="session")
def data_reader(mercury_config: Config) -> DataReader:
    return DataReader(mercury_config.test_data_dir)


@pytest.fixture
def test_report(request: pytest.FixtureRequest) -> TestResult:
    """Report record of the running test, for steps, parameters and attachments."""
    listener: RunListener = request.config.pluginmanager.get_plugin(LISTENER_NAME)
    return listener.result_for(request.node)


@pytest.fixture
def driver_manager(mercury_config: Config, test_report: TestResult):
    """A browser session for one test, opened on the environment's base URL and always closed."""
    manager = DriverManager(mercury_config.implicit_wait, mercury_config.page_load_timeout)
    session = manager.initialize(mercury_config.browser, mercury_config.headless)
    try:
        test_report.add_parameter("Browser", session.kind)
        test_report.add_parameter("Environment", mercury_config.environment)
        base_url = mercury_config.base_url
        if base_url:
            test_report.add_parameter("Base URL", base_url)
            session.navigate_to(base_url)
        yield manager
    finally:
        manager.teardown()


@pytest.fixture(scope="class")
def api_client(mercury_config: Config):
    base_url = mercury_config.api_base_url
    if not base_url:
        raise ConfigurationError(f"api.base.url.{mercury_config.environment} is not configured")
    client = ApiClient(base_url, timeout=mercury_config.page_load_timeout)
    yield client
    client.close()


@pytest.fixture
def auth_client(api_client: ApiClient, test_report: TestResult):
    """Login API client whose traffic is attached to the running test's report."""
    api_client.reset_request_spec()
    api_client.report = test_report
    yield AuthClient(api_client)
    api_client.report = None
