"""Playwright fixtures for the ORDISS E2E suite."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator

import pytest
from playwright.sync_api import Browser, BrowserContext, Page

from config import Config, config_summary, get_config, validate_config
from data_driver.cache import FixtureStore
from data_driver.guidance import first_time_guidance
from data_driver.models import Record
from data_driver.queries import filter_records
from data_driver.recorder import ExecutionRecorder
from data_driver.schemas import load_schemas
from data_driver.validator import check_fixtures
from shared.live_stack import live_app_url
from tests.e2e.pages.login_page import LoginPage
from tests.e2e.pages.organogram_page import OrganogramPage
from tests.e2e.pages.permissions_page import PermissionGroupsPage, PermissionsPage
from tests.e2e.pages.unit_type_form_page import UnitTypeFormPage
from tests.e2e.pages.unit_type_list_page import UnitTypeListPage
from tests.e2e.pages.units_page import UnitsPage

logger = logging.getLogger(__name__)


def pytest_configure(config):
    logging.basicConfig(
        level=get_config().LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def pytest_generate_tests(metafunc):
    """Parametrize ``invalid_credentials`` from the fixture file, one case per row."""
    if "invalid_credentials" not in metafunc.fixturenames:
        return
    store = FixtureStore(get_config().TEST_DATA_DIR, load_schemas())
    records = store.get_or_empty("invalid-credentials").records
    metafunc.parametrize(
        "invalid_credentials",
        records,
        ids=[f"{record['username'] or 'blank'}" for record in records],
    )


# -----------------------------------------------------------------------------
# Run configuration
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def ordiss_config() -> type[Config]:
    """Configuration class for ORDISS_ENV; aborts the run on config errors."""
    cfg = get_config()
    errors, warnings = validate_config(cfg)
    for warning in warnings:
        logger.warning("Config: %s", warning)
    if errors:
        pytest.exit("Configuration invalid:\n" + "\n".join(errors), returncode=1)
    logger.info("Running against %s", config_summary(cfg))
    return cfg


@pytest.fixture(scope="session")
def live_app(ordiss_config: type[Config]) -> str:
    """Base URL of a reachable ORDISS deployment; skips the test otherwise."""
    return live_app_url(ordiss_config.BASE_URL)


# -----------------------------------------------------------------------------
# Fixture data
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def fixture_store(ordiss_config: type[Config]) -> FixtureStore:
    """Fixture-table cache shared by every test of the run."""
    return FixtureStore(ordiss_config.TEST_DATA_DIR, load_schemas())


@pytest.fixture(scope="session")
def execution_recorder(fixture_store: FixtureStore) -> Generator[ExecutionRecorder, None, None]:
    recorder = ExecutionRecorder(fixture_store)
    yield recorder
    logger.info("Recorder finished after %d steps", recorder.summary()["total_steps"])


@pytest.fixture(scope="session", autouse=True)
def validated_fixture_files(fixture_store: FixtureStore) -> None:
    """
    Validate the fixture files marked ``startup`` before the first test runs.

    A missing, malformed or incomplete startup file stops the session with
    one message per failing file. Create-flow files may be absent; their
    tests skip with first-time guidance instead.
    """
    failures = check_fixtures(fixture_store)
    if failures:
        pytest.exit("Fixture validation failed:\n" + "\n".join(failures), returncode=1)
    logger.info("Fixture files validated: %s", fixture_store.stats()["cached_files"])


@pytest.fixture
def fixture_record(fixture_store: FixtureStore) -> Callable[[str], Record]:
    """
    Factory returning the first record of a fixture file.

    Skips the test with first-time guidance when the file is missing or empty.
    """

    def _first(name: str) -> Record:
        table = fixture_store.get_or_empty(name)
        if table.is_empty:
            pytest.skip(
                first_time_guidance(name, fixture_store.schema_for(name), fixture_store.data_dir)
            )
        return dict(table.records[0])

    return _first


@pytest.fixture(scope="session")
def superadmin(ordiss_config: type[Config], fixture_store: FixtureStore) -> dict[str, str]:
    """Superadmin credentials: SUPERADMIN_* env vars, else users.csv, else defaults."""
    if "SUPERADMIN_USERNAME" not in os.environ:
        for user in filter_records(fixture_store.get_or_empty("users"), "role", "superadmin"):
            return {"username": user["username"], "password": user["password"]}
    return {
        "username": ordiss_config.SUPERADMIN_USERNAME,
        "password": ordiss_config.SUPERADMIN_PASSWORD,
    }


# -----------------------------------------------------------------------------
# Browser
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def browser_type_launch_args(browser_type_launch_args: dict, ordiss_config: type[Config]) -> dict:
    args = {**browser_type_launch_args, "slow_mo": ordiss_config.SLOW_MO}
    if not ordiss_config.HEADLESS:
        args["headless"] = False
    return args


@pytest.fixture(scope="session")
def browser_context_args():
    return {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
        "accept_downloads": True,
    }


@pytest.fixture(scope="function")
def context(
    browser: Browser, browser_context_args: dict, ordiss_config: type[Config]
) -> Generator[BrowserContext, None, None]:
    context = browser.new_context(**browser_context_args)
    context.set_default_timeout(ordiss_config.timeout_for("element"))
    context.set_default_navigation_timeout(ordiss_config.timeout_for("navigation"))
    yield context
    context.close()


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Generator[Page, None, None]:
    page = context.new_page()
    yield page
    page.close()


# -----------------------------------------------------------------------------
# Page objects
# -----------------------------------------------------------------------------


@pytest.fixture
def login_page(page: Page, live_app: str) -> LoginPage:
    return LoginPage(page, live_app).navigate()


@pytest.fixture
def logged_in(login_page: LoginPage, superadmin: dict[str, str]) -> LoginPage:
    """Log the superadmin in within the current browser context."""
    login_page.login(superadmin["username"], superadmin["password"])
    return login_page


@pytest.fixture
def unit_type_list_page(page: Page, live_app: str, logged_in) -> UnitTypeListPage:
    return UnitTypeListPage(page, live_app).navigate()


@pytest.fixture
def unit_type_form_page(page: Page, live_app: str, logged_in) -> UnitTypeFormPage:
    return UnitTypeFormPage(page, live_app)


@pytest.fixture
def units_page(page: Page, live_app: str, logged_in) -> UnitsPage:
    return UnitsPage(page, live_app).navigate()


@pytest.fixture
def organogram_page(page: Page, live_app: str, logged_in) -> OrganogramPage:
    return OrganogramPage(page, live_app).navigate()


@pytest.fixture
def permissions_page(page: Page, live_app: str, logged_in) -> PermissionsPage:
    return PermissionsPage(page, live_app).navigate()


@pytest.fixture
def permission_groups_page(page: Page, live_app: str, logged_in) -> PermissionGroupsPage:
    return PermissionGroupsPage(page, live_app).navigate()


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Capture screenshot on UI test failure."""
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        page = item.funcargs.get("page")
        if page:
            screenshot_dir = "test-results/screenshots"
            os.makedirs(screenshot_dir, exist_ok=True)
            test_name = item.name.replace("/", "_").replace("::", "_")
            screenshot_path = f"{screenshot_dir}/{test_name}.png"
            try:
                page.screenshot(path=screenshot_path, full_page=True)
                print(f"\nScreenshot saved: {screenshot_path}")
            except Exception as exc:  # pragma: no cover - best effort logging
                print(f"\nFailed to capture screenshot: {exc}")
