"""Browser fixtures for end-to-end console tests.

The console is started against an API address nothing listens on, so these
tests cover what the console does on its own: routing, the auth gate, the
login form and error display. Set ROSTER_E2E=1 to run them; they need
``playwright install chromium``.
"""

import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Generator

import httpx
import pytest
from playwright.sync_api import Browser, Page, sync_playwright

STREAMLIT_PORT = 8513  # Avoid conflict with a dev console on 8501
UNREACHABLE_API_URL = "http://127.0.0.1:9"
PROJECT_ROOT = Path(__file__).parent.parent.parent


def pytest_collection_modifyitems(config, items):
    if os.environ.get("ROSTER_E2E", "").lower() in ("1", "true", "yes"):
        return
    skip = pytest.mark.skip(reason="set ROSTER_E2E=1 to run browser tests")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def console_server() -> Generator[str, None, None]:
    """Start the Streamlit console; yields its base URL."""
    env = os.environ.copy()
    env["ROSTER_API_URL"] = UNREACHABLE_API_URL
    env["ROSTER_HTTP_TIMEOUT"] = "2"

    proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "streamlit",
            "run",
            str(PROJECT_ROOT / "streamlit-console" / "app.py"),
            "--server.port",
            str(STREAMLIT_PORT),
            "--server.headless",
            "true",
            "--server.runOnSave",
            "false",
            "--browser.gatherUsageStats",
            "false",
        ],
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    base_url = f"http://localhost:{STREAMLIT_PORT}"

    # Wait for server to start (15s timeout)
    for _ in range(30):
        try:
            if httpx.get(f"{base_url}/_stcore/health", timeout=1).status_code == 200:
                break
        except httpx.HTTPError:
            pass
        time.sleep(0.5)
    else:
        proc.terminate()
        proc.wait()
        pytest.fail("Streamlit console failed to start")

    yield base_url

    proc.terminate()
    proc.wait(timeout=5)


@pytest.fixture(scope="session")
def browser() -> Generator[Browser, None, None]:
    """Launch browser for UI tests."""
    with sync_playwright() as p:
        browser = p.chromium.launch(
            headless=True,
            args=["--disable-gpu", "--disable-dev-shm-usage", "--no-sandbox"],
        )
        yield browser
        browser.close()


@pytest.fixture
def open_page(browser: Browser, console_server: str):
    """Return a function that opens a console path in a fresh browser context."""
    contexts = []

    def _open(path: str = "/") -> Page:
        context = browser.new_context(viewport={"width": 1280, "height": 720})
        contexts.append(context)
        page = context.new_page()
        page.goto(f"{console_server}{path}")
        page.wait_for_selector('[data-testid="stApp"]', timeout=10000)
        page.wait_for_load_state("networkidle")
        return page

    yield _open

    for context in contexts:
        context.close()
