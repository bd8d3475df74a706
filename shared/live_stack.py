"""Reachability helpers for the ORDISS application under test."""

from __future__ import annotations

import logging
import time

import pytest
import requests

logger = logging.getLogger(__name__)


def is_app_reachable(url: str, timeout: int = 5) -> bool:
    """
    Return True when the application answers at ``url``.

    Any HTTP response below 500 counts: the login page may redirect or ask for
    credentials, but the server is up. TLS verification is off because the
    test environments use self-signed certificates.
    """
    try:
        response = requests.get(url, timeout=timeout, verify=False, allow_redirects=True)
    except requests.RequestException as exc:
        logger.debug("Probe of %s failed: %s", url, exc)
        return False
    return response.status_code < 500


def wait_for_app(url: str, timeout: int = 30, interval: int = 1) -> None:
    """Poll ``url`` until it answers or ``timeout`` seconds pass."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if is_app_reachable(url):
            return
        time.sleep(interval)
    raise RuntimeError(f"ORDISS at {url} not reachable after {timeout}s")


def live_app_url(base_url: str, *, suite_name: str = "E2E", timeout: int = 30) -> str:
    """
    Return ``base_url`` once the application answers, or skip the calling test.

    Args:
        base_url: Root URL of the ORDISS deployment.
        suite_name: Used in the skip reason.
        timeout: Seconds to wait before giving up.
    """
    try:
        wait_for_app(base_url, timeout=timeout)
    except RuntimeError as exc:
        pytest.skip(f"{exc}; set BASE_URL (or ORDISS_ENV) to run {suite_name} tests")
    logger.info("ORDISS reachable at %s", base_url)
    return base_url
