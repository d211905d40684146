#!/usr/bin/env python3
"""
E2E test for the image fetch API against a real browser and the live search engine.

Starts uvicorn in a subprocess; opt in with RUN_E2E=1.
"""

import os
import subprocess
import sys
from concurrent.futures import ThreadPoolExecutor
import time
from contextlib import contextmanager
from typing import Generator

import httpx
import pytest

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(os.getenv("RUN_E2E") != "1", reason="set RUN_E2E=1 to run"),
]


@contextmanager
def uvicorn_server(
    host: str = "127.0.0.1", port: int = 3001, timeout: int = 60
) -> Generator[str, None, None]:
    """Start the API with uvicorn and yield its base URL once it answers."""
    base_url = f"http://{host}:{port}"
    env = {**os.environ, "LOG_FILE": ""}
    server_process = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "app.presentation.main:app",
            "--host",
            host,
            "--port",
            str(port),
        ],
        env=env,
    )
    try:
        deadline = time.time() + timeout
        while time.time() < deadline:
            if server_process.poll() is not None:
                raise RuntimeError("uvicorn exited before the server came up")
            try:
                # Missing q never touches the browser: 400 means ready
                if httpx.get(f"{base_url}/", timeout=2).status_code == 400:
                    break
            except httpx.HTTPError:
                pass
            time.sleep(0.5)
        else:
            raise RuntimeError(f"Server did not start within {timeout}s")
        yield base_url
    finally:
        server_process.terminate()
        try:
            server_process.wait(timeout=15)
        except subprocess.TimeoutExpired:
            server_process.kill()


@pytest.fixture(scope="module")
def base_url():
    with uvicorn_server() as url:
        yield url


def test_fetch_image_returns_jpeg(base_url):
    response = httpx.get(f"{base_url}/", params={"q": "red sports car"}, timeout=90)

    # The live engine may not expose an external image for every query
    assert response.status_code in (200, 404)
    if response.status_code == 200:
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content[:2] == b"\xff\xd8"
    else:
        assert response.json() == {"error": "No full-size image found"}


def test_concurrent_requests_are_all_answered(base_url):
    queries = ["mountain lake", "golden retriever", "city skyline"]

    def fetch(q):
        return httpx.get(f"{base_url}/", params={"q": q}, timeout=180).status_code

    with ThreadPoolExecutor(max_workers=len(queries)) as pool:
        statuses = list(pool.map(fetch, queries))

    assert all(status in (200, 404, 500) for status in statuses)


def test_unknown_path_returns_404(base_url):
    response = httpx.get(f"{base_url}/nope", timeout=10)

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}
