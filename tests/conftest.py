# Test configuration to spin up the FastAPI app with a real uvicorn server
# and provide helper fixtures.

import os
import sys
import socket
import subprocess
import time
from contextlib import closing
from pathlib import Path
from typing import Iterator

import pytest
import logging
import requests

ROOT = Path(__file__).resolve().parents[1]
logger = logging.getLogger(__name__)


def _get_free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def base_url() -> Iterator[str]:
    # Point BASE_URL at a running instance to skip starting one here.
    existing = os.environ.get("BASE_URL")
    if existing:
        logger.info("[tests] Using existing API instance at %s", existing)
        yield existing
        return

    env = os.environ.copy()
    # in-memory store, crits off so damage numbers are exact
    env.pop("REDIS_URL", None)
    env["AUTOBATTLE_CRIT_CHANCE"] = "0"

    port = _get_free_port()

    # Start uvicorn pointing to our app module
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "autobattle.app:app",
        "--host",
        "127.0.0.1",
        "--port",
        str(port),
        "--log-level",
        "warning",
    ]
    proc = subprocess.Popen(
        cmd,
        cwd=str(ROOT),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    logger.info("[tests] Started uvicorn (pid=%s) on port %s", proc.pid, port)

    # Wait for health endpoint
    url = f"http://127.0.0.1:{port}"
    for _ in range(120):
        try:
            r = requests.get(url + "/health", timeout=1.0)
            if r.status_code == 200:
                break
        except requests.RequestException:
            pass
        # If process died early, surface logs
        if proc.poll() is not None:
            out, err = proc.communicate(timeout=2)
            raise RuntimeError(f"Server exited early (code={proc.returncode}). STDOUT:\n{out}\nSTDERR:\n{err}")
        time.sleep(0.25)
    else:
        proc.terminate()
        try:
            out, err = proc.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            out, err = ("", "")
        raise RuntimeError(f"Server did not start in time. STDOUT:\n{out}\nSTDERR:\n{err}")

    try:
        yield url
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()


@pytest.fixture()
def http(base_url: str):
    session = requests.Session()
    default_timeout = 10

    class Client:
        def __init__(self, base: str):
            self.base = base

        def get(self, path: str, **params) -> requests.Response:
            return session.get(self.base + path, params=params or None, timeout=default_timeout)

        def post(self, path: str, payload: dict | None = None, **params) -> requests.Response:
            return session.post(
                self.base + path,
                json=payload,
                params=params or None,
                timeout=default_timeout,
            )

        def delete(self, path: str) -> requests.Response:
            return session.delete(self.base + path, timeout=default_timeout)

        def create_battle(self, payload: dict | None = None) -> dict:
            r = self.post("/battles", payload or {})
            r.raise_for_status()
            return r.json()

    yield Client(base_url)
    session.close()
