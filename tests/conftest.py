from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cfchat.config import ACCOUNT_ID_ENV, API_KEY_ENV, BASE_URL_ENV, HISTORY_FILE_ENV  # noqa: E402


@pytest.fixture(autouse=True)
def _set_test_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration"):
        yield
        return
    for name in (ACCOUNT_ID_ENV, API_KEY_ENV, BASE_URL_ENV, HISTORY_FILE_ENV):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("cfchat.cli.load_dotenv", lambda *a, **k: False)
    yield


class FakeResponse:
    """Stand-in for a streamed ``requests.Response``."""

    def __init__(self, chunks: List[bytes], status_code: int = 200):
        self._chunks = chunks
        self.status_code = status_code
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def iter_content(self, chunk_size: Optional[int] = None):  # noqa: ARG002
        yield from self._chunks

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.closed = True


class FakeEndpoint:
    """Records outgoing POSTs and answers with canned chunks."""

    def __init__(self) -> None:
        self.chunks: List[bytes] = []
        self.status_code = 200
        self.error: Optional[Exception] = None
        self.calls: List[Dict[str, Any]] = []

    def respond(self, body: str, status_code: int = 200) -> None:
        self.chunks = [body.encode("utf-8")] if body else []
        self.status_code = status_code

    def post(self, url, headers=None, data=None, stream=False, timeout=None):
        self.calls.append(
            {"url": url, "headers": headers, "data": data, "stream": stream, "timeout": timeout}
        )
        if self.error is not None:
            raise self.error
        return FakeResponse(list(self.chunks), self.status_code)


@pytest.fixture
def endpoint(monkeypatch: pytest.MonkeyPatch) -> FakeEndpoint:
    fake = FakeEndpoint()
    monkeypatch.setattr(requests, "post", fake.post)
    return fake


@pytest.fixture
def credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ACCOUNT_ID_ENV, "acct123")
    monkeypatch.setenv(API_KEY_ENV, "secret-token")


@pytest.fixture
def history_file(tmp_path: Path) -> Path:
    return tmp_path / "messages"


@pytest.fixture
def piped() -> io.StringIO:
    """Non-interactive stdin with nothing on it."""
    return io.StringIO("")
