import pytest
import requests

from htmlbook.core import locator
from htmlbook.core.pipeline import ConversionSession
from htmlbook.utils.config import Configuration


class FakeResponse:
    def __init__(self, url: str, body: bytes | None):
        self.url = url
        self.body = body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.body is None:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {self.url}")

    def iter_content(self, chunk_size=1):
        yield self.body


class FakeWeb:
    """Stands in for requests.get; `pages` maps URLs to response bodies."""

    def __init__(self):
        self.pages: dict[str, bytes] = {}
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return FakeResponse(url, self.pages.get(url))


@pytest.fixture
def fake_web(monkeypatch):
    web = FakeWeb()
    monkeypatch.setattr(locator.requests, "get", web.get)
    return web


@pytest.fixture
def config():
    return Configuration()


@pytest.fixture
def session(config):
    session = ConversionSession(config)
    yield session
    session.cleanup()


@pytest.fixture
def write_file(tmp_path):
    """Creates a file under tmp_path (parents included) and returns its path."""
    def _write(name: str, content: str = "<html><body><p>text</p></body></html>"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write
