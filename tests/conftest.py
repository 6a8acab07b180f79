"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from markupsafe import Markup

from app.upstream import UpstreamClient

API_KEY = "sk_test_secret_key"
NAMESPACE = "acme"
UPSTREAM_URL = "https://upstream.test/api/json"

SAMPLE_EMAILS: List[Dict[str, Any]] = [
    {
        "id": "m1",
        "subject": "Welcome <b>aboard</b>",
        "from": "noreply@example.com",
        "to": "acme.signup-1@inbox.testmail.app",
        "timestamp": 1700000000000,
        "tag": "signup-1",
        "text": "see https://b.test now",
        "html": '<a href="https://a.test">x</a>',
        "spam_score": 0,
        "attachments": [
            {"filename": "hello.bin", "content_type": "application/octet-stream", "data": "AP+A"},
            {"content_type": "text/plain"},
        ],
    },
    {
        "id": "m2",
        "from": "security@example.com",
        "to": "acme.reset-2@inbox.testmail.app",
        "timestamp": 1699999000,
        "tag": "reset-2",
        "text": "Reset\n\n  your   password",
    },
    {
        "id": "m3",
        "subject": "Second signup",
        "from": "noreply@example.com",
        "to": "acme.signup-3@inbox.testmail.app",
        "timestamp": 1699998000000,
        "tag": "signup-3",
        "html": "<p>Hello</p>",
        "headers": {"x-mailer": "test", "received": "from mx"},
        "spam_report": "Content analysis details: (-0.1 points)",
    },
]


class FakeUpstream:
    """MockTransport handler that behaves like the inbox search API."""

    def __init__(self, emails: List[Dict[str, Any]] | None = None) -> None:
        self.emails = copy.deepcopy(SAMPLE_EMAILS if emails is None else emails)
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        params = request.url.params
        if params.get("apikey") != API_KEY:
            return httpx.Response(401, json={"result": "fail", "message": "invalid apikey"})
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"result": "fail", "message": "upstream error"})

        emails = list(self.emails)
        if params.get("tag"):
            emails = [item for item in emails if item.get("tag") == params["tag"]]
        if params.get("tag_prefix"):
            emails = [item for item in emails if (item.get("tag") or "").startswith(params["tag_prefix"])]
        limit = int(params.get("limit", "10"))
        offset = int(params.get("offset", "0"))
        page = emails[offset : offset + limit]
        return httpx.Response(
            200,
            json={
                "result": "success",
                "message": None,
                "count": len(emails),
                "limit": limit,
                "offset": offset,
                "emails": page,
            },
        )

    @property
    def last_params(self) -> httpx.QueryParams:
        return self.requests[-1].url.params


class RecordingSurface:
    """In-memory surface that keeps every rendered fragment."""

    def __init__(self) -> None:
        self.namespace = ""
        self.lists: List[Markup] = []
        self.details: List[Markup] = []
        self.auto_refresh: List[bool] = []
        self.documents: List[str] = []
        self.updates = 0

    def show_namespace(self, namespace: str) -> None:
        self.namespace = namespace

    def show_detail(self, content: Markup) -> None:
        self.details.append(content)
        self.updates += 1

    def show_panels(self, list_content: Markup, detail_content: Markup) -> None:
        self.lists.append(list_content)
        self.details.append(detail_content)
        self.updates += 1

    def show_auto_refresh(self, enabled: bool) -> None:
        self.auto_refresh.append(enabled)

    def open_document(self, document: str) -> None:
        self.documents.append(document)


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream_client(fake_upstream: FakeUpstream) -> UpstreamClient:
    return UpstreamClient(
        API_KEY,
        NAMESPACE,
        base_url=UPSTREAM_URL,
        transport=httpx.MockTransport(fake_upstream),
    )


@pytest.fixture
def proxy_app(upstream_client: UpstreamClient):
    """The application with its upstream client wired in, lifespan skipped."""
    from main import app

    previous = getattr(app.state, "upstream", None)
    app.state.upstream = upstream_client
    yield app
    app.state.upstream = previous


@pytest.fixture
def proxy(proxy_app) -> TestClient:
    return TestClient(proxy_app)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def viewer_http(proxy_app) -> httpx.AsyncClient:
    """Async client that reaches the proxy in-process."""
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=proxy_app), base_url="http://viewer.test")


@pytest.fixture
def make_controller(viewer_http: httpx.AsyncClient, surface: RecordingSurface, tmp_path) -> Callable[..., Any]:
    from app.viewer import QueryController

    def factory(**kwargs: Any) -> Tuple[QueryController, RecordingSurface]:
        kwargs.setdefault("downloads_dir", tmp_path / "downloads")
        return QueryController(viewer_http, surface, **kwargs), surface

    return factory


@pytest.fixture
def sample_emails() -> List[Dict[str, Any]]:
    return copy.deepcopy(SAMPLE_EMAILS)
