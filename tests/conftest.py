"""
Shared pytest fixtures — in‑memory SQLite storage, a fake upstream backend
(httpx.MockTransport) and a FastAPI TestClient wired to both.
"""
import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_DIR", os.path.join(tempfile.gettempdir(), "receiptdesk-tests"))

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from receiptdesk.a.client import ReceiptClient, get_receipt_client  # noqa: E402
from receiptdesk.a.cookie_client import CookieClient, get_cookie_client  # noqa: E402
from receiptdesk.a.database import Base  # noqa: E402
from receiptdesk.a.models import StorageEntryModel  # noqa: E402,F401
from receiptdesk.a.schemas import CookieReceipt  # noqa: E402
from receiptdesk.a.storage import SqlReceiptRepository  # noqa: E402
from receiptdesk.b.client import RevocationClient, get_revocation_client  # noqa: E402
from receiptdesk.backend import BackendClient  # noqa: E402
from receiptdesk.main import app  # noqa: E402

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


class FakeBackend:
    """Routes ``(method, path)`` to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.raw_paths = []
        self.down = False

    def on(self, method, path, status=200, json=None):
        self.routes[(method, path)] = (status, json)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path))
        self.raw_paths.append(request.url.raw_path.decode("ascii"))
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        status, body = self.routes.get(
            (request.method, request.url.path), (404, {"detail": "Not Found"})
        )
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def client(self) -> BackendClient:
        http = httpx.Client(
            base_url="http://backend.test",
            transport=httpx.MockTransport(self.handle),
        )
        return BackendClient("http://backend.test", http=http)


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def session_factory():
    return _Session


@pytest.fixture()
def repository():
    return SqlReceiptRepository(_Session, key="test.receipts")


@pytest.fixture()
def cookie_repository():
    return SqlReceiptRepository(
        _Session, key="test.cookies", model=CookieReceipt, id_field="receipt_id"
    )


@pytest.fixture()
def fake_backend():
    return FakeBackend()


@pytest.fixture()
def backend_client(fake_backend):
    return ReceiptClient(repository=SqlReceiptRepository(_Session), backend=fake_backend.client())


@pytest.fixture()
def local_client(repository, fake_backend):
    return ReceiptClient(repository=repository, backend=fake_backend.client(), mock_enabled=True)


@pytest.fixture()
def api(fake_backend, repository, cookie_repository):
    """TestClient factory: ``api(mock_enabled=False)``."""
    clients = []

    def _make(mock_enabled=False):
        def _receipts():
            yield ReceiptClient(
                repository=repository,
                backend=fake_backend.client(),
                mock_enabled=mock_enabled,
            )

        def _cookies():
            yield CookieClient(
                repository=cookie_repository,
                backend=fake_backend.client(),
                mock_enabled=mock_enabled,
            )

        def _revocations():
            yield RevocationClient(fake_backend.client())

        app.dependency_overrides[get_receipt_client] = _receipts
        app.dependency_overrides[get_revocation_client] = _revocations
        app.dependency_overrides[get_cookie_client] = _cookies
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
    app.dependency_overrides.clear()
