"""
Tests for cookie receipts: stats, the client facade and the endpoints.
"""
import pytest

from receiptdesk.a.cookie_client import CookieClient
from receiptdesk.a.pipeline.cookies import (
    build_cookie_receipt,
    calculate_cookie_stats,
    generate_dummy_cookie_receipts,
)
from receiptdesk.a.schemas import CookieInfo
from receiptdesk.backend import BackendError


def _cookie(name, party="first_party", purpose="functional", duration="session"):
    return CookieInfo(
        name=name, domain=".example.com", party_type=party, purpose=purpose, duration=duration
    )


COOKIES = [
    _cookie("sid"),
    _cookie("_ga", "third_party", "analytics", "persistent"),
    _cookie("ad", "third_party", "advertising", "persistent"),
    _cookie("csrf", purpose="necessary"),
]

REMOTE = {
    "receipt_id": "ck-1",
    "created_at": "2026-10-01T00:00:00Z",
    "site_name": "예시몰",
    "site_url": "https://shop.example",
    "cookies": [c.model_dump() for c in COOKIES],
    "total_cookies": 4,
    "third_party_count": 2,
}


@pytest.fixture()
def local_cookies(cookie_repository, fake_backend):
    return CookieClient(cookie_repository, fake_backend.client(), mock_enabled=True)


@pytest.fixture()
def remote_cookies(cookie_repository, fake_backend):
    return CookieClient(cookie_repository, fake_backend.client())


# =====================================================================
# Stats and dummy data
# =====================================================================
class TestStats:
    def test_counts(self):
        stats = calculate_cookie_stats(COOKIES)
        assert stats.total_cookies == 4
        assert stats.first_party_count == 2
        assert stats.third_party_count == 2
        assert stats.advertising_count == 1
        assert stats.analytics_count == 1
        assert stats.functional_count == 1
        assert stats.session_count == 2
        assert stats.persistent_count == 2

    def test_receipt_carries_stats(self):
        receipt = build_cookie_receipt("예시몰", "https://shop.example", COOKIES)
        assert receipt.receipt_id
        assert receipt.total_cookies == len(receipt.cookies) == 4

    def test_dummy_sites(self):
        dummies = generate_dummy_cookie_receipts()
        assert [d.site_name for d in dummies] == ["네이버", "카카오", "쿠팡"]
        assert dummies[2].total_cookies == 5
        assert dummies[1].advertising_count == 2
        assert len({d.receipt_id for d in dummies}) == 3


# =====================================================================
# Facade
# =====================================================================
class TestLocalCookies:
    def test_create_get_delete(self, local_cookies, fake_backend):
        created = local_cookies.create("예시몰", "https://shop.example", COOKIES)
        assert local_cookies.get(created.receipt_id) == created
        assert [r.receipt_id for r in local_cookies.list()] == [created.receipt_id]
        local_cookies.delete(created.receipt_id)
        assert local_cookies.list() == []
        assert fake_backend.calls == []

    def test_missing_is_none(self, local_cookies):
        assert local_cookies.get("nope") is None

    def test_load_samples_replaces_store(self, local_cookies):
        local_cookies.create("old", "https://old.example", [])
        samples = local_cookies.load_samples()
        assert [r.receipt_id for r in local_cookies.list()] == [r.receipt_id for r in samples]

    def test_kept_apart_from_receipts(self, local_cookies, repository):
        local_cookies.create("예시몰", "https://shop.example", COOKIES)
        assert repository.list() == []


class TestRemoteCookies:
    def test_list(self, remote_cookies, fake_backend):
        fake_backend.on("GET", "/api/cookies", json=[REMOTE, {"receipt_id": "broken"}])
        assert [r.receipt_id for r in remote_cookies.list()] == ["ck-1"]

    def test_list_degrades(self, remote_cookies, fake_backend):
        fake_backend.down = True
        result = remote_cookies.list_result()
        assert result.value == []
        assert result.error.operation == "list_cookies"

    def test_create_posts(self, remote_cookies, fake_backend):
        fake_backend.on("POST", "/api/cookies", json=REMOTE)
        receipt = remote_cookies.create("예시몰", "https://shop.example", COOKIES)
        assert receipt.receipt_id == "ck-1"

    def test_create_propagates(self, remote_cookies, fake_backend):
        fake_backend.down = True
        with pytest.raises(BackendError):
            remote_cookies.create("예시몰", "https://shop.example", COOKIES)

    def test_get_not_found(self, remote_cookies):
        assert remote_cookies.get("ck-404") is None

    def test_get_server_error_propagates(self, remote_cookies, fake_backend):
        fake_backend.on("GET", "/api/cookies/ck-1", status=500, json={"detail": "boom"})
        with pytest.raises(BackendError):
            remote_cookies.get("ck-1")

    def test_delete_escapes_id(self, remote_cookies, fake_backend):
        remote_cookies.delete("ck#1")
        assert fake_backend.raw_paths == ["/api/cookies/ck%231"]

    def test_load_samples_backend_mode(self, remote_cookies, fake_backend):
        assert remote_cookies.load_samples() == []
        assert fake_backend.calls == []


# =====================================================================
# Endpoints
# =====================================================================
class TestCookieEndpoints:
    def test_local_roundtrip(self, api):
        client = api(mock_enabled=True)
        payload = {
            "site_name": "예시몰",
            "site_url": "https://shop.example",
            "cookies": [c.model_dump() for c in COOKIES],
        }
        created = client.post("/api/cookies", json=payload)
        assert created.status_code == 200
        rid = created.json()["receipt_id"]
        assert created.json()["third_party_count"] == 2

        assert client.get(f"/api/cookies/{rid}").status_code == 200
        assert client.delete(f"/api/cookies/{rid}").json()["receipt_id"] == rid
        assert client.get(f"/api/cookies/{rid}").status_code == 404

    def test_samples(self, api):
        body = api(mock_enabled=True).post("/api/cookies/samples").json()
        assert len(body) == 3

    def test_invalid_cookie_rejected(self, api):
        resp = api(mock_enabled=True).post(
            "/api/cookies",
            json={"site_name": "x", "site_url": "y", "cookies": [{"name": "a"}]},
        )
        assert resp.status_code == 422

    def test_create_backend_failure(self, api, fake_backend):
        fake_backend.down = True
        resp = api().post("/api/cookies", json={"site_name": "x", "site_url": "y"})
        assert resp.status_code == 502

    def test_list_backend_down(self, api, fake_backend):
        fake_backend.down = True
        assert api().get("/api/cookies").json() == []
