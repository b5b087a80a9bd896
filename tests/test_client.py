"""
Tests for the receipt client facade in backend and local (demo) mode.
"""
import json
import pathlib

import pytest

from receiptdesk.a.pipeline import receipt_from_text
from receiptdesk.backend import BackendError

FIXTURES = pathlib.Path(__file__).resolve().parent.parent / "fixtures"
CONSENT = json.loads((FIXTURES / "backend_receipt_consent.json").read_text(encoding="utf-8"))
CONSENT_ID = CONSENT["receipt_id"]


# =====================================================================
# Backend mode
# =====================================================================
class TestBackendList:
    def test_normalizes_every_receipt(self, backend_client, fake_backend):
        fake_backend.on("GET", "/api/receipts", json=[CONSENT, {"receipt_id": "bare"}])
        result = backend_client.list_result()
        assert result.ok
        assert [r.id for r in result.value] == [CONSENT_ID, "bare"]
        assert result.value[1].service_name == "Unknown Service"

    def test_transport_failure_degrades_to_empty(self, backend_client, fake_backend):
        fake_backend.down = True
        assert backend_client.list() == []
        result = backend_client.list_result()
        assert not result.ok
        assert result.error.operation == "list"
        assert result.error.status_code is None

    def test_http_error_degrades_to_empty(self, backend_client, fake_backend):
        fake_backend.on("GET", "/api/receipts", status=500, json={"detail": "boom"})
        result = backend_client.list_result()
        assert result.value == []
        assert result.error.status_code == 500

    def test_empty_success_is_distinct_from_failure(self, backend_client, fake_backend):
        fake_backend.on("GET", "/api/receipts", json=[])
        result = backend_client.list_result()
        assert result.ok
        assert result.value == []

    def test_non_array_payload(self, backend_client, fake_backend):
        fake_backend.on("GET", "/api/receipts", json={"items": []})
        assert backend_client.list() == []

    def test_duplicate_ids_dropped(self, backend_client, fake_backend):
        fake_backend.on("GET", "/api/receipts", json=[CONSENT, CONSENT])
        assert len(backend_client.list()) == 1


class TestBackendGet:
    def test_found(self, backend_client, fake_backend):
        fake_backend.on("GET", f"/api/receipts/{CONSENT_ID}", json=CONSENT)
        receipt = backend_client.get_by_id(CONSENT_ID)
        assert receipt.entity_name == "주식회사 헬스메이트"

    def test_not_found_is_none(self, backend_client):
        assert backend_client.get_by_id("nope") is None

    def test_transport_failure_is_none(self, backend_client, fake_backend):
        fake_backend.down = True
        assert backend_client.get_by_id(CONSENT_ID) is None

    def test_id_stays_one_path_segment(self, backend_client, fake_backend):
        fake_backend.on(
            "GET", "/api/receipts/a", json={"receipt_id": "a", "seven_lines": {"what": "WRONG"}}
        )
        assert backend_client.get_by_id("a?x=1") is None
        assert fake_backend.calls == [("GET", "/api/receipts/a?x=1")]
        assert fake_backend.raw_paths == ["/api/receipts/a%3Fx%3D1"]

    def test_slash_and_fragment_escaped(self, backend_client, fake_backend):
        backend_client.get_by_id("../admin#top")
        assert fake_backend.raw_paths == ["/api/receipts/..%2Fadmin%23top"]


class TestBackendCreate:
    def test_posts_and_normalizes(self, backend_client, fake_backend):
        fake_backend.on(
            "POST",
            "/api/ingest",
            json={"receipt": CONSENT, "extract_result": {"document_type": "consent"}},
        )
        receipt = backend_client.create("개인정보 수집 동의서", "email")
        assert receipt.id == CONSENT_ID
        assert fake_backend.calls == [("POST", "/api/ingest")]

    def test_failure_propagates(self, backend_client, fake_backend):
        fake_backend.on("POST", "/api/ingest", status=500, json={"detail": "boom"})
        with pytest.raises(BackendError) as exc:
            backend_client.create("text")
        assert exc.value.status_code == 500

    def test_transport_failure_propagates(self, backend_client, fake_backend):
        fake_backend.down = True
        with pytest.raises(BackendError):
            backend_client.create("text")

    def test_blank_text_rejected(self, backend_client, fake_backend):
        with pytest.raises(ValueError):
            backend_client.create("   ")
        assert fake_backend.calls == []


class TestBackendDelete:
    def test_success(self, backend_client, fake_backend):
        fake_backend.on("DELETE", "/api/receipts/r-1", json={"receipt_id": "r-1"})
        backend_client.delete("r-1")
        assert fake_backend.calls == [("DELETE", "/api/receipts/r-1")]

    def test_missing_remote_is_success(self, backend_client, fake_backend):
        fake_backend.on("DELETE", "/api/receipts/r-1", status=404, json={"detail": "Receipt not found"})
        backend_client.delete("r-1")

    def test_query_in_id_does_not_hit_other_receipt(self, backend_client, fake_backend):
        fake_backend.on("DELETE", "/api/receipts/a", json={"receipt_id": "a"})
        backend_client.delete("a?x")
        assert fake_backend.calls == [("DELETE", "/api/receipts/a?x")]
        assert fake_backend.raw_paths == ["/api/receipts/a%3Fx"]

    def test_server_error_propagates(self, backend_client, fake_backend):
        fake_backend.on("DELETE", "/api/receipts/r-1", status=503, json={"detail": "down"})
        with pytest.raises(BackendError):
            backend_client.delete("r-1")

    def test_transport_failure_propagates(self, backend_client, fake_backend):
        fake_backend.down = True
        with pytest.raises(BackendError):
            backend_client.delete("r-1")


# =====================================================================
# Local (demo) mode
# =====================================================================
class TestLocalMode:
    def test_create_list_get_delete(self, local_client, fake_backend):
        receipt = local_client.create("Service: 쇼핑몰\n회원가입 동의", "other")
        assert receipt.service_name == "쇼핑몰"
        assert [r.id for r in local_client.list()] == [receipt.id]
        assert local_client.get_by_id(receipt.id) == receipt
        local_client.delete(receipt.id)
        assert local_client.list() == []
        assert fake_backend.calls == []

    def test_list_never_calls_backend(self, local_client, fake_backend):
        fake_backend.down = True
        assert local_client.list_result().ok

    def test_get_falls_back_to_backend(self, local_client, fake_backend):
        fake_backend.on("GET", f"/api/receipts/{CONSENT_ID}", json=CONSENT)
        receipt = local_client.get_by_id(CONSENT_ID)
        assert receipt.id == CONSENT_ID
        assert fake_backend.calls == [("GET", f"/api/receipts/{CONSENT_ID}")]

    def test_get_missing_everywhere(self, local_client):
        assert local_client.get_by_id("ghost") is None

    def test_local_hit_skips_backend(self, local_client, repository, fake_backend):
        stored = repository.save(receipt_from_text("local only"))
        assert local_client.get_by_id(stored.id) == stored
        assert fake_backend.calls == []

    def test_load_samples(self, local_client):
        samples = local_client.load_samples()
        assert len(samples) == 3
        assert [r.id for r in local_client.list()] == [r.id for r in samples]

    def test_load_samples_backend_mode_is_noop(self, backend_client, fake_backend):
        assert backend_client.load_samples() == []
        assert fake_backend.calls == []
