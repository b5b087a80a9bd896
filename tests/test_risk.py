"""
Unit tests for the three-level risk classifier.
"""
import pytest

from receiptdesk.a.pipeline.risk import classify_risk, is_revoke_path_unclear
from receiptdesk.a.schemas import Receipt, RiskLevel, Transfer, TransferType


def _receipt(**overrides):
    """A receipt that qualifies as LOW unless overridden."""
    base = dict(
        id="r-1",
        data_items=["이름", "이메일"],
        retention_days=180,
        revoke_path="고객센터 1588-0000",
        third_party_services=[],
        transfers=[],
        summary="기본 정보 수집",
    )
    base.update(overrides)
    return Receipt(**base)


class TestHigh:
    def test_over_collection(self):
        assert classify_risk(_receipt(over_collection=True)) == RiskLevel.HIGH

    @pytest.mark.parametrize("item", ["OTP 번호", "계좌번호", "주민등록번호", "비밀번호"])
    def test_sensitive_item(self, item):
        assert classify_risk(_receipt(data_items=["이름", item])) == RiskLevel.HIGH

    def test_sensitive_item_case_insensitive(self):
        assert classify_risk(_receipt(data_items=["otp code"])) == RiskLevel.HIGH

    def test_sensitive_summary(self):
        assert classify_risk(_receipt(summary="계좌 연결 동의")) == RiskLevel.HIGH

    def test_high_beats_med(self):
        receipt = _receipt(data_items=["OTP 번호"], retention_days=400)
        assert classify_risk(receipt) == RiskLevel.HIGH

    def test_keywords_are_configurable(self):
        receipt = _receipt(data_items=["여권번호"])
        assert classify_risk(receipt) == RiskLevel.LOW
        assert classify_risk(receipt, item_keywords=["여권"]) == RiskLevel.HIGH


class TestMed:
    def test_retention_threshold(self):
        assert classify_risk(_receipt(retention_days=365)) == RiskLevel.MED
        assert classify_risk(_receipt(retention_days=364)) == RiskLevel.LOW

    def test_third_party(self):
        assert classify_risk(_receipt(third_party_services=["A사"])) == RiskLevel.MED

    def test_overseas_transfer(self):
        transfer = Transfer(type=TransferType.OVERSEAS, destination="AWS", is_overseas=True)
        assert classify_risk(_receipt(transfers=[transfer])) == RiskLevel.MED

    def test_domestic_transfer_alone_is_low(self):
        transfer = Transfer(type=TransferType.OUTSOURCING, destination="콜센터")
        assert classify_risk(_receipt(transfers=[transfer])) == RiskLevel.LOW

    @pytest.mark.parametrize("path", [None, "", "Needs clarification", "철회 경로 명확화 필요"])
    def test_unclear_revoke_path(self, path):
        assert classify_risk(_receipt(revoke_path=path)) == RiskLevel.MED


class TestLow:
    def test_all_clear(self):
        assert classify_risk(_receipt()) == RiskLevel.LOW


class TestRevokePath:
    def test_clear(self):
        assert not is_revoke_path_unclear("앱 설정 > 동의 철회")

    def test_whitespace_only(self):
        assert is_revoke_path_unclear("   ")
