"""
receiptdesk 애플리케이션 설정
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # 로컬(데모) 모드 토글: "true" 일 때만 활성화
    MOCK_MODE: str = "false"

    # 업스트림 ReceiptOS 백엔드
    BACKEND_URL: str = "http://localhost:8000"

    # 로컬 모드 저장소
    DATABASE_URL: str = "sqlite:///./data/receiptdesk.db"
    STORAGE_KEY: str = "receiptos.receipts"
    COOKIE_STORAGE_KEY: str = "receiptos.cookie_receipts"
    DATA_DIR: str = "./data"

    # 위험도 분류 키워드
    HIGH_RISK_KEYWORDS: List[str] = ["otp", "계좌", "주민", "비밀번호"]
    SUMMARY_RISK_KEYWORDS: List[str] = ["otp", "계좌"]

    # 환경
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def mock_enabled(self) -> bool:
        return self.MOCK_MODE.strip().lower() == "true"


settings = Settings()
