from decimal import ROUND_HALF_UP
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Tax rates per document type (fractions, 0.08 == 8%)
    ESTIMATE_TAX_RATE: float = 0.13
    PURCHASE_ORDER_TAX_RATE: float = 0.08
    INVOICE_TAX_RATE: float = 0.13

    # Document defaults
    ESTIMATE_EXPIRY_DAYS: int = 30
    INVOICE_DUE_DAYS: int = 30

    # Money
    CURRENCY: str = "CAD"
    CURRENCY_SYMBOL: str = "$"
    MONEY_ROUNDING: str = ROUND_HALF_UP

    # Per-line upper bounds (quantity and price share one)
    MAX_LINE_VALUE: int = 1_000_000_000
    MAX_MARKUP_PERCENT: int = 1000

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
    ]

settings = Settings()
