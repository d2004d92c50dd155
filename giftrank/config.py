"""Configuration settings for the gift ranking engine"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Gift Ranking Engine"
    VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Corpus Settings
    CORPUS_PATH: str = "data/gifts.json"
    ALL_CATEGORY: str = "All"

    # Scoring Settings
    SCORE_FORMULA: str = "auto"  # auto, review or interaction
    SCORE_PRICE_FALLBACK: bool = True

    # Classifier Settings
    VALUE_PERCENTILE: float = 0.85
    HIGH_SCORE_PERCENTILE: float = 0.90
    HIGH_SCORE_THRESHOLD: Optional[float] = None  # overrides the percentile when set
    HIGH_DEMAND_THRESHOLD: int = 400
    LOW_DEMAND_THRESHOLD: int = 200

    # Query Settings
    DEFAULT_PAGE_LIMIT: int = 100
    MAX_PAGE_LIMIT: int = 1000

    # Rate Limiting
    RATE_LIMIT: str = "100/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
