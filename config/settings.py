"""
County Natality Analysis - Application Settings
Manages environment variables and configuration using Pydantic
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional
import os


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All values have defaults so a bare checkout runs against the files
    under data/raw/.

    Optional:
        - EXPECTED_ROW_COUNT (asserts the analytic table size)
    """

    # Inputs
    NATALITY_PATH: str = "data/raw/natality_2022.txt"
    HEALTH_RANKINGS_SOURCE: str = (
        "https://www.countyhealthrankings.org/sites/default/files/media/document/analytic_data2022.csv"
    )
    HTTP_TIMEOUT_SECONDS: int = 60

    # Outputs
    OUTPUT_PATH: str = "data/processed/analytic_counties.parquet"
    REPORT_DIR: str = "reports"
    LOG_DIR: str = "logs"

    # Application
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Derivation thresholds
    POVERTY_THRESHOLD: float = 16.3  # National child poverty average (%)

    # Reference 2022 inputs produce 569 counties
    EXPECTED_ROW_COUNT: Optional[int] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_DIR:
            os.makedirs(self.LOG_DIR, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached settings instance.
    Uses lru_cache to avoid re-reading .env on every call.
    """
    return Settings()


# State-level rows in the health rankings extract carry the state name as county
US_STATE_NAMES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California",
    "Colorado", "Connecticut", "Delaware", "Florida", "Georgia",
    "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa",
    "Kansas", "Kentucky", "Louisiana", "Maine", "Maryland",
    "Massachusetts", "Michigan", "Minnesota", "Mississippi", "Missouri",
    "Montana", "Nebraska", "Nevada", "New Hampshire", "New Jersey",
    "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina",
    "South Dakota", "Tennessee", "Texas", "Utah", "Vermont",
    "Virginia", "Washington", "West Virginia", "Wisconsin", "Wyoming",
]

AGGREGATE_COUNTY_LABELS = US_STATE_NAMES + ["United States"]
