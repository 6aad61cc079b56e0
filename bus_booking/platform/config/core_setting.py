from pathlib import Path
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Bus Booking Session Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    DEPLOY_ENV: str = 'local_dev'

    # Remote ticketing API
    API_BASE_URL: str = 'http://localhost:8080'
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Caches
    ROUTE_CACHE_TTL_SECONDS: float = 300.0  # 5 minutes
    SEAT_DETAIL_CACHE_TTL_SECONDS: float = 60.0

    # Bus layout
    SEAT_ROW_WIDTH: int = 4
    REAR_ROW_WIDTH: int = 5
    REAR_ROW: Optional[int] = None  # None -> highest row number is the rear bench

    # Mock seat map fallback when the seat feed is down (never in production)
    MOCK_SEAT_COUNT: int = 40
    ALLOW_MOCK_SEATS: Optional[bool] = None

    @field_validator('SEAT_ROW_WIDTH', 'REAR_ROW_WIDTH', 'MOCK_SEAT_COUNT')
    @classmethod
    def positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError('must be a positive integer')
        return v

    @field_validator('API_BASE_URL')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @model_validator(mode='after')
    def default_mock_seats(self) -> 'Settings':
        if self.ALLOW_MOCK_SEATS is None:
            self.ALLOW_MOCK_SEATS = not self.is_production
        return self

    @property
    def is_production(self) -> bool:
        return self.DEPLOY_ENV.lower() in ('prod', 'production')


settings = Settings()  # type: ignore
