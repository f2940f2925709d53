"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Data store
    datastore_api_base: str = "http://localhost:8001"
    datastore_api_key: str = ""

    # Service
    service_name: str = "facility-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Reporting
    facility_timezone: str = "Asia/Kolkata"
    expiry_horizon_days: int = 7
    preview_limit: int = 5
    income_ring_radius: float = 45.0  # Radius of the income ring chart in SVG units


settings = Settings()
