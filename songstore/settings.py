from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from songstore.schemas.fingerprint import AddressPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_port: int = 17020
    service_host: str = "0.0.0.0"  # nosec B104

    # App metadata
    app_name: str = "songstore"
    app_version: str = "0.1.0"

    # Database
    database_url: str = "sqlite+aiosqlite:///./song_recognition.db"
    database_echo: bool = False
    sqlite_busy_timeout_s: float = Field(default=5.0, ge=0.0)

    # Fingerprint index
    fingerprint_address_policy: AddressPolicy = AddressPolicy.ACCUMULATE
    lookup_chunk_size: int = Field(default=500, ge=1)

    # Admin
    admin_api_key: str = ""  # Empty = write endpoints locked


settings = Settings()
