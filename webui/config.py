"""Application configuration pulled from environment variables via pydantic."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the web UI server."""
    model_config = SettingsConfigDict(env_prefix="WEBUI_", extra="ignore")

    allow_registration: bool = False
    version: str = "unknown"
    commit: str = "unknown"
    build_date: str = "unknown"
    asset_dir: str | None = None  # serve an unpacked build/ tree from disk
    asset_archive: str | None = None  # serve a zipped bundle; wins over asset_dir
    gzip_minimum_size: int = 500
    gzip_compresslevel: int = Field(default=6, ge=1, le=9)
    log_level: str = "INFO"

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return str(v).upper()


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
