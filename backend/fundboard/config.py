from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional

DEFAULT_BIO = (
    "I'm passionate about serving others and making a difference in the lives "
    "of children. This Tanzania mission is close to my heart!"
)


class Settings(BaseSettings):

    PORT: int = 8080
    DATABASE_URL: str = 'sqlite:///./fundboard.db'
    ADMIN_PASSWORD: str

    # optional: keep a spreadsheet webhook in sync with the ledger
    FORWARD_TO_APPSCRIPT_URL: Optional[str] = None
    FORWARD_TIMEOUT: float = 10.0

    DEFAULT_GOAL: int = 3500
    DEFAULT_BIO: str = DEFAULT_BIO
    MAX_NUMBER: int = 80

    LOG_LEVEL: str = 'INFO'
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
