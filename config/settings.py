# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # FTSnext
    FTS_URL: str = Field(default="foo", validation_alias="FTS_URL")
    PROJECT_NAME: str = Field(default="example", validation_alias="PROJECT_NAME")
    REQUIRE_STATUS_LOCATION: bool = Field(
        default=False, validation_alias="REQUIRE_STATUS_LOCATION"
    )

    # Polling
    POLL_INTERVAL_SECONDS: float = Field(
        default=1.0, gt=0, validation_alias="POLL_INTERVAL_SECONDS"
    )
    # None keeps the fetch unbounded
    FETCH_TIMEOUT_SECONDS: float | None = Field(
        default=None, validation_alias="FETCH_TIMEOUT_SECONDS"
    )
    FETCH_RETRY_ATTEMPTS: int = Field(
        default=0, ge=0, validation_alias="FETCH_RETRY_ATTEMPTS"
    )
    FETCH_RETRY_BACKOFF_SECONDS: float = Field(
        default=1.0, ge=0, validation_alias="FETCH_RETRY_BACKOFF_SECONDS"
    )
    FETCH_RETRY_MAX_BACKOFF_SECONDS: float = Field(
        default=30.0, ge=0, validation_alias="FETCH_RETRY_MAX_BACKOFF_SECONDS"
    )

    # Rendering
    RENDER_PADDING: int = Field(default=2, ge=0, validation_alias="RENDER_PADDING")
    RENDER_MAX_WIDTH: int = Field(default=80, gt=0, validation_alias="RENDER_MAX_WIDTH")
    RENDER_FPS: int = Field(default=30, gt=0, validation_alias="RENDER_FPS")

    # Logging knobs
    LOGGER_NAME: str = "ftsctl"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="ftsctl.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=10 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=3, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
