"""Application configuration using pydantic-settings."""

import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from dotenv import dotenv_values
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Shared by Settings fields and by the mapping variables scanned at startup,
# e.g. URSHORT_PORT and URSHORT_STANDARD_URI_<key>.
ENV_PREFIX = "URSHORT"
DEFAULT_PORT = 3000
REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Process settings loaded from URSHORT_* environment variables.

    Redirect mappings are not fields here: their names are open-ended and are
    scanned separately by ``services.mapping_loader``.
    """

    model_config = SettingsConfigDict(
        env_prefix=f"{ENV_PREFIX}_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT

    # 307 keeps the request method and is not cached by browsers
    redirect_status_code: int = 307

    # Pattern policy - defaults trust the regex author
    pattern_full_match: bool = False
    pattern_strict_templates: bool = False

    # Merged under the process environment when scanning mappings
    env_file: str = ".env"

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    debug: bool = False
    enable_docs: bool = False

    @field_validator("port", mode="before")
    @classmethod
    def fallback_invalid_port(cls, value: Any) -> Any:
        """Ignore unusable port values instead of refusing to start."""
        try:
            port = int(str(value).strip())
        except ValueError:
            return DEFAULT_PORT
        if not 0 < port <= 65535:
            return DEFAULT_PORT
        return port

    @field_validator("redirect_status_code")
    @classmethod
    def validate_redirect_status(cls, value: int) -> int:
        if value not in REDIRECT_STATUS_CODES:
            allowed = ", ".join(str(code) for code in sorted(REDIRECT_STATUS_CODES))
            raise ValueError(f"redirect_status_code must be one of {allowed}")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def docs_enabled(self) -> bool:
        return self.enable_docs or self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this in tests to reset settings between test cases.
    After clearing, the next get_settings() call will create
    a fresh Settings instance with current environment variables.

    Example:
        def test_something(monkeypatch):
            monkeypatch.setenv("URSHORT_PORT", "8080")
            clear_settings_cache()
            settings = get_settings()  # Fresh instance
    """
    get_settings.cache_clear()


def read_environment(
    settings: Settings, environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Merge the optional .env file under the process environment.

    Process variables win over the file, so a deployment can override any
    value without editing it. File values are taken verbatim: ``${name}``
    in a pattern template is a placeholder, not a variable reference.
    """
    merged: dict[str, str] = {}
    env_path = Path(settings.env_file)
    if env_path.is_file():
        for key, value in dotenv_values(env_path, interpolate=False).items():
            if value is not None:
                merged[key] = value
        logger.info("env_file.loaded", extra={"env_file": str(env_path)})
    merged.update(os.environ if environ is None else environ)
    return merged
