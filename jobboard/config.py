from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


def parse_list_setting(raw: Any) -> list[str]:
    """Accept a JSON array string, a comma-separated string or a real list."""

    if raw is None:
        return []

    items: list[Any]
    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                items = parsed if isinstance(parsed, list) else [parsed]
            except ValueError:
                items = [p.strip() for p in s.split(",")]
        else:
            items = [p.strip() for p in s.split(",")]
    else:
        items = [raw]

    values: list[str] = []
    for item in items:
        if item is None:
            continue
        value = str(item).strip()
        if value:
            values.append(value)
    return values


class Settings(BaseSettings):
    app_name: str = Field(default="Job Board Backend")
    api_prefix: str = Field(default="/api")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Database configuration
    # ORM_DB_URL wins over DB_URL; with neither set, development runs on sqlite.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="jobboard", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    # Tokens are valid for 7 days.
    access_token_expire_minutes: int = Field(default=60 * 24 * 7)
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )

    # Payment gate for job creation
    # - ADMIN_WALLET: address every job payment must be sent to
    # - ETH_RPC_URL: full JSON-RPC endpoint; if unset, built from INFURA_API_KEY + ETH_NETWORK
    admin_wallet: str = Field(default="", validation_alias="ADMIN_WALLET")
    min_payment_eth: float = Field(default=0.001, ge=0, validation_alias="MIN_PAYMENT_ETH")
    eth_rpc_url: str | None = Field(default=None, validation_alias="ETH_RPC_URL")
    infura_api_key: str | None = Field(default=None, validation_alias="INFURA_API_KEY")
    eth_network: str = Field(default="sepolia", validation_alias="ETH_NETWORK")
    eth_rpc_timeout_seconds: float = Field(default=10.0, gt=0, validation_alias="ETH_RPC_TIMEOUT_SECONDS")

    # Canonical skills recognised by resume extraction.
    # - JSON array string: SKILL_VOCABULARY=["python","react"]
    # - Comma-separated:   SKILL_VOCABULARY=python,react
    # Empty means the built-in default vocabulary.
    skill_vocabulary: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="SKILL_VOCABULARY")

    @field_validator("cors_origins", "skill_vocabulary", mode="before")
    @classmethod
    def _validate_list_settings(cls, v: Any) -> list[str]:
        return parse_list_setting(v)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    if settings.orm_db_url:
        return settings.orm_db_url

    if settings.db_url:
        return settings.db_url

    if settings.environment.lower() in {"development", "test"}:
        return "sqlite:///./dev.db"

    # Production fallback: use discrete DB_* components.
    # NOTE: password may include special chars; prefer DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )


def build_eth_rpc_url(settings: Settings) -> str | None:
    if settings.eth_rpc_url:
        return settings.eth_rpc_url
    if settings.infura_api_key:
        return f"https://{settings.eth_network}.infura.io/v3/{settings.infura_api_key}"
    return None
