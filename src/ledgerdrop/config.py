"""Configuration management using pydantic-settings."""

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Self

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import (
    DEFAULT_CREDIT_MEMO_LINE_FIELDS,
    DEFAULT_FALLBACK_ITEM,
    DEFAULT_REPORT_PREFIX,
    IngestConfig,
)

DEFAULT_BASE = "~/Documents/Ledgerdrop"
DEFAULT_PATTERNS = ["*.json"]
DEFAULT_WORKERS = 4
CONFIG_PATH = Path("~/.config/ledgerdrop/config.toml").expanduser()


class RecordProvider(str, Enum):
    """Available record stores."""

    MEMORY = "memory"
    NETSUITE = "netsuite"


class RecordsConfig(BaseSettings):
    """Record store configuration."""

    model_config = SettingsConfigDict(env_prefix="LEDGERDROP_RECORDS_")

    provider: RecordProvider = RecordProvider.MEMORY
    account_id: str = ""
    base_url: str | None = None
    token: str = ""
    timeout: float = 30.0


class FoldersConfig(BaseSettings):
    base: Path = Path(DEFAULT_BASE)
    input: str = "input"
    success: str = "success"
    error: str = "error"

    @field_validator("base", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()

    @property
    def locations(self) -> dict[str, Path]:
        """Location id -> directory."""
        return {name: self.base / name for name in (self.input, self.success, self.error)}


class TransactionsConfig(BaseSettings):
    fallback_item: int | str = DEFAULT_FALLBACK_ITEM
    credit_memo_line_fields: dict[str, Any] = DEFAULT_CREDIT_MEMO_LINE_FIELDS
    enable_sourcing: bool = True
    ignore_mandatory_fields: bool = True


class RunConfig(BaseSettings):
    workers: int = DEFAULT_WORKERS
    report_prefix: str = DEFAULT_REPORT_PREFIX


class WatchConfig(BaseSettings):
    patterns: list[str] = DEFAULT_PATTERNS
    settle_seconds: float = 2.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LEDGERDROP_")

    folders: FoldersConfig = FoldersConfig()
    transactions: TransactionsConfig = TransactionsConfig()
    records: RecordsConfig = RecordsConfig()
    run: RunConfig = RunConfig()
    watch: WatchConfig = WatchConfig()

    @model_validator(mode="after")
    def ensure_dirs(self) -> Self:
        for path in self.folders.locations.values():
            path.mkdir(parents=True, exist_ok=True)
        return self

    def ingest_config(self) -> IngestConfig:
        """Build the immutable config handed to the pipeline."""
        return IngestConfig(
            input_location=self.folders.input,
            success_location=self.folders.success,
            error_location=self.folders.error,
            fallback_item=self.transactions.fallback_item,
            credit_memo_line_fields=self.transactions.credit_memo_line_fields,
            enable_sourcing=self.transactions.enable_sourcing,
            ignore_mandatory_fields=self.transactions.ignore_mandatory_fields,
            report_prefix=self.run.report_prefix,
        )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        folders = FoldersConfig(**data.get("folders", {}))
        transactions = TransactionsConfig(**data.get("transactions", {}))
        records = RecordsConfig(**data.get("records", {}))
        run = RunConfig(**data.get("run", {}))
        watch = WatchConfig(**data.get("watch", {}))
        return Settings(
            folders=folders,
            transactions=transactions,
            records=records,
            run=run,
            watch=watch,
        )

    return Settings()
