"""Invoice dashboard configuration."""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_ENV_PREFIX = "INVOICE_"


class InvoiceConfig(BaseModel):
    """
    Invoice dashboard configuration.

    Defaults match a single-user desktop install: a JSON file in ./data,
    sample invoices on first run, and ten rows per page.
    """

    # Storage
    storage_backend: Literal["local", "valkey"] = Field(
        default="local",
        description="Key-value backend holding the invoice collection",
    )
    storage_path: Path = Field(
        default=Path("data/invoices.json"),
        description="File used by the local backend",
    )
    storage_key: str = Field(
        default="qistonpe-invoices",
        description="Key the invoice collection is stored under",
        min_length=1,
    )
    valkey_url: str | None = Field(
        default=None,
        description="Connection URL for the valkey backend",
    )
    persist_attempts: int = Field(
        default=3,
        description="Write attempts before a persistence failure is reported",
        ge=1,
        le=10,
    )

    # Behaviour
    seed_sample_data: bool = Field(
        default=True,
        description="Seed ten sample invoices when the store is empty",
    )
    page_size: int = Field(
        default=10,
        description="Rows per page in the invoice listing",
        ge=1,
        le=100,
    )
    recent_invoices_limit: int = Field(
        default=5,
        description="How many invoices the dashboard lists as recent",
        ge=1,
        le=50,
    )
    audit_history_limit: int = Field(
        default=500,
        description="Audit entries kept in memory for invoice history",
        ge=1,
        le=100_000,
    )
    activity_feed_limit: int = Field(
        default=50,
        description="Entries kept in the recent-activity feed",
        ge=1,
        le=1000,
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone used to decide what 'today' is",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> "InvoiceConfig":
        """
        Build config from INVOICE_* environment variables.

        A .env file (default: ./.env) is loaded first; real environment
        variables take precedence over it. Unset variables keep defaults.
        """
        load_dotenv(env_file, override=False)

        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{_ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw

        return cls.model_validate(values)
