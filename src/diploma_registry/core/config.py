"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .models import DEFAULT_MAX_DIPLOMAS, DEFAULT_MINT_FEE, GovernanceConfig


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class GovernanceSettings(BaseModel):
    max_diplomas: int = DEFAULT_MAX_DIPLOMAS
    mint_fee: int = DEFAULT_MINT_FEE  # smallest currency unit

    def to_config(self) -> GovernanceConfig:
        """Deployment-time GovernanceConfig (no authority, no tokens)."""
        return GovernanceConfig(
            max_diplomas=self.max_diplomas,
            mint_fee=self.mint_fee,
        )


class AuditSettings(BaseModel):
    persist_path: str | None = None  # JSONL file; in-memory only when unset
    max_memory_entries: int = 100_000


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level registry settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    authorized_issuers: list[str] = Field(default_factory=list)
    state_path: str = "data/registry.json"
    audit: AuditSettings = Field(default_factory=AuditSettings)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "DIPLOMA_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    return Settings(**data)
