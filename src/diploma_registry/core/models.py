"""Core domain models for the diploma registry.

These are the canonical "truth models" for the system: every component
reads and writes these same types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from .errors import ConfigError, ErrorCode, error_for_code
from .ids import utc_now

DEFAULT_MAX_DIPLOMAS = 1_000_000
DEFAULT_MINT_FEE = 500


# ---------------------------------------------------------------------------
# Mint request
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MintRequest:
    """Raw mint input, exactly as the caller supplied it.

    Values are checked in a fixed order by
    :mod:`diploma_registry.registry.validation` and are never coerced.
    """

    recipient: str
    degree_type: str
    gpa: int
    graduation_date: int
    honors: str
    major: str
    minor: str | None
    transcript_hash: bytes
    field_of_study: str
    credit_hours: int
    thesis_title: str | None = None
    advisor: str | None = None
    awards: list[str] = field(default_factory=list)
    verification_level: int = 0


# ---------------------------------------------------------------------------
# Diploma record
# ---------------------------------------------------------------------------

class DiplomaRecord(BaseModel):
    """Metadata for one minted diploma. Frozen; changes go through model_copy."""

    model_config = {"frozen": True}

    token_id: int
    issuer: str
    degree_type: str
    gpa: int  # 0..400 -> 0.00..4.00
    graduation_date: int
    honors: str
    major: str
    minor: str | None = None
    transcript_hash: bytes
    field_of_study: str
    credit_hours: int
    thesis_title: str | None = None
    advisor: str | None = None
    awards: tuple[str, ...] = ()
    verification_level: int = 0
    status: bool = True  # False once revoked, never back
    minted_at: int = 0  # block height

    @field_validator("transcript_hash", mode="before")
    @classmethod
    def _hash_from_hex(cls, value: Any) -> Any:
        if isinstance(value, str):
            return bytes.fromhex(value)
        return value

    @field_serializer("transcript_hash", when_used="json")
    def _hash_to_hex(self, value: bytes) -> str:
        return value.hex()

    @property
    def gpa_display(self) -> str:
        """GPA on the conventional 0.00-4.00 scale."""
        return f"{self.gpa // 100}.{self.gpa % 100:02d}"


class UpdateRecord(BaseModel):
    """Most recent amendment of a diploma. Overwritten on each update."""

    model_config = {"frozen": True}

    token_id: int
    update_degree_type: str
    update_gpa: int
    update_height: int
    updater: str


# ---------------------------------------------------------------------------
# Governance
# ---------------------------------------------------------------------------

class GovernanceConfig(BaseModel):
    """Registry-wide configuration owned by a single registry instance."""

    model_config = {"validate_assignment": True}

    last_token_id: int = 0
    max_diplomas: int = DEFAULT_MAX_DIPLOMAS
    mint_fee: int = DEFAULT_MINT_FEE
    authority_contract: str | None = None

    def model_post_init(self, __context: Any) -> None:
        if self.max_diplomas <= 0:
            raise ConfigError(f"max_diplomas must be positive, got {self.max_diplomas}")
        if self.mint_fee < 0:
            raise ConfigError(f"mint_fee must be non-negative, got {self.mint_fee}")
        if self.last_token_id < 0:
            raise ConfigError(f"last_token_id must be non-negative, got {self.last_token_id}")

    @property
    def next_token_id(self) -> int:
        return self.last_token_id + 1


# ---------------------------------------------------------------------------
# Value transfer
# ---------------------------------------------------------------------------

class ValueTransfer(BaseModel):
    """One value movement observed through the transfer primitive."""

    amount: int
    sender: str
    recipient: str
    memo: str = ""
    timestamp: datetime = Field(default_factory=utc_now)


# ---------------------------------------------------------------------------
# Operation result
# ---------------------------------------------------------------------------

class OperationResult(BaseModel):
    """Discriminated success/failure result of a registry operation."""

    ok: bool
    value: Any = None
    error: ErrorCode | None = None
    message: str = ""

    @classmethod
    def success(cls, value: Any = True) -> OperationResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: ErrorCode, message: str = "") -> OperationResult:
        return cls(ok=False, error=code, message=message or code.name.lower())

    def unwrap(self) -> Any:
        """Return the value, or raise the error this result carries."""
        if self.ok:
            return self.value
        assert self.error is not None
        raise error_for_code(self.error, self.message)
