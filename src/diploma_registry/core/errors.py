"""Error codes and the exception hierarchy for the diploma registry.

Every failure the registry can report maps to exactly one :class:`ErrorCode`.
Components raise the matching :class:`RegistryError` subclass; the public
facade converts it into a failed :class:`OperationResult`.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    NOT_AUTHORIZED = 100
    ALREADY_MINTED = 101
    INVALID_ID = 102
    INVALID_DEGREE_TYPE = 103
    INVALID_GPA = 104
    INVALID_GRAD_DATE = 105
    INVALID_HONORS = 106
    INVALID_MAJOR = 107
    INVALID_MINOR = 108
    INVALID_TRANSCRIPT_HASH = 109
    REVOKED = 110
    NOT_OWNER = 111
    INVALID_METADATA = 112
    MAX_DIPLOMAS_EXCEEDED = 113
    INVALID_UPDATE_PARAM = 114
    UPDATE_NOT_ALLOWED = 115
    INVALID_ISSUER = 116
    INVALID_RECIPIENT = 117
    INVALID_STATUS = 118
    AUTHORITY_NOT_VERIFIED = 119
    INVALID_FIELD_OF_STUDY = 120
    INVALID_CREDIT_HOURS = 121
    INVALID_THESIS_TITLE = 122
    INVALID_ADVISOR = 123
    INVALID_AWARDS = 124
    INVALID_VERIFICATION_LEVEL = 125
    FEE_TRANSFER_FAILED = 126


class RegistryError(Exception):
    """Base exception for all registry errors."""

    code: ErrorCode = ErrorCode.INVALID_METADATA

    def __init__(self, message: str = "", code: ErrorCode | None = None) -> None:
        if code is not None:
            self.code = code
        self.message = message or self.code.name.lower()
        super().__init__(f"[{self.code.name}] {self.message}")


# --- Configuration ---
class ConfigError(RegistryError):
    """Invalid or missing configuration."""

    code = ErrorCode.INVALID_UPDATE_PARAM


# --- Authorization ---
class AuthorizationError(RegistryError):
    """Caller is not allowed to perform the operation."""


class NotAuthorized(AuthorizationError):
    code = ErrorCode.NOT_AUTHORIZED


class AuthorityNotVerified(AuthorizationError):
    """No governance authority is configured, or it is already set."""

    code = ErrorCode.AUTHORITY_NOT_VERIFIED


class NotOwner(AuthorizationError):
    code = ErrorCode.NOT_OWNER


# --- Lookup ---
class LookupFailure(RegistryError):
    """Token id does not refer to a known record."""


class InvalidId(LookupFailure):
    code = ErrorCode.INVALID_ID


class AlreadyMinted(LookupFailure):
    """Token id is already taken by an existing record."""

    code = ErrorCode.ALREADY_MINTED


# --- Capacity ---
class CapacityError(RegistryError):
    """Capacity ceiling reached."""


class MaxDiplomasExceeded(CapacityError):
    code = ErrorCode.MAX_DIPLOMAS_EXCEEDED


# --- State ---
class StateError(RegistryError):
    """Record is in a state that forbids the operation."""


class Revoked(StateError):
    code = ErrorCode.REVOKED


# --- Governance ---
class GovernanceParamError(RegistryError):
    """Governance parameter out of range."""


class InvalidUpdateParam(GovernanceParamError):
    code = ErrorCode.INVALID_UPDATE_PARAM


# --- Field validation ---
class ValidationError(RegistryError):
    """A diploma field failed its bounds check."""

    field_name: str = ""


class InvalidDegreeType(ValidationError):
    code = ErrorCode.INVALID_DEGREE_TYPE
    field_name = "degree_type"


class InvalidGpa(ValidationError):
    code = ErrorCode.INVALID_GPA
    field_name = "gpa"


class InvalidGradDate(ValidationError):
    code = ErrorCode.INVALID_GRAD_DATE
    field_name = "graduation_date"


class InvalidHonors(ValidationError):
    code = ErrorCode.INVALID_HONORS
    field_name = "honors"


class InvalidMajor(ValidationError):
    code = ErrorCode.INVALID_MAJOR
    field_name = "major"


class InvalidMinor(ValidationError):
    code = ErrorCode.INVALID_MINOR
    field_name = "minor"


class InvalidTranscriptHash(ValidationError):
    code = ErrorCode.INVALID_TRANSCRIPT_HASH
    field_name = "transcript_hash"


class InvalidFieldOfStudy(ValidationError):
    code = ErrorCode.INVALID_FIELD_OF_STUDY
    field_name = "field_of_study"


class InvalidCreditHours(ValidationError):
    code = ErrorCode.INVALID_CREDIT_HOURS
    field_name = "credit_hours"


class InvalidThesisTitle(ValidationError):
    code = ErrorCode.INVALID_THESIS_TITLE
    field_name = "thesis_title"


class InvalidAdvisor(ValidationError):
    code = ErrorCode.INVALID_ADVISOR
    field_name = "advisor"


class InvalidAwards(ValidationError):
    code = ErrorCode.INVALID_AWARDS
    field_name = "awards"


class InvalidVerificationLevel(ValidationError):
    code = ErrorCode.INVALID_VERIFICATION_LEVEL
    field_name = "verification_level"


class InvalidRecipient(ValidationError):
    code = ErrorCode.INVALID_RECIPIENT
    field_name = "recipient"


# --- External collaborators ---
class FeeTransferFailed(RegistryError):
    """The value-transfer primitive refused or failed the mint fee."""

    code = ErrorCode.FEE_TRANSFER_FAILED


class AuditUnavailable(RegistryError):
    """The audit journal is unavailable; mutations are refused."""

    code = ErrorCode.UPDATE_NOT_ALLOWED


_BY_CODE: dict[ErrorCode, type[RegistryError]] = {
    cls.code: cls
    for cls in (
        NotAuthorized,
        AuthorityNotVerified,
        NotOwner,
        InvalidId,
        AlreadyMinted,
        MaxDiplomasExceeded,
        Revoked,
        InvalidUpdateParam,
        InvalidDegreeType,
        InvalidGpa,
        InvalidGradDate,
        InvalidHonors,
        InvalidMajor,
        InvalidMinor,
        InvalidTranscriptHash,
        InvalidFieldOfStudy,
        InvalidCreditHours,
        InvalidThesisTitle,
        InvalidAdvisor,
        InvalidAwards,
        InvalidVerificationLevel,
        InvalidRecipient,
        FeeTransferFailed,
        AuditUnavailable,
    )
}


def error_for_code(code: ErrorCode, message: str = "") -> RegistryError:
    """Build the exception matching *code* (generic RegistryError if none)."""
    cls = _BY_CODE.get(code)
    if cls is None:
        return RegistryError(message, code=code)
    return cls(message)
