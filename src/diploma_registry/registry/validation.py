"""Field validation for diploma mint and update requests.

Checks run in a fixed order and stop at the first violation, so a request
with several bad fields always reports the same error. Optional fields
(``minor``, ``thesis_title``, ``advisor``) are only checked when present.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from diploma_registry.core import errors
from diploma_registry.core.ids import TRANSCRIPT_HASH_LENGTH
from diploma_registry.core.models import MintRequest

MAX_DEGREE_TYPE_LEN = 50
MAX_GPA = 400
MAX_HONORS_LEN = 50
MAX_MAJOR_LEN = 100
MAX_MINOR_LEN = 100
MAX_FIELD_OF_STUDY_LEN = 100
MAX_CREDIT_HOURS = 300
MAX_THESIS_TITLE_LEN = 200
MAX_ADVISOR_LEN = 128
MAX_PRINCIPAL_LEN = 128
MAX_AWARDS = 5
MAX_AWARD_LEN = 100
MAX_VERIFICATION_LEVEL = 5


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _str_len_between(value: Any, low: int, high: int) -> bool:
    return isinstance(value, str) and low <= len(value) <= high


def _int_between(value: Any, low: int, high: int | None = None) -> bool:
    if not _is_int(value) or value < low:
        return False
    return high is None or value <= high


# ---------------------------------------------------------------------------
# Single-field checks
# ---------------------------------------------------------------------------

def validate_degree_type(value: Any) -> None:
    if not _str_len_between(value, 1, MAX_DEGREE_TYPE_LEN):
        raise errors.InvalidDegreeType(f"degree type must be 1-{MAX_DEGREE_TYPE_LEN} chars")


def validate_gpa(value: Any) -> None:
    if not _int_between(value, 0, MAX_GPA):
        raise errors.InvalidGpa(f"gpa must be an integer 0-{MAX_GPA}, got {value!r}")


def validate_graduation_date(value: Any) -> None:
    if not _int_between(value, 1):
        raise errors.InvalidGradDate(f"graduation date must be positive, got {value!r}")


def validate_honors(value: Any) -> None:
    if not _str_len_between(value, 0, MAX_HONORS_LEN):
        raise errors.InvalidHonors(f"honors must be at most {MAX_HONORS_LEN} chars")


def validate_major(value: Any) -> None:
    if not _str_len_between(value, 1, MAX_MAJOR_LEN):
        raise errors.InvalidMajor(f"major must be 1-{MAX_MAJOR_LEN} chars")


def validate_minor(value: Any) -> None:
    if value is not None and not _str_len_between(value, 0, MAX_MINOR_LEN):
        raise errors.InvalidMinor(f"minor must be at most {MAX_MINOR_LEN} chars")


def validate_transcript_hash(value: Any) -> None:
    if not isinstance(value, (bytes, bytearray)) or len(value) != TRANSCRIPT_HASH_LENGTH:
        raise errors.InvalidTranscriptHash(
            f"transcript hash must be exactly {TRANSCRIPT_HASH_LENGTH} bytes"
        )


def validate_field_of_study(value: Any) -> None:
    if not _str_len_between(value, 0, MAX_FIELD_OF_STUDY_LEN):
        raise errors.InvalidFieldOfStudy(
            f"field of study must be at most {MAX_FIELD_OF_STUDY_LEN} chars"
        )


def validate_credit_hours(value: Any) -> None:
    if not _int_between(value, 0, MAX_CREDIT_HOURS):
        raise errors.InvalidCreditHours(
            f"credit hours must be an integer 0-{MAX_CREDIT_HOURS}, got {value!r}"
        )


def validate_thesis_title(value: Any) -> None:
    if value is not None and not _str_len_between(value, 0, MAX_THESIS_TITLE_LEN):
        raise errors.InvalidThesisTitle(
            f"thesis title must be at most {MAX_THESIS_TITLE_LEN} chars"
        )


def validate_advisor(value: Any) -> None:
    if value is not None and not _str_len_between(value, 1, MAX_ADVISOR_LEN):
        raise errors.InvalidAdvisor(f"advisor must be 1-{MAX_ADVISOR_LEN} chars")


def validate_awards(value: Any) -> None:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise errors.InvalidAwards("awards must be a sequence of strings")
    if len(value) > MAX_AWARDS:
        raise errors.InvalidAwards(f"at most {MAX_AWARDS} awards, got {len(value)}")
    for award in value:
        if not _str_len_between(award, 0, MAX_AWARD_LEN):
            raise errors.InvalidAwards(f"award entries must be at most {MAX_AWARD_LEN} chars")


def validate_verification_level(value: Any) -> None:
    if not _int_between(value, 0, MAX_VERIFICATION_LEVEL):
        raise errors.InvalidVerificationLevel(
            f"verification level must be 0-{MAX_VERIFICATION_LEVEL}, got {value!r}"
        )


def validate_recipient(value: Any) -> None:
    if not _str_len_between(value, 1, MAX_PRINCIPAL_LEN):
        raise errors.InvalidRecipient(f"recipient must be a 1-{MAX_PRINCIPAL_LEN} char principal")


# ---------------------------------------------------------------------------
# Request-level checks
# ---------------------------------------------------------------------------

# Precedence order for mint. Do not reorder.
MINT_FIELD_CHECKS: tuple[tuple[str, Callable[[Any], None]], ...] = (
    ("degree_type", validate_degree_type),
    ("gpa", validate_gpa),
    ("graduation_date", validate_graduation_date),
    ("honors", validate_honors),
    ("major", validate_major),
    ("minor", validate_minor),
    ("transcript_hash", validate_transcript_hash),
    ("field_of_study", validate_field_of_study),
    ("credit_hours", validate_credit_hours),
    ("thesis_title", validate_thesis_title),
    ("advisor", validate_advisor),
    ("awards", validate_awards),
    ("verification_level", validate_verification_level),
    ("recipient", validate_recipient),
)


def validate_mint_request(request: MintRequest) -> None:
    """Raise the first field error found in *request*, in precedence order."""
    for name, check in MINT_FIELD_CHECKS:
        check(getattr(request, name))


def validate_update(degree_type: Any, gpa: Any) -> None:
    """Validate the two mutable fields of an existing record."""
    validate_degree_type(degree_type)
    validate_gpa(gpa)
