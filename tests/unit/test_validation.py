"""Test ordered field validation for mint and update requests."""

from __future__ import annotations

import pytest

from diploma_registry.core import errors
from diploma_registry.core.models import MintRequest
from diploma_registry.registry.validation import (
    MINT_FIELD_CHECKS,
    validate_mint_request,
    validate_update,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _request(**overrides) -> MintRequest:
    fields = dict(
        recipient="ST3RECIPIENT",
        degree_type="Bachelor",
        gpa=350,
        graduation_date=2025,
        honors="Cum Laude",
        major="Computer Science",
        minor="Math",
        transcript_hash=bytes(32),
        field_of_study="Engineering",
        credit_hours=120,
        thesis_title=None,
        advisor=None,
        awards=["Award1"],
        verification_level=3,
    )
    fields.update(overrides)
    return MintRequest(**fields)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestValidRequests:
    def test_baseline_is_valid(self):
        validate_mint_request(_request())

    def test_boundaries_accepted(self):
        validate_mint_request(
            _request(
                degree_type="D" * 50,
                gpa=400,
                graduation_date=1,
                honors="H" * 50,
                major="M" * 100,
                minor="m" * 100,
                field_of_study="F" * 100,
                credit_hours=300,
                thesis_title="T" * 200,
                advisor="A" * 128,
                awards=["a" * 100] * 5,
                verification_level=5,
            )
        )

    def test_lower_boundaries_accepted(self):
        validate_mint_request(
            _request(
                degree_type="D",
                gpa=0,
                honors="",
                major="M",
                minor="",
                field_of_study="",
                credit_hours=0,
                awards=[],
                verification_level=0,
            )
        )

    def test_optional_fields_absent(self):
        validate_mint_request(_request(minor=None, thesis_title=None, advisor=None))


class TestFieldErrors:
    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"degree_type": ""}, errors.InvalidDegreeType),
            ({"degree_type": "D" * 51}, errors.InvalidDegreeType),
            ({"gpa": 450}, errors.InvalidGpa),
            ({"gpa": 401}, errors.InvalidGpa),
            ({"gpa": -1}, errors.InvalidGpa),
            ({"graduation_date": 0}, errors.InvalidGradDate),
            ({"honors": "H" * 51}, errors.InvalidHonors),
            ({"major": ""}, errors.InvalidMajor),
            ({"major": "M" * 101}, errors.InvalidMajor),
            ({"minor": "m" * 101}, errors.InvalidMinor),
            ({"transcript_hash": bytes(31)}, errors.InvalidTranscriptHash),
            ({"transcript_hash": bytes(33)}, errors.InvalidTranscriptHash),
            ({"field_of_study": "F" * 101}, errors.InvalidFieldOfStudy),
            ({"credit_hours": 301}, errors.InvalidCreditHours),
            ({"credit_hours": -5}, errors.InvalidCreditHours),
            ({"thesis_title": "T" * 201}, errors.InvalidThesisTitle),
            ({"advisor": ""}, errors.InvalidAdvisor),
            ({"advisor": "A" * 129}, errors.InvalidAdvisor),
            ({"awards": ["a"] * 6}, errors.InvalidAwards),
            ({"awards": ["a" * 101]}, errors.InvalidAwards),
            ({"verification_level": 6}, errors.InvalidVerificationLevel),
            ({"verification_level": -1}, errors.InvalidVerificationLevel),
            ({"recipient": ""}, errors.InvalidRecipient),
        ],
    )
    def test_single_field_violation(self, overrides, expected):
        with pytest.raises(expected):
            validate_mint_request(_request(**overrides))


class TestTypeStrictness:
    def test_gpa_string_not_coerced(self):
        with pytest.raises(errors.InvalidGpa):
            validate_mint_request(_request(gpa="350"))

    def test_gpa_bool_rejected(self):
        with pytest.raises(errors.InvalidGpa):
            validate_mint_request(_request(gpa=True))

    def test_gpa_float_rejected(self):
        with pytest.raises(errors.InvalidGpa):
            validate_mint_request(_request(gpa=3.5))

    def test_transcript_hash_hex_string_rejected(self):
        with pytest.raises(errors.InvalidTranscriptHash):
            validate_mint_request(_request(transcript_hash="00" * 32))

    def test_transcript_hash_bytearray_accepted(self):
        validate_mint_request(_request(transcript_hash=bytearray(32)))

    def test_awards_plain_string_rejected(self):
        with pytest.raises(errors.InvalidAwards):
            validate_mint_request(_request(awards="Award1"))

    def test_award_entry_must_be_string(self):
        with pytest.raises(errors.InvalidAwards):
            validate_mint_request(_request(awards=[1]))


class TestPrecedence:
    def test_degree_type_before_gpa(self):
        with pytest.raises(errors.InvalidDegreeType):
            validate_mint_request(_request(degree_type="", gpa=450))

    def test_gpa_before_transcript(self):
        with pytest.raises(errors.InvalidGpa):
            validate_mint_request(_request(gpa=999, transcript_hash=b"short"))

    def test_minor_before_transcript(self):
        with pytest.raises(errors.InvalidMinor):
            validate_mint_request(_request(minor="m" * 101, transcript_hash=b""))

    def test_awards_before_verification_level(self):
        with pytest.raises(errors.InvalidAwards):
            validate_mint_request(_request(awards=["a"] * 6, verification_level=9))

    def test_check_order(self):
        names = [name for name, _ in MINT_FIELD_CHECKS]
        assert names == [
            "degree_type",
            "gpa",
            "graduation_date",
            "honors",
            "major",
            "minor",
            "transcript_hash",
            "field_of_study",
            "credit_hours",
            "thesis_title",
            "advisor",
            "awards",
            "verification_level",
            "recipient",
        ]


class TestValidateUpdate:
    def test_valid(self):
        validate_update("Master", 380)

    def test_degree_type_checked_first(self):
        with pytest.raises(errors.InvalidDegreeType):
            validate_update("", 999)

    def test_gpa(self):
        with pytest.raises(errors.InvalidGpa):
            validate_update("Master", 401)
