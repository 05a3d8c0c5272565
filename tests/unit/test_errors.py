"""Test ErrorCode values, the exception hierarchy and OperationResult."""

import pytest

from diploma_registry.core.errors import (
    AlreadyMinted,
    AuditUnavailable,
    AuthorityNotVerified,
    AuthorizationError,
    ErrorCode,
    InvalidGpa,
    InvalidId,
    NotOwner,
    RegistryError,
    ValidationError,
    error_for_code,
)
from diploma_registry.core.models import OperationResult


class TestErrorCode:
    def test_codes_are_stable(self):
        assert ErrorCode.NOT_AUTHORIZED == 100
        assert ErrorCode.INVALID_ID == 102
        assert ErrorCode.INVALID_GPA == 104
        assert ErrorCode.NOT_OWNER == 111
        assert ErrorCode.MAX_DIPLOMAS_EXCEEDED == 113
        assert ErrorCode.AUTHORITY_NOT_VERIFIED == 119
        assert ErrorCode.INVALID_VERIFICATION_LEVEL == 125

    def test_registry_taxonomy_has_26_codes(self):
        registry_codes = [c for c in ErrorCode if 100 <= c <= 125]
        assert len(registry_codes) == 26

    def test_codes_are_unique(self):
        values = [int(c) for c in ErrorCode]
        assert len(values) == len(set(values))


class TestHierarchy:
    def test_groups(self):
        assert issubclass(NotOwner, AuthorizationError)
        assert issubclass(AuthorityNotVerified, AuthorizationError)
        assert issubclass(InvalidGpa, ValidationError)
        assert issubclass(InvalidGpa, RegistryError)

    def test_exception_carries_code_and_message(self):
        exc = InvalidId("no diploma 7")
        assert exc.code == ErrorCode.INVALID_ID
        assert exc.message == "no diploma 7"
        assert "INVALID_ID" in str(exc)

    def test_default_message_from_code(self):
        assert NotOwner().message == "not_owner"

    def test_field_name(self):
        assert InvalidGpa.field_name == "gpa"

    def test_error_for_code_builds_matching_class(self):
        exc = error_for_code(ErrorCode.ALREADY_MINTED, "dup")
        assert isinstance(exc, AlreadyMinted)
        assert exc.message == "dup"

    def test_audit_unavailable_maps_to_update_not_allowed(self):
        assert AuditUnavailable.code == ErrorCode.UPDATE_NOT_ALLOWED
        assert isinstance(error_for_code(ErrorCode.UPDATE_NOT_ALLOWED), AuditUnavailable)

    def test_error_for_code_unmapped_code(self):
        exc = error_for_code(ErrorCode.INVALID_STATUS)
        assert type(exc) is RegistryError
        assert exc.code == ErrorCode.INVALID_STATUS


class TestOperationResult:
    def test_success(self):
        result = OperationResult.success(5)
        assert result.ok is True
        assert result.value == 5
        assert result.error is None
        assert result.unwrap() == 5

    def test_success_defaults_to_true(self):
        assert OperationResult.success().value is True

    def test_failure(self):
        result = OperationResult.failure(ErrorCode.NOT_OWNER, "nope")
        assert result.ok is False
        assert result.value is None
        assert result.error == ErrorCode.NOT_OWNER
        assert result.message == "nope"

    def test_failure_unwrap_raises_matching_error(self):
        result = OperationResult.failure(ErrorCode.INVALID_GPA)
        with pytest.raises(InvalidGpa):
            result.unwrap()
