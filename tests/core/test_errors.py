"""Tests for error types and codes."""

import pytest

from apidiff.core.errors import ApiDiffError, ConfigError, ErrorCode, PolicyError


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_FILE_NOT_FOUND, 2000),
            (ErrorCode.POLICY_PARSE_ERROR, 3000),
            (ErrorCode.POLICY_UNKNOWN, 3000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(self, code: ErrorCode, expected_range: int) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestApiDiffError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = ApiDiffError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        error = ApiDiffError(code=ErrorCode.POLICY_UNKNOWN, message="nope")
        assert str(error) == "[3003] POLICY_UNKNOWN: nope"

    def test_given_error_when_raised_then_is_exception(self) -> None:
        with pytest.raises(ApiDiffError):
            raise ConfigError.missing_required("diff.rename_threshold")


class TestConfigError:
    """ConfigError factory tests."""

    def test_given_parse_failure_when_created_then_has_path(self) -> None:
        error = ConfigError.parse_error("/repo/.apidiff/config.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/repo/.apidiff/config.yaml", "reason": "bad indent"}
        assert "bad indent" in error.message

    def test_given_invalid_value_when_created_then_stringifies_value(self) -> None:
        error = ConfigError.invalid_value("diff.rename_threshold", 1.5, "too large")

        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "1.5"
        assert error.retryable is False

    def test_given_missing_file_when_created_then_code_set(self) -> None:
        assert ConfigError.file_not_found("/x.yaml").code == ErrorCode.CONFIG_FILE_NOT_FOUND


class TestPolicyError:
    """PolicyError factory tests."""

    def test_given_invalid_rule_when_created_then_names_rule(self) -> None:
        error = PolicyError.invalid_rule("removal", "action: bad value")

        assert error.code == ErrorCode.POLICY_INVALID_RULE
        assert error.details == {"rule": "removal", "reason": "action: bad value"}

    def test_given_unknown_policy_when_created_then_lists_known(self) -> None:
        error = PolicyError.unknown_policy("strict", ["a", "b"])

        assert error.details["known"] == ["a", "b"]
        assert "a, b" in error.message

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (PolicyError.parse_error("p.yaml", "oops"), ErrorCode.POLICY_PARSE_ERROR),
            (PolicyError.file_not_found("p.yaml"), ErrorCode.POLICY_FILE_NOT_FOUND),
        ],
    )
    def test_given_factory_when_called_then_code_matches(self, error: PolicyError, code: ErrorCode) -> None:
        assert error.code == code
