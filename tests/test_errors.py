"""Tests for the error taxonomy."""
import pytest

from reviewroster.core.errors import (
    DEFAULT_MESSAGES,
    HTTP_STATUS_CODES,
    ErrorCode,
    ReviewRosterError,
)


def test_every_code_has_status_and_message():
    """Test that the taxonomy is complete."""
    for code in ErrorCode:
        assert code in HTTP_STATUS_CODES
        assert DEFAULT_MESSAGES[code]


@pytest.mark.parametrize(
    "code,status",
    [
        (ErrorCode.INVALID_INPUT, 400),
        (ErrorCode.NOT_FOUND, 404),
        (ErrorCode.PR_EXISTS, 409),
        (ErrorCode.TEAM_EXISTS, 400),
        (ErrorCode.PR_MERGED, 409),
        (ErrorCode.NOT_ASSIGNED, 409),
        (ErrorCode.NO_CANDIDATE, 409),
        (ErrorCode.INTERNAL_ERROR, 500),
    ],
)
def test_status_codes(code, status):
    """Test HTTP status mapping."""
    assert ReviewRosterError(code).status_code == status


def test_default_and_custom_message():
    """Test message defaults and overrides."""
    default = ReviewRosterError(ErrorCode.PR_MERGED)
    assert default.message == "cannot reassign on merged PR"
    assert str(default) == "PR_MERGED: cannot reassign on merged PR"

    custom = ReviewRosterError(ErrorCode.NOT_FOUND, "author not found")
    assert custom.message == "author not found"


def test_to_dict_envelope():
    """Test the serialized error envelope."""
    error = ReviewRosterError(ErrorCode.NO_CANDIDATE)

    assert error.to_dict() == {
        "error": {
            "code": "NO_CANDIDATE",
            "message": "no active replacement candidate in team",
        }
    }


def test_transient_flag():
    """Test transient defaults to False and shows in repr."""
    assert ReviewRosterError(ErrorCode.INTERNAL_ERROR).transient is False

    error = ReviewRosterError(ErrorCode.INTERNAL_ERROR, transient=True)
    assert error.transient is True
    assert "transient=True" in repr(error)
