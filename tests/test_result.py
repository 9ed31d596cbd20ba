import pytest

from eventhub.result import ErrorType, Result


def test_success_carries_value():
    result = Result.success(42)

    assert result.is_success
    assert not result.is_failure
    assert result.value == 42
    assert result.message is None
    assert result.error_type is None


def test_success_may_carry_none():
    result = Result.success()

    assert result.is_success
    assert result.value is None


def test_failure_carries_message_and_type():
    result = Result.failure("missing", ErrorType.RECORD_NOT_FOUND)

    assert result.is_failure
    assert result.value is None
    assert result.message == "missing"
    assert result.error_type is ErrorType.RECORD_NOT_FOUND


def test_failure_requires_message():
    with pytest.raises(ValueError):
        Result.failure("", ErrorType.INVALID_INPUT)


def test_failure_requires_error_type():
    with pytest.raises(ValueError):
        Result(is_success=False, message="broken")


def test_success_cannot_carry_error():
    with pytest.raises(ValueError):
        Result(is_success=True, message="oops", error_type=ErrorType.UNKNOWN_ERROR)


def test_forward_keeps_failure_details():
    original = Result.failure("taken", ErrorType.ALREADY_EXISTS)

    forwarded = original.forward()

    assert forwarded.is_failure
    assert forwarded.message == "taken"
    assert forwarded.error_type is ErrorType.ALREADY_EXISTS


def test_forward_rejects_success():
    with pytest.raises(ValueError):
        Result.success(1).forward()


def test_error_type_values_are_wire_names():
    assert ErrorType.DATABASE_ERROR.value == "DatabaseError"
    assert ErrorType.FILE_SYSTEM_ERROR.value == "FileSystemError"
