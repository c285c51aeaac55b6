"""Error Hierarchy — tests for codes, statuses and the REST envelope."""

from surveillance_pseudonym.core.errors import (
    ChainInsertFailedError,
    ChainMissingError,
    DatabaseError,
    ErrorCategory,
)


def test_chain_missing_carries_chain_id():
    error = ChainMissingError("c0ffee")
    assert error.code == "CHAIN_MISSING"
    assert error.context.chain_id == "c0ffee"
    assert error.category == ErrorCategory.DATA_INTEGRITY


def test_integrity_errors_are_not_retryable():
    response = ChainInsertFailedError("race lost").to_response()
    assert response["error"]["code"] == "CHAIN_INSERT_FAILED"
    assert response["error"]["retryable"] is False


def test_database_errors_are_retryable():
    error = DatabaseError("lock timeout", "execute")
    assert error.http_status == 503
    assert error.to_response()["error"]["retryable"] is True
