import pytest

from leasedb.exception import ConfigurationError
from leasedb.policy import QueryRequest, RetryPolicy


def test_defaults():
    policy = RetryPolicy()
    assert policy.max_retry_count == 0
    assert policy.retry_error_codes == frozenset()


def test_codes_are_frozen():
    policy = RetryPolicy(2, ["LOCK_TIMEOUT", "ER_LOCK_DEADLOCK"])
    assert policy.retry_error_codes == frozenset(
        {"LOCK_TIMEOUT", "ER_LOCK_DEADLOCK"}
    )


def test_single_string_is_one_code():
    request = QueryRequest("SELECT 1", extra_retry_codes="SQLITE_BUSY")
    assert request.extra_retry_codes == frozenset({"SQLITE_BUSY"})


def test_policy_is_immutable():
    policy = RetryPolicy(1)
    with pytest.raises(AttributeError):
        policy.max_retry_count = 3


@pytest.mark.parametrize("value", (-1, 1.5, "2", True, None))
def test_invalid_max_retry_count(value):
    with pytest.raises(ConfigurationError):
        RetryPolicy(max_retry_count=value)


def test_non_string_code():
    with pytest.raises(ConfigurationError):
        RetryPolicy(retry_error_codes={1205})


def test_effective_codes_are_union():
    policy = RetryPolicy(1, {"A"})
    request = QueryRequest("SELECT 1", extra_retry_codes={"B"})
    assert policy.retry_codes_for(request) == frozenset({"A", "B"})
    assert policy.retry_codes_for(QueryRequest("SELECT 1")) == {"A"}
