import pytest
import requests

from cinematch.services.retry import RetryPolicy


def test_delays_grow_exponentially():
    policy = RetryPolicy(base_delay=1.0, multiplier=2.0)
    assert [policy.delay(n) for n in range(3)] == [1.0, 2.0, 4.0]


def test_succeeds_after_transient_failures(retry, sleeps):
    outcomes = [requests.ConnectionError("down"), requests.Timeout("slow"), "ok"]

    def flaky():
        result = outcomes.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    assert retry.call(flaky) == "ok"
    assert sleeps == [1.0, 2.0]


def test_reraises_after_last_attempt(retry, sleeps):
    calls = []

    def always_down():
        calls.append(1)
        raise requests.HTTPError("HTTP error! status: 503")

    with pytest.raises(requests.HTTPError):
        retry.call(always_down)
    assert len(calls) == 3
    # No wait after the final attempt.
    assert sleeps == [1.0, 2.0]


def test_other_errors_are_not_retried(retry, sleeps):
    def broken():
        raise KeyError("results")

    with pytest.raises(KeyError):
        retry.call(broken)
    assert sleeps == []


def test_single_attempt_policy_never_sleeps(sleeps):
    policy = RetryPolicy(max_attempts=1, sleep=sleeps.append)

    def down():
        raise requests.ConnectionError("refused")

    with pytest.raises(requests.ConnectionError):
        policy.call(down)
    assert sleeps == []
