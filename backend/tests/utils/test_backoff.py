from __future__ import annotations

from app.utils.backoff import RetryPolicy, calc_next_delay


def test_calc_next_delay_doubles_and_caps():
    assert [calc_next_delay(n, 10, 120) for n in range(0, 6)] == [10, 10, 20, 40, 80, 120]


def test_default_policy_never_retries():
    policy = RetryPolicy()
    assert policy.should_retry(1) is False


def test_policy_allows_up_to_max_attempts():
    policy = RetryPolicy(max_attempts=3, base_seconds=2, max_seconds=5)
    assert [policy.should_retry(n) for n in (1, 2, 3)] == [True, True, False]
    assert [policy.delay_for(n) for n in (1, 2, 3)] == [2, 4, 5]
