"""
tests/test_cache_decorator.py — Tests for @cached_endpoint and invalidate_prefix

Runs against the in-process memory backend (TESTING disables Redis);
get_cached/set_cached are patched only where call arguments matter.
"""

from unittest.mock import patch

from app.cache.backend import get_cached, set_cached
from app.cache.decorators import cache_key_for, cached_endpoint, invalidate_prefix


def _counting(prefix, **decorator_kwargs):
    calls = []

    @cached_endpoint(prefix=prefix, **decorator_kwargs)
    def endpoint(time_range=30, db=None, user=None):
        calls.append(time_range)
        return {"time_range": time_range, "calls": len(calls)}

    return endpoint, calls


def test_second_call_served_from_cache():
    endpoint, calls = _counting("analytics_test", ttl_seconds=60, key_params=["time_range"])
    first = endpoint(time_range=7, db="session-a")
    second = endpoint(time_range=7, db="session-b")
    assert first == second
    assert calls == [7]


def test_key_params_separate_entries():
    endpoint, calls = _counting("analytics_test", ttl_seconds=60, key_params=["time_range"])
    endpoint(time_range=7)
    endpoint(time_range=30)
    endpoint(time_range=7)
    assert calls == [7, 30]


def test_ttl_passed_to_backend():
    endpoint, _ = _counting("analytics_ttl", ttl_seconds=90, key_params=["time_range"])
    with patch("app.cache.decorators.get_cached", return_value=None), \
         patch("app.cache.decorators.set_cached") as mock_set:
        endpoint(time_range=7)
    key, value = mock_set.call_args.args
    assert key.startswith("analytics_ttl:")
    assert value == {"time_range": 7, "calls": 1}
    assert mock_set.call_args.kwargs["ttl_seconds"] == 90


def test_default_key_ignores_db_and_user():
    endpoint, calls = _counting("analytics_default", ttl_seconds=60)
    endpoint(time_range=7, db="a", user="u1")
    endpoint(time_range=7, db="b", user="u2")
    assert calls == [7]


def test_non_json_result_not_cached():
    @cached_endpoint(prefix="plain", ttl_seconds=60)
    def endpoint():
        return "plain text"

    with patch("app.cache.decorators.set_cached") as mock_set:
        assert endpoint() == "plain text"
    mock_set.assert_not_called()


def test_wrapper_exposes_prefix():
    endpoint, _ = _counting("analytics_prefix")
    assert endpoint.cache_prefix == "analytics_prefix"
    assert endpoint.__name__ == "endpoint"


def test_invalidate_prefix_forces_recompute():
    endpoint, calls = _counting("analytics_inv", ttl_seconds=60, key_params=["time_range"])
    endpoint(time_range=7)
    invalidate_prefix("analytics_inv")
    endpoint(time_range=7)
    assert calls == [7, 7]


def test_invalidate_prefix_leaves_lookalike_prefixes():
    set_cached("analytics_inv:a", 1)
    set_cached("analytics_inv_other:b", 2)
    invalidate_prefix("analytics_inv")
    assert get_cached("analytics_inv:a") is None
    assert get_cached("analytics_inv_other:b") == 2


def test_cache_key_for_is_order_independent():
    a = cache_key_for("p", {"x": 1, "y": 2})
    b = cache_key_for("p", {"y": 2, "x": 1})
    assert a == b
    assert len(a) == len("p:") + 12


def test_cache_key_for_with_key_params_ignores_others():
    assert cache_key_for("p", {"x": 1, "y": 2}, ["x"]) == cache_key_for("p", {"x": 1, "y": 3}, ["x"])
