"""
tests/test_rate_limiting.py — Tests for rate limiting behavior

Covers: slowapi rate limiter configuration, storage selection with Redis
fallback, and that assignment endpoints still respond under TESTING.

Called by: pytest
Depends on: app.rate_limit, routers/items.py
"""

import os
from unittest.mock import MagicMock, patch


def test_limiter_is_configured():
    """Rate limiter module exports a Limiter with key_func."""
    from app.rate_limit import limiter
    assert limiter is not None
    assert limiter._key_func is not None


def test_limiter_uses_rate_limit_key():
    from app.rate_limit import limiter, rate_limit_key
    assert limiter._key_func is rate_limit_key


def test_key_is_client_ip_without_agent_key():
    from app.rate_limit import rate_limit_key
    request = MagicMock()
    request.headers = {}
    request.client.host = "10.0.0.7"
    assert rate_limit_key(request) == "10.0.0.7"


def test_agent_key_gets_own_bucket():
    """Agent traffic is keyed by a hash of the key, never the raw key."""
    from app.rate_limit import rate_limit_key
    request = MagicMock()
    request.headers = {"x-agent-key": "s3cret"}
    key = rate_limit_key(request)
    assert key.startswith("agent:")
    assert "s3cret" not in key


def test_rate_limit_disabled_in_test_mode():
    """In TESTING mode the limiter never blocks."""
    from app.rate_limit import limiter
    assert os.environ.get("TESTING") == "1"
    assert limiter.enabled is False


def test_assign_endpoint_not_blocked_in_tests(client, vp_user, item_ids):
    """Repeated assign calls keep working with limiting disabled."""
    for _ in range(5):
        resp = client.post("/api/items/assign", json={"item_ids": item_ids, "assignee_id": vp_user.id})
        assert resp.status_code == 200


def test_resolve_storage_testing_is_memory():
    from app.rate_limit import _resolve_storage
    assert _resolve_storage() == "memory://"


def test_resolve_storage_no_redis():
    """_resolve_storage falls back to memory when Redis is not configured."""
    with patch.dict(os.environ, {"TESTING": ""}), patch("app.rate_limit.settings") as mock_settings:
        mock_settings.cache_backend = "memory"
        mock_settings.redis_url = ""
        from app.rate_limit import _resolve_storage
        assert _resolve_storage() == "memory://"


def test_resolve_storage_redis_unavailable():
    """_resolve_storage falls back to memory when Redis ping fails."""
    import redis as redis_lib

    with patch.dict(os.environ, {"TESTING": ""}), patch("app.rate_limit.settings") as mock_settings:
        mock_settings.cache_backend = "redis"
        mock_settings.redis_url = "redis://localhost:6379/15"
        with patch.object(redis_lib, "from_url") as mock_from_url:
            mock_from_url.return_value.ping.side_effect = ConnectionError
            from app.rate_limit import _resolve_storage
            assert _resolve_storage() == "memory://"


def test_resolve_storage_redis_ok():
    import redis as redis_lib

    with patch.dict(os.environ, {"TESTING": ""}), patch("app.rate_limit.settings") as mock_settings:
        mock_settings.cache_backend = "redis"
        mock_settings.redis_url = "redis://cache:6379/0"
        with patch.object(redis_lib, "from_url"):
            from app.rate_limit import _resolve_storage
            assert _resolve_storage() == "redis://cache:6379/0"
