"""Tests for StoreSettings."""

import pytest
from pydantic import ValidationError

from kvstack import RetryPolicy
from kvstack.backend.redis_backend import RedisBackend
from kvstack.config import StoreSettings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep ambient KVSTACK_* variables and .env files out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("URL", "DB", "SOCKET_TIMEOUT", "MAX_ATTEMPTS", "BACKOFF", "BASE_DELAY"):
        monkeypatch.delenv(f"KVSTACK_{name}", raising=False)


def test_defaults():
    settings = StoreSettings()

    assert settings.url == "redis://localhost:6379"
    assert settings.db == 0
    assert settings.socket_timeout is None
    assert settings.retry_policy() == RetryPolicy()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("KVSTACK_URL", "redis://cache:6380")
    monkeypatch.setenv("KVSTACK_DB", "3")
    monkeypatch.setenv("KVSTACK_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("KVSTACK_BACKOFF", "exponential")

    settings = StoreSettings()

    assert settings.url == "redis://cache:6380"
    assert settings.db == 3
    assert settings.retry_policy() == RetryPolicy(max_attempts=4, backoff="exponential")


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("KVSTACK_DB=5\nUNRELATED=1\n")

    assert StoreSettings().db == 5


@pytest.mark.parametrize(
    "overrides",
    [{"db": -1}, {"max_attempts": 0}, {"backoff": "random"}, {"base_delay": -0.5}],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        StoreSettings(**overrides)


def test_backend_from_settings():
    settings = StoreSettings(url="redis://cache:6380", db=2, socket_timeout=0.5, max_attempts=3)

    backend = RedisBackend.from_settings(settings)

    kwargs = backend.sync_client.connection_pool.connection_kwargs
    assert kwargs["host"] == "cache"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2
    assert kwargs["socket_timeout"] == 0.5
    assert backend._retry.max_attempts == 3
