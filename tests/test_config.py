from __future__ import annotations

import pytest

from hqtrack.config import HqConfig
from hqtrack.exceptions import HqConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("PORT", "DATABASE_URL", "HQ_HOST", "HQ_IDLE_TIMEOUT", "HQ_POOL_SIZE", "HQ_CREATE_SCHEMA"):
        monkeypatch.delenv(key, raising=False)


def test_from_env_reads_required_and_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "5013")
    monkeypatch.setenv("DATABASE_URL", "mysql://tracker:secret@db/tracking")

    config = HqConfig.from_env()

    assert config.port == 5013
    assert config.database_url == "mysql://tracker:secret@db/tracking"
    assert config.host == "0.0.0.0"
    assert config.idle_timeout == 240.0
    assert config.pool_size == 10
    assert config.create_schema is False


def test_from_env_optional_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "5013")
    monkeypatch.setenv("DATABASE_URL", "memory://")
    monkeypatch.setenv("HQ_HOST", "127.0.0.1")
    monkeypatch.setenv("HQ_IDLE_TIMEOUT", "30")
    monkeypatch.setenv("HQ_POOL_SIZE", "4")
    monkeypatch.setenv("HQ_CREATE_SCHEMA", "yes")

    config = HqConfig.from_env()

    assert config.host == "127.0.0.1"
    assert config.idle_timeout == 30.0
    assert config.pool_size == 4
    assert config.create_schema is True


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "5013")
    monkeypatch.setenv("DATABASE_URL", "memory://")

    config = HqConfig.from_env(port=6000)

    assert config.port == 6000


def test_missing_port_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "memory://")

    with pytest.raises(HqConfigError, match="PORT"):
        HqConfig.from_env()


def test_missing_database_url_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "5013")

    with pytest.raises(HqConfigError, match="DATABASE_URL"):
        HqConfig.from_env()


def test_non_numeric_port_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "http")
    monkeypatch.setenv("DATABASE_URL", "memory://")

    with pytest.raises(HqConfigError):
        HqConfig.from_env()


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(HqConfigError):
        HqConfig(port=70000, database_url="memory://")
    with pytest.raises(HqConfigError):
        HqConfig(port=1, database_url="memory://", idle_timeout=0)
    with pytest.raises(HqConfigError):
        HqConfig(port=1, database_url="memory://", pool_size=0)
