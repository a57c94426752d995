"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import CacheSettings, DatabaseSettings


class TestDatabaseSettings:
    """Tests for database connection and pool configuration."""

    def test_defaults_point_at_local_database(self):
        settings = DatabaseSettings()
        assert settings.database == "security_groups"
        assert settings.pool_max_connections >= settings.pool_min_connections

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(
            host="db.internal",
            username="sg",
            password="hunter2",
            database="sgdb",
        )
        assert settings.connection_string == "postgresql://sg@db.internal:5432/sgdb"
        assert "hunter2" not in settings.connection_string

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    @pytest.mark.parametrize(
        "field,value",
        [("pool_min_connections", 0), ("pool_max_connections", 101)],
    )
    def test_pool_bounds(self, field, value):
        with pytest.raises(ValidationError):
            DatabaseSettings(**{field: value})

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SECGROUPS_DB_HOST", "postgres")
        monkeypatch.setenv("SECGROUPS_DB_PORT", "6543")

        settings = DatabaseSettings()

        assert settings.host == "postgres"
        assert settings.port == 6543


class TestCacheSettings:
    """Tests for permission cache configuration."""

    def test_defaults_to_in_memory_backend(self):
        settings = CacheSettings()
        assert settings.backend == "memory"
        assert settings.decision_ttl_seconds == 300
        assert settings.group_ttl_seconds == 600

    def test_selects_redis_from_environment(self, monkeypatch):
        monkeypatch.setenv("SECGROUPS_CACHE_BACKEND", "redis")
        monkeypatch.setenv("SECGROUPS_CACHE_REDIS_URL", "redis://cache:6379/2")

        settings = CacheSettings()

        assert settings.backend == "redis"
        assert settings.redis_url == "redis://cache:6379/2"

    def test_unknown_backend_is_rejected(self):
        with pytest.raises(ValidationError):
            CacheSettings(backend="memcached")

    def test_ttls_must_be_positive(self):
        with pytest.raises(ValidationError):
            CacheSettings(decision_ttl_seconds=0)

    def test_key_prefix_cannot_be_empty(self):
        with pytest.raises(ValidationError):
            CacheSettings(key_prefix="")
