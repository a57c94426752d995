"""Unit test fixtures shared across test packages."""

import pytest


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test so environment patches take effect."""
    from infrastructure.settings import (
        get_cache_settings,
        get_database_settings,
        get_settings,
    )

    for getter in (get_settings, get_database_settings, get_cache_settings):
        getter.cache_clear()
    yield
    for getter in (get_settings, get_database_settings, get_cache_settings):
        getter.cache_clear()
