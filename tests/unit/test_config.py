"""Tests for configuration and dependency wiring."""

import logging

import pytest

from core import Settings, create_container, get_settings
from core.logging_config import HANDLER_NAME
from handlers import AutosaveTask
from clients.pages import PagesClient
from document import BuilderStore


@pytest.mark.unit
def test_settings_defaults():
    settings = Settings()

    assert settings.history_max_size == 50
    assert settings.autosave_interval == 30.0
    assert settings.min_zoom == 25
    assert settings.max_zoom == 200


@pytest.mark.unit
def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("BUILDER_HISTORY_MAX_SIZE", "10")
    monkeypatch.setenv("BUILDER_AUTOSAVE_INTERVAL", "2.5")

    settings = Settings()

    assert settings.history_max_size == 10
    assert settings.autosave_interval == 2.5


@pytest.mark.unit
def test_settings_validation(monkeypatch):
    monkeypatch.setenv("BUILDER_HISTORY_MAX_SIZE", "0")

    with pytest.raises(Exception):
        Settings()


@pytest.mark.unit
def test_get_settings_cached(settings):
    from core import get_settings

    assert get_settings() is settings


@pytest.mark.unit
def test_container_wires_store():
    container = create_container("http://pages.test")

    store = container.get(BuilderStore)

    assert store is container.get(BuilderStore)
    assert isinstance(store.gateway, PagesClient)
    assert store.gateway.backend_url == "http://pages.test"
    assert store.max_history == container.get(Settings).history_max_size


@pytest.fixture
def tuned_env(monkeypatch):
    """Non-default settings in the environment, with the settings cache reset around the test."""
    monkeypatch.setenv("BUILDER_AUTOSAVE_INTERVAL", "7.5")
    monkeypatch.setenv("BUILDER_MAX_TREE_DEPTH", "8")
    monkeypatch.setenv("BUILDER_MAX_PAGE_SIZE", "2048")
    monkeypatch.setenv("BUILDER_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.unit
def test_container_applies_settings(tuned_env):
    container = create_container()

    store = container.get(BuilderStore)
    autosave = container.get(AutosaveTask)

    assert autosave.store is store
    assert autosave.interval == 7.5
    assert store.gateway.max_tree_depth == 8
    assert store.gateway.max_page_size == 2048


@pytest.mark.unit
def test_container_configures_logging(tuned_env):
    create_container()
    create_container()

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
    assert [h.get_name() for h in root.handlers].count(HANDLER_NAME) == 1
