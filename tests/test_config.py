"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fieldarea.config import (
    LogLevel,
    Settings,
    StorageBackend,
    build_object_store,
    get_settings,
    get_settings_uncached,
)
from fieldarea.storage import InMemoryObjectStore, LocalObjectStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test from an empty directory with no FIELDAREA_ variables."""
    monkeypatch.chdir(tmp_path)
    for name in [
        "FIELDAREA_USER_ID",
        "FIELDAREA_WORKSPACE_PATH",
        "FIELDAREA_LOG_LEVEL",
        "FIELDAREA_BOUNDS_PADDING",
        "FIELDAREA_STORAGE_BACKEND",
        "FIELDAREA_STORAGE_LOCAL_PATH",
    ]:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = get_settings_uncached()
        assert settings.user_id is None
        assert settings.log_level == LogLevel.WARNING
        assert settings.bounds_padding == 0.15
        assert settings.storage.backend == StorageBackend.LOCAL
        assert settings.storage.local_path == Path("./data/objects")

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("FIELDAREA_USER_ID", "alice")
        monkeypatch.setenv("FIELDAREA_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("FIELDAREA_STORAGE_BACKEND", "memory")

        settings = get_settings_uncached()

        assert settings.user_id == "alice"
        assert settings.log_level == LogLevel.DEBUG
        assert settings.storage.backend == StorageBackend.MEMORY

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("FIELDAREA_USER_ID=bob\nFIELDAREA_BOUNDS_PADDING=0.3\n")
        settings = get_settings_uncached()
        assert settings.user_id == "bob"
        assert settings.bounds_padding == 0.3

    def test_blank_user_is_signed_out(self, monkeypatch):
        monkeypatch.setenv("FIELDAREA_USER_ID", "   ")
        assert get_settings_uncached().user_id is None

    def test_negative_padding_rejected(self):
        with pytest.raises(ValidationError):
            Settings(bounds_padding=-1)

    def test_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestBuildObjectStore:
    def test_local(self, tmp_path):
        settings = Settings()
        settings.storage.local_path = tmp_path / "objects"
        store = build_object_store(settings)
        assert isinstance(store, LocalObjectStore)
        assert store.root == tmp_path / "objects"

    def test_memory(self, monkeypatch):
        monkeypatch.setenv("FIELDAREA_STORAGE_BACKEND", "memory")
        assert isinstance(build_object_store(Settings()), InMemoryObjectStore)
