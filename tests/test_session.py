"""Configuration and session wiring tests."""

import logging
from pathlib import Path

import pytest

from orbitlearn.classroom import JsonFileStorage, MemoryStorage, SQLiteStorage
from orbitlearn.config import AppConfig
from orbitlearn.session import create_classroom, create_storage


ENV_VARS = [
    "ORBITLEARN_DATA_DIR",
    "ORBITLEARN_STORAGE",
    "ORBITLEARN_STORAGE_KEY",
    "ORBITLEARN_CURRICULUM",
    "ORBITLEARN_PRELOAD",
    "ORBITLEARN_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # setenv first so values loaded from .env files are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # keep a developer's .env out of the test
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture(autouse=True)
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


class TestAppConfig:
    """Test environment-driven configuration."""

    def test_defaults(self, clean_env):
        config = AppConfig.from_env()
        assert config.storage == "sqlite"
        assert config.storage_key == "orbitlearn-state"
        assert config.curriculum_path is None
        assert config.preload == ["basics", "dom"]
        assert config.log_level == "INFO"

    def test_from_env(self, clean_env, tmp_path):
        clean_env.setenv("ORBITLEARN_DATA_DIR", str(tmp_path))
        clean_env.setenv("ORBITLEARN_STORAGE", "JSON")
        clean_env.setenv("ORBITLEARN_PRELOAD", "basics, es6,")
        clean_env.setenv("ORBITLEARN_LOG_LEVEL", "debug")

        config = AppConfig.from_env()
        assert config.data_dir == tmp_path
        assert config.storage == "json"
        assert config.preload == ["basics", "es6"]
        assert config.log_level == "DEBUG"

    def test_empty_preload(self, clean_env):
        clean_env.setenv("ORBITLEARN_PRELOAD", "")
        assert AppConfig.from_env().preload == []

    def test_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("ORBITLEARN_STORAGE=memory\n", encoding="utf-8")
        assert AppConfig.from_env(env_file).storage == "memory"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            AppConfig(storage="redis")


class TestSession:
    """Test the composition root."""

    def test_create_storage(self, tmp_path):
        assert isinstance(create_storage(AppConfig(storage="memory")), MemoryStorage)
        assert isinstance(create_storage(AppConfig(data_dir=tmp_path, storage="json")), JsonFileStorage)
        sqlite = create_storage(AppConfig(data_dir=tmp_path, storage="sqlite"))
        assert isinstance(sqlite, SQLiteStorage)
        assert sqlite.db_path == tmp_path / "progress.db"

    def test_create_classroom(self):
        classroom = create_classroom(AppConfig(storage="memory"))
        assert len(classroom.curriculum.groups) == 14
        assert classroom.navigator.progress is classroom.store
        assert classroom.loader.curriculum is classroom.curriculum

    def test_create_classroom_applies_log_level(self):
        create_classroom(AppConfig(storage="memory", log_level="DEBUG"))
        assert logging.getLogger().level == logging.DEBUG

        create_classroom(AppConfig(storage="memory", log_level="warning"))
        assert logging.getLogger().level == logging.WARNING

    def test_progress_survives_restart(self, tmp_path):
        config = AppConfig(data_dir=tmp_path, storage="sqlite")
        create_classroom(config).store.complete_item("basics-1")

        restored = create_classroom(config).store
        assert restored.is_item_completed("basics-1")
        assert restored.is_group_unlocked("dom")

    @pytest.mark.asyncio
    async def test_start_preloads(self):
        classroom = create_classroom(AppConfig(storage="memory", preload=["basics", "dom", "nope"]))
        loaded = await classroom.start()
        assert loaded == ["basics", "dom"]
        assert classroom.loader.is_cached("dom")

    def test_custom_curriculum(self, tmp_path):
        path = tmp_path / "course.yaml"
        path.write_text("groups:\n  basics:\n    item_count: 1\n", encoding="utf-8")
        classroom = create_classroom(AppConfig(storage="memory", curriculum_path=Path(path)))
        assert classroom.curriculum.group_ids == ["basics"]
