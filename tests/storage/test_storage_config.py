"""
Storage Configuration Tests

Defaults from config/settings.py, YAML overrides and validation.
"""

import pytest
import yaml

from config.settings import METADATA_DB_NAME, MIN_CLIP_DURATION_SECONDS
from storage.config import StorageConfig


@pytest.mark.unit
class TestStorageConfig:

    def test_defaults_without_file(self, temp_storage_dir):
        config = StorageConfig(config_path=temp_storage_dir / "missing.yaml")

        assert config.get("db_name") == METADATA_DB_NAME
        assert config.min_clip_duration_seconds == MIN_CLIP_DURATION_SECONDS
        assert config.db_path.name == METADATA_DB_NAME
        assert not (temp_storage_dir / "missing.yaml").exists()

    def test_yaml_overrides_defaults(self, temp_storage_dir):
        path = temp_storage_dir / "storage.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "storage_base_path": str(temp_storage_dir / "clips"),
                    "db_name": "custom.db",
                    "db_timeout_seconds": 2,
                },
            ),
        )

        config = StorageConfig(config_path=path)

        assert config.db_path == temp_storage_dir / "clips" / "custom.db"
        assert config.db_timeout_seconds == 2.0

    def test_save_defaults_writes_file(self, temp_storage_dir):
        path = temp_storage_dir / "conf" / "storage.yaml"

        StorageConfig(config_path=path, save_defaults=True)

        assert yaml.safe_load(path.read_text())["db_name"] == METADATA_DB_NAME

    def test_set_and_reload(self, temp_storage_dir):
        path = temp_storage_dir / "storage.yaml"
        config = StorageConfig(config_path=path)

        config.set("db_name", "other.db")
        config.set("db_name", "scratch.db", save=False)
        config.reload()

        assert config.get("db_name") == "other.db"

    def test_broken_yaml_falls_back_to_defaults(self, temp_storage_dir):
        path = temp_storage_dir / "storage.yaml"
        path.write_text("db_name: [unclosed")

        config = StorageConfig(config_path=path)

        assert config.get("db_name") == METADATA_DB_NAME

    @pytest.mark.parametrize(
        "overrides",
        [
            {"db_name": "  "},
            {"db_timeout_seconds": 0},
            {"min_clip_duration_seconds": -1},
        ],
    )
    def test_invalid_values_raise(self, temp_storage_dir, overrides):
        path = temp_storage_dir / "storage.yaml"
        path.write_text(yaml.safe_dump(overrides))

        with pytest.raises(ValueError):
            StorageConfig(config_path=path)
