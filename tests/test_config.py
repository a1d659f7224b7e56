from pathlib import Path

import config
from config import DEFAULT_CATEGORIES, load_config


class TestLoadConfig:
    """Tests for configuration loading."""

    def test_creates_default_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        loaded = load_config()

        assert config.get_config_path().exists()
        assert loaded.db_path == tmp_path / "data" / "tally" / "db" / "tally.db"
        assert loaded.default_categories == DEFAULT_CATEGORIES

    def test_reads_existing_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        path = tmp_path / ".config" / "tally.toml"
        path.parent.mkdir(parents=True)
        path.write_text(
            f'base_dir = "{tmp_path / "base"}"\n'
            "[database]\n"
            'filename = "other.db"\n'
            "[logging]\n"
            'level = "DEBUG"\n'
            "[categories]\n"
            'defaults = ["Food"]\n'
        )

        loaded = load_config()

        assert loaded.db_path == tmp_path / "base" / "db" / "other.db"
        assert loaded.log_level == "DEBUG"
        assert loaded.log_dir == tmp_path / "base" / "logs"
        assert loaded.default_categories == ["Food"]

    def test_round_trips_written_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        first = load_config()
        second = load_config()

        assert first == second
