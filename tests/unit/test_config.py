"""
Unit tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError
from siftcore.config import Config, MonitoringConfig, ScoringSettings, SiftOptions, find_config_file, settings
from siftcore.extractor import ContentSifter


class TestConfigModels:
    """Defaults and validators."""

    def test_defaults(self):
        config = Config()
        assert config.project_name == "SiftCore"
        assert config.extraction.min_word_count == 200
        assert config.extraction.parser == "html.parser"
        assert config.extraction.scoring.removal_threshold == 0.0
        assert config.extraction.scoring.relaxed_removal_threshold == -20.0
        assert config.monitoring.log_level == "INFO"
        assert config.monitoring.metrics_enabled is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SIFT_EXTRACTION__MIN_WORD_COUNT", "50")
        monkeypatch.setenv("SIFT_MONITORING__JSON_LOGS", "true")

        config = Config()

        assert config.extraction.min_word_count == 50
        assert config.monitoring.json_logs is True

    def test_relaxed_threshold_must_not_exceed_removal(self):
        with pytest.raises(ValidationError):
            ScoringSettings(removal_threshold=-10.0, relaxed_removal_threshold=0.0)

        settings_ok = ScoringSettings(removal_threshold=-5.0, relaxed_removal_threshold=-5.0)
        assert settings_ok.relaxed_removal_threshold == -5.0

    def test_invalid_parser(self):
        with pytest.raises(ValidationError):
            SiftOptions(parser="regex")

    def test_negative_min_word_count(self):
        with pytest.raises(ValidationError):
            SiftOptions(min_word_count=-1)

    def test_log_file_parent_created(self, tmp_path):
        log_file = tmp_path / "logs" / "nested" / "siftcore.log"
        config = MonitoringConfig(log_file=log_file)
        assert config.log_file == str(log_file)
        assert log_file.parent.is_dir()


class TestYamlLoading:
    """Loading from YAML files."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "extraction:\n"
            "  min_word_count: 80\n"
            "  exact_selectors: ['.promo']\n"
            "  scoring:\n"
            "    removal_threshold: -2\n"
            "monitoring:\n"
            "  log_level: DEBUG\n",
            encoding="utf-8",
        )

        config = Config.from_yaml(path)

        assert config.extraction.min_word_count == 80
        assert config.extraction.exact_selectors == [".promo"]
        assert config.extraction.scoring.removal_threshold == -2.0
        assert config.monitoring.log_level == "DEBUG"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.from_yaml(path).extraction.min_word_count == 200

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "absent.yaml")

    def test_find_config_file(self, tmp_path):
        assert find_config_file() is None

        (tmp_path / "config.yml").write_text("{}", encoding="utf-8")
        assert find_config_file() == Path.cwd() / "config.yml"

        (tmp_path / "siftcore.yaml").write_text("{}", encoding="utf-8")
        assert find_config_file() == Path.cwd() / "siftcore.yaml"


class TestLazySettings:
    """The process-wide settings proxy."""

    def test_defaults_without_file(self):
        assert settings.extraction.min_word_count == 200

    def test_reads_file_in_working_directory(self, tmp_path):
        (tmp_path / "siftcore.yaml").write_text("extraction:\n  min_word_count: 50\n", encoding="utf-8")
        assert settings.extraction.min_word_count == 50

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "siftcore.yaml").write_text("extraction:\n  min_word_count: -5\n", encoding="utf-8")
        assert settings.extraction.min_word_count == 200

    def test_malformed_yaml_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "siftcore.yaml").write_text("extraction: [unclosed\n", encoding="utf-8")
        assert settings.extraction.min_word_count == 200

    def test_sifter_uses_settings(self, tmp_path):
        (tmp_path / "siftcore.yaml").write_text(
            "extraction:\n  min_word_count: 0\n  remove_images: true\n", encoding="utf-8"
        )

        sifter = ContentSifter()

        assert sifter.options.min_word_count == 0
        assert sifter.options.remove_images is True

    def test_explicit_options_win(self, tmp_path):
        (tmp_path / "siftcore.yaml").write_text("extraction:\n  min_word_count: 0\n", encoding="utf-8")
        assert ContentSifter(SiftOptions(min_word_count=10)).options.min_word_count == 10
