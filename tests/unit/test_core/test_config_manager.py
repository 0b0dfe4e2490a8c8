"""
Unit tests for hierarchical configuration loading.
"""

import pytest
import yaml

from clockvoice.core.config_manager import AppConfig, ConfigManager, InterpreterSettings, LoggingConfig
from clockvoice.core.error_handler import ConfigurationError
from clockvoice.timeclock.models import InterpreterConfig


def _write_yaml(path, data):
    with open(path, "w") as f:
        yaml.dump(data, f)


class TestConfigModels:
    """Test suite for the pydantic settings models"""

    @pytest.mark.unit
    def test_defaults(self):
        config = AppConfig()
        assert config.interpreter.allowed_verbs == ["add", "change", "delete"]
        assert config.interpreter.reference_timezone == "America/Los_Angeles"
        assert config.interpreter.name_window == 50
        assert config.capture.language == "en-US"
        assert config.logging.level == "INFO"

    @pytest.mark.unit
    def test_comma_separated_lists(self):
        settings = InterpreterSettings(allowed_verbs="Add, delete", employees="Sara Lee,Ann")
        assert settings.allowed_verbs == ["add", "delete"]
        assert settings.employees == ["Sara Lee", "Ann"]

    @pytest.mark.unit
    def test_unknown_verb_rejected(self):
        with pytest.raises(ValueError):
            InterpreterSettings(allowed_verbs=["add", "punch"])

    @pytest.mark.unit
    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValueError):
            InterpreterSettings(reference_timezone="Mars/Olympus_Mons")

    @pytest.mark.unit
    def test_log_level_case_insensitive(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValueError):
            LoggingConfig(level="LOUD")


class TestConfigManager:
    """Test suite for ConfigManager"""

    @pytest.mark.unit
    def test_environment_file_overrides_default(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        config = manager.load_config()

        assert config.app_name == "ClockVoice-Test"
        assert config.interpreter.allowed_verbs == ["add"]
        assert config.interpreter.employees == ["Sara Lee", "Carmen Ortiz"]

    @pytest.mark.unit
    def test_local_file_applied_last(self, temp_config_dir, clean_environment):
        _write_yaml(temp_config_dir / "local.yaml", {"interpreter": {"name_window": 20}})
        config = ConfigManager(config_path=temp_config_dir, environment="testing").load_config()
        assert config.interpreter.name_window == 20
        assert config.interpreter.allowed_verbs == ["add"]

    @pytest.mark.unit
    def test_missing_directory_gives_defaults(self, tmp_path, clean_environment):
        config = ConfigManager(config_path=tmp_path / "absent").load_config()
        assert config == AppConfig()

    @pytest.mark.unit
    def test_environment_variable_overrides(self, temp_config_dir, clean_environment, monkeypatch):
        monkeypatch.setenv("CLOCKVOICE_INTERPRETER_EMPLOYEES", "Ann,Bob")
        monkeypatch.setenv("CLOCKVOICE_INTERPRETER_NAME_WINDOW", "30")
        monkeypatch.setenv("CLOCKVOICE_CAPTURE_CONTINUOUS", "true")

        config = ConfigManager(config_path=temp_config_dir, environment="testing").load_config()

        assert config.interpreter.employees == ["Ann", "Bob"]
        assert config.interpreter.name_window == 30
        assert config.capture.continuous is True

    @pytest.mark.unit
    def test_config_is_cached(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        assert manager.load_config() is manager.load_config()

    @pytest.mark.unit
    def test_invalid_values(self, tmp_path, clean_environment):
        _write_yaml(tmp_path / "default_config.yaml", {"interpreter": {"allowed_verbs": ["punch"]}})
        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=tmp_path).load_config()

    @pytest.mark.unit
    def test_invalid_yaml(self, tmp_path, clean_environment):
        (tmp_path / "default_config.yaml").write_text("interpreter: [unclosed")
        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=tmp_path).load_config()

    @pytest.mark.unit
    def test_top_level_must_be_mapping(self, tmp_path, clean_environment):
        (tmp_path / "default_config.yaml").write_text("- add\n- change\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(config_path=tmp_path).load_config()

    @pytest.mark.unit
    def test_update_config(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        config = manager.update_config({"interpreter": {"employees": ["Ling Chen"]}})

        assert config.interpreter.employees == ["Ling Chen"]
        assert config.interpreter.allowed_verbs == ["add"]

    @pytest.mark.unit
    def test_invalid_update_keeps_previous(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        before = manager.load_config()

        with pytest.raises(ConfigurationError):
            manager.update_config({"interpreter": {"name_window": -1}})

        assert manager.load_config() is before

    @pytest.mark.unit
    def test_reload_picks_up_changes(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        manager.load_config()

        _write_yaml(temp_config_dir / "local.yaml", {"capture": {"language": "es-MX"}})

        assert manager.reload_config().capture.language == "es-MX"

    @pytest.mark.unit
    def test_failed_reload_keeps_previous(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        before = manager.load_config()

        (temp_config_dir / "local.yaml").write_text("logging: {level: [")

        with pytest.raises(ConfigurationError):
            manager.reload_config()
        assert manager.load_config() is before

    @pytest.mark.unit
    def test_config_changes_listed(self, clean_environment, tmp_path):
        manager = ConfigManager(config_path=tmp_path)
        old = AppConfig()
        new = AppConfig(interpreter={"name_window": 10})

        assert manager._get_config_changes(old, new) == ["interpreter.name_window: 50 -> 10"]

    @pytest.mark.unit
    def test_export_round_trip(self, temp_config_dir, clean_environment, tmp_path):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        export_dir = tmp_path / "exported"
        export_dir.mkdir()

        assert manager.export_config(export_dir / "default_config.yaml")

        reloaded = ConfigManager(config_path=export_dir, environment="testing").load_config()
        assert reloaded == manager.load_config()

    @pytest.mark.unit
    def test_export_to_unwritable_path(self, temp_config_dir, clean_environment, tmp_path):
        manager = ConfigManager(config_path=temp_config_dir)
        assert not manager.export_config(tmp_path / "missing" / "config.yaml")

    @pytest.mark.unit
    def test_to_interpreter_config(self, temp_config_dir, clean_environment):
        manager = ConfigManager(config_path=temp_config_dir, environment="testing")
        assert manager.to_interpreter_config() == InterpreterConfig(
            allowed_verbs=("add",),
            available_employees=("Sara Lee", "Carmen Ortiz")
        )
