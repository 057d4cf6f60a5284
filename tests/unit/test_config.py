from pathlib import Path

import pytest
import yaml
from omegaconf.errors import InterpolationResolutionError

from maid import Maid, OnErrorAction
from maid.core.config import ConfigLoader


class TestConfigLoader:
    def test_load_config_missing_file_uses_built_in_defaults(self) -> None:
        loader = ConfigLoader()
        config = loader.load_config("/nonexistent/path/maid.yaml")

        assert config == {"maid": {"on_error": "collect"}}

    def test_load_config_overrides_on_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text(yaml.dump({"maid": {"on_error": "raise"}}))

        loader = ConfigLoader()
        config = loader.load_config(str(config_file))

        assert config["maid"]["on_error"] == "raise"

    def test_load_config_keeps_other_sections(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text(yaml.dump({"app": {"name": "demo"}}))

        loader = ConfigLoader()
        config = loader.load_config(str(config_file))

        assert config["app"] == {"name": "demo"}
        assert config["maid"] == {"on_error": "collect"}

    def test_load_config_from_env_var(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(yaml.dump({"maid": {"on_error": "raise"}}))
        monkeypatch.setenv("MAID_CONFIG", str(config_file))

        loader = ConfigLoader()
        config = loader.load_config()

        assert config["maid"]["on_error"] == "raise"

    def test_load_config_resolves_interpolation(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text(
            "policy: raise\n"
            "maid:\n"
            "  on_error: ${policy}\n"
        )

        loader = ConfigLoader()
        config = loader.load_config(str(config_file))

        assert config["maid"]["on_error"] == "raise"

    def test_load_config_undefined_variable_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text("maid:\n  on_error: ${missing}\n")

        loader = ConfigLoader()

        with pytest.raises(InterpolationResolutionError):
            loader.load_config(str(config_file))

    def test_load_config_invalid_yaml_raises_value_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text("maid: [unclosed\n")

        loader = ConfigLoader()

        with pytest.raises(ValueError):
            loader.load_config(str(config_file))

    def test_load_config_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text("")

        loader = ConfigLoader()
        config = loader.load_config(str(config_file))

        assert config == {"maid": {"on_error": "collect"}}

    def test_load_config_rejects_unknown_on_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "maid.yaml"
        config_file.write_text(yaml.dump({"maid": {"on_error": "ignore"}}))

        loader = ConfigLoader()

        with pytest.raises(ValueError, match="on_error must be one of"):
            loader.load_config(str(config_file))


class TestValidateConfig:
    def test_non_string_on_error(self) -> None:
        loader = ConfigLoader()

        with pytest.raises(ValueError, match="on_error must be a string"):
            loader.validate_config({"maid": {"on_error": 1}})

    def test_section_must_be_mapping(self) -> None:
        loader = ConfigLoader()

        with pytest.raises(ValueError, match="must be a mapping"):
            loader.validate_config({"maid": ["collect"]})

    def test_missing_section_is_valid(self) -> None:
        ConfigLoader().validate_config({})


class TestMaidFromConfig:
    def test_from_config_applies_policy(self) -> None:
        maid = Maid.from_config({"maid": {"on_error": "raise"}})

        assert maid.on_error is OnErrorAction.RAISE

    def test_from_config_without_section_uses_default(self) -> None:
        maid = Maid.from_config({})

        assert maid.on_error is OnErrorAction.COLLECT

    def test_from_loaded_defaults(self) -> None:
        config = ConfigLoader().load_config("/nonexistent/maid.yaml")

        assert Maid.from_config(config).on_error is OnErrorAction.COLLECT
