import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from maid.constants import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE, DEFAULT_ON_ERROR, OnErrorAction

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load YAML configuration for cleanup registries and merge it with defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "on_error": DEFAULT_ON_ERROR.value,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks MAID_CONFIG env var,
            then falls back to maid.yaml

        Returns
        -------
        dict[str, Any]
            Configuration with a ``maid`` section holding built-in defaults
            overridden by the file, with variable interpolations resolved

        Raises
        ------
        ValueError
            If the file is not valid YAML or its values are invalid
        RuntimeError
            If the file exists but cannot be read
        omegaconf.errors.InterpolationResolutionError
            If undefined variables are referenced
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)

        config_file = Path(config_path)

        if not config_file.exists():
            logger.debug("No config file at %s, using defaults", config_file)
            return {"maid": copy.deepcopy(self.BUILT_IN_DEFAULTS)}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {"maid": copy.deepcopy(self.BUILT_IN_DEFAULTS)}

        try:
            loaded = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise
        except (ValueError, KeyError, AttributeError) as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)
        merged.update(loaded.get("maid") or {})
        loaded["maid"] = merged

        self.validate_config(loaded)
        return loaded

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate the ``maid`` section of a configuration.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ValueError
            If configuration is invalid
        """
        section = config.get("maid")

        if section is None:
            return

        if not isinstance(section, dict):
            raise ValueError("maid section must be a mapping")

        self._validate_on_error(section)

    def _validate_on_error(self, section: dict[str, Any]) -> None:
        """Validate on_error configuration.

        Parameters
        ----------
        section : dict[str, Any]
            ``maid`` section to validate

        Raises
        ------
        ValueError
            If on_error configuration is invalid
        """
        if "on_error" not in section:
            return

        if not isinstance(section["on_error"], str):
            raise ValueError("on_error must be a string")

        allowed = [action.value for action in OnErrorAction]
        if section["on_error"] not in allowed:
            raise ValueError(f"on_error must be one of {allowed}, got '{section['on_error']}'")
