"""Custom YAML settings source with environment-based file merging."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic_settings import PydanticBaseSettingsSource


if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge override into base dict.

    Args:
        base: Base dictionary to merge into.
        override: Dictionary with values to override.

    Returns:
        New dictionary with merged values.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_directory(directory: Path) -> dict[str, Any]:
    """Deep-merge every YAML file in a directory, in filename order."""
    merged: dict[str, Any] = {}
    if not directory.exists():
        return merged
    for yaml_file in sorted(directory.glob("*.yaml")):
        with yaml_file.open(encoding="utf-8") as f:
            merged = deep_merge(merged, yaml.safe_load(f) or {})
    return merged


class MultiYamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load and merge multiple YAML files based on APP_ENV.

    Base files come from config/base/, then the overrides from
    config/environments/{APP_ENV}/ are deep-merged on top.
    """

    def __init__(
        self,
        settings_cls: type[Any],
        config_dir: Path | None = None,
    ) -> None:
        """Initialize the YAML settings source.

        Args:
            settings_cls: The settings class to load configuration for.
            config_dir: Override for the config directory (tests).
        """
        super().__init__(settings_cls)
        self._config_dir = config_dir or self._find_config_dir()
        self._app_env = os.getenv("APP_ENV", "development")
        self._yaml_data = deep_merge(
            _load_directory(self._config_dir / "base"),
            _load_directory(self._config_dir / "environments" / self._app_env),
        )

    @staticmethod
    def _find_config_dir() -> Path:
        """Find the config directory relative to the project root."""
        # src/allergen_finder/core/config/yaml_source.py -> project root
        project_root = Path(__file__).resolve().parents[4]
        return project_root / "config"

    def get_field_value(
        self,
        _field: FieldInfo,
        field_name: str,
    ) -> tuple[Any, str, bool]:
        """Get the value for a specific field from YAML data."""
        value = self._yaml_data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, Any]:
        """Return all YAML configuration data."""
        return self._yaml_data
