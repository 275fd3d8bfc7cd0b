"""Layered YAML settings source.

Base files under ``config/base`` are merged first, then the overrides found in
``config/environments/{APP_ENV}``. Set ``MARKET_COMPARE_CONFIG_DIR`` to point
the loader at a different config tree.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic_settings import PydanticBaseSettingsSource


if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


CONFIG_DIR_ENV_VAR = "MARKET_COMPARE_CONFIG_DIR"


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


def load_yaml_dir(directory: Path) -> dict[str, Any]:
    """Merge every ``*.yaml`` file of a directory in name order.

    Missing directories load as an empty mapping.
    """
    merged: dict[str, Any] = {}
    if not directory.is_dir():
        return merged

    for yaml_file in sorted(directory.glob("*.yaml")):
        with yaml_file.open(encoding="utf-8") as f:
            merged = deep_merge(merged, yaml.safe_load(f) or {})
    return merged


def default_config_dir() -> Path:
    """Return the ``config`` directory at the project root."""
    override = os.getenv(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)
    # src/market_compare/core/config/yaml_source.py -> project root
    return Path(__file__).resolve().parents[4] / "config"


class LayeredYamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading base YAML plus per-environment overrides."""

    def __init__(
        self,
        settings_cls: type[Any],
        config_dir: Path | None = None,
        app_env: str | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._config_dir = config_dir or default_config_dir()
        self._app_env = app_env or os.getenv("APP_ENV", "development")
        self._yaml_data = deep_merge(
            load_yaml_dir(self._config_dir / "base"),
            load_yaml_dir(self._config_dir / "environments" / self._app_env),
        )

    def get_field_value(
        self,
        _field: FieldInfo,
        field_name: str,
    ) -> tuple[Any, str, bool]:
        """Get the value for a specific field from YAML data."""
        value = self._yaml_data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, Any]:
        """Return all merged YAML configuration data."""
        return self._yaml_data
