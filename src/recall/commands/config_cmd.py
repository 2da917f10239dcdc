# src/recall/commands/config_cmd.py
"""Config command - display current configuration."""

from __future__ import annotations

import os
from pathlib import Path

from recall.commands.base import ConfigResult, SettingInfo
from recall.config import (
    DEFAULT_DATA_DIR,
    build_settings,
    find_config_file,
    get_settings_from_env,
    get_settings_from_yaml,
    load_config,
)


def _get_setting_source(key: str, yaml_settings: dict, env_settings: dict) -> str:
    """Determine the source of a setting value."""
    if key in env_settings:
        return "env var"
    if key in yaml_settings:
        return "yaml"
    return "default"


def config(config_path: str | Path | None = None) -> ConfigResult:
    """Get current configuration settings and where each came from."""
    file_config = load_config(config_path)
    env_settings = get_settings_from_env()
    yaml_settings = get_settings_from_yaml(file_config)

    try:
        settings = build_settings(file_config, env_settings)
    except ValueError as e:
        return ConfigResult(success=False, error=f"Invalid settings: {e}")

    found = Path(config_path) if config_path else find_config_file()
    result = ConfigResult(success=True, config_path=str(found) if found else None)
    result.provider = file_config.get("provider", "litellm")
    if result.provider == "litellm":
        result.embedding_model = file_config.get("embedding_model") or os.environ.get(
            "RECALL_LITELLM_EMBEDDING_MODEL"
        )
        result.llm_model = file_config.get("llm_model") or os.environ.get(
            "RECALL_LITELLM_LLM_MODEL"
        )
    result.data_dir = file_config.get("data_dir") or DEFAULT_DATA_DIR
    result.storage_backend = file_config.get("storage_backend", "sqlite")

    for key, value in settings.model_dump().items():
        result.settings.append(
            SettingInfo(
                name=key,
                value=str(value),
                source=_get_setting_source(key, yaml_settings, env_settings),
            )
        )
    return result
