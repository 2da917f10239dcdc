# src/recall/config.py
"""Configuration loading utilities for Recall.

Used by the CLI and by applications that prefer file/env based setup. It
handles:
- Finding and loading recall.yaml config files
- Loading .env files for API keys
- Building Settings objects from multiple sources
- Creating Recall instances from configuration
"""

from __future__ import annotations

import importlib
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import yaml
from loguru import logger

if TYPE_CHECKING:
    from recall.recall import Recall
    from recall.settings import Settings
    from recall.stores import VectorStore

# Default paths
DEFAULT_DATA_DIR = "./recall_data"
CONFIG_FILES = ["recall.yaml", "recall.yml", ".recallrc"]
ENV_FILE = ".env"
ENV_PREFIX = "RECALL_"
MAX_SEARCH_DEPTH = 10


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def _env_pairs(path: Path) -> Iterator[tuple[str, str]]:
    """Yield KEY=value pairs of a .env file, skipping comments and junk lines."""
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        yield key.strip(), value.strip().strip("'\"")


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Export a .env file's variables (API keys mostly) into ``os.environ``.

    A missing file is fine. Variables already set in the environment win.
    """
    path = Path(env_path)
    if path.is_file():
        for key, value in _env_pairs(path):
            os.environ.setdefault(key, value)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest recall.yaml (or .yml/.recallrc), walking up from start_dir.

    At most MAX_SEARCH_DEPTH directories are inspected, starting at cwd by default.
    """
    start = start_dir or Path.cwd()
    for directory in [start, *start.parents][:MAX_SEARCH_DEPTH]:
        candidates = (directory / name for name in CONFIG_FILES)
        found = next((c for c in candidates if c.exists()), None)
        if found is not None:
            return found
    return None


VALID_ROOT_KEYS = {
    # Provider config
    "provider",
    "embedding_model",
    "embedding_dimensions",
    "llm_model",
    # Custom provider
    "embedder",
    "embedder_kwargs",
    # Storage
    "data_dir",
    "storage_backend",
    # Settings section
    "settings",
}

# Settings field -> parser for RECALL_<FIELD> environment variables
_ENV_SETTINGS: dict[str, type] = {
    "max_chunk_size": int,
    "default_k": int,
    "min_similarity": float,
    "embedding_dimension": int,
    "max_concurrent_embeddings": int,
    "max_attempts": int,
    "retry_initial_wait": float,
    "retry_max_wait": float,
    "num_retries": int,
}

VALID_SETTINGS_KEYS = set(_ENV_SETTINGS) | {"rate_limit_profile"}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Return one warning per group of unrecognised keys (typos, stale options)."""
    where = str(config_path) if config_path else "config"
    warnings = []

    if unknown := sorted(set(config) - VALID_ROOT_KEYS):
        warnings.append(f"Unknown config keys in {where}: {', '.join(unknown)}")

    section = config.get("settings")
    if isinstance(section, dict) and (unknown := sorted(set(section) - VALID_SETTINGS_KEYS)):
        warnings.append(f"Unknown settings keys: {', '.join(unknown)}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()
    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return cast(dict[str, Any], config)


def _parse(value: str, parser: type) -> Any:
    """Parse an env value, returning None when it is empty or malformed."""
    if value == "":
        return None
    try:
        return parser(value)
    except ValueError:
        logger.warning(f"Ignoring malformed environment value {value!r}")
        return None


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from RECALL_* environment variables.

    Only explicitly set, well-formed values are returned, so YAML settings
    apply unless overridden.
    """
    result: dict[str, Any] = {}
    for field, parser in _ENV_SETTINGS.items():
        env_key = ENV_PREFIX + field.upper()
        if env_key in os.environ:
            value = _parse(os.environ[env_key], parser)
            if value is not None:
                result[field] = value
    if profile := os.environ.get(ENV_PREFIX + "RATE_LIMIT_PROFILE"):
        result["rate_limit_profile"] = profile
    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract the 'settings:' section of a YAML config."""
    yaml_settings = config.get("settings", {}) or {}
    return {key: yaml_settings[key] for key in VALID_SETTINGS_KEYS if key in yaml_settings}


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build a Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables
    2. YAML settings: section
    3. Settings class defaults

    Args:
        config: YAML configuration dictionary
        env_settings: Environment variable overrides (if None, reads from env)
    """
    from recall.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    merged = {**yaml_settings, **env_settings}

    # A rate limit profile affects multiple settings
    rate_limit_profile = merged.pop("rate_limit_profile", None)
    if rate_limit_profile:
        return Settings.with_profile(rate_limit_profile, **merged)
    return Settings(**merged)


def import_class(class_path: str) -> type[Any]:
    """Import a class from a dotted path like 'my_package.module.ClassName'."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return cast(type[Any], getattr(module, class_name))


@dataclass
class RecallConfig:
    """Configuration for creating a Recall instance."""

    provider: str
    embedding_model: str | None
    data_dir: str
    settings: Settings
    storage_backend: str = "sqlite"
    llm_model: str | None = None
    embedding_dimensions: int | None = None
    embedding_api_key: str | None = None
    llm_api_key: str | None = None
    # Custom provider fields
    embedder_class: str | None = None
    embedder_kwargs: dict[str, Any] | None = None


def get_recall_config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RecallConfig | ConfigError:
    """Get configuration for creating a Recall instance.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        RecallConfig, or ConfigError if the configuration is incomplete
    """
    config = load_config(config_path)
    for warning in validate_config(config, Path(config_path) if config_path else None):
        logger.warning(warning)

    effective_data_dir = data_dir or config.get("data_dir") or DEFAULT_DATA_DIR
    provider = config.get("provider", "litellm")
    storage_backend = config.get("storage_backend", "sqlite")
    if storage_backend not in ("sqlite", "chroma"):
        return ConfigError(
            message=f"Unknown storage_backend '{storage_backend}'",
            suggestion="Supported backends: sqlite, chroma",
        )

    try:
        settings = build_settings(config)
    except ValueError as e:
        return ConfigError(message=f"Invalid settings: {e}")

    if provider == "litellm":
        embedding_model = config.get("embedding_model") or os.environ.get(
            "RECALL_LITELLM_EMBEDDING_MODEL"
        )
        if not embedding_model:
            return ConfigError(
                message="LiteLLM provider requires embedding_model.",
                suggestion="Set embedding_model in recall.yaml or RECALL_LITELLM_EMBEDDING_MODEL",
            )
        return RecallConfig(
            provider=provider,
            embedding_model=embedding_model,
            data_dir=effective_data_dir,
            settings=settings,
            storage_backend=storage_backend,
            llm_model=config.get("llm_model") or os.environ.get("RECALL_LITELLM_LLM_MODEL"),
            embedding_dimensions=config.get("embedding_dimensions"),
            embedding_api_key=os.environ.get("RECALL_EMBEDDING_API_KEY"),
            llm_api_key=os.environ.get("RECALL_LLM_API_KEY"),
        )

    if provider == "custom":
        embedder_class = config.get("embedder")
        if not embedder_class:
            return ConfigError(
                message="Custom provider requires an embedder class.",
                suggestion="Add 'embedder: my_package.MyEmbedder' to recall.yaml",
            )
        return RecallConfig(
            provider=provider,
            embedding_model=None,
            data_dir=effective_data_dir,
            settings=settings,
            storage_backend=storage_backend,
            embedder_class=embedder_class,
            embedder_kwargs=config.get("embedder_kwargs", {}),
        )

    return ConfigError(
        message=f"Unknown provider '{provider}'",
        suggestion="Supported providers: litellm, custom",
    )


def create_recall(config: RecallConfig) -> Recall:
    """Create a Recall instance from configuration.

    Raises:
        ValueError: If the configuration is incomplete
        ImportError: If a custom embedder class cannot be imported
    """
    from recall.configuration import LiteLLMProvider, LocalStorage
    from recall.recall import Recall

    backend = config.storage_backend
    storage = LocalStorage(config.data_dir, backend=backend)  # type: ignore[arg-type]

    if config.provider == "litellm":
        if not config.embedding_model:
            raise ValueError("LiteLLM provider requires embedding_model")
        return Recall(
            provider=LiteLLMProvider(
                embedding=config.embedding_model,
                llm=config.llm_model,
                dimensions=config.embedding_dimensions,
                embedding_api_key=config.embedding_api_key,
                llm_api_key=config.llm_api_key,
            ),
            storage=storage,
            settings=config.settings,
        )

    if config.provider == "custom":
        if not config.embedder_class:
            raise ValueError("Custom provider requires an embedder class")
        embedder_cls = import_class(config.embedder_class)
        return Recall(
            embedder=embedder_cls(**(config.embedder_kwargs or {})),
            storage=storage,
            settings=config.settings,
        )

    raise ValueError(f"Unknown provider: {config.provider}")


def get_recall(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> Recall | ConfigError:
    """Create a Recall instance based on configuration.

    Convenience wrapper around get_recall_config and create_recall.
    """
    config = get_recall_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    return create_recall(config)


def get_store(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> VectorStore:
    """Open the configured vector store without building a provider.

    Used by read-only and delete operations that never embed.
    """
    from recall.configuration import LocalStorage

    config = load_config(config_path)
    settings = build_settings(config)
    storage = LocalStorage(
        data_dir or config.get("data_dir") or DEFAULT_DATA_DIR,
        backend=config.get("storage_backend", "sqlite"),
    )
    return storage.build_vector_store(settings.embedding_dimension)
