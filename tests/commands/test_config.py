"""Tests for the config command."""

from recall.commands import config_cmd


def settings_by_name(result):
    return {s.name: s for s in result.settings}


def test_config_sources(config_file, monkeypatch):
    monkeypatch.setenv("RECALL_DEFAULT_K", "9")

    result = config_cmd.config(config_path=config_file)

    assert result.success
    assert result.provider == "litellm"
    assert result.embedding_model == "test/embedding-model"
    assert result.llm_model is None
    assert result.storage_backend == "sqlite"
    assert result.config_path == config_file

    settings = settings_by_name(result)
    assert settings["default_k"].value == "9"
    assert settings["default_k"].source == "env var"
    assert settings["embedding_dimension"].value == "4"
    assert settings["embedding_dimension"].source == "yaml"
    assert settings["max_chunk_size"].source == "default"


def test_config_models_from_env(temp_dir, monkeypatch):
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("RECALL_LITELLM_EMBEDDING_MODEL", "env/embed")
    monkeypatch.setenv("RECALL_LITELLM_LLM_MODEL", "env/llm")

    result = config_cmd.config()

    assert result.success
    assert result.config_path is None
    assert result.embedding_model == "env/embed"
    assert result.llm_model == "env/llm"
    assert result.data_dir == "./recall_data"


def test_config_invalid_settings(temp_dir, monkeypatch):
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("RECALL_RETRY_INITIAL_WAIT", "10")
    monkeypatch.setenv("RECALL_RETRY_MAX_WAIT", "1")

    result = config_cmd.config()

    assert not result.success
    assert "Invalid settings" in result.error
