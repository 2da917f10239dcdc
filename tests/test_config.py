"""Tests for recall.config loading utilities."""

import os

import pytest

from recall import LocalStorage, Recall
from recall.config import (
    ConfigError,
    RecallConfig,
    build_settings,
    create_recall,
    find_config_file,
    get_recall_config,
    get_settings_from_env,
    get_store,
    import_class,
    load_config,
    load_env_file,
    validate_config,
)
from recall.configuration import LiteLLMProvider
from recall.embedder import ClientEmbedder
from recall.settings import Settings
from recall.stores import SQLiteVectorStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove RECALL_* variables so the host environment cannot leak in."""
    for key in list(os.environ):
        if key.startswith("RECALL_"):
            monkeypatch.delenv(key)


def write_yaml(tmp_path, text, name="recall.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestEnvFile:
    def test_loads_missing_keys_only(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECALL_EXISTING", "keep")
        env = tmp_path / ".env"
        env.write_text(
            "# comment\n\nRECALL_NEW='fresh'\nRECALL_EXISTING=overwritten\nnot a pair\n",
            encoding="utf-8",
        )
        try:
            load_env_file(env)

            assert os.environ["RECALL_NEW"] == "fresh"
            assert os.environ["RECALL_EXISTING"] == "keep"
        finally:
            os.environ.pop("RECALL_NEW", None)

    def test_missing_file_is_ignored(self, tmp_path):
        load_env_file(tmp_path / "absent.env")


class TestFindAndLoad:
    def test_finds_in_parent(self, tmp_path):
        write_yaml(tmp_path, "provider: litellm\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == tmp_path / "recall.yaml"

    def test_alternate_names(self, tmp_path):
        write_yaml(tmp_path, "provider: custom\n", name=".recallrc")
        assert find_config_file(tmp_path) == tmp_path / ".recallrc"

    def test_load_explicit(self, tmp_path):
        path = write_yaml(tmp_path, "embedding_model: m\n")
        assert load_config(path) == {"embedding_model": "m"}

    def test_empty_file(self, tmp_path):
        path = write_yaml(tmp_path, "")
        assert load_config(path) == {}

    def test_no_config_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == {}


class TestValidateConfig:
    def test_clean(self):
        assert validate_config({"provider": "litellm", "settings": {"default_k": 3}}) == []

    def test_unknown_keys(self):
        warnings = validate_config({"provder": "x", "settings": {"defalt_k": 3}})
        assert len(warnings) == 2
        assert "provder" in warnings[0]
        assert "defalt_k" in warnings[1]


class TestBuildSettings:
    def test_defaults(self):
        assert build_settings({}, env_settings={}) == Settings()

    def test_yaml_settings(self):
        settings = build_settings({"settings": {"default_k": 9, "bogus": 1}}, env_settings={})
        assert settings.default_k == 9

    def test_env_beats_yaml(self):
        settings = build_settings({"settings": {"default_k": 9}}, env_settings={"default_k": 2})
        assert settings.default_k == 2

    def test_profile(self):
        settings = build_settings(
            {"settings": {"rate_limit_profile": "conservative", "max_attempts": 2}},
            env_settings={},
        )
        assert settings.max_concurrent_embeddings == 1
        assert settings.max_attempts == 2

    def test_reads_env_when_not_given(self, monkeypatch):
        monkeypatch.setenv("RECALL_MAX_CHUNK_SIZE", "123")
        assert build_settings({}).max_chunk_size == 123


class TestSettingsFromEnv:
    def test_parses_values(self, monkeypatch):
        monkeypatch.setenv("RECALL_DEFAULT_K", "7")
        monkeypatch.setenv("RECALL_MIN_SIMILARITY", "0.25")
        monkeypatch.setenv("RECALL_RATE_LIMIT_PROFILE", "aggressive")

        assert get_settings_from_env() == {
            "default_k": 7,
            "min_similarity": 0.25,
            "rate_limit_profile": "aggressive",
        }

    def test_ignores_empty_and_malformed(self, monkeypatch):
        monkeypatch.setenv("RECALL_DEFAULT_K", "seven")
        monkeypatch.setenv("RECALL_MAX_ATTEMPTS", "")
        assert get_settings_from_env() == {}


class TestGetRecallConfig:
    def test_litellm(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECALL_EMBEDDING_API_KEY", "sk-test")
        path = write_yaml(
            tmp_path,
            "embedding_model: openai/text-embedding-3-small\n"
            "llm_model: openai/gpt-4o-mini\n"
            "embedding_dimensions: 256\n"
            "data_dir: /tmp/recall-data\n"
            "settings:\n  embedding_dimension: 256\n",
        )

        config = get_recall_config(config_path=path)

        assert isinstance(config, RecallConfig)
        assert config.provider == "litellm"
        assert config.embedding_model == "openai/text-embedding-3-small"
        assert config.llm_model == "openai/gpt-4o-mini"
        assert config.embedding_dimensions == 256
        assert config.data_dir == "/tmp/recall-data"
        assert config.storage_backend == "sqlite"
        assert config.settings.embedding_dimension == 256
        assert config.embedding_api_key == "sk-test"

    def test_model_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RECALL_LITELLM_EMBEDDING_MODEL", "gemini/gemini-embedding-001")
        path = write_yaml(tmp_path, "provider: litellm\n")

        config = get_recall_config(config_path=path)

        assert isinstance(config, RecallConfig)
        assert config.embedding_model == "gemini/gemini-embedding-001"

    def test_data_dir_override(self, tmp_path):
        path = write_yaml(tmp_path, "embedding_model: m\ndata_dir: /from/yaml\n")
        config = get_recall_config(data_dir="/from/cli", config_path=path)
        assert isinstance(config, RecallConfig)
        assert config.data_dir == "/from/cli"

    def test_missing_embedding_model(self, tmp_path):
        path = write_yaml(tmp_path, "provider: litellm\n")
        config = get_recall_config(config_path=path)
        assert isinstance(config, ConfigError)
        assert "embedding_model" in config.message

    def test_unknown_provider(self, tmp_path):
        path = write_yaml(tmp_path, "provider: magic\n")
        config = get_recall_config(config_path=path)
        assert isinstance(config, ConfigError)
        assert "magic" in config.message

    def test_unknown_backend(self, tmp_path):
        path = write_yaml(tmp_path, "embedding_model: m\nstorage_backend: mongo\n")
        config = get_recall_config(config_path=path)
        assert isinstance(config, ConfigError)
        assert "mongo" in config.message

    def test_invalid_settings(self, tmp_path):
        path = write_yaml(tmp_path, "embedding_model: m\nsettings:\n  default_k: 0\n")
        config = get_recall_config(config_path=path)
        assert isinstance(config, ConfigError)
        assert config.message.startswith("Invalid settings")

    def test_custom_provider(self, tmp_path):
        path = write_yaml(
            tmp_path,
            "provider: custom\nembedder: my_pkg.MyEmbedder\nembedder_kwargs:\n  size: 3\n",
        )
        config = get_recall_config(config_path=path)
        assert isinstance(config, RecallConfig)
        assert config.embedder_class == "my_pkg.MyEmbedder"
        assert config.embedder_kwargs == {"size": 3}

    def test_custom_provider_requires_class(self, tmp_path):
        path = write_yaml(tmp_path, "provider: custom\n")
        assert isinstance(get_recall_config(config_path=path), ConfigError)


class TestCreateRecall:
    def test_litellm(self, tmp_path):
        config = RecallConfig(
            provider="litellm",
            embedding_model="openai/text-embedding-3-small",
            data_dir=str(tmp_path / "data"),
            settings=Settings(),
        )

        recall = create_recall(config)

        assert isinstance(recall, Recall)
        assert isinstance(recall.embedder, ClientEmbedder)
        assert isinstance(recall.store, SQLiteVectorStore)
        assert recall.storage == LocalStorage(str(tmp_path / "data"))
        recall.close()

    def test_custom(self, tmp_path, embedder_cls):
        config = RecallConfig(
            provider="custom",
            embedding_model=None,
            data_dir=str(tmp_path),
            settings=Settings(embedding_dimension=4),
            embedder_class=f"{embedder_cls.__module__}.KeywordEmbedder",
            embedder_kwargs={"flaky": 1},
        )

        recall = create_recall(config)

        assert type(recall.embedder).__name__ == "KeywordEmbedder"
        assert recall.embedder.flaky == 1
        recall.close()

    def test_unknown_provider(self, tmp_path):
        config = RecallConfig(
            provider="magic", embedding_model=None, data_dir=str(tmp_path), settings=Settings()
        )
        with pytest.raises(ValueError):
            create_recall(config)


def test_import_class():
    assert import_class("recall.configuration.LiteLLMProvider") is LiteLLMProvider


def test_get_store(tmp_path):
    path = write_yaml(
        tmp_path, f"data_dir: {tmp_path / 'data'}\nsettings:\n  embedding_dimension: 4\n"
    )

    store = get_store(config_path=path)

    assert isinstance(store, SQLiteVectorStore)
    assert store.dimension == 4
    assert (tmp_path / "data" / "vectors.db").exists()
