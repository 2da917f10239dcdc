"""Tests for provider and storage configuration objects."""

import os

import pytest

from recall.configuration import LiteLLMProvider, LocalStorage
from recall.embedder import ClientEmbedder
from recall.providers.litellm import LiteLLMClient, LiteLLMEmbeddingClient
from recall.settings import Settings
from recall.stores import SQLiteKnowledgeGraph, SQLiteVectorStore


class TestLocalStorage:
    def test_sqlite_backend(self, temp_dir):
        data_dir = os.path.join(temp_dir, "nested", "data")
        store = LocalStorage(data_dir).build_vector_store(4)

        assert isinstance(store, SQLiteVectorStore)
        assert store.dimension == 4
        assert os.path.exists(os.path.join(data_dir, "vectors.db"))

    def test_knowledge_graph(self, temp_dir):
        graph = LocalStorage(temp_dir).build_knowledge_graph()

        assert isinstance(graph, SQLiteKnowledgeGraph)
        assert graph.db_path == os.path.join(temp_dir, "knowledge.db")

    def test_chroma_backend(self, temp_dir):
        pytest.importorskip("chromadb")
        from recall.stores import ChromaVectorStore

        store = LocalStorage(temp_dir, backend="chroma").build_vector_store(4)

        assert isinstance(store, ChromaVectorStore)
        store.close()

    def test_unknown_backend(self, temp_dir):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            LocalStorage(temp_dir, backend="mongo")  # type: ignore[arg-type]

    def test_frozen(self, temp_dir):
        storage = LocalStorage(temp_dir)
        with pytest.raises(AttributeError):
            storage.data_dir = "elsewhere"  # type: ignore[misc]


class TestLiteLLMProvider:
    def test_build_embedder(self):
        provider = LiteLLMProvider(
            embedding="openai/text-embedding-3-small", dimensions=256, embedding_api_key="k"
        )

        embedder = provider.build_embedder(Settings(num_retries=2))

        assert isinstance(embedder, ClientEmbedder)
        client = embedder._client
        assert isinstance(client, LiteLLMEmbeddingClient)
        assert client.model == "openai/text-embedding-3-small"
        assert client.num_retries == 2
        assert client.dimensions == 256
        assert client.api_key == "k"

    def test_build_llm_client(self):
        provider = LiteLLMProvider(embedding="e", llm="openai/gpt-4o-mini", llm_api_key="k")

        client = provider.build_llm_client()

        assert isinstance(client, LiteLLMClient)
        assert client.model == "openai/gpt-4o-mini"
        assert client.num_retries == 3
        assert client.api_key == "k"

    def test_llm_client_uses_settings_retries(self):
        provider = LiteLLMProvider(embedding="e", llm="m")
        assert provider.build_llm_client(Settings(num_retries=1)).num_retries == 1

    def test_build_llm_client_without_model(self):
        with pytest.raises(ValueError):
            LiteLLMProvider(embedding="e").build_llm_client()
