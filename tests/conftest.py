"""Shared pytest fixtures."""

import asyncio
import contextlib
import os
import tempfile
from dataclasses import dataclass
from typing import Any

import pytest

from recall.embedder import Embedder
from recall.exceptions import ProviderRejected, ProviderUnavailable
from recall.providers import LLMClient
from recall.settings import Settings

VOCAB = ("alpha", "beta", "gamma")


class KeywordEmbedder(Embedder):
    """Deterministic embedder: one axis per vocabulary word plus a constant axis.

    Markers in the text drive failures:
    - "REJECT": ProviderRejected
    - "DOWN": ProviderUnavailable on every call
    - "SLOW": aembed_text blocks until ``gate`` is set
    ``flaky`` makes the first N calls raise ProviderUnavailable.
    """

    dimension = len(VOCAB) + 1

    def __init__(self, flaky: int = 0) -> None:
        self.flaky = flaky
        self.calls: list[str] = []
        self.gate = asyncio.Event()

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        if not text.strip() or "REJECT" in text:
            raise ProviderRejected("rejected", model="fake")
        if "DOWN" in text:
            raise ProviderUnavailable("down", model="fake")
        if self.flaky > 0:
            self.flaky -= 1
            raise ProviderUnavailable("flaky", model="fake")
        words = text.lower().split()
        return [float(sum(w.strip(".,") == v for w in words)) for v in VOCAB] + [0.1]

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) for t in texts]

    async def aembed_text(self, text: str) -> list[float]:
        if "SLOW" in text:
            await self.gate.wait()
        return self.embed_text(text)


class FakeLLM(LLMClient):
    """LLM client returning a canned response and recording prompts."""

    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[list[dict]] = []

    def complete(self, messages: list[dict], temperature: float | None = None) -> str:
        self.prompts.append(messages)
        return self.response


@dataclass(frozen=True)
class MockProvider:
    """Provider configuration wrapping fixed components."""

    embedder: Any
    llm: Any = None

    def build_embedder(self, settings: Any) -> Any:
        return self.embedder

    def build_llm_client(self, settings: Any = None) -> Any:
        if self.llm is None:
            raise ValueError("no llm")
        return self.llm


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Cleanup ChromaDB's shared system cache to release file handles
        # See: https://github.com/chroma-core/chroma/issues/5868
        try:
            from chromadb.api.shared_system_client import SharedSystemClient

            if hasattr(SharedSystemClient, "_identifier_to_system"):
                identifiers_to_remove = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in identifiers_to_remove:
                    if identifier in SharedSystemClient._identifier_to_system:
                        system = SharedSystemClient._identifier_to_system.pop(identifier)
                        with contextlib.suppress(Exception):
                            system.stop()
        except Exception:
            pass  # Best effort cleanup - ChromaDB internals may change


@pytest.fixture
def settings():
    """Settings sized for KeywordEmbedder, with no backoff delay and no similarity floor."""
    return Settings(
        embedding_dimension=KeywordEmbedder.dimension,
        min_similarity=-1.0,
        retry_initial_wait=0.0,
        retry_max_wait=0.0,
    )


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def embedder_cls():
    return KeywordEmbedder


@pytest.fixture
def memory_store():
    from recall.stores import InMemoryVectorStore

    return InMemoryVectorStore(dimension=KeywordEmbedder.dimension)


@pytest.fixture
def sqlite_store(temp_dir):
    from recall.stores import SQLiteVectorStore

    return SQLiteVectorStore(
        os.path.join(temp_dir, "vectors.db"), dimension=KeywordEmbedder.dimension
    )


@pytest.fixture
def recall_instance(embedder, sqlite_store, settings):
    """Recall over a SQLite store and the keyword embedder."""
    from recall import Recall

    instance = Recall.from_components(embedder=embedder, store=sqlite_store, settings=settings)
    yield instance
    instance.close()


@pytest.fixture
def fake_llm_cls():
    return FakeLLM


@pytest.fixture
def mock_provider_cls():
    return MockProvider


@pytest.fixture
def config_file(temp_dir):
    """A recall.yaml pointing at a temp data dir, sized for KeywordEmbedder."""
    path = os.path.join(temp_dir, "recall.yaml")
    with open(path, "w", encoding="utf-8") as f:
        f.write(
            "provider: litellm\n"
            "embedding_model: test/embedding-model\n"
            f"data_dir: {os.path.join(temp_dir, 'data')}\n"
            "settings:\n"
            f"  embedding_dimension: {KeywordEmbedder.dimension}\n"
            "  min_similarity: -1.0\n"
            "  retry_initial_wait: 0.0\n"
            "  retry_max_wait: 0.0\n"
        )
    return path


@pytest.fixture
def patched_create_recall(monkeypatch):
    """Make the commands layer build Recall with KeywordEmbedder instead of LiteLLM."""
    from recall import LocalStorage, Recall

    def create(config):
        return Recall(
            embedder=KeywordEmbedder(),
            storage=LocalStorage(config.data_dir, backend=config.storage_backend),
            settings=config.settings,
        )

    for module in ("recall.commands.ingest", "recall.commands.query"):
        monkeypatch.setattr(f"{module}.create_recall", create)
    return create
