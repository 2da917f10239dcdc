"""Fixtures for command tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("RECALL_"):
            monkeypatch.delenv(key)


@pytest.fixture
def docs_dir(temp_dir):
    """A directory with two supported files and one unsupported file."""
    docs = os.path.join(temp_dir, "docs")
    os.makedirs(os.path.join(docs, "sub"))
    with open(os.path.join(docs, "a.txt"), "w", encoding="utf-8") as f:
        f.write("alpha one.\n\nbeta two.")
    with open(os.path.join(docs, "sub", "b.md"), "w", encoding="utf-8") as f:
        f.write("gamma three.")
    with open(os.path.join(docs, "blob.unknownext"), "wb") as f:
        f.write(b"\x00\x01")
    return docs
