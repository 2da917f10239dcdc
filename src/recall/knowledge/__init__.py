# src/recall/knowledge/__init__.py
"""Knowledge graph extraction and querying."""

from recall.knowledge.extractor import (
    KnowledgeExtractor,
    LLMKnowledgeExtractor,
    parse_extraction,
)
from recall.knowledge.service import KnowledgeService

__all__ = [
    "KnowledgeExtractor",
    "LLMKnowledgeExtractor",
    "KnowledgeService",
    "parse_extraction",
]
