# src/recall/knowledge/extractor.py
"""Knowledge extraction: turn free text into entities and relationships."""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

from loguru import logger
from pydantic import ValidationError

from recall.exceptions import KnowledgeExtractionError
from recall.models import Entity, KnowledgeExtraction, Relationship
from recall.providers.base import LLMClient

DEFAULT_PROMPT = """Extract the entities and the relationships between them from the text below.

Entities are people, organizations, places, projects, concepts or other named things.
Relationships connect two entities by name.

Return your response as a JSON object with this shape:
{{
  "entities": [
    {{"type": "person", "name": "Ada Lovelace", "attributes": {{"role": "mathematician"}}}}
  ],
  "relationships": [
    {{"source": "Ada Lovelace", "target": "Analytical Engine", "type": "wrote_about"}}
  ]
}}

Every relationship source and target must be the name of an entity in the list.

Text:
{content}

Return ONLY the JSON object, no other text."""

_FENCE = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)


class KnowledgeExtractor(ABC):
    """Abstract base class for knowledge extraction."""

    @abstractmethod
    def extract(self, text: str) -> KnowledgeExtraction:
        """Extract entities and relationships from text."""
        ...

    async def aextract(self, text: str) -> KnowledgeExtraction:
        """Extract entities and relationships (async).

        Default implementation calls sync extract().
        """
        return self.extract(text)


def parse_extraction(response_text: str) -> KnowledgeExtraction:
    """Parse an LLM response into a KnowledgeExtraction.

    Accepts bare JSON or JSON inside a markdown code block (even with
    introductory text). Malformed individual entities or relationships are
    dropped with a warning.

    Raises:
        KnowledgeExtractionError: If no JSON object can be parsed
    """
    text = response_text.strip()
    fence = _FENCE.search(text)
    if fence:
        text = fence.group(1)
    else:
        # Tolerate prose around a bare object
        start, end = text.find("{"), text.rfind("}")
        if start != -1 and end > start:
            text = text[start : end + 1]

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise KnowledgeExtractionError(f"LLM response is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise KnowledgeExtractionError("LLM response is not a JSON object")

    return KnowledgeExtraction(
        entities=_parse_items(payload.get("entities"), Entity, "entity"),
        relationships=_parse_items(payload.get("relationships"), Relationship, "relationship"),
    )


def _parse_items(raw: Any, model: type, label: str) -> list:
    if not isinstance(raw, list):
        return []
    items = []
    for item in raw:
        try:
            items.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping malformed {label} {item!r}: {e.error_count()} errors")
    return items


class LLMKnowledgeExtractor(KnowledgeExtractor):
    """LLM-based knowledge extractor.

    Example:
        from recall.providers.litellm import LiteLLMClient
        from recall.knowledge import LLMKnowledgeExtractor

        extractor = LLMKnowledgeExtractor(LiteLLMClient(model="openai/gpt-4o-mini"))
        extraction = extractor.extract("Ada Lovelace wrote about the Analytical Engine.")
    """

    def __init__(
        self,
        llm_client: LLMClient,
        prompt_template: str | None = None,
        temperature: float | None = 0.0,
    ) -> None:
        """Initialize the extractor.

        Args:
            llm_client: Any LLMClient implementation
            prompt_template: Custom prompt template with {content} placeholder
            temperature: LLM temperature. None to use model default.
        """
        self._client = llm_client
        self.prompt_template = prompt_template or DEFAULT_PROMPT
        self.temperature = temperature

    def _messages(self, text: str) -> list[dict]:
        return [{"role": "user", "content": self.prompt_template.format(content=text.strip())}]

    def extract(self, text: str) -> KnowledgeExtraction:
        if not text.strip():
            return KnowledgeExtraction()
        response = self._client.complete(self._messages(text), temperature=self.temperature)
        return parse_extraction(response)

    async def aextract(self, text: str) -> KnowledgeExtraction:
        if not text.strip():
            return KnowledgeExtraction()
        response = await self._client.acomplete(
            self._messages(text), temperature=self.temperature
        )
        return parse_extraction(response)
