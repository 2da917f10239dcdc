# src/recall/knowledge/service.py
"""Knowledge graph service: extraction, entity linking and one-hop queries."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from loguru import logger

from recall.models import (
    Entity,
    IngestResult,
    KnowledgeExtraction,
    KnowledgeNode,
    KnowledgeQueryResult,
    KnowledgeRelation,
    KnowledgeUpdate,
    SourceType,
)
from recall.stores.vectors import validate_scope

if TYPE_CHECKING:
    from recall.knowledge.extractor import KnowledgeExtractor
    from recall.recall import Recall
    from recall.stores import KnowledgeGraphStore
    from recall.tasks import IngestionQueue, IngestionTask


def entity_content(entity: Entity) -> str:
    """Serialize an entity's attributes as node content."""
    if not entity.attributes:
        return ""
    return json.dumps(entity.attributes, sort_keys=True, default=str)


class KnowledgeService:
    """Build and query an owner-scoped knowledge graph.

    Each extracted entity becomes a KnowledgeNode whose description is also
    ingested into the vector store as a ``knowledge_node`` source (keyed by
    node id), so entities surface in retrieve_context.

    Relationships are linked by entity name: case-insensitive exact match
    after collapsing whitespace. When several nodes share a name the earliest
    created one is used. Relationships whose endpoints do not resolve are
    skipped and listed in the returned update.
    """

    def __init__(
        self,
        recall: Recall,
        graph: KnowledgeGraphStore,
        extractor: KnowledgeExtractor,
    ) -> None:
        self.recall = recall
        self.graph = graph
        self.extractor = extractor

    def _new_nodes(
        self, owner_scope: str, extraction: KnowledgeExtraction, source: str
    ) -> list[KnowledgeNode]:
        nodes = []
        for entity in extraction.entities:
            if not entity.name.strip():
                logger.warning(f"Skipping unnamed {entity.type} entity from {source}")
                continue
            node = KnowledgeNode(
                owner_scope=owner_scope,
                type=entity.type,
                name=entity.name.strip(),
                content=entity_content(entity),
                source=source,
            )
            self.graph.add_node(node)
            nodes.append(node)
        return nodes

    def resolve(self, owner_scope: str, name: str) -> KnowledgeNode | None:
        """Find the node a relationship endpoint name refers to."""
        matches = self.graph.find_nodes_by_name(owner_scope, name)
        return matches[0] if matches else None

    def _link(
        self, owner_scope: str, extraction: KnowledgeExtraction, update: KnowledgeUpdate
    ) -> None:
        for relationship in extraction.relationships:
            source_node = self.resolve(owner_scope, relationship.source)
            target_node = self.resolve(owner_scope, relationship.target)
            if source_node is None or target_node is None:
                logger.warning(
                    f"Skipping relationship: {relationship.source} -[{relationship.type}]-> "
                    f"{relationship.target} (nodes not found)"
                )
                update.skipped_relationships.append(relationship)
                continue
            relation = KnowledgeRelation(
                owner_scope=owner_scope,
                source_id=source_node.id,
                target_id=target_node.id,
                type=relationship.type,
            )
            self.graph.add_relation(relation)
            update.relations.append(relation)

    def apply(
        self, owner_scope: str, extraction: KnowledgeExtraction, source: str
    ) -> KnowledgeUpdate:
        """Store an extraction: add nodes, embed their descriptions, link relationships."""
        validate_scope(owner_scope)
        update = KnowledgeUpdate(nodes=self._new_nodes(owner_scope, extraction, source))
        for node in update.nodes:
            result = self.recall.ingest(
                owner_scope, SourceType.KNOWLEDGE_NODE, node.id, node.description
            )
            update.ingest_results.append(result)
        self._link(owner_scope, extraction, update)
        self._log_update(source, update)
        return update

    async def aapply(
        self, owner_scope: str, extraction: KnowledgeExtraction, source: str
    ) -> KnowledgeUpdate:
        """Async variant of apply."""
        validate_scope(owner_scope)
        update = KnowledgeUpdate(nodes=self._new_nodes(owner_scope, extraction, source))
        for node in update.nodes:
            result: IngestResult = await self.recall.aingest(
                owner_scope, SourceType.KNOWLEDGE_NODE, node.id, node.description
            )
            update.ingest_results.append(result)
        self._link(owner_scope, extraction, update)
        self._log_update(source, update)
        return update

    @staticmethod
    def _log_update(source: str, update: KnowledgeUpdate) -> None:
        logger.info(
            f"Knowledge from {source}: {len(update.nodes)} entities, "
            f"{len(update.relations)} relationships, "
            f"{len(update.skipped_relationships)} skipped"
        )

    def process_text(self, owner_scope: str, text: str, source: str) -> KnowledgeUpdate:
        """Extract knowledge from text and add it to the graph.

        Raises:
            InvalidScope: If owner_scope is blank (before the LLM call)
            ProviderError: If the extraction LLM call fails
            KnowledgeExtractionError: If the LLM response cannot be parsed
        """
        validate_scope(owner_scope)
        return self.apply(owner_scope, self.extractor.extract(text), source)

    async def aprocess_text(self, owner_scope: str, text: str, source: str) -> KnowledgeUpdate:
        """Async variant of process_text."""
        validate_scope(owner_scope)
        return await self.aapply(owner_scope, await self.extractor.aextract(text), source)

    def submit(
        self, queue: IngestionQueue, owner_scope: str, text: str, source: str
    ) -> IngestionTask[KnowledgeUpdate]:
        """Run process_text in the background on a caller-owned queue."""
        validate_scope(owner_scope)
        return queue.submit_job(
            f"knowledge {source}", lambda: self.aprocess_text(owner_scope, text, source)
        )

    def query(self, owner_scope: str, topic: str, limit: int = 50) -> KnowledgeQueryResult:
        """Find nodes whose name contains the topic, plus their direct neighbours.

        Args:
            owner_scope: Partition to search
            topic: Case-insensitive substring of entity names
            limit: Maximum number of directly matching nodes
        """
        direct = self.graph.search_nodes(owner_scope, topic, limit=limit)
        direct_ids = {node.id for node in direct}
        relations = self.graph.relations_for(owner_scope, list(direct_ids))

        related_ids: list[str] = []
        for relation in relations:
            for node_id in (relation.source_id, relation.target_id):
                if node_id not in direct_ids and node_id not in related_ids:
                    related_ids.append(node_id)
        related = [
            node
            for node_id in related_ids
            if (node := self.graph.get_node(owner_scope, node_id)) is not None
        ]
        return KnowledgeQueryResult(direct=direct, related=related, relations=relations)

    def remove_node(self, owner_scope: str, node_id: str) -> bool:
        """Delete a node, its relations and its embeddings.

        Returns False if the node did not exist (its embeddings are still purged).
        """
        removed = self.recall.remove_source(owner_scope, SourceType.KNOWLEDGE_NODE, node_id)
        deleted = self.graph.delete_node(owner_scope, node_id)
        logger.debug(f"Removed knowledge node {node_id}: {removed} embeddings")
        return deleted
