# src/recall/stores/knowledge_graph.py
"""Knowledge graph storage: abstract base and SQLite implementation."""

import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from recall.models import KnowledgeNode, KnowledgeRelation
from recall.stores.vectors import validate_scope


def normalize_name(name: str) -> str:
    """Key used for entity linking: whitespace collapsed, case folded."""
    return " ".join(name.split()).casefold()


class KnowledgeGraphStore(ABC):
    """Abstract base class for owner-scoped entity/relation storage."""

    @abstractmethod
    def add_node(self, node: KnowledgeNode) -> None:
        """Store a node."""
        ...

    @abstractmethod
    def add_relation(self, relation: KnowledgeRelation) -> None:
        """Store a relation between two nodes of the same scope."""
        ...

    @abstractmethod
    def get_node(self, owner_scope: str, node_id: str) -> KnowledgeNode | None:
        """Retrieve a node by ID, or None if absent from the scope."""
        ...

    @abstractmethod
    def find_nodes_by_name(self, owner_scope: str, name: str) -> list[KnowledgeNode]:
        """Nodes whose normalized name equals ``name``'s, earliest first."""
        ...

    @abstractmethod
    def search_nodes(self, owner_scope: str, text: str, limit: int = 10) -> list[KnowledgeNode]:
        """Nodes whose name contains ``text`` (case-insensitive), earliest first."""
        ...

    @abstractmethod
    def relations_for(self, owner_scope: str, node_ids: list[str]) -> list[KnowledgeRelation]:
        """Relations with either endpoint in ``node_ids``."""
        ...

    @abstractmethod
    def list_nodes(self, owner_scope: str) -> list[KnowledgeNode]:
        """All nodes of a scope, earliest first."""
        ...

    @abstractmethod
    def delete_node(self, owner_scope: str, node_id: str) -> bool:
        """Delete a node and its relations. Returns False if it did not exist."""
        ...

    def close(self) -> None:  # noqa: B027
        """Release resources."""


class SQLiteKnowledgeGraph(KnowledgeGraphStore):
    """SQLite-based knowledge graph store."""

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS knowledge_nodes (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    owner_scope TEXT NOT NULL,
                    type TEXT NOT NULL,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL,
                    content TEXT NOT NULL,
                    source TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS knowledge_relations (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    owner_scope TEXT NOT NULL,
                    source_id TEXT NOT NULL,
                    target_id TEXT NOT NULL,
                    type TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_node_name ON knowledge_nodes(owner_scope, name_key)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_rel_source "
                "ON knowledge_relations(owner_scope, source_id)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_rel_target "
                "ON knowledge_relations(owner_scope, target_id)"
            )
            conn.commit()

    _NODE_COLUMNS = "id, owner_scope, type, name, content, source, created_at"
    _RELATION_COLUMNS = "id, owner_scope, source_id, target_id, type, created_at"

    @staticmethod
    def _row_to_node(row: tuple) -> KnowledgeNode:
        return KnowledgeNode(
            id=row[0],
            owner_scope=row[1],
            type=row[2],
            name=row[3],
            content=row[4],
            source=row[5],
            created_at=datetime.fromisoformat(row[6]),
        )

    @staticmethod
    def _row_to_relation(row: tuple) -> KnowledgeRelation:
        return KnowledgeRelation(
            id=row[0],
            owner_scope=row[1],
            source_id=row[2],
            target_id=row[3],
            type=row[4],
            created_at=datetime.fromisoformat(row[5]),
        )

    def add_node(self, node: KnowledgeNode) -> None:
        validate_scope(node.owner_scope)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"""
                INSERT INTO knowledge_nodes ({self._NODE_COLUMNS}, name_key)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    node.id,
                    node.owner_scope,
                    node.type,
                    node.name,
                    node.content,
                    node.source,
                    node.created_at.isoformat(timespec="microseconds"),
                    normalize_name(node.name),
                ),
            )
            conn.commit()

    def add_relation(self, relation: KnowledgeRelation) -> None:
        validate_scope(relation.owner_scope)
        for node_id in (relation.source_id, relation.target_id):
            if self.get_node(relation.owner_scope, node_id) is None:
                raise ValueError(
                    f"Node {node_id} does not exist in scope {relation.owner_scope!r}"
                )
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"""
                INSERT INTO knowledge_relations ({self._RELATION_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    relation.id,
                    relation.owner_scope,
                    relation.source_id,
                    relation.target_id,
                    relation.type,
                    relation.created_at.isoformat(timespec="microseconds"),
                ),
            )
            conn.commit()

    def get_node(self, owner_scope: str, node_id: str) -> KnowledgeNode | None:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                f"SELECT {self._NODE_COLUMNS} FROM knowledge_nodes "
                "WHERE owner_scope = ? AND id = ?",
                (owner_scope, node_id),
            ).fetchone()
        return self._row_to_node(row) if row else None

    def find_nodes_by_name(self, owner_scope: str, name: str) -> list[KnowledgeNode]:
        validate_scope(owner_scope)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {self._NODE_COLUMNS} FROM knowledge_nodes "
                "WHERE owner_scope = ? AND name_key = ? ORDER BY created_at, seq",
                (owner_scope, normalize_name(name)),
            )
            return [self._row_to_node(row) for row in cursor.fetchall()]

    def search_nodes(self, owner_scope: str, text: str, limit: int = 10) -> list[KnowledgeNode]:
        validate_scope(owner_scope)
        key = normalize_name(text)
        if not key:
            return []
        # Escape LIKE wildcards so the match is a literal substring
        pattern = "%" + key.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {self._NODE_COLUMNS} FROM knowledge_nodes "
                "WHERE owner_scope = ? AND name_key LIKE ? ESCAPE '\\' "
                "ORDER BY created_at, seq LIMIT ?",
                (owner_scope, pattern, limit),
            )
            return [self._row_to_node(row) for row in cursor.fetchall()]

    def relations_for(self, owner_scope: str, node_ids: list[str]) -> list[KnowledgeRelation]:
        if not node_ids:
            return []
        placeholders = ",".join("?" * len(node_ids))
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {self._RELATION_COLUMNS} FROM knowledge_relations "
                f"WHERE owner_scope = ? "
                f"AND (source_id IN ({placeholders}) OR target_id IN ({placeholders})) "
                "ORDER BY created_at, seq",
                (owner_scope, *node_ids, *node_ids),
            )
            return [self._row_to_relation(row) for row in cursor.fetchall()]

    def list_nodes(self, owner_scope: str) -> list[KnowledgeNode]:
        validate_scope(owner_scope)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {self._NODE_COLUMNS} FROM knowledge_nodes "
                "WHERE owner_scope = ? ORDER BY created_at, seq",
                (owner_scope,),
            )
            return [self._row_to_node(row) for row in cursor.fetchall()]

    def delete_node(self, owner_scope: str, node_id: str) -> bool:
        validate_scope(owner_scope)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "DELETE FROM knowledge_relations "
                "WHERE owner_scope = ? AND (source_id = ? OR target_id = ?)",
                (owner_scope, node_id, node_id),
            )
            cursor = conn.execute(
                "DELETE FROM knowledge_nodes WHERE owner_scope = ? AND id = ?",
                (owner_scope, node_id),
            )
            conn.commit()
            return cursor.rowcount > 0
