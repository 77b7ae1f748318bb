import copy
import logging
from itertools import count
from typing import Any, Dict, List, Optional

from workflow_engine.models.factory.Nodes import DataStoreNodeModel
from workflow_engine.node_system.Node import Node

logger = logging.getLogger(__name__)


class InMemoryTables:
    """
    Minimal table store backing the data-store node. Rows are dicts with
    an integer ``id`` assigned on insert; queries match by field equality.
    """

    def __init__(self):
        self._tables: Dict[str, List[Dict[str, Any]]] = {}
        self._ids = count(1)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self._tables.setdefault(table, [])

    @staticmethod
    def _matches(row: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
        return all(row.get(key) == value for key, value in (query or {}).items())

    def select(self, table: str, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return [copy.deepcopy(row) for row in self.rows(table) if self._matches(row, query)]

    def insert(self, table: str, record: Any) -> int:
        row = dict(record) if isinstance(record, dict) else {'value': record}
        row['id'] = next(self._ids)
        self.rows(table).append(row)
        return row['id']

    def update(self, table: str, query: Optional[Dict[str, Any]], changes: Any) -> int:
        if not isinstance(changes, dict):
            changes = {'value': changes}
        affected = 0
        for row in self.rows(table):
            if self._matches(row, query):
                row.update({k: v for k, v in changes.items() if k != 'id'})
                affected += 1
        return affected

    def delete(self, table: str, query: Optional[Dict[str, Any]]) -> int:
        rows = self.rows(table)
        kept = [row for row in rows if not self._matches(row, query)]
        self._tables[table] = kept
        return len(rows) - len(kept)


class NodeDataStore(Node):
    """
    Data store node - select/insert/update/delete against a named table in
    an in-memory store shared by every data-store node of one registry.
    """
    config_model = DataStoreNodeModel

    def __init__(self, tables: Optional[InMemoryTables] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.tables = tables if tables is not None else InMemoryTables()

    async def process(self, inputs, config: DataStoreNodeModel):
        value = self.primary_input(inputs)
        table = config.table
        logger.info("NodeDataStore:%s %s on table '%s'", self.node_id, config.operation, table)

        if config.operation == 'select':
            query = config.query if config.query is not None else (value if isinstance(value, dict) else None)
            return {'success': True, 'data': self.tables.select(table, query), 'query': query, 'input': value}
        if config.operation == 'insert':
            inserted_id = self.tables.insert(table, value)
            return {'success': True, 'insertedId': inserted_id, 'data': value}
        if config.operation == 'update':
            affected = self.tables.update(table, config.query, value)
            return {'success': True, 'affected': affected, 'data': value}
        affected = self.tables.delete(table, config.query)
        return {'success': True, 'affected': affected}
