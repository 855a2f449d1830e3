# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Per-client cache of schema metadata.

The cache is created empty with its client and filled on first access. Entries
never expire and are never refreshed: a schema change on the server is picked up
by constructing a new client.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from ..models.schema import EntitySchema, Schema


class SchemaCache:
    """
    Append-only store for the service :class:`Schema` and per-entity :class:`EntitySchema` objects.

    Writes are serialized with a lock. Lookups are not deduplicated: two threads
    missing the same name at once may both fetch it, and the last write wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._schema: Optional[Schema] = None
        self._entities: Dict[str, EntitySchema] = {}

    def schema(self) -> Optional[Schema]:
        return self._schema

    def store_schema(self, schema: Schema) -> Schema:
        with self._lock:
            self._schema = schema
        return schema

    def entity(self, name: str) -> Optional[EntitySchema]:
        with self._lock:
            return self._entities.get(name)

    def store_entity(self, schema: EntitySchema) -> EntitySchema:
        with self._lock:
            self._entities[schema.name] = schema
        return schema

    def entity_names(self) -> List[str]:
        """Names of the cached entities, in the order they were first stored."""
        with self._lock:
            return list(self._entities)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entities

    def __len__(self) -> int:
        with self._lock:
            return len(self._entities)
