# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import threading

from Wastedge.Api.data._schema_cache import SchemaCache
from Wastedge.Api.models.schema import EntitySchema, Schema


def test_starts_empty():
    cache = SchemaCache()
    assert cache.schema() is None
    assert cache.entity("orders") is None
    assert len(cache) == 0
    assert "orders" not in cache


def test_store_and_lookup(orders_schema):
    cache = SchemaCache()
    assert cache.store_entity(orders_schema) is orders_schema
    assert cache.entity("orders") is orders_schema
    assert "orders" in cache
    assert cache.entity_names() == ["orders"]


def test_last_write_wins(orders_schema):
    cache = SchemaCache()
    cache.store_entity(orders_schema)
    replacement = EntitySchema("orders")
    cache.store_entity(replacement)
    assert cache.entity("orders") is replacement
    assert len(cache) == 1


def test_store_schema():
    cache = SchemaCache()
    schema = Schema(entities=("orders",))
    assert cache.store_schema(schema) is schema
    assert cache.schema() is schema


def test_concurrent_writes_keep_every_entity():
    cache = SchemaCache()
    names = [f"entity{i}" for i in range(50)]

    def worker(name):
        cache.store_entity(EntitySchema(name))

    threads = [threading.Thread(target=worker, args=(n,)) for n in names]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(cache.entity_names()) == sorted(names)
