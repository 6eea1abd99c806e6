#!/usr/bin/env python3
"""
Unit tests for providing records to a Graph and listing them.
"""

import logging
import random
import unittest
from dataclasses import dataclass, field
from typing import Annotated

from graphinject import (
    DuplicateConcreteTypeError,
    DuplicateNameError,
    Graph,
    InvalidRecordError,
    PreFilledDependencyMapError,
    Record,
    inject,
)


class Database:
    def __init__(self, url: str = "sqlite://"):
        self.url = url


@dataclass
class Settings:
    debug: bool = False


@dataclass
class Server:
    database: Annotated[Database | None, inject()] = None
    settings: Annotated[Settings, inject("inline")] = field(default_factory=Settings)


class TestProvide(unittest.TestCase):
    """Test Graph.provide."""

    def test_provide_unnamed(self):
        """Test providing unnamed records."""
        graph = Graph()
        graph.provide(Record(Database()), Record(Settings()))
        self.assertEqual(len(graph), 2)

    def test_duplicate_unnamed_type(self):
        """Test that two non-private unnamed instances of one type are rejected."""
        graph = Graph()
        graph.provide(Record(Database()))
        with self.assertRaises(DuplicateConcreteTypeError) as ctx:
            graph.provide(Record(Database()))
        self.assertIs(ctx.exception.concrete_type, Database)
        self.assertIn("Database", str(ctx.exception))

    def test_private_duplicate_allowed(self):
        """Test that a private instance does not take the type."""
        graph = Graph()
        graph.provide(Record(Database(), private=True))
        graph.provide(Record(Database()))
        graph.provide(Record(Database(), private=True))
        self.assertEqual(len(graph), 3)

    def test_duplicate_name(self):
        """Test that names are unique."""
        graph = Graph()
        graph.provide(Record("first", name="greeting"))
        with self.assertRaises(DuplicateNameError) as ctx:
            graph.provide(Record("second", name="greeting"))
        self.assertEqual(ctx.exception.name, "greeting")

    def test_named_and_unnamed_same_type(self):
        """Test that named records do not take the unnamed type slot."""
        graph = Graph()
        graph.provide(Record(Database("a"), name="primary"))
        graph.provide(Record(Database("b")))
        graph.provide(Record(Database("c"), name="replica"))
        self.assertEqual(graph.named("primary").value.url, "a")
        self.assertIsNone(graph.named("missing"))

    def test_prefilled_fields_rejected(self):
        """Test that records must not arrive with resolved fields."""
        graph = Graph()
        record = Record(Server(), fields={"database": Record(Database())})
        with self.assertRaises(PreFilledDependencyMapError):
            graph.provide(record)

    def test_unnamed_value_must_be_record(self):
        """Test that unnamed values must be instances of record types."""
        graph = Graph()
        for value in [42, "text", {"a": 1}, [1, 2], Database]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidRecordError):
                    graph.provide(Record(value))
        self.assertEqual(len(graph), 0)

    def test_named_plain_values(self):
        """Test that named records may hold plain values."""
        graph = Graph()
        graph.provide(Record(42, name="answer"), Record({"a": 1}, name="table"))
        self.assertEqual(graph.named("answer").value, 42)

    def test_provide_logs_lifecycle(self):
        """Test that providing emits a debug event on the graph logger."""
        graph = Graph(logging.getLogger("graphinject.test"))
        with self.assertLogs("graphinject.test", level="DEBUG") as logs:
            graph.provide(Record(Database(), name="db"))
        self.assertIn("provided", logs.output[0])
        self.assertIn("Database named db", logs.output[0])


class TestRecord(unittest.TestCase):
    """Test Record behaviour."""

    def test_record_str(self):
        """Test the readable form of records."""
        self.assertTrue(str(Record(Database(), name="primary")).endswith("Database named primary"))
        self.assertTrue(str(Record(Database())).endswith("Database"))

    def test_records_compare_by_identity(self):
        """Test that structurally equal records are distinct."""
        settings = Settings()
        self.assertNotEqual(Record(settings), Record(settings))

    def test_internal_flags_default_false(self):
        """Test that created and embedded are not constructor arguments."""
        record = Record(Settings(), private=True)
        self.assertTrue(record.private)
        self.assertFalse(record.created)
        self.assertFalse(record.embedded)
        with self.assertRaises(TypeError):
            Record(Settings(), created=True)  # type: ignore[call-arg]


class TestListTracked(unittest.TestCase):
    """Test Graph.list_tracked."""

    def test_lists_named_and_unnamed(self):
        """Test that every provided record is listed."""
        graph = Graph(rng=random.Random(7))
        records = [Record(Database()), Record(Settings()), Record("x", name="x")]
        graph.provide(*records)
        listed = graph.list_tracked()
        self.assertEqual({id(r) for r in listed}, {id(r) for r in records})

    def test_embedded_records_excluded(self):
        """Test that anonymous inline records are not listed."""
        graph = Graph()
        server = Server()
        graph.provide(Record(server), Record(Database()))
        graph.populate()

        listed = graph.list_tracked()
        self.assertEqual(len(listed), 2)
        self.assertNotIn(server.settings, [r.value for r in listed])
        self.assertEqual(len(graph), 3)

    def test_order_is_shuffled(self):
        """Test that the listing order comes from the configured random source."""
        graph = Graph(rng=random.Random(1))
        values = []
        for i in range(20):
            value = Database(str(i))
            values.append(value)
            graph.provide(Record(value, name=str(i)))

        orders = {tuple(id(r.value) for r in graph.list_tracked()) for _ in range(5)}
        self.assertGreater(len(orders), 1)
        for order in orders:
            self.assertEqual(set(order), {id(v) for v in values})


if __name__ == "__main__":
    unittest.main()
