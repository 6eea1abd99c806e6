#!/usr/bin/env python3
"""
Unit tests for the populate() shortcut and the Container wrapper.
"""

import logging
import unittest
from dataclasses import dataclass
from typing import Annotated

from graphinject import (
    Container,
    DuplicateConcreteTypeError,
    Graph,
    MissingNamedDependencyError,
    inject,
    populate,
)


class Database:
    def __init__(self, url: str = "sqlite://"):
        self.url = url


@dataclass
class Repository:
    database: Annotated[Database | None, inject()] = None


@dataclass
class Application:
    repository: Annotated[Repository | None, inject()] = None
    name: Annotated[str, inject("app-name")] = ""


class TestPopulateShortcut(unittest.TestCase):
    """Test the populate() function."""

    def test_populate_values(self):
        """Test that populate() wires the given values together."""
        database = Database("postgres://")
        repository = Repository()
        graph = populate(repository, database)

        self.assertIsInstance(graph, Graph)
        self.assertIs(repository.database, database)
        self.assertEqual(len(graph.list_tracked()), 2)

    def test_populate_errors_propagate(self):
        """Test that provide errors surface from populate()."""
        with self.assertRaises(DuplicateConcreteTypeError):
            populate(Database(), Database())


class TestContainer(unittest.TestCase):
    """Test the Container wrapper."""

    def test_container_wires_beans(self):
        """Test providing beans with and without names."""
        container = Container()
        app = Application()
        container.provides(app, Database())
        container.provide_with_name("app-name", "inventory")
        container.populate()

        self.assertEqual(app.name, "inventory")
        self.assertIsInstance(app.repository, Repository)
        self.assertIsInstance(app.repository.database, Database)
        self.assertEqual(len(container.objects()), 4)
        self.assertEqual(container.graph.named("app-name").value, "inventory")

    def test_container_logs_timing(self):
        """Test that populating logs the time taken."""
        container = Container(logging.getLogger("graphinject.container.test"))
        container.provides(Repository())
        with self.assertLogs("graphinject.container.test", level="INFO") as logs:
            container.populate()
        self.assertTrue(any("took" in line for line in logs.output))

    def test_container_logs_timing_on_failure(self):
        """Test that the timing is logged even when populating fails."""
        container = Container(logging.getLogger("graphinject.container.failing"))
        container.provides(Application())
        with self.assertLogs("graphinject.container.failing", level="INFO") as logs:
            with self.assertRaises(MissingNamedDependencyError):
                container.populate()
        self.assertTrue(any("took" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
