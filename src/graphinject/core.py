"""
Convenience entry points on top of Graph.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from .graph import Graph
from .model import Record

_logger = logging.getLogger(__name__)


def populate(*values: Any, logger: logging.Logger | None = None) -> Graph:
    """
    Populate the given values as unnamed records of a fresh Graph.

    Example:
        ```python
        app = App()
        populate(app, Database("sqlite://"))
        ```

    Returns:
        The populated Graph, for inspection
    """
    graph = Graph(logger)
    for value in values:
        graph.provide(Record(value))
    graph.populate()
    return graph


class Container:
    """
    A Graph wrapper with bean-style registration.

    Every bean is provided as an unnamed record unless a name is given.
    ``populate()`` must be called once all beans are provided.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger if logger is not None else _logger
        self._graph = Graph(logger)

    @property
    def graph(self) -> Graph:
        return self._graph

    def provides(self, *beans: Any) -> None:
        """Provide beans as unnamed records."""
        for bean in beans:
            self._graph.provide(Record(bean))

    def provide_with_name(self, name: str, bean: Any) -> None:
        """Provide a bean under ``name``."""
        self._graph.provide(Record(bean, name=name))

    def populate(self) -> None:
        """Populate the dependency fields of every bean."""
        start = time.perf_counter()
        try:
            self._graph.populate()
        finally:
            self._logger.info(
                "populating the bean container took %.6fs", time.perf_counter() - start
            )

    def objects(self) -> list[Record]:
        """Every tracked record in unspecified order."""
        return self._graph.list_tracked()
