"""
Graph - the registry of tracked records.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator

from .errors import (
    DuplicateConcreteTypeError,
    DuplicateNameError,
    InvalidRecordError,
    PreFilledDependencyMapError,
)
from .introspection import FieldIntrospector
from .model import DEFAULT_TAG_KEY, Record
from .resolver import FieldResolver

_logger = logging.getLogger(__name__)


class Graph:
    """
    Registry of instances whose fields are populated by the graph.

    Unnamed records are kept in provide order and may hold at most one
    non-private instance per concrete type. Named records are unique by name
    and are only ever used for fields that ask for them by name.

    A Graph is not thread-safe. ``populate()`` is meant to be called once,
    after every record has been provided. A failed ``populate()`` leaves the
    assignments made so far in place.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        tag_key: str = DEFAULT_TAG_KEY,
        rng: random.Random | None = None,
    ):
        """
        Create an empty Graph.

        Args:
            logger: Logger receiving lifecycle and assignment events
            tag_key: Tag key holding the injection directive
            rng: Random source used to shuffle ``list_tracked()``
        """
        self._logger = logger if logger is not None else _logger
        self._tag_key = tag_key
        self._rng = rng if rng is not None else random.Random()
        self._unnamed: list[Record] = []
        self._unnamed_types: set[type] = set()
        self._unnamed_ids: set[int] = set()
        self._named: dict[str, Record] = {}

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def tag_key(self) -> str:
        return self._tag_key

    def provide(self, *records: Record) -> None:
        """
        Add records to the graph.

        Raises:
            PreFilledDependencyMapError: If a record already has resolved fields
            InvalidRecordError: If an unnamed value is not a record instance
            DuplicateConcreteTypeError: If a second non-private unnamed record has the same type
            DuplicateNameError: If a name is already taken
        """
        for record in records:
            record.value_type = type(record.value)

            if record.fields:
                raise PreFilledDependencyMapError(record)

            if not record.name:
                if not FieldIntrospector.is_record_type(record.value_type):
                    raise InvalidRecordError(record.value)

                if not record.private:
                    if record.value_type in self._unnamed_types:
                        raise DuplicateConcreteTypeError(record.value_type)
                    self._unnamed_types.add(record.value_type)
                self._unnamed.append(record)
                self._unnamed_ids.add(id(record.value))
            else:
                if record.name in self._named:
                    raise DuplicateNameError(record.name)
                self._named[record.name] = record

            if record.created:
                self._logger.debug("created %s", record)
            elif record.embedded:
                self._logger.debug("provided embedded %s", record)
            else:
                self._logger.debug("provided %s", record)

    def populate(self) -> None:
        """
        Populate the tagged fields of every incomplete record.

        Raises:
            InjectionError: The first error met; earlier assignments stay applied
        """
        FieldResolver(self).populate()

    def list_tracked(self) -> list[Record]:
        """
        Return every record the graph knows about except embedded ones.

        The order is deliberately shuffled; callers must not rely on it.
        """
        records = [r for r in self._unnamed if not r.embedded]
        records.extend(r for r in self._named.values() if not r.embedded)
        self._rng.shuffle(records)
        return records

    def named(self, name: str) -> Record | None:
        """Get the record provided under ``name``, if any."""
        return self._named.get(name)

    def is_tracked_unnamed(self, value: object) -> bool:
        """Check by identity whether ``value`` is held by an unnamed record."""
        return id(value) in self._unnamed_ids

    def is_type_taken(self, value_type: type) -> bool:
        """Check whether a non-private unnamed record of ``value_type`` exists."""
        return value_type in self._unnamed_types

    def unnamed_at(self, index: int) -> Record | None:
        """Get the unnamed record at ``index``, or None past the current end."""
        if index < len(self._unnamed):
            return self._unnamed[index]
        return None

    def unnamed_records(self) -> list[Record]:
        return list(self._unnamed)

    def named_records(self) -> list[Record]:
        return list(self._named.values())

    def __len__(self) -> int:
        return len(self._unnamed) + len(self._named)

    def __iter__(self) -> Iterator[Record]:
        yield from self._unnamed
        yield from self._named.values()
