"""
Field resolution engine.

Population runs in four passes:

1. explicit fields of named records
2. explicit fields of unnamed records, including records appended while the
   pass runs
3. capability fields of unnamed records
4. capability fields of named records

Capability fields are matched against the pool of concrete records, so they
are only resolved once passes 1 and 2 have created every concrete value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import (
    AmbiguousCapabilityError,
    AmbiguousDependencyError,
    InstantiationError,
    InvalidInlineUsageError,
    MalformedDirectiveError,
    MissingNamedDependencyError,
    NoAssignableCapabilityError,
    NotSettableFieldError,
    TypeMismatchError,
    UnsupportedFieldKindError,
)
from .introspection import FieldIntrospector, FieldSpec
from .model import Directive, Record, parse_directive

if TYPE_CHECKING:
    from .graph import Graph


class FieldResolver:
    """Populates the tagged fields of every record in a Graph."""

    def __init__(self, graph: Graph):
        self._graph = graph
        self._logger = graph.logger

    def populate(self) -> None:
        for record in self._graph.named_records():
            if record.complete:
                continue
            self.populate_explicit(record)

        # Resolving a field may append records to the unnamed sequence, so
        # walk it by index until the end is reached.
        i = 0
        while (record := self._graph.unnamed_at(i)) is not None:
            i += 1
            if record.complete:
                continue
            self.populate_explicit(record)

        for record in self._graph.unnamed_records():
            if record.complete:
                continue
            self.populate_capabilities(record)

        for record in self._graph.named_records():
            if record.complete:
                continue
            self.populate_capabilities(record)

    def _tagged_fields(self, record: Record) -> list[tuple[FieldSpec, Directive]]:
        result: list[tuple[FieldSpec, Directive]] = []
        for spec in FieldIntrospector.fields(record.value_type):
            try:
                directive = parse_directive(spec.tag, self._graph.tag_key)
            except MalformedDirectiveError as e:
                raise MalformedDirectiveError(
                    e.tag, e.reason, spec.name, record.value_type
                ) from e
            if directive is not None:
                result.append((spec, directive))
        return result

    def populate_explicit(self, record: Record) -> None:
        """Resolve every non-capability tagged field of ``record``."""
        # Named plain values such as strings or numbers have no fields.
        if record.name and not FieldIntrospector.is_record_type(record.value_type):
            return

        owner = record.value_type
        for spec, directive in self._tagged_fields(record):
            field_name = spec.name
            field_type = spec.declared_type

            if not FieldIntrospector.is_settable(owner, field_name):
                raise NotSettableFieldError(field_name, owner)

            if directive.inline and not FieldIntrospector.is_record_type(field_type):
                raise InvalidInlineUsageError("inline requested on non record field", field_name, owner)

            if directive.inline:
                self._provide_inline(record, spec, directive)
                continue

            current = getattr(record.value, field_name, None)
            if not FieldIntrospector.is_zero(current):
                if FieldIntrospector.is_record_type(field_type) and not directive.private:
                    self._deep_inject(record, field_name, current)
                continue

            if directive.name:
                self._assign_named(record, field_name, field_type, directive.name)
                continue

            # Capability fields are resolved once every concrete value exists.
            if FieldIntrospector.is_capability_type(field_type):
                continue

            if FieldIntrospector.is_mapping_type(field_type):
                if not directive.private:
                    raise UnsupportedFieldKindError(
                        "inject on mapping field must be named or private: field", field_name, owner
                    )
                setattr(record.value, field_name, FieldIntrospector.new_mapping(field_type))
                self._logger.debug("made mapping for field %s in %s", field_name, record)
                continue

            if not FieldIntrospector.is_record_type(field_type):
                raise UnsupportedFieldKindError("found inject tag on unsupported field", field_name, owner)

            if not directive.private:
                existing = self._find_unnamed(record, field_name, field_type)
                if existing is not None:
                    setattr(record.value, field_name, existing.value)
                    self._logger.debug(
                        "assigned existing %s to field %s in %s", existing, field_name, record
                    )
                    record.add_dep(field_name, existing)
                    continue

            try:
                new_value = field_type()
            except TypeError as e:
                raise InstantiationError(field_type, e, field_name, owner) from e
            created = Record(new_value, private=directive.private)
            created.created = True

            self._graph.provide(created)
            self.populate_explicit(created)

            setattr(record.value, field_name, new_value)
            self._logger.debug(
                "assigned newly created %s to field %s in %s", created, field_name, record
            )
            record.add_dep(field_name, created)

    def _provide_inline(self, record: Record, spec: FieldSpec, directive: Directive) -> None:
        owner = record.value_type
        if directive.private:
            raise InvalidInlineUsageError(
                "cannot use private inject on inline field", spec.name, owner
            )

        embedded_value = getattr(record.value, spec.name, None)
        if embedded_value is None:
            try:
                embedded_value = spec.declared_type()
            except TypeError as e:
                raise InstantiationError(spec.declared_type, e, spec.name, owner) from e
            setattr(record.value, spec.name, embedded_value)

        if self._graph.is_tracked_unnamed(embedded_value):
            return
        inline = Record(embedded_value, private=True)
        inline.embedded = spec.anonymous
        self._graph.provide(inline)

    def _deep_inject(self, record: Record, field_name: str, current: Any) -> None:
        """Fill the dependencies of a value that was assigned by hand."""
        if self._graph.is_tracked_unnamed(current):
            return

        # A second instance of an already provided type cannot be shared,
        # so it is tracked as private and only populated.
        existing = Record(current, private=self._graph.is_type_taken(type(current)))
        self._graph.provide(existing)
        self.populate_explicit(existing)
        self._logger.debug(
            "deep injected existing %s in field %s of %s", existing, field_name, record
        )

    def _assign_named(self, record: Record, field_name: str, field_type: Any, name: str) -> None:
        owner = record.value_type
        existing = self._graph.named(name)
        if existing is None:
            raise MissingNamedDependencyError(name, field_name, owner)

        if not FieldIntrospector.is_assignable(existing.value, field_type):
            raise TypeMismatchError(name, field_type, existing.value_type, field_name, owner)

        setattr(record.value, field_name, existing.value)
        self._logger.debug("assigned %s to field %s in %s", existing, field_name, record)
        record.add_dep(field_name, existing)

    def _find_unnamed(self, record: Record, field_name: str, field_type: type) -> Record | None:
        candidates = [
            existing
            for existing in self._graph.unnamed_records()
            if not existing.private and issubclass(existing.value_type, field_type)
        ]
        # The exact type is unique among non-private records; subclasses are not.
        for existing in candidates:
            if existing.value_type is field_type:
                return existing
        if len(candidates) > 1:
            raise AmbiguousDependencyError(
                candidates[0], candidates[1], field_name, record.value_type
            )
        return candidates[0] if candidates else None

    def populate_capabilities(self, record: Record) -> None:
        """Resolve the capability-typed tagged fields of ``record``."""
        if record.name and not FieldIntrospector.is_record_type(record.value_type):
            return

        owner = record.value_type
        for spec, directive in self._tagged_fields(record):
            field_name = spec.name
            field_type = spec.declared_type

            if not FieldIntrospector.is_capability_type(field_type):
                continue

            # A capability cannot be instantiated.
            if directive.private:
                raise UnsupportedFieldKindError(
                    "found private inject tag on capability field", field_name, owner
                )

            # Named fields were assigned by the explicit pass, possibly with a
            # falsy value such as False or 0.
            if field_name in record.fields:
                continue
            if not FieldIntrospector.is_zero(getattr(record.value, field_name, None)):
                continue

            if directive.name:
                raise AssertionError(f"unhandled named instance with name {directive.name}")

            candidates = [
                existing
                for existing in self._graph.unnamed_records()
                if not existing.private and FieldIntrospector.satisfies(existing.value, field_type)
            ]
            if not candidates:
                raise NoAssignableCapabilityError(field_name, owner)
            if len(candidates) > 1:
                raise AmbiguousCapabilityError(candidates[0], candidates[1], field_name, owner)

            found = candidates[0]
            setattr(record.value, field_name, found.value)
            self._logger.debug(
                "assigned existing %s to capability field %s in %s", found, field_name, record
            )
            record.add_dep(field_name, found)
