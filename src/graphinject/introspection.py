"""
Runtime introspection of record types and the values assigned to them.
"""

from __future__ import annotations

import inspect
import re
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Union, get_args, get_origin, get_type_hints

from .errors import AnnotationResolutionError
from .model.directive import Tag

_ZERO_SCALARS = (bool, int, float, complex, str, bytes)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass(frozen=True)
class FieldSpec:
    """A single annotated attribute of a record type."""

    name: str
    declared_type: Any
    tag: str | None
    anonymous: bool


def snake_case(name: str) -> str:
    """Convert ``HttpClient`` to ``http_client``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class FieldIntrospector:
    """Extracts field information and classifies types for the resolver."""

    @staticmethod
    def fields(cls: type) -> list[FieldSpec]:
        """
        List the annotated attributes of ``cls`` in declaration order.

        Inherited attributes come first. ``ClassVar`` annotations are skipped.

        Raises:
            AnnotationResolutionError: If an annotation cannot be evaluated
        """
        try:
            hints = get_type_hints(cls, include_extras=True)
        except (NameError, TypeError) as e:
            raise AnnotationResolutionError(cls, e) from e

        specs: list[FieldSpec] = []
        for name, hint in hints.items():
            if get_origin(hint) is ClassVar:
                continue
            declared_type, tags = FieldIntrospector.unwrap(hint)
            specs.append(
                FieldSpec(
                    name=name,
                    declared_type=declared_type,
                    tag=" ".join(tags) if tags else None,
                    anonymous=FieldIntrospector._is_anonymous(name, declared_type),
                )
            )
        return specs

    @staticmethod
    def unwrap(hint: Any) -> tuple[Any, list[str]]:
        """Strip ``Annotated`` and ``Optional`` from a hint, collecting Tag markers."""
        tags: list[str] = []
        current = hint
        while True:
            origin = get_origin(current)
            if origin is Annotated:
                tags.extend(meta.raw for meta in current.__metadata__ if isinstance(meta, Tag))
                current = get_args(current)[0]
                continue
            if origin is Union or origin is types.UnionType:
                args = get_args(current)
                remaining = [arg for arg in args if arg is not type(None)]
                if len(remaining) == 1 and len(remaining) < len(args):
                    current = remaining[0]
                    continue
            return current, tags

    @staticmethod
    def _is_anonymous(name: str, declared_type: Any) -> bool:
        type_name = getattr(declared_type, "__name__", None)
        if not isinstance(type_name, str):
            return False
        return name == type_name or name == snake_case(type_name)

    @staticmethod
    def is_settable(cls: type, name: str) -> bool:
        """Check whether the graph may assign ``name`` on instances of ``cls``."""
        if name.startswith("_"):
            return False
        params = getattr(cls, "__dataclass_params__", None)
        if params is not None and params.frozen:
            return False
        attr = inspect.getattr_static(cls, name, None)
        if isinstance(attr, property) and attr.fset is None:
            return False
        return True

    @staticmethod
    def is_capability_type(target_type: Any) -> bool:
        """Protocols, abstract classes, ``Any`` and ``object`` describe behavior only."""
        if target_type is Any or target_type is object:
            return True
        if not inspect.isclass(target_type) or issubclass(target_type, Mapping):
            return False
        return bool(getattr(target_type, "_is_protocol", False)) or inspect.isabstract(target_type)

    @staticmethod
    def is_record_type(target_type: Any) -> bool:
        """A concrete user class whose instances carry fields."""
        return (
            inspect.isclass(target_type)
            and target_type.__module__ != "builtins"
            and not issubclass(target_type, (Mapping, Enum, type))
            and not FieldIntrospector.is_capability_type(target_type)
        )

    @staticmethod
    def is_mapping_type(target_type: Any) -> bool:
        origin = get_origin(target_type) or target_type
        return inspect.isclass(origin) and issubclass(origin, Mapping)

    @staticmethod
    def new_mapping(target_type: Any) -> Mapping[Any, Any]:
        """Create an empty mapping for a mapping-typed field."""
        origin = get_origin(target_type) or target_type
        if inspect.isabstract(origin):
            return {}
        return typing.cast(Mapping[Any, Any], origin())

    @staticmethod
    def is_zero(value: Any) -> bool:
        """None and falsy scalars count as unset."""
        if value is None:
            return True
        return isinstance(value, _ZERO_SCALARS) and not value

    @staticmethod
    def protocol_members(protocol: type) -> frozenset[str]:
        getter = getattr(typing, "get_protocol_members", None)
        if getter is not None:
            return frozenset(getter(protocol))
        return frozenset(getattr(protocol, "__protocol_attrs__", ()))

    @staticmethod
    def satisfies(value: Any, capability: Any) -> bool:
        """
        Check whether ``value`` offers the behavior described by ``capability``.

        Protocols match structurally: every protocol member must be present on
        the value. Abstract classes match through ``isinstance``, which
        includes virtual subclasses registered with the ABC.
        """
        if capability is Any or capability is object:
            return True
        if getattr(capability, "_is_protocol", False):
            if capability in type(value).__mro__:
                return True
            return all(
                hasattr(value, member) for member in FieldIntrospector.protocol_members(capability)
            )
        return isinstance(value, capability)

    @staticmethod
    def is_assignable(value: Any, target_type: Any) -> bool:
        """Check whether ``value`` may be stored in a field declared as ``target_type``."""
        if target_type is Any or target_type is object:
            return True
        origin = get_origin(target_type)
        if origin is Union or origin is types.UnionType:
            return any(FieldIntrospector.is_assignable(value, arg) for arg in get_args(target_type))
        if origin is Literal:
            return value in get_args(target_type)
        if FieldIntrospector.is_capability_type(target_type):
            return FieldIntrospector.satisfies(value, target_type)
        if origin is not None and inspect.isclass(origin):
            return isinstance(value, origin)
        if inspect.isclass(target_type):
            return isinstance(value, target_type)
        # TypeVars, NewTypes and similar carry no runtime check
        return True
