"""
Exceptions raised while providing records to a Graph and populating it.
"""

from __future__ import annotations

from typing import Any


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__qualname__", None) or str(target_type)


class InjectionError(Exception):
    """Base class for every error raised by graphinject."""


class MalformedDirectiveError(InjectionError):
    """Raised when a field tag cannot be parsed."""

    def __init__(self, tag: str, reason: str, field: str | None = None, owner: type | None = None):
        self.tag = tag
        self.reason = reason
        self.field = field
        self.owner = owner
        msg = f"unexpected tag format `{tag}`: {reason}"
        if field is not None:
            msg += f" (field {field} in type {_type_name(owner)})"
        super().__init__(msg)


class PreFilledDependencyMapError(InjectionError):
    """Raised when a record is provided with its dependency map already filled."""

    def __init__(self, record: Any):
        self.record = record
        super().__init__(f"fields were specified on object {record} when it was provided")


class InvalidRecordError(InjectionError):
    """Raised when an unnamed value is not an instance of a record type."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"expected unnamed object value to be an instance of a record type "
            f"but got type {_type_name(type(value))} with value {value!r}"
        )


class DuplicateConcreteTypeError(InjectionError):
    """Raised when two non-private unnamed instances share a concrete type."""

    def __init__(self, concrete_type: type):
        self.concrete_type = concrete_type
        super().__init__(
            f"provided two unnamed instances of type {concrete_type.__module__}.{concrete_type.__qualname__}"
        )


class DuplicateNameError(InjectionError):
    """Raised when two records are provided under the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"provided two instances named {name}")


class FieldError(InjectionError):
    """An error tied to a single field of a record type."""

    def __init__(self, message: str, field: str, owner: type):
        self.field = field
        self.owner = owner
        super().__init__(f"{message} {field} in type {_type_name(owner)}")


class NotSettableFieldError(FieldError):
    def __init__(self, field: str, owner: type):
        super().__init__("inject requested on unassignable field", field, owner)


class InvalidInlineUsageError(FieldError):
    def __init__(self, reason: str, field: str, owner: type):
        self.reason = reason
        super().__init__(reason, field, owner)


class UnsupportedFieldKindError(FieldError):
    def __init__(self, reason: str, field: str, owner: type):
        self.reason = reason
        super().__init__(reason, field, owner)


class MissingNamedDependencyError(FieldError):
    """Raised when a named directive refers to a name that was never provided."""

    def __init__(self, name: str, field: str, owner: type):
        self.name = name
        super().__init__(f"did not find object named {name} required by field", field, owner)


class TypeMismatchError(FieldError):
    """Raised when a named record cannot be assigned to the field asking for it."""

    def __init__(self, name: str, field_type: Any, value_type: type, field: str, owner: type):
        self.name = name
        self.field_type = field_type
        self.value_type = value_type
        super().__init__(
            f"object named {name} of type {_type_name(value_type)} is not assignable "
            f"to {_type_name(field_type)} field",
            field,
            owner,
        )


class NoAssignableCapabilityError(FieldError):
    def __init__(self, field: str, owner: type):
        super().__init__("found no assignable value for field", field, owner)


class AmbiguousDependencyError(FieldError):
    """Raised when more than one unnamed record could satisfy a field."""

    def __init__(self, first: Any, second: Any, field: str, owner: type):
        self.first = first
        self.second = second
        super().__init__(
            f"found two assignable values ({first} with value {first.value!r} and "
            f"{second} with value {second.value!r}) for field",
            field,
            owner,
        )


class AmbiguousCapabilityError(AmbiguousDependencyError):
    """Raised when more than one unnamed record satisfies a capability field."""


class InstantiationError(FieldError):
    """Raised when a dependency cannot be created without constructor arguments."""

    def __init__(self, target_type: type, cause: Exception, field: str, owner: type):
        self.target_type = target_type
        self.cause = cause
        super().__init__(
            f"could not create {_type_name(target_type)} ({cause}) for field", field, owner
        )


class AnnotationResolutionError(InjectionError):
    """Raised when the annotations of a record type cannot be evaluated."""

    def __init__(self, owner: type, cause: Exception):
        self.owner = owner
        self.cause = cause
        super().__init__(f"could not resolve annotations of type {_type_name(owner)}: {cause}")
