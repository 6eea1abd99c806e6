"""
graphinject - populates the fields of existing object graphs.

Instances are provided to a Graph as Records. Fields annotated with an
``inject`` tag are filled in place:

- ``inject()`` reuses the one provided instance of the field's type, or
  creates one
- ``inject("private")`` always creates a fresh instance for the field
- ``inject("inline")`` traverses into the field's value without sharing it
- ``inject("name")`` uses the record provided under that name

Values assigned by hand are kept, and their own tagged fields are populated
too.
"""

from .core import Container, populate
from .errors import (
    AmbiguousCapabilityError,
    AmbiguousDependencyError,
    AnnotationResolutionError,
    DuplicateConcreteTypeError,
    DuplicateNameError,
    InjectionError,
    InstantiationError,
    InvalidInlineUsageError,
    InvalidRecordError,
    MalformedDirectiveError,
    MissingNamedDependencyError,
    NoAssignableCapabilityError,
    NotSettableFieldError,
    PreFilledDependencyMapError,
    TypeMismatchError,
    UnsupportedFieldKindError,
)
from .graph import Graph
from .model import Directive, Record, Tag, inject, parse_directive
from .structtag import extract

__all__ = [
    "AmbiguousCapabilityError",
    "AmbiguousDependencyError",
    "AnnotationResolutionError",
    "Container",
    "Directive",
    "DuplicateConcreteTypeError",
    "DuplicateNameError",
    "Graph",
    "InjectionError",
    "InstantiationError",
    "InvalidInlineUsageError",
    "InvalidRecordError",
    "MalformedDirectiveError",
    "MissingNamedDependencyError",
    "NoAssignableCapabilityError",
    "NotSettableFieldError",
    "PreFilledDependencyMapError",
    "Record",
    "Tag",
    "TypeMismatchError",
    "UnsupportedFieldKindError",
    "extract",
    "inject",
    "parse_directive",
    "populate",
]
