"""
Record - a tracked reference to one caller-owned instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class Record:
    """
    An instance tracked by a Graph.

    The graph never copies ``value``; it assigns into its fields in place.
    Records compare by identity.

    Attributes:
        value: The instance itself
        name: Optional name; named records are looked up by name only
        complete: If True the graph leaves the value's fields alone
        fields: Field name -> Record that satisfied it, filled during population
        private: If True the value is never reused for other fields
    """

    value: Any
    name: str = ""
    complete: bool = False
    fields: dict[str, Record] = field(default_factory=dict)
    private: bool = False
    created: bool = field(default=False, init=False)
    embedded: bool = field(default=False, init=False)
    value_type: type = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.value_type = type(self.value)

    def add_dep(self, field_name: str, dep: Record) -> None:
        """Record that ``field_name`` was satisfied by ``dep``."""
        self.fields[field_name] = dep

    def __str__(self) -> str:
        type_name = f"{self.value_type.__module__}.{self.value_type.__qualname__}"
        if self.name:
            return f"{type_name} named {self.name}"
        return type_name
