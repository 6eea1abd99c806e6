"""
Model subpackage containing the records and directives the graph works with.
"""

from .directive import (
    DEFAULT_TAG_KEY,
    INJECT_INLINE,
    INJECT_ONLY,
    INJECT_PRIVATE,
    Directive,
    Tag,
    inject,
    parse_directive,
)
from .record import Record

__all__ = [
    "DEFAULT_TAG_KEY",
    "INJECT_INLINE",
    "INJECT_ONLY",
    "INJECT_PRIVATE",
    "Directive",
    "Record",
    "Tag",
    "inject",
    "parse_directive",
]
