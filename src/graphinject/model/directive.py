"""
Tag markers and the injection directives parsed from them.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..structtag import extract, quote

DEFAULT_TAG_KEY = "inject"


@dataclass(frozen=True)
class Tag:
    """
    Field tag attached to an annotation.

    Example:
        ```python
        class Service:
            db: Annotated[Database | None, Tag('inject:""')] = None
        ```
    """

    raw: str

    def __repr__(self) -> str:
        return f"Tag({self.raw!r})"


def inject(value: str = "", key: str = DEFAULT_TAG_KEY) -> Tag:
    """
    Build a Tag carrying an injection directive.

    ``inject()`` is a bare injection, ``inject("private")`` requests a private
    instance, ``inject("inline")`` traverses into the field and any other
    value looks up the record provided under that name.
    """
    return Tag(f"{key}:{quote(value)}")


@dataclass(frozen=True)
class Directive:
    """How a single field should be resolved."""

    name: str = ""
    inline: bool = False
    private: bool = False

    @property
    def is_bare(self) -> bool:
        return not (self.name or self.inline or self.private)

    def tag(self, key: str = DEFAULT_TAG_KEY) -> Tag:
        if self.inline:
            return inject("inline", key)
        if self.private:
            return inject("private", key)
        return inject(self.name, key)

    def __str__(self) -> str:
        if self.inline:
            return "inline"
        if self.private:
            return "private"
        return self.name or "bare"


INJECT_ONLY = Directive()
INJECT_PRIVATE = Directive(private=True)
INJECT_INLINE = Directive(inline=True)


def parse_directive(raw: str | None, key: str = DEFAULT_TAG_KEY) -> Directive | None:
    """
    Parse the directive stored under ``key`` in a raw tag.

    Returns None when the tag does not mention ``key``, meaning the field is
    not managed by the graph.

    Raises:
        MalformedDirectiveError: If the tag is malformed
    """
    if raw is None:
        return None
    found, value = extract(key, raw)
    if not found:
        return None
    if value == "":
        return INJECT_ONLY
    if value == "inline":
        return INJECT_INLINE
    if value == "private":
        return INJECT_PRIVATE
    return Directive(name=value)
