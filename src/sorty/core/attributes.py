"""
Attribute normalization.

Turns the attributes attached to a declaration into a deterministic text
prefix such as::

    #[macro_use]
    #[cfg(all(feature = "a", unix))]
    pub

The prefix is used both for comparing declarations and for rendering the
suggested replacement, so it never depends on the source order of the
attributes or of nested attribute arguments.
"""

import logging

from sorty.core.syntax import (
    Attribute,
    Literal,
    LitKind,
    MetaItem,
    MetaList,
    MetaNameValue,
    MetaWord,
    Visibility,
)

logger = logging.getLogger(__name__)

DOC_ATTRIBUTE = "doc"
MACRO_USE = "#[macro_use]"
PUB_MARKER = "pub "


class MalformedAttributeError(ValueError):
    """An attribute holds a literal the normalizer does not know how to render"""


def render_literal(literal: Literal) -> str:
    """Render a literal appearing inside an attribute"""
    if literal.kind != LitKind.STR:
        raise MalformedAttributeError(
            f"unexpected {literal.kind.value} literal for meta item: {literal.value!r}"
        )
    return literal.value


def render_meta(meta: MetaItem) -> str:
    """Render a meta item, sorting the arguments of list items"""
    match meta:
        case MetaWord(name=name):
            return name
        case MetaNameValue(name=name, value=value):
            return f'{name} = "{render_literal(value)}"'
        case MetaList(name=name, items=items):
            rendered = sorted(_render_nested(item) for item in items)
            return f"{name}({', '.join(rendered)})"


def _render_nested(item: MetaItem | Literal) -> str:
    match item:
        case Literal():
            return render_literal(item)
        case _:
            return render_meta(item)


def _is_doc(meta: MetaItem) -> bool:
    match meta:
        case MetaNameValue(name=name):
            return name == DOC_ATTRIBUTE
    return False


def _attribute_order(entry: str) -> tuple[bool, str]:
    # macro_use always goes first, it changes how later items are resolved
    return entry != MACRO_USE, entry


def normalize_attributes(attrs: list[Attribute] | tuple[Attribute, ...]) -> list[str]:
    """Rendered ``#[...]`` entries, doc comments dropped, in canonical order"""
    entries = [
        f"#[{render_meta(attr.meta)}]"
        for attr in attrs
        if attr.meta is not None and not attr.is_inner and not _is_doc(attr.meta)
    ]
    return sorted(entries, key=_attribute_order)


def attribute_prefix(
    attrs: list[Attribute] | tuple[Attribute, ...],
    vis: Visibility,
    applies_visibility: bool,
) -> str:
    """Text placed in front of the declaration keyword when rendering it

    Non-empty attribute blocks end with a newline. When ``applies_visibility``
    is set and the declaration is public, the prefix ends with ``"pub "``.
    """
    attr_string = "\n".join(normalize_attributes(attrs))
    if applies_visibility and vis == Visibility.PUBLIC:
        return f"{attr_string}\n{PUB_MARKER}" if attr_string else PUB_MARKER
    return f"{attr_string}\n" if attr_string else ""


def is_public_prefix(prefix: str) -> bool:
    return prefix.endswith(PUB_MARKER)


def is_macro_use_prefix(prefix: str) -> bool:
    return prefix.startswith(MACRO_USE)
