"""
Syntax tree for the top level of a Rust module.

Only the shapes the declaration checks care about are modelled in detail:
attributes, visibility, ``extern crate``, ``mod`` and ``use`` items. Every
other item is kept as an opaque ``OtherItem`` so that positions are preserved.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Span:
    """Character range ``[lo, hi)`` inside one source file"""

    lo: int
    hi: int
    file: str

    def to(self, other: "Span") -> "Span":
        """Span from the start of this one to the end of ``other``"""
        return Span(self.lo, other.hi, self.file)


# ============================================================
# Attributes
# ============================================================


class LitKind(Enum):
    """Kinds of literal tokens that may appear inside attributes"""

    STR = "str"
    BYTE_STR = "byte_str"
    CHAR = "char"
    BYTE = "byte"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


@dataclass(frozen=True)
class Literal:
    kind: LitKind
    value: str


@dataclass(frozen=True)
class MetaWord:
    """``#[name]``"""

    name: str


@dataclass(frozen=True)
class MetaNameValue:
    """``#[name = "value"]``"""

    name: str
    value: Literal


@dataclass(frozen=True)
class MetaList:
    """``#[name(a, b = "c", d(e))]``"""

    name: str
    items: tuple["MetaItem | Literal", ...] = ()


MetaItem = MetaWord | MetaNameValue | MetaList


@dataclass(frozen=True)
class Attribute:
    # None when the attribute body is not a well-formed meta item
    meta: MetaItem | None
    span: Span
    is_inner: bool = False


class Visibility(Enum):
    INHERITED = "inherited"
    PUBLIC = "pub"
    RESTRICTED = "restricted"  # pub(crate), pub(super), pub(in path)


# ============================================================
# Use trees
# ============================================================


@dataclass(frozen=True)
class UseSimple:
    """``use a::b::c;`` or ``use a::b::c as d;``"""

    path: str
    rename: str | None = None

    @property
    def bound_name(self) -> str:
        return self.rename or self.path.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class UseGlob:
    """``use a::b::*;`` (``path`` is empty for a bare ``*`` inside a list)"""

    path: str


@dataclass(frozen=True)
class UseList:
    """``use a::b::{c, d as e, self};``"""

    path: str
    members: tuple["UseTree", ...] = ()


UseTree = UseSimple | UseGlob | UseList


# ============================================================
# Items
# ============================================================


@dataclass(frozen=True)
class ExternCrate:
    """``extern crate name;`` or ``extern crate name as rename;``"""

    name: str
    rename: str | None = None

    @property
    def bound_name(self) -> str:
        return self.rename or self.name


@dataclass(frozen=True)
class ModDecl:
    """``mod name;`` or ``mod name { ... }``

    ``inner`` spans the module contents: the braced body for inline modules,
    or the start of the resolved file for out-of-line ones.
    """

    name: str
    inner: Span
    body: "Module | None" = None


@dataclass(frozen=True)
class UseDecl:
    tree: UseTree


@dataclass(frozen=True)
class OtherItem:
    keyword: str


ItemKind = ExternCrate | ModDecl | UseDecl | OtherItem


@dataclass(frozen=True)
class Item:
    kind: ItemKind
    span: Span
    attrs: tuple[Attribute, ...] = ()
    vis: Visibility = Visibility.INHERITED


@dataclass(frozen=True)
class Module:
    """Items directly contained in one module, in source order"""

    file: str
    items: tuple[Item, ...] = ()
    inner_attrs: tuple[Attribute, ...] = ()
