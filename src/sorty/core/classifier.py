"""
Declaration classification.

Walks the direct children of one module and sorts the ones this lint cares
about into three independent sequences: crate declarations, out-of-line
module declarations and use statements.
"""

import logging
from dataclasses import dataclass

from sorty.core.attributes import attribute_prefix
from sorty.core.source_map import SourceMap
from sorty.core.syntax import (
    ExternCrate,
    Item,
    ModDecl,
    Module,
    OtherItem,
    Span,
    UseDecl,
    UseGlob,
    UseList,
    UseSimple,
)
from sorty.core.use_lists import normalize_use_list, render_simple

logger = logging.getLogger(__name__)

# Crate the compiler always provides; declaring it is never an ordering concern
STD_CRATE = "std"
STD_GLOB_PREFIX = "std::"


@dataclass(frozen=True)
class DeclarationRecord:
    """One declaration as seen by the order checker"""

    display_name: str
    attribute_prefix: str
    span: Span
    force_warn: bool = False
    # name used for ordering when it differs from the rendered one
    sort_name: str | None = None

    @property
    def key_name(self) -> str:
        return self.display_name if self.sort_name is None else self.sort_name


@dataclass(frozen=True)
class Declarations:
    extern_crates: tuple[DeclarationRecord, ...] = ()
    mods: tuple[DeclarationRecord, ...] = ()
    uses: tuple[DeclarationRecord, ...] = ()


def classify_item(item: Item, source_map: SourceMap) -> tuple[str, DeclarationRecord] | None:
    """Category and record for one item, or None when the item is not tracked"""
    match item.kind:
        case ExternCrate(name=name, rename=rename) as crate:
            if crate.bound_name == STD_CRATE:
                return None
            # sorted by the name later code refers to, i.e. after renaming
            record = DeclarationRecord(
                display_name=f"{name} as {rename}" if rename else name,
                attribute_prefix=attribute_prefix(item.attrs, item.vis, False),
                span=item.span,
                sort_name=crate.bound_name,
            )
            return "extern_crates", record

        case ModDecl(inner=inner, name=name):
            invoked_in = source_map.span_to_filename(item.span)
            declared_in = source_map.span_to_filename(inner)
            if declared_in == invoked_in:
                logger.debug(f"Skipping inline module {name}")
                return None
            record = DeclarationRecord(
                display_name=name,
                attribute_prefix=attribute_prefix(item.attrs, item.vis, True),
                span=item.span,
            )
            return "mods", record

        case UseDecl(tree=UseSimple(path=path, rename=rename)):
            display, force_warn = render_simple(path, rename), False
        case UseDecl(tree=UseList() as tree):
            normalized = normalize_use_list(tree)
            display, force_warn = normalized.display, not normalized.sorted
        case UseDecl(tree=UseGlob(path=path)):
            display, force_warn = (f"{path}::*" if path else "*"), False
            # prelude globs are injected by the compiler, not written by users
            if display.startswith(STD_GLOB_PREFIX):
                return None
        case OtherItem():
            return None

    record = DeclarationRecord(
        display_name=display,
        attribute_prefix=attribute_prefix(item.attrs, item.vis, True),
        span=item.span,
        force_warn=force_warn,
    )
    return "uses", record


def classify(module: Module, source_map: SourceMap) -> Declarations:
    """Bucket the direct children of ``module`` into the three sequences"""
    buckets: dict[str, list[DeclarationRecord]] = {
        "extern_crates": [],
        "mods": [],
        "uses": [],
    }
    for item in module.items:
        classified = classify_item(item, source_map)
        if classified is not None:
            category, record = classified
            buckets[category].append(record)

    return Declarations(
        extern_crates=tuple(buckets["extern_crates"]),
        mods=tuple(buckets["mods"]),
        uses=tuple(buckets["uses"]),
    )
