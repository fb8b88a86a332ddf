"""
Canonical ordering of declaration sequences.

Declarations are ordered by name with a three-tier bias:
1. ``#[macro_use]`` declarations first, their macros are visible to
   everything declared after them
2. ordinary declarations
3. ``pub`` declarations last
Names compare by code point (no locale or case folding). Sorting is stable.
"""

import logging
from dataclasses import dataclass

from sorty.core.attributes import is_macro_use_prefix, is_public_prefix
from sorty.core.classifier import DeclarationRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Divergence:
    """First position where a sequence departs from its canonical order"""

    index: int
    original: tuple[DeclarationRecord, ...]
    canonical: tuple[DeclarationRecord, ...]


def sort_key(record: DeclarationRecord) -> tuple[int, int, str]:
    """(macro tier, visibility tier, name)"""
    prefix = record.attribute_prefix
    return (
        0 if is_macro_use_prefix(prefix) else 1,
        1 if is_public_prefix(prefix) else 0,
        record.key_name,
    )


def canonical_order(
    records: list[DeclarationRecord] | tuple[DeclarationRecord, ...],
) -> tuple[DeclarationRecord, ...]:
    return tuple(sorted(records, key=sort_key))


def find_divergence(
    records: list[DeclarationRecord] | tuple[DeclarationRecord, ...],
) -> Divergence | None:
    """First out-of-place declaration, or None if the sequence is canonical

    A declaration whose own content is unsorted (``force_warn``) counts as a
    divergence even when it sits in the right place.
    """
    original = tuple(records)
    canonical = canonical_order(original)
    for index, (old, new) in enumerate(zip(original, canonical)):
        if old.display_name != new.display_name or new.force_warn:
            logger.debug(
                f"Divergence at {index}: found {old.display_name!r}, "
                f"expected {new.display_name!r}"
            )
            return Divergence(index, original, canonical)
    return None
