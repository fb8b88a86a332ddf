"""
Canonical rendering of ``use`` trees.

A braced list such as ``use foo::{c, a, self, b};`` renders as
``foo::{self, a, b, c}``; the normalizer also reports whether the members
were already in that order in the source.
"""

import logging
from dataclasses import dataclass

from sorty.core.syntax import UseGlob, UseList, UseSimple, UseTree

logger = logging.getLogger(__name__)

SELF = "self"


@dataclass(frozen=True)
class NormalizedUseList:
    """Members of a braced ``use`` list in canonical order"""

    path: str
    members: tuple[str, ...]
    sorted: bool

    @property
    def display(self) -> str:
        body = "{" + ", ".join(self.members) + "}"
        return f"{self.path}::{body}" if self.path else body


def render_simple(path: str, rename: str | None) -> str:
    """``path`` or ``path as rename`` when the bound name differs"""
    if rename is None or path.rsplit("::", 1)[-1] == rename:
        return path
    return f"{path} as {rename}"


def _is_self_binding(member: str) -> bool:
    return member == SELF or member.startswith(f"{SELF} as ")


def _member_order(member: str) -> tuple[bool, str]:
    # `self` comes first in a list of use items
    return not _is_self_binding(member), member


def render_member(tree: UseTree) -> tuple[str, bool]:
    """Render one list member; the flag is False when a nested list is unsorted"""
    match tree:
        case UseSimple(path=path, rename=rename):
            return render_simple(path, rename), True
        case UseGlob(path=path):
            return (f"{path}::*" if path else "*"), True
        case UseList():
            nested = normalize_use_list(tree)
            return nested.display, nested.sorted


def normalize_use_list(tree: UseList) -> NormalizedUseList:
    """Sort the members of a braced list, ``self`` pinned to the front"""
    rendered = [render_member(member) for member in tree.members]
    old_members = [text for text, _ in rendered]
    new_members = sorted(old_members, key=_member_order)

    in_order = old_members == new_members and all(ok for _, ok in rendered)
    if not in_order:
        logger.debug(f"Unsorted use list under {tree.path or '<root>'}: {old_members}")
    return NormalizedUseList(tree.path, tuple(new_members), in_order)
