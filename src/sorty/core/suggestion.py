"""
Rendering of the replacement suggested for an unsorted declaration group.
"""

from dataclasses import dataclass

from sorty.core.classifier import DeclarationRecord
from sorty.core.ordering import Divergence
from sorty.core.syntax import Span


@dataclass(frozen=True)
class Suggestion:
    span: Span
    message: str
    text: str


def render_declaration(record: DeclarationRecord, keyword: str) -> str:
    if keyword:
        return f"{record.attribute_prefix}{keyword} {record.display_name};"
    return f"{record.attribute_prefix}{record.display_name};"


def build_suggestion(divergence: Divergence, kind: str, keyword: str) -> Suggestion:
    """Suggest the canonical tail of the group, from the first divergence on

    The span runs from the first misplaced declaration to the end of the last
    one, so the whole tail can be replaced in one edit.
    """
    tail = divergence.canonical[divergence.index :]
    lines = [render_declaration(record, keyword) for record in tail]

    start = divergence.original[divergence.index].span
    end = divergence.original[-1].span
    return Suggestion(
        span=start.to(end),
        message=f"{kind} should be in alphabetical order!",
        text="Try this...\n\n{}\n".format("\n".join(lines)),
    )
