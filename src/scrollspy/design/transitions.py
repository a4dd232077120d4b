"""Typed detector transitions.

The controller diffs the previous and current tick and turns the result into
zero or more messages; how they reach the host (event bus, Qt signals,
direct callbacks) is decided elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Sequence, Union

__all__ = [
    "ActiveChanged",
    "SectionEntered",
    "SectionLeft",
    "ScrollStarted",
    "ScrollEnded",
    "Transition",
    "diff_active",
    "diff_viewport",
]


@dataclass(frozen=True)
class ActiveChanged:
    new_id: Optional[str]
    prev_id: Optional[str]
    kind: str = "active_changed"


@dataclass(frozen=True)
class SectionEntered:
    id: str
    kind: str = "section_entered"


@dataclass(frozen=True)
class SectionLeft:
    id: str
    kind: str = "section_left"


@dataclass(frozen=True)
class ScrollStarted:
    kind: str = "scroll_started"


@dataclass(frozen=True)
class ScrollEnded:
    kind: str = "scroll_ended"


Transition = Union[ActiveChanged, SectionEntered, SectionLeft, ScrollStarted, ScrollEnded]


def diff_active(prev_id: Optional[str], new_id: Optional[str]) -> List[Transition]:
    if prev_id == new_id:
        return []
    return [ActiveChanged(new_id=new_id, prev_id=prev_id)]


def diff_viewport(
    prev_in_view: AbstractSet[str],
    current_in_view: AbstractSet[str],
    order: Sequence[str],
) -> List[Transition]:
    """Enter/leave messages, entered first, each group in tracked order."""
    out: List[Transition] = []
    rank = {sid: i for i, sid in enumerate(order)}

    def _ordered(ids: AbstractSet[str]) -> List[str]:
        return sorted(ids, key=lambda sid: (rank.get(sid, len(rank)), sid))

    out.extend(SectionEntered(sid) for sid in _ordered(current_in_view - prev_in_view))
    out.extend(SectionLeft(sid) for sid in _ordered(prev_in_view - current_in_view))
    return out
