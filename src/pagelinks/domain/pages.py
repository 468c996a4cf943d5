"""Page type for the directed page graph.

Pages are addressed by a stable integer id assigned by the store at
creation time. Outgoing links are kept on the source page as a list of
destination ids, in insertion order.

INVARIANT: A page's id and name never change once created.
"""

from __future__ import annotations

from dataclasses import dataclass, field

PageId = int


@dataclass(frozen=True, eq=False, slots=True)
class Page:
    """A uniquely named node in the page graph.

    ``edges`` may repeat a destination (multi-edges) and may contain
    the page's own id (self-loops).
    """

    id: PageId
    name: str
    edges: list[PageId] = field(default_factory=list)
