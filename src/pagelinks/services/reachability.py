"""Reachability — depth-first search between two pages.

The search keeps its visited marks in a set owned by the query, not on the
pages, so queries never leave traversal state behind and read-only
queries can run concurrently against the same store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pagelinks.services.base import BaseService
from pagelinks.services.result import ErrorCode, ServiceResult
from pagelinks.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pagelinks.domain.pages import Page, PageId
    from pagelinks.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)


def is_reachable(
    store: GraphStore,
    source: Page,
    target: Page,
    *,
    visited: set[PageId] | None = None,
) -> bool:
    """Return True if a directed path (possibly empty) leads from *source* to *target*.

    Pages are explored depth-first, following each page's links in link
    order; the first path found ends the search. A page is matched against
    the target before it is checked for a visit, so ``source is target``
    is always reachable.

    The traversal uses an explicit stack of link iterators rather than
    recursion, so chain length is not bounded by the recursion limit.

    Args:
        store: The store both pages belong to.
        source: Page to start from.
        target: Page to look for.
        visited: Optional set to collect visited page ids into. A fresh set
            is used when omitted.
    """
    if visited is None:
        visited = set()
    if source.id == target.id:
        return True
    visited.add(source.id)

    stack: list[Iterator[PageId]] = [iter(source.edges)]
    while stack:
        dest = next(stack[-1], None)
        if dest is None:
            stack.pop()
            continue
        if dest == target.id:
            return True
        if dest in visited:
            continue
        visited.add(dest)
        stack.append(iter(store.page(dest).edges))
    return False


class ReachabilityService(BaseService):
    """Answers ``@isConnected`` queries."""

    @traced
    def is_connected(self, source: str, target: str) -> ServiceResult:
        """Check whether *target* is reachable from *source*.

        Both names must resolve to existing pages; otherwise the query is
        not attempted and a NOT_FOUND result is returned.
        """
        missing = [name for name in (source, target) if name not in self._store]
        if missing:
            if len(missing) == 1:
                message = f"Page '{missing[0]}' not found"
            else:
                message = f"Pages '{source}' and '{target}' not found"
            return ServiceResult.failure(
                "is_connected",
                ErrorCode.NOT_FOUND,
                message,
                source=source,
                target=target,
                missing=missing,
            )

        visited: set[PageId] = set()
        with self._store.reading(), trace_span("dfs") as span:
            src_page = self._store.get(source)
            dest_page = self._store.get(target)
            assert src_page is not None and dest_page is not None
            connected = is_reachable(self._store, src_page, dest_page, visited=visited)
            if span:
                span.annotate("visited", len(visited))

        logger.debug(
            "Query %s -> %s: %s (%d pages visited)",
            source,
            target,
            connected,
            len(visited),
        )
        return ServiceResult(
            ok=True,
            op="is_connected",
            data={"source": source, "target": target, "connected": connected},
        )
