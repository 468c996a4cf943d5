"""GraphStore — in-memory arena of pages and their outgoing links.

Pages live in a list indexed by :data:`PageId`; a name index maps each
name to its id. Links are stored as destination ids on the source page,
so the store is the sole owner of every page and nothing is ever freed
individually.

INVARIANT: Page names are unique. Links only join pages in this store.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from pagelinks.domain.pages import Page, PageId

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class GraphStore:
    """Owns all pages and links for the lifetime of a run.

    Mutations and reads that must see a consistent graph (reachability
    queries) are serialized on a single re-entrant lock.
    """

    def __init__(self) -> None:
        self._pages: list[Page] = []
        self._index: dict[str, PageId] = {}
        self._link_count = 0
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def get(self, name: str) -> Page | None:
        """Return the page called *name*, or None if absent."""
        page_id = self._index.get(name)
        if page_id is None:
            return None
        return self._pages[page_id]

    def page(self, page_id: PageId) -> Page:
        """Return the page with id *page_id*."""
        return self._pages[page_id]

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def link_count(self) -> int:
        return self._link_count

    def outlinks(self, name: str) -> list[str]:
        """Destination names of *name*'s links, in link order.

        Returns an empty list for an unknown page.
        """
        page = self.get(name)
        if page is None:
            return []
        return [self._pages[dest].name for dest in page.edges]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_page(self, name: str) -> Page:
        """Create and register a page with no outgoing links.

        Raises:
            ValueError: if a page called *name* already exists. Callers are
                expected to check membership first.
        """
        with self._lock:
            if name in self._index:
                msg = f"Page '{name}' already exists"
                raise ValueError(msg)
            page = Page(id=len(self._pages), name=name)
            self._pages.append(page)
            self._index[name] = page.id
        logger.debug("Added page %s (id=%d)", name, page.id)
        return page

    def add_edge(self, source: Page, dest: Page) -> None:
        """Append a link from *source* to *dest*.

        Both pages must belong to this store. Duplicate links are kept.
        """
        with self._lock:
            if not (self._owns(source) and self._owns(dest)):
                msg = "Both pages must belong to this store"
                raise ValueError(msg)
            source.edges.append(dest.id)
            self._link_count += 1
        logger.debug("Added link %s -> %s", source.name, dest.name)

    def _owns(self, page: Page) -> bool:
        return page.id < len(self._pages) and self._pages[page.id] is page

    @contextmanager
    def reading(self) -> Iterator[GraphStore]:
        """Hold the store lock for a read that must not observe mutations."""
        with self._lock:
            yield self
