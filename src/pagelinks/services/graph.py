"""GraphService — page and link construction over the GraphStore.

Single-item operations (``create_page``, ``find_page``, ``add_link``) map
one-to-one onto store operations. Batch operations (``add_pages``,
``add_links``) back the ``@addPages`` / ``@addLinks`` verbs: every item is
attempted, failures are collected, and one result describes the batch.

INVARIANT: A failed operation leaves the store unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pagelinks.services.base import BaseService
from pagelinks.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def _not_found(op: str, name: str, **detail: Any) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"Page '{name}' not found",
        name=name,
        **detail,
    )


class GraphService(BaseService):
    """Handles page creation, lookup, and linking."""

    # ------------------------------------------------------------------
    # Single-item operations
    # ------------------------------------------------------------------

    def create_page(self, name: str) -> ServiceResult:
        """Create a page called *name* with no outgoing links."""
        if name in self._store:
            return ServiceResult.failure(
                "create_page",
                ErrorCode.DUPLICATE_NAME,
                f"Page '{name}' already exists",
                name=name,
            )
        page = self._store.add_page(name)
        return ServiceResult(ok=True, op="create_page", data={"name": name, "id": page.id})

    def find_page(self, name: str) -> ServiceResult:
        """Look up a page by name."""
        page = self._store.get(name)
        if page is None:
            return _not_found("find_page", name)
        return ServiceResult(
            ok=True,
            op="find_page",
            data={
                "name": page.name,
                "id": page.id,
                "outlinks": self._store.outlinks(name),
            },
        )

    def add_link(self, source: str, dest: str) -> ServiceResult:
        """Link *source* to *dest*. Both pages must exist."""
        src_page = self._store.get(source)
        dest_page = self._store.get(dest)
        if src_page is None:
            return _not_found("add_link", source, source=source, dest=dest)
        if dest_page is None:
            return _not_found("add_link", dest, source=source, dest=dest)
        self._store.add_edge(src_page, dest_page)
        return ServiceResult(ok=True, op="add_link", data={"source": source, "dest": dest})

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def add_pages(self, names: Sequence[str]) -> ServiceResult:
        """Create every page in *names*, skipping (and reporting) duplicates.

        A duplicate later in the same batch is reported too: the first
        occurrence creates the page, the second fails.
        """
        created: list[str] = []
        duplicates: list[str] = []
        for name in names:
            result = self.create_page(name)
            if result.ok:
                created.append(name)
            else:
                duplicates.append(name)

        if duplicates:
            logger.debug("Rejected duplicate pages: %s", duplicates)
            if len(duplicates) == 1:
                message = f"Page '{duplicates[0]}' already exists"
            else:
                message = "Pages already exist: " + ", ".join(duplicates)
            return ServiceResult.failure(
                "add_pages",
                ErrorCode.DUPLICATE_NAME,
                message,
                duplicates=duplicates,
                created=created,
                failures=len(duplicates),
            )
        return ServiceResult(
            ok=True,
            op="add_pages",
            data={"count": len(created), "created": created},
        )

    def add_links(self, source: str, dests: Sequence[str]) -> ServiceResult:
        """Link *source* to each of *dests* in order.

        The source is resolved once. Missing destinations are reported
        and skipped; the remaining destinations are still linked. A
        missing source fails every destination.
        """
        src_page = self._store.get(source)
        if src_page is None:
            return _not_found(
                "add_links",
                source,
                source=source,
                linked=[],
                missing=[source],
                failures=len(dests),
            )

        linked: list[str] = []
        missing: list[str] = []
        for dest in dests:
            dest_page = self._store.get(dest)
            if dest_page is None:
                missing.append(dest)
                continue
            self._store.add_edge(src_page, dest_page)
            linked.append(dest)

        if missing:
            if len(missing) == 1:
                message = f"Page '{missing[0]}' not found"
            else:
                message = "Pages not found: " + ", ".join(missing)
            return ServiceResult.failure(
                "add_links",
                ErrorCode.NOT_FOUND,
                message,
                source=source,
                linked=linked,
                missing=missing,
                failures=len(missing),
            )
        return ServiceResult(
            ok=True,
            op="add_links",
            data={"source": source, "count": len(linked), "linked": linked},
        )

    # ------------------------------------------------------------------
    # stats
    # ------------------------------------------------------------------

    def stats(self) -> ServiceResult:
        """Report page and link counts."""
        return ServiceResult(
            ok=True,
            op="stats",
            data={
                "pages": self._store.page_count,
                "links": self._store.link_count,
            },
        )
