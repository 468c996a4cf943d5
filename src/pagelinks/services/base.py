"""BaseService — abstract foundation for all pagelinks services.

Every service receives the :class:`GraphStore` at construction time and
performs all graph access through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagelinks.infrastructure.graph.store import GraphStore


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class GraphService(BaseService):
            def create_page(self, name: str) -> ServiceResult:
                if name in self._store:
                    ...
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store
