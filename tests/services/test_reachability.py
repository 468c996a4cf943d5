"""Tests for depth-first reachability and ReachabilityService."""

from __future__ import annotations

import pytest

from pagelinks.domain.pages import Page
from pagelinks.infrastructure.graph.store import GraphStore
from pagelinks.services.reachability import ReachabilityService, is_reachable
from pagelinks.services.telemetry import enable_telemetry


def _pages(store: GraphStore, *names: str) -> list[Page]:
    return [store.add_page(name) for name in names]


class TestIsReachable:
    def test_direct_link(self, store: GraphStore) -> None:
        a, b = _pages(store, "A", "B")
        store.add_edge(a, b)
        assert is_reachable(store, a, b) is True
        assert is_reachable(store, b, a) is False

    def test_transitive(self, chain_store: GraphStore) -> None:
        x, z = chain_store.get("X"), chain_store.get("Z")
        assert x is not None and z is not None
        assert is_reachable(chain_store, x, z) is True
        assert is_reachable(chain_store, z, x) is False

    def test_self_without_loop(self, store: GraphStore) -> None:
        (a,) = _pages(store, "A")
        assert is_reachable(store, a, a) is True

    def test_self_is_checked_before_visit(self, store: GraphStore) -> None:
        (a,) = _pages(store, "A")
        visited: set[int] = set()
        assert is_reachable(store, a, a, visited=visited) is True
        assert visited == set()

    def test_cycle_terminates(self, store: GraphStore) -> None:
        a, b, c = _pages(store, "A", "B", "C")
        store.add_edge(a, b)
        store.add_edge(b, a)
        assert is_reachable(store, a, a) is True
        assert is_reachable(store, a, c) is False

    def test_self_loop_cycle(self, store: GraphStore) -> None:
        a, b = _pages(store, "A", "B")
        store.add_edge(a, a)
        assert is_reachable(store, a, b) is False

    def test_first_path_short_circuits(self, store: GraphStore) -> None:
        a, b, c, d = _pages(store, "A", "B", "C", "D")
        store.add_edge(a, b)
        store.add_edge(a, c)
        store.add_edge(c, d)
        visited: set[int] = set()
        assert is_reachable(store, a, b, visited=visited) is True
        # Target found on the first link; C and D are never explored.
        assert visited == {a.id}

    def test_depth_first_order(self, store: GraphStore) -> None:
        a, b, c, d, e = _pages(store, "A", "B", "C", "D", "E")
        store.add_edge(a, b)
        store.add_edge(a, c)
        store.add_edge(b, d)
        store.add_edge(c, e)
        visited: set[int] = set()
        assert is_reachable(store, a, e, visited=visited) is True
        # B's subtree is exhausted before C is entered.
        assert visited == {a.id, b.id, d.id, c.id}

    def test_diamond_visits_once(self, store: GraphStore) -> None:
        a, b, c, d, e = _pages(store, "A", "B", "C", "D", "E")
        for src, dest in ((a, b), (a, c), (b, d), (c, d)):
            store.add_edge(src, dest)
        visited: set[int] = set()
        assert is_reachable(store, a, e, visited=visited) is False
        assert visited == {a.id, b.id, c.id, d.id}

    def test_long_chain_beyond_recursion_limit(self, store: GraphStore) -> None:
        pages = _pages(store, *(f"P{i}" for i in range(5000)))
        for src, dest in zip(pages, pages[1:], strict=False):
            store.add_edge(src, dest)
        assert is_reachable(store, pages[0], pages[-1]) is True
        assert is_reachable(store, pages[-1], pages[0]) is False

    def test_repeated_queries_agree(self, store: GraphStore) -> None:
        a, b, c = _pages(store, "A", "B", "C")
        store.add_edge(a, b)
        store.add_edge(b, c)
        first = [is_reachable(store, a, c), is_reachable(store, c, a)]
        second = [is_reachable(store, a, c), is_reachable(store, c, a)]
        assert first == second == [True, False]


class TestReachabilityService:
    def test_connected(self, chain_store: GraphStore) -> None:
        result = ReachabilityService(chain_store).is_connected("X", "Z")
        assert result.ok
        assert result.data == {"source": "X", "target": "Z", "connected": True}

    def test_not_connected(self, chain_store: GraphStore) -> None:
        result = ReachabilityService(chain_store).is_connected("Z", "X")
        assert result.ok
        assert result.data["connected"] is False

    @pytest.mark.parametrize(
        ("source", "target", "missing"),
        [
            ("Q", "X", ["Q"]),
            ("X", "R", ["R"]),
            ("Q", "R", ["Q", "R"]),
        ],
    )
    def test_missing_pages(
        self, chain_store: GraphStore, source: str, target: str, missing: list[str]
    ) -> None:
        result = ReachabilityService(chain_store).is_connected(source, target)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["missing"] == missing

    def test_telemetry_annotates_visits(self, chain_store: GraphStore) -> None:
        enable_telemetry()
        result = ReachabilityService(chain_store).is_connected("X", "Z")
        assert result.meta is not None
        span = result.meta["telemetry"]
        assert span["name"] == "ReachabilityService.is_connected"
        assert span["children"][0]["name"] == "dfs"
        assert span["children"][0]["annotations"]["visited"] == 2
