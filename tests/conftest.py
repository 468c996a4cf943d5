"""Shared pytest fixtures for pagelinks tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from pagelinks.infrastructure.graph.store import GraphStore
from pagelinks.services.telemetry import _active, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store() -> GraphStore:
    """An empty graph store."""
    return GraphStore()


@pytest.fixture
def chain_store(store: GraphStore) -> GraphStore:
    """Store with pages X, Y, Z and links X -> Y -> Z."""
    x = store.add_page("X")
    y = store.add_page("Y")
    z = store.add_page("Z")
    store.add_edge(x, y)
    store.add_edge(y, z)
    return store


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty temp directory so no pagelinks.toml is discovered."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PAGELINKS_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Verbose CLI runs enable telemetry; keep it from leaking across tests."""
    yield
    disable_telemetry()
    _active.set(None)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI invocations reconfigure the root logger; restore it after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("pagelinks")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
