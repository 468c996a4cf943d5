"""Timing spans for verbose runs.

Off by default; ``-v`` turns it on for the invocation. ``@traced`` opens a
root (or nested) span around a service call and attaches the finished tree
to the returned ``ServiceResult.meta["telemetry"]``. ``trace_span`` opens a
child span only inside an active traced call.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from pagelinks.services.result import ServiceResult

log = structlog.get_logger("pagelinks.telemetry")

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("_active", default=None)


@dataclass
class Span:
    name: str
    started: float = field(default_factory=time.perf_counter)
    duration_ms: float = 0.0
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)

    def close(self) -> None:
        self.duration_ms = (time.perf_counter() - self.started) * 1000

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = self.annotations
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


@contextmanager
def _open(name: str, *, root: bool) -> Iterator[Span | None]:
    parent = _active.get()
    if not _enabled.get() or (parent is None and not root):
        yield None
        return
    span = Span(name)
    if parent is not None:
        parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


def trace_span(name: str) -> AbstractContextManager[Span | None]:
    """Child span of the active traced call; yields None outside one."""
    return _open(name, root=False)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:
    """Time *func* and attach its span tree to a returned ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        with _open(func.__qualname__, root=True) as span:
            result = func(*args, **kwargs)
        if span is None:
            return result
        ok = True
        if isinstance(result, ServiceResult):
            ok = result.ok
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        log.debug("span.complete", span=span.name, duration_ms=round(span.duration_ms, 2), ok=ok)
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
