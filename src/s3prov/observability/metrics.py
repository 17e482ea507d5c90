"""In-process counters recorded by the retry helper."""

from __future__ import annotations

from typing import Dict


_COUNTERS: Dict[str, float] = {}


def inc(name: str, value: float = 1.0) -> None:
    _COUNTERS[name] = _COUNTERS.get(name, 0.0) + value


def get(name: str, default: float = 0.0) -> float:
    return _COUNTERS.get(name, default)


def clear() -> None:
    _COUNTERS.clear()


__all__ = ["inc", "get", "clear"]
