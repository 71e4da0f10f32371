"""Polling file watcher used by ``contractgen generate --watch``."""

from __future__ import annotations

import importlib
import importlib.util
import sys
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .logging import get_logger

Snapshot = Dict[Path, int]


class Watcher:
    """Calls ``callback`` once watched files stop changing for ``debounce`` seconds."""

    def __init__(
        self,
        paths: Callable[[], Iterable[Path]],
        callback: Callable[[], None],
        *,
        interval: float = 0.5,
        debounce: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._paths = paths
        self._callback = callback
        self.interval = interval
        self.debounce = debounce
        self._clock = clock
        self._sleep = sleep
        self._last = self.snapshot()
        self._changed_at: Optional[float] = None
        self.logger = get_logger("watch")

    def snapshot(self) -> Snapshot:
        state: Snapshot = {}
        for path in self._paths():
            try:
                state[path] = path.stat().st_mtime_ns
            except FileNotFoundError:
                continue
        return state

    def poll(self) -> bool:
        """Check once; return True when the callback fired."""
        current = self.snapshot()
        now = self._clock()
        if current != self._last:
            self._last = current
            self._changed_at = now
            self.logger.debug("Change detected in %d watched files", len(current))
            return False
        if self._changed_at is not None and now - self._changed_at >= self.debounce:
            self._changed_at = None
            self._callback()
            return True
        return False

    def run(self, max_polls: Optional[int] = None) -> None:
        polls = 0
        while max_polls is None or polls < max_polls:
            self.poll()
            polls += 1
            self._sleep(self.interval)


def module_sources(modules: Sequence[str]) -> List[Path]:
    """Return the source files backing ``modules``, including package contents."""
    sources: List[Path] = []
    for name in modules:
        spec = importlib.util.find_spec(name)
        if spec is None or not spec.origin or spec.origin in {"built-in", "frozen"}:
            continue
        origin = Path(spec.origin)
        if spec.submodule_search_locations:
            for location in spec.submodule_search_locations:
                sources.extend(sorted(Path(location).rglob("*.py")))
        else:
            sources.append(origin)
    return sources


def reload_modules(modules: Sequence[str]) -> None:
    """Reload ``modules`` and their already-imported submodules."""
    for loaded in sorted(sys.modules):
        if any(loaded == name or loaded.startswith(f"{name}.") for name in modules):
            importlib.reload(sys.modules[loaded])


__all__ = ["Watcher", "module_sources", "reload_modules"]
