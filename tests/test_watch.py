"""Tests for contractgen.watch."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List

import pytest

from contractgen.watch import Watcher, module_sources, reload_modules


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def _touch(path: Path, mtime_ns: int) -> None:
    os.utime(path, ns=(mtime_ns, mtime_ns))


def test_callback_fires_once_after_quiet_period(tmp_path: Path) -> None:
    source = tmp_path / "models.py"
    source.write_text("x = 1\n", encoding="utf-8")
    _touch(source, 1_000_000_000)
    clock = FakeClock()
    calls: List[int] = []
    watcher = Watcher(lambda: [source], lambda: calls.append(1), debounce=1.0, clock=clock)

    assert watcher.poll() is False

    _touch(source, 2_000_000_000)
    assert watcher.poll() is False
    clock.now = 0.5
    assert watcher.poll() is False
    clock.now = 1.0
    assert watcher.poll() is True
    clock.now = 5.0
    assert watcher.poll() is False
    assert calls == [1]


def test_changes_during_debounce_restart_the_wait(tmp_path: Path) -> None:
    source = tmp_path / "models.py"
    source.write_text("x = 1\n", encoding="utf-8")
    _touch(source, 1_000_000_000)
    clock = FakeClock()
    calls: List[int] = []
    watcher = Watcher(lambda: [source], lambda: calls.append(1), debounce=1.0, clock=clock)

    _touch(source, 2_000_000_000)
    watcher.poll()
    clock.now = 0.8
    _touch(source, 3_000_000_000)
    watcher.poll()
    clock.now = 1.5
    assert watcher.poll() is False
    clock.now = 2.0
    assert watcher.poll() is True
    assert calls == [1]


def test_deleted_and_new_files_count_as_changes(tmp_path: Path) -> None:
    first = tmp_path / "a.py"
    first.write_text("", encoding="utf-8")
    second = tmp_path / "b.py"
    clock = FakeClock()
    calls: List[int] = []
    watcher = Watcher(lambda: [first, second], lambda: calls.append(1), debounce=0.0, clock=clock)

    second.write_text("", encoding="utf-8")
    assert watcher.poll() is False
    assert watcher.poll() is True

    first.unlink()
    assert watcher.poll() is False
    assert watcher.poll() is True
    assert calls == [1, 1]


def test_run_sleeps_between_polls(tmp_path: Path) -> None:
    clock = FakeClock()
    watcher = Watcher(lambda: [], lambda: None, interval=0.25, clock=clock, sleep=clock.sleep)

    watcher.run(max_polls=4)

    assert clock.now == 1.0


def test_module_sources_and_reload(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    package = tmp_path / "watched_pkg"
    package.mkdir()
    (package / "__init__.py").write_text("", encoding="utf-8")
    (package / "models.py").write_text("VALUE = 1\n", encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))

    sources = module_sources(["watched_pkg", "missing_watched_module"])
    assert sorted(path.name for path in sources) == ["__init__.py", "models.py"]

    import watched_pkg.models

    assert watched_pkg.models.VALUE == 1
    (package / "models.py").write_text("VALUE = 22\n", encoding="utf-8")
    _touch(package / "models.py", 9_000_000_000)
    reload_modules(["watched_pkg"])

    assert sys.modules["watched_pkg.models"].VALUE == 22
