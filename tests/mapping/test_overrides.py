"""Tests for contractgen.mapping.overrides."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from contractgen.codedom.nodes import ImportedTypeRef
from contractgen.errors import AmbiguousOverrideError
from contractgen.mapping import overrides as overrides_module
from contractgen.mapping.overrides import (
    CompositeOverride,
    NullOverride,
    PathOverride,
    discover_overrides,
)
from tests._fixtures.host_types import INT, RecordingContext, primitive

DECIMAL = primitive("decimal.Decimal")
MONEY = ImportedTypeRef("Money", "shared/Money")


class _Claims:
    def __init__(self, name: str, full_name: str) -> None:
        self.name = name
        self._full_name = full_name

    def try_map(self, host, context):
        if host.full_name == self._full_name:
            return ImportedTypeRef(self.name, f"custom/{self.name}")
        return None


class _EntryPoint:
    def __init__(self, name: str, target: object) -> None:
        self.name = name
        self._target = target

    def load(self) -> object:
        if isinstance(self._target, Exception):
            raise self._target
        return self._target


def test_null_override_declines_everything(context: RecordingContext) -> None:
    assert NullOverride().try_map(INT, context) is None


def test_path_override_matches_full_name(context: RecordingContext) -> None:
    override = PathOverride.from_config({"decimal.Decimal": {"name": "Money", "path": "shared/Money"}})

    assert override.try_map(DECIMAL, context) == MONEY
    assert override.try_map(DECIMAL.as_nullable(), context) == MONEY
    assert override.try_map(INT, context) is None


def test_composite_returns_single_claim(context: RecordingContext) -> None:
    composite = CompositeOverride([NullOverride(), _Claims("Money", "decimal.Decimal")])

    assert composite.try_map(DECIMAL, context) == ImportedTypeRef("Money", "custom/Money")
    assert composite.try_map(INT, context) is None


def test_composite_rejects_conflicting_claims(context: RecordingContext) -> None:
    composite = CompositeOverride([_Claims("Money", "decimal.Decimal"), _Claims("Amount", "decimal.Decimal")])

    with pytest.raises(AmbiguousOverrideError) as excinfo:
        composite.try_map(DECIMAL, context)

    assert excinfo.value.candidates == ["Money", "Amount"]
    assert "decimal.Decimal" in str(excinfo.value)


def test_discover_overrides_instantiates_registered_classes(monkeypatch: pytest.MonkeyPatch) -> None:
    instance = _Claims("Money", "decimal.Decimal")
    entries = [_EntryPoint("money", instance), _EntryPoint("null", NullOverride)]
    monkeypatch.setattr(overrides_module, "_iter_entry_points", lambda: entries)

    discovered = discover_overrides()

    assert discovered[0] is instance
    assert isinstance(discovered[1], NullOverride)


def test_discover_overrides_filters_enabled_names(monkeypatch: pytest.MonkeyPatch) -> None:
    entries = [_EntryPoint("Money", NullOverride), _EntryPoint("other", NullOverride)]
    monkeypatch.setattr(overrides_module, "_iter_entry_points", lambda: entries)

    assert len(discover_overrides(["money"])) == 1
    with pytest.raises(ValueError):
        discover_overrides(["money", "missing"])


def test_discover_overrides_reports_broken_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        overrides_module,
        "_iter_entry_points",
        lambda: [_EntryPoint("broken", ImportError("no module"))],
    )
    with pytest.raises(RuntimeError):
        discover_overrides()

    monkeypatch.setattr(
        overrides_module,
        "_iter_entry_points",
        lambda: [_EntryPoint("shapeless", SimpleNamespace(name="shapeless"))],
    )
    with pytest.raises(TypeError):
        discover_overrides()
