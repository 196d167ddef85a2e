from __future__ import annotations

import argparse
import importlib.util
from pathlib import Path
from types import ModuleType

import pytest
from conftest import TEST_TOWNS, build_collection, build_row

from vmtbrowser.municipalities import MunicipalityRegistry
from vmtbrowser.state.selection import SelectionManager

_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "dump_selection.py"


@pytest.fixture(scope="module")
def dump_selection() -> ModuleType:
    spec = importlib.util.spec_from_file_location("dump_selection", _SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _args(**kwargs: object) -> argparse.Namespace:
    return argparse.Namespace(**{"data_dir": None, "region": None, **kwargs})


def test_data_dir_ignores_base_url_from_env(dump_selection: ModuleType, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VMT_BASE_URL", "https://example.org/vmt")

    local = dump_selection._config_from_args(_args(data_dir="./app"))
    remote = dump_selection._config_from_args(_args())

    assert local.base_url == ""
    assert local.url_for("data_old/x.csv") == "data_old/x.csv"
    assert remote.url_for("data_old/x.csv") == "https://example.org/vmt/data_old/x.csv"


def test_table_rows_are_printed_in_column_order(dump_selection: ModuleType, registry: MunicipalityRegistry) -> None:
    manager = SelectionManager(registry, default_year=2012)
    rows = [build_row(town_id, name) for town_id, name in TEST_TOWNS]
    manager.bind_dataset(build_collection(TEST_TOWNS, {2012: rows}))
    update = manager.select_municipality(35)

    lines = dump_selection._format_update(update, dict(registry.options()))

    header = next(line for line in lines if "Mode" in line)
    assert [cell.strip() for cell in header.split("|")] == ["Mode", "6AM-9AM", "9AM-3PM", "3PM-6PM", "6PM-6AM", "Daily"]
    assert any(line.strip().startswith("Total (SOV, HOV, Trucks)") for line in lines)
