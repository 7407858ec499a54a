"""Tests for the YAML catalog store and quantity parsing."""

import os
import sys

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from budgetizer.catalog.data import (
    DEFAULT_BUDGETS, DEFAULT_CONFIG_PATH, CatalogConfigError, CatalogStore, parse_quantity,
)
from budgetizer.catalog.tiers import DEFAULT_TIERS, GB, TB, ms, ns


CATALOG_YAML = """
tiers:
  - {name: FAST, capacity: 10, cost: 100, iops: 1K, latency: 1ms, maxDevices: 3}
  - {name: SLOW, capacity: 1000, cost: 10, iops: 100, latency: 10ms, maxDevices: 3}
workload:
  - {fraction: 0.5, size: 5}
  - {fraction: 0.5, size: 100}
budgets: [100, 200]
mode: latency
"""


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(CATALOG_YAML, encoding="utf-8")
    return str(path)


# ── parse_quantity ────────────────────────────────────────────────────────────

def test_plain_numbers():
    assert parse_quantity(5) == 5.0
    assert parse_quantity(0.25) == 0.25
    assert parse_quantity("1e3") == 1000.0


def test_size_suffixes():
    assert parse_quantity("64GB") == 64 * GB
    assert parse_quantity("1.5 TB") == 1.5 * TB


def test_time_suffixes():
    assert parse_quantity("100ns") == pytest.approx(100 * ns)
    assert parse_quantity("10ms") == pytest.approx(10 * ms)


def test_rate_suffixes():
    assert parse_quantity("500K") == 500e3
    assert parse_quantity("10M") == 10e6


def test_unknown_unit():
    with pytest.raises(ValueError, match="Unknown unit"):
        parse_quantity("3PB")


def test_garbage_quantity():
    with pytest.raises(ValueError):
        parse_quantity("lots")
    with pytest.raises(ValueError):
        parse_quantity(True)


# ── CatalogStore ──────────────────────────────────────────────────────────────

def test_loads_tiers_from_yaml(catalog_file):
    store = CatalogStore(catalog_file)
    tiers = store.tiers()
    assert [t.name for t in tiers] == ["FAST", "SLOW"]
    assert tiers[0].iops == 1000
    assert tiers[1].latency_seconds == pytest.approx(0.01)
    assert tiers[1].max_devices == 3


def test_loads_workload_budgets_and_mode(catalog_file):
    store = CatalogStore(catalog_file)
    workload = store.workload()
    assert [(g.fraction, g.size_bytes) for g in workload] == [(0.5, 5.0), (0.5, 100.0)]
    assert store.budgets() == [100.0, 200.0]
    assert store.mode() == "latency"


def test_missing_file_falls_back_to_defaults(tmp_path):
    store = CatalogStore(str(tmp_path / "nope.yaml"))
    assert store.tiers() == DEFAULT_TIERS
    assert store.budgets() == list(DEFAULT_BUDGETS)
    assert len(store.workload()) == 3
    assert store.mode() == "throughput"


def test_invalid_mode_is_rejected_on_load(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("mode: fastest\n", encoding="utf-8")
    with pytest.raises(CatalogConfigError, match="mode") as exc_info:
        CatalogStore(str(path)).load()
    assert exc_info.value.path == str(path)


def test_config_error_is_a_value_error(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("mode: fastest\n", encoding="utf-8")
    with pytest.raises(ValueError):
        CatalogStore(str(path)).mode()


def test_bad_sections_are_all_reported(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "tiers:\n  - {name: X, capacity: 3PB, cost: 1, iops: 1, latency: 1, maxDevices: 2}\n"
        "workload:\n  - {fraction: 1}\n"
        "mode: fastest\n",
        encoding="utf-8",
    )
    with pytest.raises(CatalogConfigError) as exc_info:
        CatalogStore(str(path)).load()
    errors = exc_info.value.errors
    assert len(errors) == 3
    assert errors[1].startswith("tiers:")
    assert errors[2].startswith("workload:")


def test_bad_file_is_not_cached(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("mode: fastest\n", encoding="utf-8")
    store = CatalogStore(str(path))
    with pytest.raises(CatalogConfigError):
        store.load()
    path.write_text("mode: latency\n", encoding="utf-8")
    assert store.mode() == "latency"


def test_env_var_selects_path(monkeypatch, catalog_file):
    monkeypatch.setenv("BUDGETIZER_CONFIG_PATH", catalog_file)
    assert CatalogStore().path == catalog_file


def test_reload_picks_up_changes(catalog_file):
    store = CatalogStore(catalog_file)
    assert store.mode() == "latency"
    with open(catalog_file, "w", encoding="utf-8") as f:
        f.write(CATALOG_YAML.replace("mode: latency", "mode: throughput"))
    assert store.mode() == "latency"  # cached
    store.reload()
    assert store.mode() == "throughput"


def test_shipped_config_matches_builtin_catalog():
    store = CatalogStore(str(DEFAULT_CONFIG_PATH))
    assert store.tiers() == DEFAULT_TIERS
    assert store.budgets() == list(DEFAULT_BUDGETS)
