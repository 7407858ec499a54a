import logging
import os
import re
from pathlib import Path

import yaml

from budgetizer.catalog.tiers import (
    DEFAULT_TIERS, TechTier, GB, KB, MB, TB, K, M, ms, ns, us,
)
from budgetizer.models.types import AccessGroup, VALID_MODES

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = REPO_ROOT / "config" / "budgetizer.yaml"

DEFAULT_WORKLOAD = (
    AccessGroup(fraction=0.8, size_bytes=111 * GB),
    AccessGroup(fraction=0.2 - 0.001, size_bytes=1 * TB),
    AccessGroup(fraction=0.001, size_bytes=10 * TB),
)
DEFAULT_BUDGETS = (2000, 4000, 6000, 8000, 10000, 15000, 100000)

UNITS = {
    "B": 1.0, "KB": KB, "MB": MB, "GB": GB, "TB": TB,
    "ns": ns, "us": us, "ms": ms, "s": 1.0,
    "K": K, "M": M,
}
_QUANTITY_RE = re.compile(r"^\s*([-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)\s*([A-Za-z]*)\s*$")


def parse_quantity(value) -> float:
    """Parse a number or a string with a unit suffix ("64GB", "100ns", "10M")."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _QUANTITY_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid quantity: {value!r}")
    number, unit = match.groups()
    if unit and unit not in UNITS:
        raise ValueError(f"Unknown unit '{unit}' in quantity {value!r}")
    return float(number) * UNITS.get(unit, 1.0)


def tier_from_dict(raw: dict) -> TechTier:
    return TechTier(
        name=raw["name"],
        capacity_bytes=parse_quantity(raw["capacity"]),
        unit_cost_dollars=parse_quantity(raw["cost"]),
        iops=parse_quantity(raw["iops"]),
        latency_seconds=parse_quantity(raw["latency"]),
        max_devices=int(raw["maxDevices"]),
    )


def workload_from_list(raw: list) -> list:
    return [
        AccessGroup(fraction=parse_quantity(g["fraction"]), size_bytes=parse_quantity(g["size"]))
        for g in raw
    ]


class CatalogConfigError(ValueError):
    """Raised when the catalog file exists but cannot be used."""

    def __init__(self, path: str, errors: list):
        self.path = path
        self.errors = errors
        super().__init__(f"Invalid catalog {path}: " + "; ".join(errors))


def _config_errors(raw) -> list:
    if not isinstance(raw, dict):
        return ["top level must be a mapping"]
    errors = []
    mode = raw.get("mode", "throughput")
    if mode not in VALID_MODES:
        errors.append(f"mode must be one of {VALID_MODES}, got {mode!r}")
    sections = (
        ("tiers", lambda v: [tier_from_dict(t) for t in v]),
        ("workload", workload_from_list),
        ("budgets", lambda v: [parse_quantity(b) for b in v]),
    )
    for key, parse in sections:
        value = raw.get(key)
        if not value:
            continue
        try:
            parse(value)
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(f"{key}: {exc}")
    return errors


class CatalogStore:
    """Loads the tier catalog, default workload and budgets from a YAML file.

    Falls back to the built-in defaults when the file does not exist. The
    file is checked once when it is read; a bad file raises
    CatalogConfigError and is not cached.
    """

    def __init__(self, path: str | None = None):
        self.path = path or os.environ.get("BUDGETIZER_CONFIG_PATH", str(DEFAULT_CONFIG_PATH))
        self._cache = None

    def load(self) -> dict:
        if self._cache is None:
            if os.path.exists(self.path):
                logger.info("Loading catalog from %s", self.path)
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
                errors = _config_errors(raw)
                if errors:
                    raise CatalogConfigError(self.path, errors)
                self._cache = raw
            else:
                logger.warning("Catalog file %s not found, using built-in defaults", self.path)
                self._cache = {}
        return self._cache

    def reload(self) -> dict:
        self._cache = None
        return self.load()

    def tiers(self) -> tuple:
        raw = self.load().get("tiers")
        if not raw:
            return DEFAULT_TIERS
        return tuple(tier_from_dict(t) for t in raw)

    def workload(self) -> list:
        raw = self.load().get("workload")
        if not raw:
            return list(DEFAULT_WORKLOAD)
        return workload_from_list(raw)

    def budgets(self) -> list:
        raw = self.load().get("budgets")
        if not raw:
            return list(DEFAULT_BUDGETS)
        return [parse_quantity(b) for b in raw]

    def mode(self) -> str:
        return self.load().get("mode", "throughput")


catalog_store = CatalogStore()
