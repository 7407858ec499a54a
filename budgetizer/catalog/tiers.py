"""Technology catalog: storage tier definitions and unit constants.

Each tier defines:
  - capacity per device (bytes)
  - cost per device (dollars)
  - IOPS rating and access latency (seconds)
  - max_devices: exclusive upper bound on the device count the search tries

Catalog order is meaningful: index 0 is the fastest/smallest tier, the last
entry is the slowest/largest. The search treats the catalog as an inclusive
cache hierarchy in that order.
"""

from dataclasses import dataclass
from typing import Optional, Sequence


# ── Units ────────────────────────────────────────────────────────────────────

KB = 1024.0
MB = 1024.0 * KB
GB = 1024.0 * MB
TB = 1024.0 * GB

ns = 1e-9
us = 1e-6
ms = 1e-3

K = 1e3
M = 1e6


@dataclass(frozen=True)
class TechTier:
    """Immutable storage technology descriptor."""
    name: str
    capacity_bytes: float
    unit_cost_dollars: float
    iops: float
    latency_seconds: float
    max_devices: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "capacityBytes": self.capacity_bytes,
            "unitCostDollars": self.unit_cost_dollars,
            "iops": self.iops,
            "latencySeconds": self.latency_seconds,
            "maxDevices": self.max_devices,
        }


# ── Default Catalog ──────────────────────────────────────────────────────────

DEFAULT_TIERS: tuple = (
    TechTier(name="RAM", capacity_bytes=64 * GB, unit_cost_dollars=500,
             iops=10 * M, latency_seconds=100 * ns, max_devices=16),
    TechTier(name="NVM", capacity_bytes=256 * GB, unit_cost_dollars=500,
             iops=5 * M, latency_seconds=400 * ns, max_devices=8),
    TechTier(name="SSD", capacity_bytes=1 * TB, unit_cost_dollars=500,
             iops=500 * K, latency_seconds=100 * us, max_devices=16),
    TechTier(name="HDD", capacity_bytes=4 * TB, unit_cost_dollars=200,
             iops=100, latency_seconds=10 * ms, max_devices=16),
)


def resolve_tiers(tiers: Optional[Sequence[TechTier]] = None) -> Sequence[TechTier]:
    """Return the given catalog, or the default one when None."""
    return DEFAULT_TIERS if tiers is None else tiers


def get_tier(name: str, tiers: Optional[Sequence[TechTier]] = None) -> Optional[TechTier]:
    """Return the TechTier with the given name, or None."""
    for tier in resolve_tiers(tiers):
        if tier.name == name:
            return tier
    return None


def list_tiers(tiers: Optional[Sequence[TechTier]] = None) -> list:
    """Return all tier definitions in rank order."""
    return list(resolve_tiers(tiers))


def tier_capacity(config: Sequence[int], index: int,
                  tiers: Optional[Sequence[TechTier]] = None) -> float:
    """Total capacity deployed at one tier of a configuration."""
    return config[index] * resolve_tiers(tiers)[index].capacity_bytes
