"""Cost and performance scoring for tier configurations."""

from typing import Optional, Sequence

from budgetizer.catalog.tiers import TechTier, resolve_tiers


def config_cost(config: Sequence[int], tiers: Optional[Sequence[TechTier]] = None) -> float:
    """Total dollar cost of a configuration."""
    tiers = resolve_tiers(tiers)
    return sum(count * tiers[t].unit_cost_dollars for t, count in enumerate(config))


def tier_costs(config: Sequence[int], tiers: Optional[Sequence[TechTier]] = None) -> tuple:
    """Dollar cost of each tier of a configuration."""
    tiers = resolve_tiers(tiers)
    return tuple(count * tiers[t].unit_cost_dollars for t, count in enumerate(config))


def avg_time_per_access(fractions: Sequence[float],
                        tiers: Optional[Sequence[TechTier]] = None) -> float:
    """Average seconds per access when each tier serves accesses one at a time at its IOPS rating."""
    tiers = resolve_tiers(tiers)
    return sum(f * (1.0 / tiers[t].iops) for t, f in enumerate(fractions))


def avg_latency_per_access(fractions: Sequence[float],
                           tiers: Optional[Sequence[TechTier]] = None) -> float:
    """Average access latency in seconds."""
    tiers = resolve_tiers(tiers)
    return sum(f * tiers[t].latency_seconds for t, f in enumerate(fractions))


def score(fractions: Sequence[float], mode: str,
          tiers: Optional[Sequence[TechTier]] = None) -> float:
    """Average time per access for the given optimization mode ("throughput" or "latency")."""
    if mode == "throughput":
        return avg_time_per_access(fractions, tiers)
    if mode == "latency":
        return avg_latency_per_access(fractions, tiers)
    raise ValueError(f"Unknown mode: {mode}")
