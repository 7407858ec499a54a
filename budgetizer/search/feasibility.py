"""Structural feasibility gates for a tier configuration.

A configuration passes when:
  1. the fastest tier (tier 0) has at least one device,
  2. populated tiers never shrink in capacity moving to a slower tier
     (inclusive hierarchy),
  3. the slowest populated tier can hold the whole working set.
"""

from typing import Optional, Sequence

from budgetizer.catalog.tiers import TechTier, resolve_tiers, tier_capacity


def working_set(workload) -> float:
    """Total bytes the workload touches; the last populated tier must hold all of it."""
    return sum(g.size_bytes for g in workload)


def is_valid(config: Sequence[int], workload,
             tiers: Optional[Sequence[TechTier]] = None) -> bool:
    """Return True if the configuration passes every feasibility gate."""
    if config[0] == 0:
        return False
    tiers = resolve_tiers(tiers)

    last_capacity = None
    for t, count in enumerate(config):
        if not count:
            continue
        capacity = tier_capacity(config, t, tiers)
        if last_capacity is not None and capacity < last_capacity:
            return False
        last_capacity = capacity

    return last_capacity >= working_set(workload)


def gate_failures(config: Sequence[int], workload,
                  tiers: Optional[Sequence[TechTier]] = None) -> list:
    """Evaluate every gate and return the human-readable failures (empty if valid)."""
    tiers = resolve_tiers(tiers)
    if len(config) != len(tiers):
        return [f"configuration has {len(config)} entries, catalog has {len(tiers)} tiers"]

    failures = []
    if config[0] == 0:
        failures.append(f"no devices of the fastest tier ({tiers[0].name})")

    populated = [t for t, count in enumerate(config) if count]
    if not populated:
        failures.append("no tier is populated")
        return failures

    for prev, cur in zip(populated, populated[1:]):
        prev_cap = tier_capacity(config, prev, tiers)
        cur_cap = tier_capacity(config, cur, tiers)
        if cur_cap < prev_cap:
            failures.append(
                f"level is not inclusive: {tiers[cur].name} capacity {cur_cap:g} "
                f"< {tiers[prev].name} capacity {prev_cap:g}"
            )

    last = populated[-1]
    last_cap = tier_capacity(config, last, tiers)
    needed = working_set(workload)
    if last_cap < needed:
        failures.append(
            f"last-level tier {tiers[last].name} holds {last_cap:g} bytes, "
            f"workload needs {needed:g}"
        )
    return failures
