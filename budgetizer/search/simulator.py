"""Workload simulator: where accesses land in an inclusive tier hierarchy.

Tiers are consumed in rank order. Each access group fills the remaining
capacity of the current tier; whatever share of the group does not fit
overflows to the next tier. The group's size stays the same at every level
because the same data is held inclusively by all slower tiers.
"""

from typing import Optional, Sequence

from budgetizer.catalog.tiers import TechTier, resolve_tiers, tier_capacity
from budgetizer.search.feasibility import working_set


def compute_access_fractions(workload, config: Sequence[int],
                             tiers: Optional[Sequence[TechTier]] = None) -> list:
    """Return the fraction of all accesses resolved at each tier.

    Only meaningful for configurations that pass the feasibility gates.
    Whatever reaches the last populated tier is served there, so a working
    set that fits exactly never spills on float rounding.

    Raises:
        ValueError: If no tier is populated or the working set is larger
            than the last populated tier.
    """
    tiers = resolve_tiers(tiers)
    populated = [t for t, count in enumerate(config) if count]
    if not populated:
        raise ValueError("configuration has no devices")
    last = populated[-1]
    if tier_capacity(config, last, tiers) < working_set(workload):
        raise ValueError("workload does not fit the configuration; check feasibility first")

    fractions = [0.0] * len(tiers)
    tech = 0
    remaining = tier_capacity(config, tech, tiers)
    for group in workload:
        fraction = group.fraction
        while tech < last and group.size_bytes > remaining:
            served = (remaining / group.size_bytes) * fraction
            fractions[tech] += served
            fraction -= served
            tech += 1
            remaining = tier_capacity(config, tech, tiers)
        fractions[tech] += fraction
        remaining -= group.size_bytes
    return fractions
