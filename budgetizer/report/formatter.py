"""Plain-text rendering of search results.

Output per budget:

    ---
    cost budget $4000
    ops/s: 1.23e+06 (throughput)
    RAM 128 GB ($1000): 0.8
    ...
    totalCost: $3900
"""

from typing import Optional, Sequence

from budgetizer.catalog.tiers import GB, MB, TB, TechTier, resolve_tiers, tier_capacity
from budgetizer.models.types import SearchResult


def format_capacity(capacity: float) -> str:
    """Render a byte count with the largest TB/GB/MB unit it reaches."""
    if capacity >= TB:
        return f"{capacity / TB:g} TB"
    if capacity >= GB:
        return f"{capacity / GB:g} GB"
    if capacity >= MB:
        return f"{capacity / MB:g} MB"
    return f"{capacity:g}"


def format_result(result: SearchResult, tiers: Optional[Sequence[TechTier]] = None) -> str:
    tiers = resolve_tiers(tiers)
    if not result.feasible:
        return f"no feasible configuration within ${result.cost_limit:g} ({result.mode})"

    lines = [f"ops/s: {result.ops_per_second:g} ({result.mode})"]
    for t, tier in enumerate(tiers):
        count = result.config[t]
        lines.append(
            f"{tier.name} {format_capacity(tier_capacity(result.config, t, tiers))} "
            f"(${count * tier.unit_cost_dollars:g}): {result.fractions[t]:g}"
        )
    lines.append(f"totalCost: ${result.cost:g}")
    return "\n".join(lines)


def format_sweep(results: Sequence[SearchResult],
                 tiers: Optional[Sequence[TechTier]] = None) -> str:
    """Render one block per budget, separated by '---' lines."""
    blocks = []
    for result in results:
        blocks.append(
            f"---\ncost budget ${result.cost_limit:g}\n{format_result(result, tiers)}\n"
        )
    return "\n".join(blocks)
