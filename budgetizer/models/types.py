"""Data types for the storage budget search."""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Optional


VALID_MODES = ("throughput", "latency")


@dataclass(frozen=True)
class AccessGroup:
    """One workload bucket: the fraction of all accesses that touch a dataset of this size."""
    fraction: float
    size_bytes: float

    def to_dict(self) -> dict:
        return {"fraction": self.fraction, "size": self.size_bytes}


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and not math.isnan(value)


def validate_workload(workload) -> list:
    """Return the errors for a list of AccessGroup (empty if valid)."""
    errors = []
    if not workload:
        errors.append("workload must contain at least one access group")
    for i, group in enumerate(workload or []):
        if not _is_number(group.fraction) or group.fraction < 0:
            errors.append(f"workload[{i}].fraction must be a non-negative number")
        if not _is_number(group.size_bytes) or group.size_bytes < 0:
            errors.append(f"workload[{i}].size must be a non-negative number")
    return errors


@dataclass
class SearchRequest:
    """One search run: a workload, a cost budget and the metric to optimize.

    Fractions are not required to sum to 1.0; they are weights over where
    accesses land.
    """
    workload: list
    cost_limit: float
    mode: str = "throughput"

    @property
    def optimize_throughput(self) -> bool:
        return self.mode == "throughput"

    def validate(self) -> list:
        """Return a list of validation errors (empty if valid)."""
        errors = validate_workload(self.workload)
        if not _is_number(self.cost_limit) or self.cost_limit <= 0:
            errors.append("costLimit must be a positive number")
        if self.mode not in VALID_MODES:
            errors.append(f"mode must be one of {VALID_MODES}")
        return errors


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


@dataclass
class SearchResult:
    """Outcome of one configuration search.

    When nothing fits the budget, config is all zeros and cost/time are
    infinite; check `feasible` before reading the numbers.
    """
    config: tuple
    fractions: tuple
    cost: float
    time: float
    mode: str
    cost_limit: float
    tier_names: tuple = ()
    configs_enumerated: int = 0
    configs_feasible: int = 0
    configs_within_budget: int = 0
    tier_costs: tuple = field(default_factory=tuple)

    @property
    def feasible(self) -> bool:
        return math.isfinite(self.time)

    @property
    def ops_per_second(self) -> Optional[float]:
        if not self.feasible:
            return None
        if self.time == 0:
            return math.inf
        return 1.0 / self.time

    def to_dict(self) -> dict:
        ops = self.ops_per_second
        return {
            "feasible": self.feasible,
            "mode": self.mode,
            "costLimit": self.cost_limit,
            "config": list(self.config),
            "tiers": [
                {
                    "name": name,
                    "devices": self.config[i],
                    "cost": self.tier_costs[i] if i < len(self.tier_costs) else None,
                    "accessFraction": self.fractions[i],
                }
                for i, name in enumerate(self.tier_names)
            ],
            "totalCost": _finite_or_none(self.cost),
            "avgTimePerAccess": _finite_or_none(self.time),
            "opsPerSecond": _finite_or_none(ops) if ops is not None else None,
            "configsEnumerated": self.configs_enumerated,
            "configsFeasible": self.configs_feasible,
            "configsWithinBudget": self.configs_within_budget,
        }
