"""Configuration search: exhaustive enumeration, feasibility gates, scoring,
and best-configuration selection under a cost budget.

Flow:
  1. Validate the request (workload, budget, mode) and the catalog.
  2. Enumerate every configuration: device count per tier over
     range(max_devices), last tier varying fastest.
  3. Drop configurations that fail the feasibility gates.
  4. Drop configurations whose cost is >= the budget.
  5. Simulate where accesses land and score the selected time metric.
  6. Keep the best: lower time, then lower cost, then first in
     enumeration order (lexicographically smallest configuration).
  7. Return a SearchResult; an infeasible budget yields feasible=False.
"""

import itertools
import logging
import math
from typing import Optional, Sequence

from budgetizer.catalog.tiers import TechTier, resolve_tiers
from budgetizer.models.types import SearchRequest, SearchResult
from budgetizer.search.feasibility import is_valid
from budgetizer.search.scorer import config_cost, score, tier_costs
from budgetizer.search.simulator import compute_access_fractions

logger = logging.getLogger(__name__)


class SearchError(Exception):
    pass


class InvalidInputError(SearchError, ValueError):
    """Raised when the workload, budget or catalog cannot be searched."""

    def __init__(self, errors: list):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NoFeasibleConfigError(SearchError):
    """Raised when a caller requires a solution and no configuration fits the budget."""

    def __init__(self, result: SearchResult):
        self.result = result
        super().__init__(
            f"No feasible configuration within cost budget ${result.cost_limit:g} "
            f"({result.mode})"
        )


class _Best:
    """Best-so-far accumulator owned by a single search call."""

    def __init__(self, tier_count: int):
        self.config = (0,) * tier_count
        self.fractions = (0.0,) * tier_count
        self.cost = math.inf
        self.time = math.inf

    def offer(self, config: tuple, fractions: list, cost: float, time: float) -> bool:
        if time < self.time or (time == self.time and cost < self.cost):
            self.config = config
            self.fractions = tuple(fractions)
            self.cost = cost
            self.time = time
            return True
        return False


def enumerate_configs(tiers: Optional[Sequence[TechTier]] = None):
    """Yield every configuration in lexicographic order."""
    tiers = resolve_tiers(tiers)
    return itertools.product(*(range(t.max_devices) for t in tiers))


def _check_inputs(request: SearchRequest, tiers: Sequence[TechTier]):
    errors = request.validate()
    if not tiers:
        errors.append("tier catalog must not be empty")
    if errors:
        raise InvalidInputError(errors)


def find_best_config(workload, cost_limit: float, optimize_throughput: bool = True,
                     tiers: Optional[Sequence[TechTier]] = None) -> SearchResult:
    """Find the configuration with the lowest average time per access under a budget.

    Args:
        workload: Sequence of AccessGroup.
        cost_limit: Exclusive dollar budget; configurations costing exactly
            this much are not considered.
        optimize_throughput: Score by IOPS-weighted time when True, by
            latency when False.
        tiers: Optional override of the tier catalog.

    Returns:
        SearchResult. When nothing is feasible within budget, `feasible` is
        False and the configuration is all zeros.

    Raises:
        InvalidInputError: If the workload, budget or catalog is malformed.
    """
    tiers = resolve_tiers(tiers)
    mode = "throughput" if optimize_throughput else "latency"
    request = SearchRequest(workload=list(workload), cost_limit=cost_limit, mode=mode)
    _check_inputs(request, tiers)

    best = _Best(len(tiers))
    enumerated = feasible = within_budget = 0

    for config in enumerate_configs(tiers):
        enumerated += 1
        if not is_valid(config, request.workload, tiers):
            continue
        feasible += 1
        cost = config_cost(config, tiers)
        if cost >= cost_limit:
            continue
        within_budget += 1
        fractions = compute_access_fractions(request.workload, config, tiers)
        time = score(fractions, mode, tiers)
        if best.offer(config, fractions, cost, time):
            logger.debug("New best %s: cost=%.2f time=%.3e", config, cost, time)

    result = SearchResult(
        config=best.config,
        fractions=best.fractions,
        cost=best.cost,
        time=best.time,
        mode=mode,
        cost_limit=cost_limit,
        tier_names=tuple(t.name for t in tiers),
        configs_enumerated=enumerated,
        configs_feasible=feasible,
        configs_within_budget=within_budget,
        tier_costs=tier_costs(best.config, tiers),
    )
    if result.feasible:
        logger.info(
            "Budget $%g (%s): best %s cost=$%g ops/s=%g [%d enumerated, %d feasible, %d within budget]",
            cost_limit, mode, best.config, best.cost, result.ops_per_second,
            enumerated, feasible, within_budget,
        )
    else:
        logger.info(
            "Budget $%g (%s): no feasible configuration [%d enumerated, %d feasible]",
            cost_limit, mode, enumerated, feasible,
        )
    return result


def require_feasible(result: SearchResult) -> SearchResult:
    """Return the result unchanged, or raise NoFeasibleConfigError if it has no solution."""
    if not result.feasible:
        raise NoFeasibleConfigError(result)
    return result


def sweep_budgets(workload, budgets, optimize_throughput: bool = True,
                  tiers: Optional[Sequence[TechTier]] = None) -> list:
    """Run one independent search per budget, in the given order."""
    return [
        find_best_config(workload, budget, optimize_throughput, tiers)
        for budget in budgets
    ]
