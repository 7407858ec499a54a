"""HTTP handlers for the storage budget search API.

Endpoints:
  GET  /health           Health check
  GET  /api/tiers        Active tier catalog
  GET  /api/tiers/<name> One tier by name
  POST /api/search       Best configuration for one budget
  POST /api/sweep        Best configuration for each of several budgets
  POST /api/evaluate     Gates, cost and access split of one configuration
"""

import logging

from flask import Blueprint, request, jsonify

from budgetizer.catalog.data import (
    CatalogConfigError, catalog_store, parse_quantity, workload_from_list,
)
from budgetizer.catalog.tiers import get_tier, list_tiers
from budgetizer.models.types import SearchRequest, validate_workload
from budgetizer.search.feasibility import gate_failures
from budgetizer.search.scorer import (
    avg_latency_per_access, avg_time_per_access, config_cost, tier_costs,
)
from budgetizer.search.search import (
    InvalidInputError, NoFeasibleConfigError, find_best_config, require_feasible,
    sweep_budgets,
)
from budgetizer.search.simulator import compute_access_fractions

logger = logging.getLogger(__name__)

search_bp = Blueprint("search", __name__)


@search_bp.errorhandler(CatalogConfigError)
def catalog_config_error(exc):
    logger.error("Catalog configuration rejected: %s", exc)
    return jsonify({"error": "Invalid catalog configuration", "details": exc.errors}), 500


def _parse_workload(body: dict, errors: list) -> list:
    raw = body.get("workload")
    if raw is None:
        return catalog_store.workload()
    if not isinstance(raw, list):
        errors.append("workload must be a list of {fraction, size} objects")
        return []
    try:
        return workload_from_list(raw)
    except (KeyError, TypeError, ValueError) as exc:
        errors.append(f"invalid workload entry: {exc}")
        return []


def _parse_number(value, name: str, errors: list):
    try:
        return parse_quantity(value)
    except (TypeError, ValueError):
        errors.append(f"{name} must be a number")
        return None


@search_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"}), 200


@search_bp.route("/api/tiers", methods=["GET"])
def get_tiers():
    return jsonify({"tiers": [t.to_dict() for t in list_tiers(catalog_store.tiers())]}), 200


@search_bp.route("/api/tiers/<name>", methods=["GET"])
def get_tier_by_name(name):
    tier = get_tier(name, catalog_store.tiers())
    if tier is None:
        return jsonify({"error": f"Unknown tier: {name}"}), 404
    return jsonify(tier.to_dict()), 200


@search_bp.route("/api/search", methods=["POST"])
def search():
    """Find the best configuration for one cost budget.

    Returns 400 with details on malformed input and 422 when no
    configuration fits the budget.
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be valid JSON"}), 400

    errors = []
    workload = _parse_workload(body, errors)
    if "costLimit" not in body:
        errors.append("costLimit is required")
        cost_limit = None
    else:
        cost_limit = _parse_number(body["costLimit"], "costLimit", errors)
    mode = body.get("mode") or catalog_store.mode()
    if errors:
        return jsonify({"error": "Validation failed", "details": errors}), 400

    req = SearchRequest(workload=workload, cost_limit=cost_limit, mode=mode)
    errors = req.validate()
    if errors:
        return jsonify({"error": "Validation failed", "details": errors}), 400

    try:
        result = require_feasible(find_best_config(
            req.workload, req.cost_limit, req.optimize_throughput, catalog_store.tiers(),
        ))
    except InvalidInputError as exc:
        return jsonify({"error": "Validation failed", "details": exc.errors}), 400
    except NoFeasibleConfigError as exc:
        logger.warning("Search rejected: %s", exc)
        return jsonify({"error": str(exc), "result": exc.result.to_dict()}), 422

    return jsonify(result.to_dict()), 200


@search_bp.route("/api/sweep", methods=["POST"])
def sweep():
    """Run the search for each budget. Infeasible budgets are reported with feasible=false."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be valid JSON"}), 400

    errors = []
    workload = _parse_workload(body, errors)
    raw_budgets = body.get("budgets")
    if raw_budgets is None:
        budgets = catalog_store.budgets()
    elif not isinstance(raw_budgets, list) or not raw_budgets:
        errors.append("budgets must be a non-empty list of numbers")
        budgets = []
    else:
        budgets = [_parse_number(b, "budgets[]", errors) for b in raw_budgets]
    mode = body.get("mode") or catalog_store.mode()
    if errors:
        return jsonify({"error": "Validation failed", "details": errors}), 400

    for budget in budgets:
        errors.extend(SearchRequest(workload=workload, cost_limit=budget, mode=mode).validate())
    if errors:
        return jsonify({"error": "Validation failed", "details": sorted(set(errors))}), 400

    try:
        results = sweep_budgets(workload, budgets, mode == "throughput", catalog_store.tiers())
    except InvalidInputError as exc:
        return jsonify({"error": "Validation failed", "details": exc.errors}), 400

    return jsonify({"mode": mode, "results": [r.to_dict() for r in results]}), 200


@search_bp.route("/api/evaluate", methods=["POST"])
def evaluate():
    """Explain a single configuration: gate failures, cost, and where accesses land."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be valid JSON"}), 400

    tiers = catalog_store.tiers()
    errors = []
    config = body.get("config")
    if (not isinstance(config, list) or len(config) != len(tiers)
            or not all(isinstance(c, int) and not isinstance(c, bool) and c >= 0 for c in config)):
        errors.append(f"config must be a list of {len(tiers)} non-negative integers")
    workload_errors = []
    workload = _parse_workload(body, workload_errors)
    errors.extend(workload_errors or validate_workload(workload))
    if errors:
        return jsonify({"error": "Validation failed", "details": errors}), 400

    failures = gate_failures(config, workload, tiers)
    payload = {
        "config": config,
        "workload": [g.to_dict() for g in workload],
        "valid": not failures,
        "gateFailures": failures,
        "totalCost": config_cost(config, tiers),
        "tierCosts": list(tier_costs(config, tiers)),
    }
    if not failures:
        fractions = compute_access_fractions(workload, config, tiers)
        payload["accessFractions"] = fractions
        payload["avgTimePerAccess"] = avg_time_per_access(fractions, tiers)
        payload["avgLatencyPerAccess"] = avg_latency_per_access(fractions, tiers)
    return jsonify(payload), 200
