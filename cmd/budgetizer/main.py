from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from flask import Flask

from budgetizer.catalog.data import CatalogConfigError, CatalogStore, catalog_store
from budgetizer.handlers.search_api import search_bp
from budgetizer.report.formatter import format_sweep
from budgetizer.search.search import InvalidInputError, sweep_budgets


def create_app() -> Flask:
    app = Flask(__name__)
    app.register_blueprint(search_bp)
    return app


def run_sweep(args) -> int:
    store = CatalogStore(args.config) if args.config else catalog_store
    tiers = store.tiers()
    budgets = args.budget or store.budgets()
    mode = args.mode or store.mode()
    results = sweep_budgets(store.workload(), budgets, mode == "throughput", tiers)
    print(format_sweep(results, tiers))
    return 0


def run_serve(args) -> int:
    port = int(os.getenv("PORT", "8080"))
    app = create_app()
    print(f"Budgetizer listening on http://0.0.0.0:{port}")
    app.run(host="0.0.0.0", port=port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="budgetizer",
        description="Find the storage tier configuration with the best access time under a cost budget.",
    )
    sub = parser.add_subparsers(dest="command")

    sweep = sub.add_parser("sweep", help="Search each cost budget and print a report (default)")
    sweep.add_argument("--budget", type=float, action="append",
                       help="Cost budget in dollars; repeat for several (default: configured budgets)")
    sweep.add_argument("--mode", choices=["throughput", "latency"],
                       help="Metric to optimize (default: configured mode)")
    sweep.add_argument("--config", help="Path to a catalog YAML file")
    sweep.set_defaults(func=run_sweep)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.set_defaults(func=run_serve)
    return parser


def main(argv=None) -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(["sweep"])
    try:
        return args.func(args)
    except (InvalidInputError, CatalogConfigError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
