"""Command-line interface for study-abroad cost estimation."""

import argparse
import json
from pathlib import Path

import numpy as np
import pandas as pd

from studycost.config import Settings, cfg, logger
from studycost.advice.tips import build_tips_generator
from studycost.api.server import build_estimate_response
from studycost.sim.breakdown import input_from_payload
from studycost.sim.cost_estimator import extract_percentiles, simulate_trial_totals


def _inputs_from_args(args):
    """Coerce CLI flags exactly like an HTTP request body."""
    return input_from_payload({
        "tuition": args.tuition,
        "months": args.months,
        "scholarship": args.scholarship,
        "monthly": {
            "rent": args.rent,
            "food": args.food,
            "transport": args.transport,
        },
    })


def _seed(args):
    return args.seed if args.seed is not None else cfg.RANDOM_STATE


def estimate_cmd(args):
    """Estimate one program and print the result."""
    inputs = _inputs_from_args(args)
    tips_generator = build_tips_generator(cfg) if args.tips else None

    response = build_estimate_response(
        inputs,
        np.random.default_rng(_seed(args)),
        tips_generator=tips_generator,
        currency=cfg.CURRENCY,
    )

    if args.json:
        print(json.dumps(response.model_dump(), indent=2, ensure_ascii=False))
        return

    est = response.estimate
    logger.info("=" * 70)
    logger.info(f"Study Abroad Cost Estimate ({est.months} months, {response.currency})")
    logger.info("=" * 70)
    for item in response.breakdown:
        logger.info(f"  {item.label:<18} {item.amount:>12,}")
    logger.info("-" * 70)
    logger.info(f"  {'Total P10':<18} {est.total_p10:>12,}")
    logger.info(f"  {'Total median':<18} {est.total_median:>12,}")
    logger.info(f"  {'Total P90':<18} {est.total_p90:>12,}")
    logger.info("Tips:")
    for tip in response.recommendations:
        logger.info(f"  - {tip}")


def batch_cmd(args):
    """Estimate every row of a CSV file."""
    from studycost.parallel.executor import estimate_frame

    df = pd.read_csv(args.input)
    logger.info(f"Loaded {len(df)} programs from {args.input}")

    result = estimate_frame(
        df,
        n_workers=args.workers,
        seed=_seed(args),
        progress_bar=not args.no_progress,
    )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output, index=False)
    logger.info(f"Estimates saved to: {output}")


def plot_cmd(args):
    """Plot the simulated cost distribution for one program."""
    from studycost.viz.plots import plot_cost_distribution

    inputs = _inputs_from_args(args)
    totals = simulate_trial_totals(inputs, np.random.default_rng(_seed(args)))
    summary = extract_percentiles(totals)

    outpath = args.output or (cfg.results_dir / "cost_distribution.png")
    plot_cost_distribution(totals, summary, outpath, currency=cfg.CURRENCY)


def serve_cmd(args):
    """Run the HTTP API."""
    import uvicorn
    from studycost.api.server import create_app

    settings = Settings(HOST=args.host or cfg.HOST, PORT=args.port or cfg.PORT)
    app = create_app(settings)
    logger.info(f"Server running on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level="info")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Study-abroad cost estimator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Cost figures shared by estimate and plot
    inputs_parser = argparse.ArgumentParser(add_help=False)
    inputs_parser.add_argument("--tuition", default=0, help="One-time tuition")
    inputs_parser.add_argument("--months", default=12, help="Program length in months")
    inputs_parser.add_argument("--rent", default=0, help="Monthly rent")
    inputs_parser.add_argument("--food", default=0, help="Monthly food")
    inputs_parser.add_argument("--transport", default=0, help="Monthly transport")
    inputs_parser.add_argument("--scholarship", default=0, help="Scholarship amount")

    seed_parser = argparse.ArgumentParser(add_help=False)
    seed_parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")

    # estimate subcommand
    estimate_parser = subparsers.add_parser(
        "estimate",
        parents=[inputs_parser, seed_parser],
        help="Estimate total cost for one program",
    )
    estimate_parser.add_argument("--json", action="store_true", help="Print the API response as JSON")
    estimate_parser.add_argument("--tips", action="store_true",
                                 help="Ask the tips service (needs OPENAI_API_KEY)")
    estimate_parser.set_defaults(func=estimate_cmd)

    # batch subcommand
    batch_parser = subparsers.add_parser(
        "batch",
        parents=[seed_parser],
        help="Estimate every row of a CSV file",
    )
    batch_parser.add_argument("--input", required=True,
                              help="CSV with columns tuition,months,rent,food,transport,scholarship")
    batch_parser.add_argument("--output", default="results/estimates.csv", help="Output CSV")
    batch_parser.add_argument("--workers", type=int, default=None, help="Number of parallel workers")
    batch_parser.add_argument("--no-progress", action="store_true", help="Hide progress bar")
    batch_parser.set_defaults(func=batch_cmd)

    # plot subcommand
    plot_parser = subparsers.add_parser(
        "plot",
        parents=[inputs_parser, seed_parser],
        help="Plot the simulated cost distribution",
    )
    plot_parser.add_argument("--output", default=None, help="Output PNG path")
    plot_parser.set_defaults(func=plot_cmd)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")
    serve_parser.set_defaults(func=serve_cmd)

    return parser


def main(argv=None):
    """Main CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
