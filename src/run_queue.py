"""Command line interface for queueing metrics, optionally checked by simulation."""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Any, Iterable, Mapping, Tuple

import pandas as pd
from tqdm import trange

try:
    from plots import render_metrics
    from report_text import format_queueing
    from stochcalc import (
        QueueingInput,
        SimParams,
        SimulationResult,
        coerce_capacity,
        coerce_servers,
        get_input,
        list_scenarios,
        relative_error,
        run_queue_sim,
        run_queueing,
    )
    from stochcalc.logging_config import setup_logging
except ModuleNotFoundError:  # pragma: no cover - fallback when executed as package
    from .plots import render_metrics
    from .report_text import format_queueing
    from .stochcalc import (
        QueueingInput,
        SimParams,
        SimulationResult,
        coerce_capacity,
        coerce_servers,
        get_input,
        list_scenarios,
        relative_error,
        run_queue_sim,
        run_queueing,
    )
    from .stochcalc.logging_config import setup_logging

# simulation column -> theory key
METRIC_MAPPING = [
    ("L", "L"),
    ("Lq", "Lq"),
    ("W_mean", "W"),
    ("Wq_mean", "Wq"),
    ("utilization", "utilization"),
    ("lambda_eff_hat", "lambda_eff"),
]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute metrics for an M/M/c[/K] queue.")
    parser.add_argument(
        "--model",
        type=str,
        default="M/M/1",
        help="Queue model: M/M/1, M/M/c, M/M/1/K or M/M/c/K (MM1, MMc, ... accepted).",
    )
    parser.add_argument("--lam", type=str, help="Arrival rate lambda (required unless --scenario).")
    parser.add_argument("--mu", type=str, help="Service rate mu (required unless --scenario).")
    parser.add_argument("--c", type=str, default="1", help="Number of servers.")
    parser.add_argument("--K", type=str, default=None, help="System capacity (blank or <= 0: unbounded).")
    parser.add_argument(
        "--scenario",
        type=str,
        choices=list(list_scenarios()),
        help="Named scenario shortcut (A, B, C, D).",
    )
    parser.add_argument("--simulate", action="store_true", help="Also run SimPy replications.")
    parser.add_argument("--seed", type=int, default=123, help="Base random seed.")
    parser.add_argument("--warmup", type=float, default=1_000.0, help="Warm-up time to discard.")
    parser.add_argument("--horizon", type=float, default=50_000.0, help="Total simulation time.")
    parser.add_argument("--replications", type=int, default=5, help="Number of replications.")
    parser.add_argument(
        "--outputs",
        type=Path,
        default=Path("outputs/results.csv"),
        help="Path where the per-replication CSV will be written.",
    )
    parser.add_argument("--plot", type=Path, help="Write the metrics bar chart to this PNG.")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level.")
    parser.add_argument("--log-file", type=str, help="Also write diagnostics to this file.")
    return parser.parse_args(argv)


def resolve_input(args: argparse.Namespace) -> Tuple[Any, Any, Any, Any, Any]:
    """Return raw (model, lam, mu, c, K) from --scenario or the explicit flags."""
    if args.scenario:
        inp = get_input(args.scenario)
        return inp.model, inp.lam, inp.mu, inp.servers, inp.capacity
    if args.lam is None or args.mu is None:
        raise SystemExit("Either --scenario or both --lam and --mu must be provided.")
    return args.model, args.lam, args.mu, args.c, args.K


def run_replications(inp: QueueingInput, args: argparse.Namespace) -> Iterable[SimulationResult]:
    """Yield SimulationResult for each replication."""
    for rep in trange(args.replications, desc="Simulating", unit="rep"):
        params = SimParams(seed=args.seed + rep, warmup=args.warmup, horizon=args.horizon)
        yield run_queue_sim(inp, params)


def compute_summary(df: pd.DataFrame, theory: Mapping[str, float]) -> pd.DataFrame:
    """Mean, 95% CI half-width and relative error per simulated metric."""
    if df.empty:
        return pd.DataFrame()

    n = len(df)
    lam = float(df["lam"].iloc[0])
    busy_capacity = float(df["servers"].iloc[0] * df["mu"].iloc[0])
    theory = dict(theory)
    # Infinite-capacity models admit every arrival.
    theory.setdefault("lambda_eff", lam)
    theory["utilization"] = theory["lambda_eff"] / busy_capacity

    rows = []
    for sim_key, th_key in METRIC_MAPPING:
        series = df[sim_key]
        mean = float(series.mean())
        std = float(series.std(ddof=1)) if n > 1 else 0.0
        half = 1.96 * std / math.sqrt(n) if n > 1 else 0.0
        theory_value = theory.get(th_key, float("nan"))
        rows.append(
            {
                "metric": sim_key,
                "mean": mean,
                "std": std,
                "ci95_halfwidth": half,
                "theory": theory_value,
                "relative_error_pct": relative_error(mean, theory_value) * 100,
                "replications": n,
            }
        )
    return pd.DataFrame(rows)


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    model, lam, mu, c, K = resolve_input(args)

    outcome = run_queueing(model, lam, mu, c, K)
    if not outcome.ok:
        raise SystemExit(f"Error: {outcome.error}")
    result = outcome.result

    print(format_queueing(result))

    if args.plot:
        with render_metrics(result) as chart:
            path = chart.save(args.plot)
        print(f"\nChart saved to {path.resolve()}")

    if not args.simulate:
        return

    inp = QueueingInput(
        model=result.model,
        lam=float(lam),
        mu=float(mu),
        servers=coerce_servers(c),
        capacity=coerce_capacity(K),
    )
    df = pd.DataFrame([r.as_dict() for r in run_replications(inp, args)])
    if df.empty:
        raise SystemExit("No simulation data was produced.")

    ensure_parent(args.outputs)
    df.to_csv(args.outputs, index=False)
    summary_df = compute_summary(df, result.metrics)
    summary_path = args.outputs.parent / "summary.csv"
    summary_df.to_csv(summary_path, index=False)

    print("\nSimulation (empirical means):")
    for row in summary_df.itertuples():
        print(
            f"  {row.metric:<14}: {row.mean:>10.6f} +/-{row.ci95_halfwidth:>9.6f}"
            f"  (theory {row.theory:>10.6f}, error {row.relative_error_pct:>7.3f}%)"
        )
    print(f"  blocking      : {df['blocking_fraction'].mean():>10.6f}")

    print("\nLittle's law check:")
    print(f"  L vs lambda_eff*W   : {df['little_L_error'].mean() * 100:>9.3f}%")
    print(f"  Lq vs lambda_eff*Wq : {df['little_Lq_error'].mean() * 100:>9.3f}%")

    print(f"\nResults saved to {args.outputs.resolve()}")
    print(f"Summary saved to {summary_path.resolve()}")


if __name__ == "__main__":
    main()
