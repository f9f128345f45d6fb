"""Sweep the number of servers c for M/M/c or M/M/c/K and compare metrics."""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import matplotlib.pyplot as plt
import pandas as pd
from tqdm import trange

try:
    from plots import ChartHandle
    from stochcalc import (
        QueueingInput,
        QueueModel,
        SimParams,
        ValidationError,
        coerce_capacity,
        run_queue_sim,
        run_queueing,
    )
    from stochcalc.logging_config import setup_logging
except ModuleNotFoundError:  # pragma: no cover
    from .plots import ChartHandle
    from .stochcalc import (
        QueueingInput,
        QueueModel,
        SimParams,
        ValidationError,
        coerce_capacity,
        run_queue_sim,
        run_queueing,
    )
    from .stochcalc.logging_config import setup_logging

logger = logging.getLogger("stochcalc.compare")

SIM_COLUMNS = [("L", "L"), ("Lq", "Lq"), ("W_mean", "W"), ("Wq_mean", "Wq")]


def parse_c_list(spec: str) -> List[int]:
    values = []
    for chunk in spec.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            c = int(chunk)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Invalid c value '{chunk}'.") from exc
        if c < 1:
            raise argparse.ArgumentTypeError("Every c must be >= 1.")
        values.append(c)
    if not values:
        raise argparse.ArgumentTypeError("Provide at least one server count via --c-list.")
    return sorted(set(values))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare queue metrics across server counts.")
    parser.add_argument(
        "--model",
        type=str,
        default="M/M/c",
        help="Multi-server model to sweep: M/M/c or M/M/c/K.",
    )
    parser.add_argument("--lam", type=float, required=True, help="Arrival rate lambda.")
    parser.add_argument("--mu", type=float, required=True, help="Service rate mu.")
    parser.add_argument("--K", type=int, default=None, help="Capacity for M/M/c/K.")
    parser.add_argument(
        "--c-list",
        type=str,
        default="1,2,3,4",
        help='Comma-separated list of server counts to evaluate (e.g. "1,2,3,4").',
    )
    parser.add_argument("--replications", type=int, default=0, help="SimPy replications per c.")
    parser.add_argument("--seed", type=int, default=123, help="Base random seed.")
    parser.add_argument("--warmup", type=float, default=1_000.0, help="Warm-up time.")
    parser.add_argument("--horizon", type=float, default=20_000.0, help="Simulation horizon.")
    parser.add_argument("--c-server", type=float, default=1.0, dest="c_server", help="Cost per server.")
    parser.add_argument(
        "--c-wait", type=float, default=1.0, dest="c_wait", help="Cost per waiting customer."
    )
    parser.add_argument(
        "--summary-out",
        type=Path,
        default=Path("outputs/compare_summary.csv"),
        help="CSV with metrics per c.",
    )
    parser.add_argument(
        "--reports-dir",
        type=Path,
        default=Path("reports"),
        help="Directory where comparison figures will be written.",
    )
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level.")
    parser.add_argument("--log-file", type=str, help="Also write diagnostics to this file.")
    return parser.parse_args(argv)


def simulate_for_c(inp: QueueingInput, args: argparse.Namespace) -> Iterable[Dict[str, float]]:
    for rep in trange(args.replications, desc=f"c={inp.servers}", unit="rep"):
        params = SimParams(seed=args.seed + rep, warmup=args.warmup, horizon=args.horizon)
        yield run_queue_sim(inp, params).as_dict()


def summarize_replications(rows: List[Dict[str, float]]) -> Dict[str, float]:
    """Mean and 95% CI half-width of the simulated metrics."""
    df = pd.DataFrame(rows)
    summary = {}
    for column, alias in SIM_COLUMNS:
        series = df[column]
        std = float(series.std(ddof=1)) if len(series) > 1 else 0.0
        summary[f"{alias}_sim"] = float(series.mean())
        summary[f"{alias}_ci95"] = 1.96 * std / math.sqrt(len(series)) if len(series) > 1 else 0.0
    return summary


def sweep(
    model: QueueModel, lam: float, mu: float, capacity: Optional[int], args: argparse.Namespace
) -> pd.DataFrame:
    """One row of theory (and optional simulation) per stable server count."""
    rows = []
    for c in parse_c_list(args.c_list):
        outcome = run_queueing(model, lam, mu, c, capacity)
        if not outcome.ok:
            logger.warning("Skipping c=%d: %s", c, outcome.error)
            continue
        row: Dict[str, float] = {"c": c, **outcome.result.metrics}
        if args.replications > 0:
            inp = QueueingInput(model=model, lam=lam, mu=mu, servers=c, capacity=capacity)
            row.update(summarize_replications(list(simulate_for_c(inp, args))))
        rows.append(row)
    return pd.DataFrame(rows)


def annotate_decision(summary: pd.DataFrame, c_server: float, c_wait: float) -> Optional[int]:
    """Add a cost column c_server*c + c_wait*Lq and return the cheapest c."""
    if summary.empty:
        return None
    summary["score"] = c_server * summary["c"] + c_wait * summary["Lq"]
    return int(summary.loc[summary["score"].idxmin(), "c"])


def plot_metrics_vs_c(summary: pd.DataFrame, reports_dir: Path) -> Path:
    c_values = summary["c"].astype(int).tolist()
    fig, ax = plt.subplots(figsize=(10, 5))
    for label in ["L", "Lq", "W", "Wq"]:
        ax.plot(c_values, summary[label], marker="x", linestyle="--", label=f"{label} (theory)")
        if f"{label}_sim" in summary:
            ax.errorbar(
                c_values,
                summary[f"{label}_sim"],
                yerr=summary[f"{label}_ci95"],
                marker="o",
                capsize=4,
                label=f"{label} (sim)",
            )
    ax.set_xlabel("c")
    ax.set_ylabel("L, Lq, W, Wq")
    ax.set_title("Metrics vs. number of servers")
    ax.legend(loc="upper right")
    fig.tight_layout()
    with ChartHandle(fig) as chart:
        return chart.save(reports_dir / "metrics_vs_c.png")


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        model = QueueModel.parse(args.model)
    except ValidationError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    if not model.multi_server:
        raise SystemExit("Server sweeps need a multi-server model (M/M/c or M/M/c/K).")

    summary_df = sweep(model, args.lam, args.mu, coerce_capacity(args.K), args)
    if summary_df.empty:
        raise SystemExit("No stable configuration found; review the parameters.")
    best_c = annotate_decision(summary_df, args.c_server, args.c_wait)

    args.summary_out.parent.mkdir(parents=True, exist_ok=True)
    summary_df.to_csv(args.summary_out, index=False)
    args.reports_dir.mkdir(parents=True, exist_ok=True)
    figure = plot_metrics_vs_c(summary_df, args.reports_dir)

    print(summary_df.to_string(index=False))
    print(f"\nRecommended c (cost c_server*c + c_wait*Lq): {best_c}")
    print(f"Summary saved to {args.summary_out.resolve()}")
    print(f"Chart saved to {figure.resolve()}")


if __name__ == "__main__":
    main()
