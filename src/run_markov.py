"""Command line interface to evolve a discrete-time Markov chain."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Tuple

try:
    from plots import render_trajectory
    from report_text import format_markov
    from stochcalc import get_chain, list_chains, run_markov
    from stochcalc.logging_config import setup_logging
except ModuleNotFoundError:  # pragma: no cover - fallback when executed as package
    from .plots import render_trajectory
    from .report_text import format_markov
    from .stochcalc import get_chain, list_chains, run_markov
    from .stochcalc.logging_config import setup_logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute the trajectory and steady state of a Markov chain."
    )
    parser.add_argument(
        "--matrix",
        type=str,
        help='Transition matrix, e.g. "3/4,1/4; 1/5,4/5" or "[[0.75,0.25],[0.2,0.8]]".',
    )
    parser.add_argument("--vector", type=str, help='Initial distribution, e.g. "1,0".')
    parser.add_argument(
        "--chain",
        type=str,
        choices=list(list_chains()),
        help="Named example chain (overrides --matrix/--vector).",
    )
    parser.add_argument("--steps", type=str, default="10", help="Number of steps (default 10).")
    parser.add_argument("--plot", type=Path, help="Write the trajectory chart to this PNG.")
    parser.add_argument("--json-out", type=Path, help="Write the result record as JSON.")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level.")
    parser.add_argument("--log-file", type=str, help="Also write diagnostics to this file.")
    return parser.parse_args(argv)


def resolve_inputs(args: argparse.Namespace) -> Tuple[str, str]:
    """Return matrix and vector text from --chain or the explicit flags."""
    if args.chain:
        chain = get_chain(args.chain)
        return chain.matrix, chain.vector
    if args.matrix is None or args.vector is None:
        raise SystemExit("Either --chain or both --matrix and --vector must be provided.")
    return args.matrix, args.vector


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    matrix_text, vector_text = resolve_inputs(args)

    outcome = run_markov(matrix_text, vector_text, args.steps)
    if not outcome.ok:
        raise SystemExit(f"Error: {outcome.error}")
    result = outcome.result

    print(format_markov(result))

    if args.json_out:
        args.json_out.parent.mkdir(parents=True, exist_ok=True)
        args.json_out.write_text(json.dumps(result.as_dict(), indent=2), encoding="utf-8")
        print(f"\nResult saved to {args.json_out.resolve()}")

    if args.plot:
        with render_trajectory(result) as chart:
            path = chart.save(args.plot)
        print(f"Chart saved to {path.resolve()}")


if __name__ == "__main__":
    main()
