"""Plain-text rendering of Markov and queueing result records."""

from __future__ import annotations

from typing import Iterable, List

try:
    from stochcalc import MarkovResult, QueueingResult
except ModuleNotFoundError:  # pragma: no cover - fallback when executed as package
    from .stochcalc import MarkovResult, QueueingResult

METRIC_LABELS = {
    "rho": "ρ",
    "P0": "P0",
    "L": "L",
    "Lq": "Lq",
    "W": "W",
    "Wq": "Wq",
    "lambda_eff": "λ_eff",
}


def format_value(value: float) -> str:
    return f"{value:.6f}"


def format_vector(values: Iterable[float], digits: int = 6) -> str:
    return "[" + ", ".join(f"{v:.{digits}f}" for v in values) + "]"


def format_trajectory(result: MarkovResult) -> str:
    lines = [f"Step {i}: {format_vector(row)}" for i, row in enumerate(result.trajectory)]
    return "\n".join(lines)


def format_steady_state(result: MarkovResult) -> str:
    values = ", ".join(repr(float(v)) for v in result.steady_state)
    text = f"≈ [{values}]"
    if not result.converged:
        text += f"  (not converged after {result.iterations} iterations)"
    return text


def format_markov(result: MarkovResult) -> str:
    """Trajectory lines, steady state and any row-sum warnings."""
    parts: List[str] = [format_trajectory(result), "", f"Steady state: {format_steady_state(result)}"]
    if result.warnings:
        parts.append("")
        parts.append("Warning: some rows of P do not sum to 1.")
        parts.extend(f"  {w.message()}" for w in result.warnings)
    return "\n".join(parts)


def format_queueing(result: QueueingResult) -> str:
    lines = [f"Model {result.model.label}:"]
    for key, value in result.metrics.items():
        label = METRIC_LABELS.get(key, key)
        lines.append(f"  {label:<6}: {value:>12.6f}")
    return "\n".join(lines)
