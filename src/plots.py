"""Chart rendering for Markov trajectories and queue metrics.

Every ``render_*`` call returns a fresh :class:`ChartHandle`. The caller owns
it and must ``dispose()`` it (or use it as a context manager) before asking
for a new chart in the same output slot.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt

try:
    from report_text import METRIC_LABELS
    from stochcalc import MarkovResult, QueueingResult
except ModuleNotFoundError:  # pragma: no cover
    from .report_text import METRIC_LABELS
    from .stochcalc import MarkovResult, QueueingResult

PALETTE = ["#0b6b3a", "#16a085", "#f6c84c", "#ef7a2f", "#6cbf84", "#2e7d32"]
METRIC_COLORS = {
    "rho": "#0b6b3a",
    "L": "#16a085",
    "Lq": "#f6c84c",
    "W": "#ef7a2f",
    "Wq": "#8fcf9b",
    "lambda_eff": "#7fbfcd",
}


class ChartHandle:
    """Owns one matplotlib figure until disposed."""

    def __init__(self, fig: plt.Figure):
        self._fig: Optional[plt.Figure] = fig

    @property
    def figure(self) -> plt.Figure:
        if self._fig is None:
            raise RuntimeError("Chart handle has already been disposed.")
        return self._fig

    @property
    def disposed(self) -> bool:
        return self._fig is None

    def save(self, path: Path, dpi: int = 150) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.figure.savefig(path, dpi=dpi)
        return path

    def dispose(self) -> None:
        if self._fig is not None:
            plt.close(self._fig)
            self._fig = None

    def __enter__(self) -> "ChartHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


def render_trajectory(result: MarkovResult) -> ChartHandle:
    """Line chart with one series per state over steps 0..n."""
    steps = list(range(len(result.trajectory)))
    fig, ax = plt.subplots(figsize=(8, 4))
    for state in range(result.n_states):
        ax.plot(
            steps,
            result.trajectory[:, state],
            marker="o",
            markersize=3,
            color=PALETTE[state % len(PALETTE)],
            label=f"State {state + 1}",
        )
    ax.set_ylim(0, 1)
    ax.set_xlabel("Step")
    ax.set_ylabel("Probability")
    ax.set_title("State distribution by step")
    ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.15), ncol=min(result.n_states, 6))
    fig.tight_layout()
    return ChartHandle(fig)


def render_metrics(result: QueueingResult) -> ChartHandle:
    """Bar chart of the metrics present for the model, rounded to 4 decimals."""
    keys = [k for k in METRIC_COLORS if k in result.metrics]
    values = [round(result.metrics[k], 4) for k in keys]
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar(
        [METRIC_LABELS[k] for k in keys],
        values,
        color=[METRIC_COLORS[k] for k in keys],
    )
    ax.set_ylim(bottom=0)
    ax.set_title(f"Metrics for {result.model.label}")
    fig.tight_layout()
    return ChartHandle(fig)
