"""Discrete-time Markov chain evolution and steady-state estimation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ValidationError
from .numeric import as_whole_number, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowSumWarning:
    """A transition-matrix row whose sum deviates from 1."""

    row: int
    total: float

    def message(self) -> str:
        return f"row {self.row + 1} of P sums to {self.total:.6f}"


@dataclass(frozen=True)
class SteadyState:
    """Outcome of the power iteration."""

    distribution: np.ndarray
    iterations: int
    converged: bool


@dataclass(frozen=True)
class MarkovResult:
    """Trajectory snapshots (step 0..n), steady state and row-sum warnings."""

    trajectory: np.ndarray
    steady_state: np.ndarray
    warnings: Tuple[RowSumWarning, ...] = field(default_factory=tuple)
    iterations: int = 0
    converged: bool = True

    @property
    def steps(self) -> int:
        return len(self.trajectory) - 1

    @property
    def n_states(self) -> int:
        return self.trajectory.shape[1]

    def as_dict(self) -> Dict[str, Any]:
        """Plain-data view for renderers and JSON export."""
        return {
            "trajectory": self.trajectory.tolist(),
            "steady_state": self.steady_state.tolist(),
            "warnings": [{"row": w.row, "sum": w.total} for w in self.warnings],
            "iterations": self.iterations,
            "converged": self.converged,
        }


def validate_chain(P: np.ndarray, v0: np.ndarray) -> int:
    """Check that P is square and v0 matches; return the state count."""
    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise ValidationError(f"The matrix must be square (n x n); got shape {P.shape}.")
    n = P.shape[0]
    if v0.ndim != 1 or v0.shape[0] != n:
        raise ValidationError(
            f"Dimension mismatch: initial vector has length {v0.size} but P is {n} x {n}."
        )
    return n


def check_row_sums(P: np.ndarray, tol: float = DEFAULT_CONFIG.row_sum_tol) -> List[RowSumWarning]:
    """Return one warning per row whose sum is farther than ``tol`` from 1."""
    warnings = []
    for i, total in enumerate(P.sum(axis=1)):
        if abs(total - 1.0) > tol:
            warnings.append(RowSumWarning(row=i, total=float(total)))
    return warnings


def step(current: np.ndarray, P: np.ndarray) -> np.ndarray:
    """One transition v_{t+1} = normalize(v_t P)."""
    return normalize(current @ P)


def trajectory(P: np.ndarray, v0: np.ndarray, steps: int) -> np.ndarray:
    """Return the ``steps + 1`` distributions visited from normalize(v0)."""
    current = normalize(v0)
    snapshots = []
    for _ in range(steps + 1):
        snapshots.append(current)
        current = step(current, P)
    return np.vstack(snapshots)


def steady_state(
    P: np.ndarray, v0: np.ndarray, config: EngineConfig = DEFAULT_CONFIG
) -> SteadyState:
    """
    Approximate the stationary distribution by power iteration.

    The loop is bounded by ``config.max_iterations`` so periodic or
    reducible chains still terminate; ``converged`` reports whether the
    successive-iterate difference dropped below ``config.convergence_tol``.
    """
    est = normalize(v0)
    prev: Optional[np.ndarray] = None
    converged = False
    iterations = 0
    for iterations in range(1, config.max_iterations + 1):
        est = step(est, P)
        if prev is not None and np.max(np.abs(est - prev)) < config.convergence_tol:
            converged = True
            break
        prev = est

    if converged:
        logger.debug("Power iteration converged after %d rounds.", iterations)
    else:
        logger.warning(
            "Power iteration stopped after %d rounds without converging.", iterations
        )
    return SteadyState(
        distribution=np.round(est, config.steady_decimals),
        iterations=iterations,
        converged=converged,
    )


def coerce_steps(value: Any, config: EngineConfig = DEFAULT_CONFIG) -> int:
    """Whole non-negative step count, else the configured default."""
    steps = as_whole_number(value)
    if steps is None or steps < 0:
        return config.default_steps
    return steps


def evolve(
    P: np.ndarray,
    v0: np.ndarray,
    steps: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> MarkovResult:
    """
    Validate the chain, compute its trajectory and its steady state.

    Raises:
        ValidationError: when P is not square or v0 has the wrong length.
    """
    P = np.asarray(P, dtype=float)
    v0 = np.asarray(v0, dtype=float)
    steps = coerce_steps(steps, config)
    validate_chain(P, v0)

    warnings = check_row_sums(P, config.row_sum_tol)
    for warning in warnings:
        logger.warning("Transition matrix is not stochastic: %s.", warning.message())

    steady = steady_state(P, v0, config)
    return MarkovResult(
        trajectory=trajectory(P, v0, steps),
        steady_state=steady.distribution,
        warnings=tuple(warnings),
        iterations=steady.iterations,
        converged=steady.converged,
    )
