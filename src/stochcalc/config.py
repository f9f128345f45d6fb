"""Numerical tolerances and defaults used by the engines."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """Bundle of tolerances so tests and CLIs can tighten or relax them."""

    row_sum_tol: float = 1e-6
    convergence_tol: float = 1e-10
    max_iterations: int = 1000
    default_steps: int = 10
    steady_decimals: int = 10
    unit_rho_tol: float = 1e-12

    def __post_init__(self) -> None:
        if self.row_sum_tol < 0 or self.convergence_tol <= 0:
            raise ValueError("Tolerances must be positive.")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1.")
        if self.default_steps < 0:
            raise ValueError("default_steps must be non-negative.")


DEFAULT_CONFIG = EngineConfig()
