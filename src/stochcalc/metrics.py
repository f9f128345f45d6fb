"""Closed-form performance metrics for single-server queues (M/M/1, M/M/1/K)."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Mapping

import numpy as np

from .config import DEFAULT_CONFIG
from .errors import ValidationError
from .numeric import birth_death_distribution


@dataclass(frozen=True)
class MM1Theory:
    """Bundle of theoretical steady-state metrics for an M/M/1 system."""

    rho: float
    P0: float
    L: float
    Lq: float
    W: float
    Wq: float

    def as_dict(self) -> Mapping[str, float]:
        """Return the metrics as a plain dictionary (handy for printing)."""
        return asdict(self)


@dataclass(frozen=True)
class MM1KTheory:
    """Steady-state metrics for an M/M/1/K system with room for K customers."""

    rho: float
    P0: float
    L: float
    Lq: float
    W: float
    Wq: float
    lambda_eff: float

    def as_dict(self) -> Mapping[str, float]:
        return asdict(self)


def check_rates(lam: float, mu: float) -> None:
    """Both rates must be strictly positive."""
    if not lam > 0:
        raise ValidationError("Arrival rate lam must be strictly positive.")
    if not mu > 0:
        raise ValidationError("Service rate mu must be strictly positive.")


def rho(lam: float, mu: float) -> float:
    """Return the traffic intensity λ/μ validating the input domain."""
    check_rates(lam, mu)
    r = lam / mu
    if not math.isfinite(r):
        raise ValidationError("Parameters out of numeric range: lam / mu is not finite.")
    return r


def mm1_theory(lam: float, mu: float) -> MM1Theory:
    """
    Compute steady-state M/M/1 metrics.

    Raises:
        ValidationError: when ρ ≥ 1 (system unstable) or inputs are invalid.
    """
    r = rho(lam, mu)
    if r >= 1.0:
        raise ValidationError(f"System unstable: rho = {r:.4f} must be < 1 for M/M/1.")

    denom = 1.0 - r
    L = r / denom
    Lq = (r * r) / denom
    W = L / lam
    Wq = Lq / lam
    return MM1Theory(rho=r, P0=denom, L=L, Lq=Lq, W=W, Wq=Wq)


def mm1k_probabilities(r: float, K: int, unit_tol: float = DEFAULT_CONFIG.unit_rho_tol) -> np.ndarray:
    """Return P_0..P_K for a birth-death chain with constant ratio ``r``."""
    if abs(r - 1.0) < unit_tol:
        return np.full(K + 1, 1.0 / (K + 1))
    return birth_death_distribution(r, 1, K)


def mm1k_theory(
    lam: float, mu: float, K: int, unit_tol: float = DEFAULT_CONFIG.unit_rho_tol
) -> MM1KTheory:
    """
    Compute M/M/1/K metrics. The finite buffer keeps it stable for any ρ.

    K = 0 admits nobody: P0 = 1, λ_eff = 0 and both waiting times are
    reported as 0.
    """
    r = rho(lam, mu)
    if K is None or K < 0:
        raise ValidationError("M/M/1/K requires a finite capacity K >= 0.")

    probs = mm1k_probabilities(r, K, unit_tol)
    P0 = float(probs[0])
    L = float(np.dot(np.arange(K + 1), probs))
    Lq = max(L - (1.0 - P0), 0.0)
    lambda_eff = lam * (1.0 - float(probs[K]))
    if lambda_eff > 0:
        W = L / lambda_eff
        Wq = Lq / lambda_eff
    else:
        W = Wq = 0.0
    return MM1KTheory(rho=r, P0=P0, L=L, Lq=Lq, W=W, Wq=Wq, lambda_eff=lambda_eff)


def relative_error(sim_value: float, reference_value: float) -> float:
    """Return |sim-ref| / ref guarding division by zero."""
    if reference_value == 0:
        return 0.0 if sim_value == 0 else float("inf")
    return abs(sim_value - reference_value) / abs(reference_value)
