"""Closed-form metrics for multi-server queues (M/M/c and M/M/c/K)."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

import numpy as np

from .errors import ValidationError
from .metrics import check_rates
from .metrics import rho as offered_load
from .numeric import birth_death_distribution


@dataclass(frozen=True)
class MMCTheory:
    """Bundle of steady-state metrics for an M/M/c system."""

    rho: float
    P0: float
    L: float
    Lq: float
    W: float
    Wq: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class MMCKTheory:
    """Bundle of steady-state metrics for an M/M/c/K system."""

    rho: float
    P0: float
    L: float
    Lq: float
    W: float
    Wq: float
    lambda_eff: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def _check_servers(c: int) -> None:
    if c < 1:
        raise ValidationError("Number of servers c must be >= 1.")


def mmc_theory(lam: float, mu: float, c: int) -> MMCTheory:
    """
    Compute M/M/c steady-state metrics using the Erlang-C formulas.

    L is reported as Lq + a/c, the formula set this tool has always shown;
    for c > 1 it is the queue length plus the per-server utilization.

    Raises:
        ValidationError: if inputs are outside the stability region (rho >= 1)
                         or c < 1 / mu <= 0 / lam <= 0.
    """
    check_rates(lam, mu)
    _check_servers(c)

    a = offered_load(lam, mu)
    rho = a / c
    if rho >= 1.0:
        raise ValidationError(f"System unstable: rho = {rho:.4f} must be < 1 for M/M/c.")

    # log(a**n / n!) for n = 0..c; the last term becomes the Erlang-C tail.
    log_terms = np.concatenate(([0.0], np.cumsum(math.log(a) - np.log(np.arange(1, c + 1)))))
    log_terms[c] -= math.log1p(-rho)
    shift = float(log_terms.max())
    total = float(np.exp(log_terms - shift).sum())
    P0 = math.exp(-shift) / total
    Pc = math.exp(float(log_terms[c]) - shift) / total

    Lq = Pc * rho / (1.0 - rho)
    L = Lq + a / c
    Wq = Lq / lam
    W = Wq + 1.0 / mu
    return MMCTheory(rho=rho, P0=P0, L=L, Lq=Lq, W=W, Wq=Wq)


def mmck_probabilities(a: float, c: int, K: int) -> np.ndarray:
    """Return P_0..P_K: Erlang branch for n <= c, geometric tail above c."""
    return birth_death_distribution(a, c, K)


def mmck_theory(lam: float, mu: float, c: int, K: int) -> MMCKTheory:
    """
    Compute M/M/c/K metrics. Blocking keeps the chain finite, so no
    stability condition applies.

    Raises:
        ValidationError: if K is missing or smaller than c, or rates/servers
                         are invalid.
    """
    check_rates(lam, mu)
    _check_servers(c)
    if K is None:
        raise ValidationError("M/M/c/K requires a finite capacity K.")
    if K < c:
        raise ValidationError(f"Capacity K = {K} must be >= the number of servers c = {c}.")

    a = offered_load(lam, mu)
    probs = mmck_probabilities(a, c, K)
    n = np.arange(K + 1)

    L = float(np.dot(n, probs))
    Lq = float(np.dot(np.clip(n - c, 0, None), probs))
    lambda_eff = lam * (1.0 - float(probs[K]))
    if lambda_eff > 0:
        W = L / lambda_eff
        Wq = Lq / lambda_eff
    else:
        W = Wq = 0.0
    return MMCKTheory(
        rho=a / c,
        P0=float(probs[0]),
        L=L,
        Lq=Lq,
        W=W,
        Wq=Wq,
        lambda_eff=lambda_eff,
    )
