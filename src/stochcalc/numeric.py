"""Small numeric primitives shared by the Markov and queueing engines."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Union

import numpy as np

ArrayLike = Union[Sequence[float], np.ndarray]


def factorial(n: float) -> float:
    """
    Return n! as a float using an iterative product over 2..floor(n).

    Non-integer input is floored and anything <= 1 yields 1. Integer counts
    are validated at the API boundary, not here. Large n overflows to inf
    like any other float product.
    """
    upper = math.floor(n)
    result = 1.0
    for i in range(2, upper + 1):
        result *= i
    return result


def normalize(vector: ArrayLike) -> np.ndarray:
    """Scale ``vector`` to sum 1; a zero-sum vector becomes uniform."""
    arr = np.asarray(vector, dtype=float)
    total = arr.sum()
    if total == 0:
        return np.full(arr.shape, 1.0 / arr.size)
    return arr / total


def birth_death_distribution(a: float, c: int, K: int) -> np.ndarray:
    """
    Stationary P_0..P_K of a birth-death chain with arrival/service ratio
    ``a`` and ``c`` parallel servers.

    Weights follow w_n = w_{n-1} * a / min(n, c) and are built in log space,
    then shifted by their maximum, so no intermediate power of ``a`` or
    factorial can overflow.
    """
    n = np.arange(1, K + 1)
    log_steps = math.log(a) - np.log(np.minimum(n, c))
    log_weights = np.concatenate(([0.0], np.cumsum(log_steps)))
    weights = np.exp(log_weights - log_weights.max())
    return weights / weights.sum()


def as_whole_number(value: Any) -> Optional[int]:
    """Return ``value`` as an int when it denotes a whole number, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)
