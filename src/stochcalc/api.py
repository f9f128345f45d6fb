"""Entry points that take raw user input and never raise on bad input.

Each ``run_*`` call parses/coerces its arguments, runs one engine and wraps
either the result record or the error message in an :class:`Outcome`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import StochcalcError
from .markov import MarkovResult, coerce_steps, evolve
from .numeric import as_whole_number
from .parser import parse_matrix, parse_vector
from .queueing import QueueingInput, QueueingResult, QueueModel, compute_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATES_MESSAGE = "Enter valid positive values for λ and μ."


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a result record or a user-facing error message."""

    result: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise StochcalcError(self.error)
        return self.result


def _as_rate(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def coerce_servers(value: Any) -> int:
    """Whole server count >= 1, else 1."""
    servers = as_whole_number(value)
    if servers is None or servers < 1:
        return 1
    return servers


def coerce_capacity(value: Any) -> Optional[int]:
    """Whole capacity > 0; anything else (including K <= 0) is unbounded."""
    capacity = as_whole_number(value)
    if capacity is None or capacity <= 0:
        return None
    return capacity


def run_markov(
    matrix_text: str,
    vector_text: str,
    steps: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Outcome[MarkovResult]:
    """Parse P and v0, then compute the trajectory and steady state."""
    try:
        P = parse_matrix(matrix_text)
        v0 = parse_vector(vector_text)
        result = evolve(P, v0, coerce_steps(steps, config), config)
    except StochcalcError as exc:
        logger.info("Markov run rejected: %s", exc)
        return Outcome(error=str(exc))
    return Outcome(result=result)


def run_queueing(
    model: Union[str, QueueModel],
    lam: Any,
    mu: Any,
    servers: Any = None,
    capacity: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Outcome[QueueingResult]:
    """Validate rates, normalize the model tag and compute its metrics."""
    lam_value = _as_rate(lam)
    mu_value = _as_rate(mu)
    if lam_value is None or mu_value is None:
        return Outcome(error=RATES_MESSAGE)

    try:
        inp = QueueingInput(
            model=model,
            lam=lam_value,
            mu=mu_value,
            servers=coerce_servers(servers),
            capacity=coerce_capacity(capacity),
        )
        result = compute_metrics(inp, config)
    except StochcalcError as exc:
        logger.info("Queueing run rejected: %s", exc)
        return Outcome(error=str(exc))
    return Outcome(result=result)
