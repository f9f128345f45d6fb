"""Queue model catalogue and metric dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ValidationError
from .metrics import check_rates, mm1_theory, mm1k_theory
from .metrics_mmc import mmc_theory, mmck_theory

logger = logging.getLogger(__name__)


class QueueModel(str, Enum):
    MM1 = "M/M/1"
    MMC = "M/M/c"
    MM1K = "M/M/1/K"
    MMCK = "M/M/c/K"

    @property
    def label(self) -> str:
        return self.value

    @property
    def multi_server(self) -> bool:
        return self in (QueueModel.MMC, QueueModel.MMCK)

    @property
    def finite_capacity(self) -> bool:
        return self in (QueueModel.MM1K, QueueModel.MMCK)

    @classmethod
    def parse(cls, tag: "str | QueueModel") -> "QueueModel":
        """
        Normalize a user-supplied tag such as ``"MM1"``, ``"m/m/c"`` or
        ``"M/M/1K"``; slashes, spaces and case are ignored.
        """
        if isinstance(tag, QueueModel):
            return tag
        key = "".join(str(tag).split()).replace("/", "").upper()
        try:
            return _SYNONYMS[key]
        except KeyError:
            raise ValidationError(f"Unsupported model '{tag}'.") from None


_SYNONYMS: Dict[str, QueueModel] = {
    "MM1": QueueModel.MM1,
    "MMC": QueueModel.MMC,
    "MM1K": QueueModel.MM1K,
    "MMCK": QueueModel.MMCK,
}


@dataclass(frozen=True)
class QueueingInput:
    """
    Arrival/service parameters of one queueing question.

    ``capacity`` is the maximum number of customers in the system; ``None``
    means unbounded. ``servers`` is ignored by single-server models.
    """

    model: QueueModel
    lam: float
    mu: float
    servers: int = 1
    capacity: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "model", QueueModel.parse(self.model))
        check_rates(self.lam, self.mu)
        if self.servers < 1:
            raise ValidationError("Number of servers c must be >= 1.")
        if self.capacity is not None and self.capacity < 0:
            raise ValidationError("Capacity K must be non-negative or unbounded.")

    @property
    def effective_servers(self) -> int:
        return self.servers if self.model.multi_server else 1


@dataclass(frozen=True)
class QueueingResult:
    """Named metrics for one model; the present keys depend on the model."""

    model: QueueModel
    metrics: Mapping[str, float] = field(default_factory=dict)

    def __getitem__(self, key: str) -> float:
        return self.metrics[key]

    def as_dict(self) -> Dict[str, object]:
        return {"model": self.model.label, **self.metrics}


def compute_metrics(
    inp: QueueingInput, config: EngineConfig = DEFAULT_CONFIG
) -> QueueingResult:
    """
    Dispatch ``inp`` to the closed-form metrics of its model.

    Raises:
        ValidationError: for unstable infinite-capacity systems or a missing
            finite capacity.
    """
    model = inp.model
    if model is QueueModel.MM1:
        theory = mm1_theory(inp.lam, inp.mu)
    elif model is QueueModel.MMC:
        theory = mmc_theory(inp.lam, inp.mu, inp.servers)
    elif model is QueueModel.MM1K:
        if inp.capacity is None:
            raise ValidationError("M/M/1/K requires a finite capacity K.")
        theory = mm1k_theory(inp.lam, inp.mu, inp.capacity, config.unit_rho_tol)
    elif model is QueueModel.MMCK:
        theory = mmck_theory(inp.lam, inp.mu, inp.servers, inp.capacity)
    else:  # pragma: no cover - QueueModel.parse rejects anything else
        raise ValidationError(f"Unsupported model '{model}'.")

    metrics = theory.as_dict()
    logger.debug("%s metrics: %s", model.label, metrics)
    return QueueingResult(model=model, metrics=dict(metrics))
