"""Discrete-event simulation of the four queue models, used to cross-check
the closed-form metrics."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import numpy as np
import simpy

from .queueing import QueueingInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimParams:
    """Replication settings bundled for convenience."""

    seed: int
    warmup: float
    horizon: float

    def __post_init__(self) -> None:
        if self.horizon <= 0:
            raise ValueError("Simulation horizon must be positive.")
        if self.warmup < 0:
            raise ValueError("Warm-up period must be non-negative.")


@dataclass
class SimulationResult:
    """Container for the aggregated outputs of one replication."""

    model: str
    servers: int
    capacity: Optional[int]
    lam: float
    mu: float
    seed: int
    warmup: float
    horizon: float
    L: float
    Lq: float
    utilization: float
    W_mean: float
    Wq_mean: float
    n_samples: int
    obs_time: float
    arrivals_obs: int
    blocked_obs: int
    blocking_fraction: float
    lambda_hat: float
    lambda_eff_hat: float
    little_L_error: float
    little_Lq_error: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class QueueSimulationState:
    """Mutable containers for aggregated statistics."""

    wait_samples: List[float] = field(default_factory=list)
    system_samples: List[float] = field(default_factory=list)
    arrivals_obs: int = 0
    blocked_obs: int = 0
    in_system: int = 0
    busy_servers: int = 0
    area_L: float = 0.0
    area_Lq: float = 0.0
    busy_area: float = 0.0
    clock: float = 0.0

    @property
    def in_queue(self) -> int:
        return max(self.in_system - self.busy_servers, 0)

    def advance(self, now: float, warmup: float, horizon: float) -> None:
        """Accumulate the areas of the current counts over [clock, now] clipped to the window."""
        dt = min(now, horizon) - max(self.clock, warmup)
        self.clock = now
        if dt > 0:
            self.area_L += self.in_system * dt
            self.area_Lq += self.in_queue * dt
            self.busy_area += self.busy_servers * dt


class QueueSystem:
    """Encapsulates SimPy processes and measurements for M/M/c[/K]."""

    def __init__(self, env: simpy.Environment, inp: QueueingInput, params: SimParams):
        self.env = env
        self.inp = inp
        self.params = params
        self.servers = inp.effective_servers
        self.capacity = inp.capacity if inp.model.finite_capacity else None
        self.state = QueueSimulationState()
        self.rng = np.random.default_rng(seed=params.seed)
        self.server = simpy.Resource(env, capacity=self.servers)

    def _exp(self, rate: float) -> float:
        return self.rng.exponential(1.0 / rate)

    def _observed(self, t: float) -> bool:
        return t >= self.params.warmup

    def arrival_process(self):
        while True:
            inter_arrival = self._exp(self.inp.lam)
            yield self.env.timeout(inter_arrival)
            if self.env.now > self.params.horizon:
                break
            if self._observed(self.env.now):
                self.state.arrivals_obs += 1
            if self.capacity is not None and self.state.in_system >= self.capacity:
                if self._observed(self.env.now):
                    self.state.blocked_obs += 1
                continue
            self.env.process(self._customer())

    def _shift(self, customers: int = 0, busy: int = 0) -> None:
        """Close the area slice up to now, then apply the population change."""
        self.state.advance(self.env.now, self.params.warmup, self.params.horizon)
        self.state.in_system += customers
        self.state.busy_servers += busy

    def _customer(self):
        arrival_time = self.env.now
        self._shift(customers=1)

        with self.server.request() as req:
            yield req
            wait = self.env.now - arrival_time
            self._shift(busy=1)

            yield self.env.timeout(self._exp(self.inp.mu))
            self._shift(customers=-1, busy=-1)

            if self._observed(arrival_time):
                self.state.wait_samples.append(wait)
                self.state.system_samples.append(self.env.now - arrival_time)


def run_queue_sim(inp: QueueingInput, params: SimParams) -> SimulationResult:
    """Run one replication of ``inp`` and return aggregated statistics."""
    obs_time = max(params.horizon - params.warmup, 0.0)

    env = simpy.Environment()
    system = QueueSystem(env, inp, params)
    env.process(system.arrival_process())
    env.run(until=params.horizon)
    system.state.advance(params.horizon, params.warmup, params.horizon)
    state = system.state

    if obs_time == 0:
        L = Lq = utilization = 0.0
    else:
        L = state.area_L / obs_time
        Lq = state.area_Lq / obs_time
        utilization = state.busy_area / obs_time / system.servers

    W_mean = float(np.mean(state.system_samples)) if state.system_samples else 0.0
    Wq_mean = float(np.mean(state.wait_samples)) if state.wait_samples else 0.0
    lambda_hat = state.arrivals_obs / obs_time if obs_time > 0 else 0.0
    admitted = state.arrivals_obs - state.blocked_obs
    lambda_eff_hat = admitted / obs_time if obs_time > 0 else 0.0
    blocking = state.blocked_obs / state.arrivals_obs if state.arrivals_obs else 0.0

    little_L = lambda_eff_hat * W_mean
    little_Lq = lambda_eff_hat * Wq_mean
    little_L_error = 0.0 if L == 0 else abs(L - little_L) / L
    little_Lq_error = 0.0 if Lq == 0 else abs(Lq - little_Lq) / Lq

    logger.debug(
        "Replication seed=%d: %d arrivals, %d blocked, L=%.4f",
        params.seed,
        state.arrivals_obs,
        state.blocked_obs,
        L,
    )
    return SimulationResult(
        model=inp.model.label,
        servers=system.servers,
        capacity=system.capacity,
        lam=inp.lam,
        mu=inp.mu,
        seed=params.seed,
        warmup=params.warmup,
        horizon=params.horizon,
        L=L,
        Lq=Lq,
        utilization=utilization,
        W_mean=W_mean,
        Wq_mean=Wq_mean,
        n_samples=len(state.system_samples),
        obs_time=obs_time,
        arrivals_obs=state.arrivals_obs,
        blocked_obs=state.blocked_obs,
        blocking_fraction=blocking,
        lambda_hat=lambda_hat,
        lambda_eff_hat=lambda_eff_hat,
        little_L_error=little_L_error,
        little_Lq_error=little_Lq_error,
    )
