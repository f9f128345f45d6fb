"""Pre-defined example inputs for both engines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .queueing import QueueingInput, QueueModel


@dataclass(frozen=True)
class Scenario:
    name: str
    model: QueueModel
    lam: float
    mu: float
    servers: int = 1
    capacity: Optional[int] = None


@dataclass(frozen=True)
class ChainScenario:
    name: str
    matrix: str
    vector: str
    description: str


SCENARIOS: Dict[str, Scenario] = {
    "A": Scenario(name="A", model=QueueModel.MM1, lam=0.6, mu=1.0),  # ρ = 0.60
    "B": Scenario(name="B", model=QueueModel.MMC, lam=1.7, mu=1.0, servers=2),  # ρ = 0.85
    "C": Scenario(name="C", model=QueueModel.MM1K, lam=0.95, mu=1.0, capacity=5),
    "D": Scenario(name="D", model=QueueModel.MMCK, lam=3.0, mu=1.0, servers=2, capacity=6),  # ρ = 1.5
}

CHAINS: Dict[str, ChainScenario] = {
    "weather": ChainScenario(
        name="weather",
        matrix="3/4,1/4; 1/5,4/5",
        vector="1,0",
        description="Sunny/rainy two-state chain.",
    ),
    "brand": ChainScenario(
        name="brand",
        matrix="[[0.8, 0.1, 0.1], [0.2, 0.7, 0.1], [0.1, 0.3, 0.6]]",
        vector="[1/3, 1/3, 1/3]",
        description="Three competing brands with customer switching.",
    ),
    "flip": ChainScenario(
        name="flip",
        matrix="0,1;1,0",
        vector="1,0",
        description="Periodic chain; the power iteration never settles.",
    ),
}


def list_scenarios() -> Iterable[str]:
    """Return available queue scenario identifiers."""
    return sorted(SCENARIOS.keys())


def list_chains() -> Iterable[str]:
    """Return available Markov chain example names."""
    return sorted(CHAINS.keys())


def get_input(name: str) -> QueueingInput:
    """Return the `QueueingInput` for a named scenario."""
    key = name.upper()
    if key not in SCENARIOS:
        raise KeyError(f"Scenario '{name}' is not defined. Available: {list(list_scenarios())}")
    scenario = SCENARIOS[key]
    return QueueingInput(
        model=scenario.model,
        lam=scenario.lam,
        mu=scenario.mu,
        servers=scenario.servers,
        capacity=scenario.capacity,
    )


def get_chain(name: str) -> ChainScenario:
    """Return a named Markov chain example."""
    key = name.lower()
    if key not in CHAINS:
        raise KeyError(f"Chain '{name}' is not defined. Available: {list(list_chains())}")
    return CHAINS[key]
