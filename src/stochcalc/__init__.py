"""Markov-chain and queueing-theory calculators."""

from .api import Outcome, coerce_capacity, coerce_servers, coerce_steps, run_markov, run_queueing
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ParseError, StochcalcError, ValidationError
from .markov import MarkovResult, RowSumWarning, evolve
from .metrics import MM1KTheory, MM1Theory, mm1_theory, mm1k_theory, relative_error, rho
from .metrics_mmc import MMCKTheory, MMCTheory, mmc_theory, mmck_theory
from .numeric import factorial, normalize
from .parser import parse_matrix, parse_vector
from .queueing import QueueingInput, QueueingResult, QueueModel, compute_metrics
from .scenarios import ChainScenario, Scenario, get_chain, get_input, list_chains, list_scenarios
from .sim_core import SimParams, SimulationResult, run_queue_sim

__all__ = [
    "ChainScenario",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "MM1KTheory",
    "MM1Theory",
    "MMCKTheory",
    "MMCTheory",
    "MarkovResult",
    "Outcome",
    "ParseError",
    "QueueModel",
    "QueueingInput",
    "QueueingResult",
    "RowSumWarning",
    "Scenario",
    "SimParams",
    "SimulationResult",
    "StochcalcError",
    "ValidationError",
    "coerce_capacity",
    "coerce_servers",
    "coerce_steps",
    "compute_metrics",
    "evolve",
    "factorial",
    "get_chain",
    "get_input",
    "list_chains",
    "list_scenarios",
    "mm1_theory",
    "mm1k_theory",
    "mmc_theory",
    "mmck_theory",
    "normalize",
    "parse_matrix",
    "parse_vector",
    "relative_error",
    "rho",
    "run_markov",
    "run_queue_sim",
    "run_queueing",
]
