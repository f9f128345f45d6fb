"""Tests for the raw-input entry points."""

import math

import pytest

from stochcalc.api import (
    RATES_MESSAGE,
    Outcome,
    coerce_capacity,
    coerce_servers,
    coerce_steps,
    run_markov,
    run_queueing,
)
from stochcalc.errors import StochcalcError


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 10), ("5", 5), (7, 7), ("3.0", 3), (0, 0), (-1, 10), ("x", 10), (2.5, 10), (True, 10)],
)
def test_coerce_steps(raw, expected):
    assert coerce_steps(raw) == expected


@pytest.mark.parametrize("raw, expected", [(None, 1), (0, 1), ("3", 3), ("abc", 1), (2.5, 1)])
def test_coerce_servers(raw, expected):
    assert coerce_servers(raw) == expected


@pytest.mark.parametrize(
    "raw, expected", [(None, None), (0, None), (-5, None), ("7", 7), ("inf", None), ("", None)]
)
def test_coerce_capacity(raw, expected):
    assert coerce_capacity(raw) == expected


def test_run_markov_success():
    outcome = run_markov("1/2,1/2;0,1", "1,0", 3)
    assert outcome.ok
    assert len(outcome.result.trajectory) == 4
    assert outcome.result.trajectory[1].tolist() == [0.5, 0.5]


def test_run_markov_invalid_steps_use_default():
    outcome = run_markov("0.9,0.1;0.5,0.5", "[1, 0]", "abc")
    assert len(outcome.result.trajectory) == 11


@pytest.mark.parametrize(
    "matrix, vector, fragment",
    [
        ("", "1,0", "Empty"),
        ("1,0;0,1", "1,x", "non-numeric"),
        ("1,0;0,1", "1,0,0", "Dimension mismatch"),
        ("1,0,0;0,1,0", "1,0", "square"),
    ],
)
def test_run_markov_reports_errors(matrix, vector, fragment):
    outcome = run_markov(matrix, vector, 3)
    assert not outcome.ok
    assert outcome.result is None
    assert fragment in outcome.error


def test_run_queueing_mm1():
    outcome = run_queueing("M/M/1", 2, 5)
    assert outcome.ok
    metrics = outcome.result.metrics
    assert metrics["L"] == pytest.approx(0.6667, abs=1e-3)
    assert math.isclose(metrics["L"], 2 * metrics["W"])


def test_run_queueing_unstable_mm1():
    outcome = run_queueing("MM1", 5, 4)
    assert not outcome.ok
    assert "unstable" in outcome.error
    assert outcome.result is None


@pytest.mark.parametrize("lam, mu", [("abc", 5), (0, 5), (2, -1), (None, 1), (float("nan"), 1)])
def test_run_queueing_rejects_bad_rates(lam, mu):
    outcome = run_queueing("M/M/1", lam, mu)
    assert outcome.error == RATES_MESSAGE


def test_run_queueing_unsupported_model():
    outcome = run_queueing("M/D/1", 1, 2)
    assert "Unsupported model" in outcome.error


def test_run_queueing_accepts_form_strings():
    outcome = run_queueing("M/M/1/K", "1", "2", capacity="2")
    assert outcome.ok
    assert math.isclose(outcome.result["lambda_eff"], 6 / 7)


def test_run_queueing_non_positive_capacity_means_unbounded():
    outcome = run_queueing("M/M/1/K", 1, 2, capacity=0)
    assert not outcome.ok
    assert "finite capacity" in outcome.error


def test_run_queueing_invalid_servers_default_to_one():
    outcome = run_queueing("M/M/c", 1.7, 1, servers="2.5")
    assert "unstable" in outcome.error


def test_outcome_unwrap():
    assert Outcome(result=3).unwrap() == 3
    with pytest.raises(StochcalcError, match="boom"):
        Outcome(error="boom").unwrap()


def test_run_markov_huge_json_integer_is_reported():
    outcome = run_markov("[[1" + "0" * 400 + ", 0], [0, 1]]", "1,0", 2)
    assert not outcome.ok
    assert "row 1, column 1" in outcome.error


@pytest.mark.parametrize(
    "model, lam, mu, servers, capacity",
    [
        ("M/M/1/K", 2, 1, None, 2000),
        ("M/M/c/K", 10, 1, 2, 400),
        ("M/M/c", 150, 1, 200, None),
    ],
)
def test_run_queueing_large_systems_stay_finite(model, lam, mu, servers, capacity):
    outcome = run_queueing(model, lam, mu, servers, capacity)
    assert outcome.ok
    assert all(math.isfinite(value) for value in outcome.result.metrics.values())


def test_run_queueing_rate_beyond_float_range():
    outcome = run_queueing("M/M/1", 10**400, 1)
    assert outcome.error == RATES_MESSAGE
