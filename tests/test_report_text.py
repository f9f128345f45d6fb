"""Tests for textual result rendering."""

import numpy as np

from report_text import format_markov, format_queueing
from stochcalc.markov import evolve
from stochcalc.queueing import QueueingInput, compute_metrics


def test_markov_report_lists_steps_and_steady_state():
    result = evolve(np.array([[0.9, 0.1], [0.5, 0.5]]), np.array([1.0, 0.0]), 2)
    text = format_markov(result)
    assert "Step 0: [1.000000, 0.000000]" in text
    assert "Step 2:" in text
    assert "Steady state: ≈ [" in text
    assert "Warning" not in text


def test_markov_report_appends_row_warnings():
    result = evolve(np.array([[0.5, 0.4], [0.5, 0.5]]), np.array([1.0, 0.0]), 1)
    text = format_markov(result)
    assert "Warning: some rows of P do not sum to 1." in text
    assert "row 1 of P sums to 0.900000" in text


def test_markov_report_flags_non_convergence():
    result = evolve(np.array([[0.0, 1.0], [1.0, 0.0]]), np.array([1.0, 0.0]), 1)
    assert "not converged after 1000 iterations" in format_markov(result)


def test_queueing_report():
    text = format_queueing(compute_metrics(QueueingInput("M/M/1/K", 1.0, 2.0, capacity=2)))
    assert text.startswith("Model M/M/1/K:")
    assert "ρ" in text
    assert "λ_eff" in text
