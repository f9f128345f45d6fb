"""Unit tests for analytical single-server metrics."""

import math

import pytest

from stochcalc.errors import ValidationError
from stochcalc.metrics import mm1_theory, mm1k_theory, relative_error, rho


def test_rho_basic_value():
    assert math.isclose(rho(0.5, 1.0), 0.5)


def test_mm1_theory_matches_known_case():
    theory = mm1_theory(0.5, 1.0)
    assert math.isclose(theory.rho, 0.5)
    assert math.isclose(theory.P0, 0.5)
    assert math.isclose(theory.L, 1.0)
    assert math.isclose(theory.Lq, 0.5)
    assert math.isclose(theory.W, 2.0)
    assert math.isclose(theory.Wq, 1.0)
    assert math.isclose(theory.L, 0.5 * theory.W)  # Little's law


def test_mm1_textbook_example():
    theory = mm1_theory(2.0, 5.0)
    assert theory.rho == pytest.approx(0.4, abs=1e-3)
    assert theory.L == pytest.approx(0.6667, abs=1e-3)
    assert theory.Lq == pytest.approx(0.2667, abs=1e-3)
    assert theory.W == pytest.approx(0.3333, abs=1e-3)
    assert theory.Wq == pytest.approx(0.1333, abs=1e-3)
    assert math.isclose(theory.L, 2.0 * theory.W)


@pytest.mark.parametrize("lam, mu", [(1.0, 1.0), (5.0, 4.0)])
def test_mm1_theory_unstable(lam, mu):
    with pytest.raises(ValidationError, match="unstable"):
        mm1_theory(lam, mu)


def test_rho_requires_positive_rates():
    with pytest.raises(ValidationError):
        rho(0.5, 0.0)
    with pytest.raises(ValidationError):
        rho(0.0, 1.0)


def test_relative_error_guard_zero_reference():
    assert relative_error(0.0, 0.0) == 0.0
    assert math.isinf(relative_error(1.0, 0.0))


def test_mm1k_known_case():
    theory = mm1k_theory(1.0, 2.0, K=2)
    assert math.isclose(theory.P0, 4 / 7)
    assert math.isclose(theory.L, 4 / 7)
    assert math.isclose(theory.Lq, 1 / 7)
    assert math.isclose(theory.lambda_eff, 6 / 7)
    assert math.isclose(theory.W, 2 / 3)
    assert math.isclose(theory.Wq, 1 / 6)


def test_mm1k_unit_traffic_uses_uniform_distribution():
    theory = mm1k_theory(1.0, 1.0, K=4)
    assert math.isclose(theory.P0, 0.2)
    assert math.isclose(theory.L, 2.0)
    assert math.isclose(theory.lambda_eff, 0.8)
    assert math.isclose(theory.W, 2.5)
    assert math.isclose(theory.Lq, 1.2)


def test_mm1k_zero_capacity_is_degenerate():
    theory = mm1k_theory(1.0, 2.0, K=0)
    assert theory.P0 == 1.0
    assert theory.L == 0.0
    assert theory.lambda_eff == 0.0
    assert theory.W == 0.0
    assert theory.Wq == 0.0


def test_mm1k_is_stable_when_overloaded():
    theory = mm1k_theory(3.0, 1.0, K=3)
    # Flow balance: admitted arrivals equal completed services.
    assert math.isclose(theory.lambda_eff, 1.0 * (1.0 - theory.P0))
    assert theory.L < 3


def test_mm1k_approaches_mm1_for_large_capacity():
    finite = mm1k_theory(0.5, 1.0, K=200)
    infinite = mm1_theory(0.5, 1.0)
    assert math.isclose(finite.L, infinite.L, rel_tol=1e-6)
    assert math.isclose(finite.W, infinite.W, rel_tol=1e-6)


def test_mm1k_requires_capacity():
    with pytest.raises(ValidationError):
        mm1k_theory(1.0, 2.0, K=None)


def test_mm1k_overloaded_with_large_capacity():
    # rho = 2: the buffer stays almost full and the server never idles.
    K = 2000
    theory = mm1k_theory(2.0, 1.0, K=K)
    assert math.isclose(theory.lambda_eff, 1.0, rel_tol=1e-9)
    assert math.isclose(theory.L, K - 1, rel_tol=1e-9)
    assert math.isclose(theory.Lq, K - 2, rel_tol=1e-9)
    assert theory.P0 >= 0.0


def test_rho_out_of_float_range():
    with pytest.raises(ValidationError, match="numeric range"):
        rho(1e308, 1e-308)
