"""Tests for model-tag normalization and metric dispatch."""

import math

import pytest

from stochcalc.errors import ValidationError
from stochcalc.queueing import QueueingInput, QueueModel, compute_metrics


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("MM1", QueueModel.MM1),
        ("M/M/1", QueueModel.MM1),
        ("m/m/1", QueueModel.MM1),
        ("MMc", QueueModel.MMC),
        ("M/M/c", QueueModel.MMC),
        ("MM1K", QueueModel.MM1K),
        ("M/M/1/K", QueueModel.MM1K),
        ("M/M/1K", QueueModel.MM1K),
        ("MMcK", QueueModel.MMCK),
        ("M/M/c/K", QueueModel.MMCK),
        (" M / M / c K ", QueueModel.MMCK),
        (QueueModel.MMC, QueueModel.MMC),
    ],
)
def test_model_synonyms(tag, expected):
    assert QueueModel.parse(tag) is expected


def test_unknown_model_rejected():
    with pytest.raises(ValidationError, match="Unsupported model"):
        QueueModel.parse("M/G/1")


def test_model_properties():
    assert QueueModel.MMCK.multi_server and QueueModel.MMCK.finite_capacity
    assert not QueueModel.MM1.multi_server and not QueueModel.MM1.finite_capacity
    assert QueueModel.MM1K.label == "M/M/1/K"


def test_input_validation():
    with pytest.raises(ValidationError):
        QueueingInput(model="M/M/1", lam=0.0, mu=1.0)
    with pytest.raises(ValidationError):
        QueueingInput(model="M/M/1", lam=1.0, mu=-1.0)
    with pytest.raises(ValidationError):
        QueueingInput(model="M/M/c", lam=1.0, mu=1.0, servers=0)
    with pytest.raises(ValidationError):
        QueueingInput(model="M/M/X", lam=1.0, mu=1.0)


def test_input_normalizes_model_tag():
    inp = QueueingInput(model="mmc", lam=1.0, mu=1.0, servers=2)
    assert inp.model is QueueModel.MMC
    assert inp.effective_servers == 2
    assert QueueingInput(model="MM1", lam=1.0, mu=2.0, servers=4).effective_servers == 1


@pytest.mark.parametrize(
    "inp, keys",
    [
        (QueueingInput("M/M/1", 2.0, 5.0), {"rho", "P0", "L", "Lq", "W", "Wq"}),
        (QueueingInput("M/M/c", 1.7, 1.0, servers=2), {"rho", "P0", "L", "Lq", "W", "Wq"}),
        (
            QueueingInput("M/M/1/K", 1.0, 2.0, capacity=3),
            {"rho", "P0", "L", "Lq", "W", "Wq", "lambda_eff"},
        ),
        (
            QueueingInput("M/M/c/K", 3.0, 1.0, servers=2, capacity=6),
            {"rho", "P0", "L", "Lq", "W", "Wq", "lambda_eff"},
        ),
    ],
)
def test_metric_keys_depend_on_model(inp, keys):
    result = compute_metrics(inp)
    assert result.model is inp.model
    assert set(result.metrics) == keys


def test_single_server_model_ignores_servers():
    plain = compute_metrics(QueueingInput("M/M/1", 2.0, 5.0))
    with_servers = compute_metrics(QueueingInput("M/M/1", 2.0, 5.0, servers=3))
    assert plain.metrics == with_servers.metrics


def test_result_access_and_export():
    result = compute_metrics(QueueingInput("M/M/1", 2.0, 5.0))
    assert math.isclose(result["L"], 2 / 3)
    data = result.as_dict()
    assert data["model"] == "M/M/1"
    assert math.isclose(data["Wq"], 2 / 15)


def test_finite_model_needs_capacity():
    with pytest.raises(ValidationError, match="finite capacity"):
        compute_metrics(QueueingInput("M/M/1/K", 1.0, 2.0))
    with pytest.raises(ValidationError, match="finite capacity"):
        compute_metrics(QueueingInput("M/M/c/K", 1.0, 2.0, servers=2))


def test_zero_capacity_boundary():
    result = compute_metrics(QueueingInput("M/M/1/K", 1.0, 2.0, capacity=0))
    assert result["P0"] == 1.0
    assert result["L"] == 0.0
    assert result["lambda_eff"] == 0.0
    assert result["W"] == 0.0
