"""Shared fixtures and small dummy models for learnet tests.

The models work on plain lists of floats so every expected value can be
worked out by hand. Each model counts its own ``fit``/``update`` calls in
``fits``/``updates`` (plain attributes, not hyperparameters).
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from statistics import NormalDist

import pytest

from learnet import Deterministic, Interval, Probabilistic, Static, Unsupervised, get_config

X = [1.0, 2.0, 3.0, 4.0]
Y = [3.0, 5.0, 7.0, 9.0]  # 2x + 1


class Counting:
    """Mixin recording how often a model was trained."""

    def __post_init__(self) -> None:
        self.fits = 0
        self.updates = 0


# ---------------------------------------------------------------------------
# Unsupervised
# ---------------------------------------------------------------------------


@dataclass
class Standardizer(Counting, Unsupervised):
    """Centres (optionally) and scales to unit population variance."""

    center: bool = True

    def fit(self, verbosity, X):
        self.fits += 1
        mu = statistics.fmean(X) if self.center else 0.0
        sigma = statistics.pstdev(X) or 1.0
        return (mu, sigma), None, {"n": len(X)}

    def transform(self, fitresult, X):
        mu, sigma = fitresult
        return [(x - mu) / sigma for x in X]

    def inverse_transform(self, fitresult, Z):
        mu, sigma = fitresult
        return [z * sigma + mu for z in Z]


@dataclass
class Thresholder(Counting, Unsupervised):
    """Learns the median; transforms to offsets, predicts above/below labels."""

    margin: float = 0.0

    def fit(self, verbosity, X):
        self.fits += 1
        return statistics.median(X) + self.margin, None, None

    def update(self, verbosity, fitresult, cache, X):
        self.updates += 1
        return statistics.median(X) + self.margin, None, None

    def transform(self, fitresult, X):
        return [x - fitresult for x in X]

    def inverse_transform(self, fitresult, Z):
        return [z + fitresult for z in Z]

    def predict(self, fitresult, X):
        return [x > fitresult for x in X]


# ---------------------------------------------------------------------------
# Static
# ---------------------------------------------------------------------------


@dataclass
class Scale(Counting, Static):
    factor: float = 2.0

    def fit(self, verbosity, *args):
        self.fits += 1
        return super().fit(verbosity, *args)

    def transform(self, fitresult, X):
        return [self.factor * x for x in X]


def double(values):
    return [2 * v for v in values]


# ---------------------------------------------------------------------------
# Supervised
# ---------------------------------------------------------------------------


@dataclass
class LinearRegressor(Counting, Deterministic):
    """Least squares on one feature; ``ridge`` shrinks the slope."""

    ridge: float = 0.0

    def fit(self, verbosity, X, y):
        self.fits += 1
        mx, my = statistics.fmean(X), statistics.fmean(y)
        sxx = sum((x - mx) ** 2 for x in X)
        sxy = sum((x - mx) * (t - my) for x, t in zip(X, y))
        slope = sxy / (sxx + self.ridge)
        return (slope, my - slope * mx), None, {"n": len(X)}

    def predict(self, fitresult, X):
        slope, intercept = fitresult
        return [slope * x + intercept for x in X]

    def transform(self, fitresult, X):
        slope, _ = fitresult
        return [slope * x for x in X]

    def fitted_params(self, fitresult):
        slope, intercept = fitresult
        return {"slope": slope, "intercept": intercept}


@dataclass
class NormalRegressor(Counting, Probabilistic):
    """Predicts the same normal distribution, fitted to the target, for every row."""

    def fit(self, verbosity, X, y):
        self.fits += 1
        return NormalDist(statistics.fmean(y), statistics.pstdev(y) or 1.0), None, None

    def predict(self, fitresult, X):
        return [fitresult for _ in X]


@dataclass
class RangeInterval(Counting, Interval):
    """Predicts the target's training range for every row."""

    def fit(self, verbosity, X, y):
        self.fits += 1
        return (min(y), max(y)), None, None

    def predict(self, fitresult, X):
        return [fitresult for _ in X]


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from LEARNET_* variables and the memoized config."""
    monkeypatch.delenv("LEARNET_CACHE", raising=False)
    monkeypatch.delenv("LEARNET_VERBOSITY", raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def data():
    return list(X), list(Y)
