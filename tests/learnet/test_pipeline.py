"""Unit tests for Pipeline construction, property access and category dispatch."""

from __future__ import annotations

import copy

import pytest

from learnet import (
    Capability,
    CapabilityMismatchError,
    EmptyPipelineError,
    InvalidOperationError,
    InvalidPredictionTypeError,
    MixedSpecificationError,
    Model,
    Pipeline,
    PredictionTypeConflictError,
    ReservedNameError,
    TooManySupervisedError,
    UnknownPropertyError,
)
from tests.learnet.conftest import (
    LinearRegressor,
    NormalRegressor,
    RangeInterval,
    Scale,
    Standardizer,
    Thresholder,
    X,
    double,
)


@pytest.mark.unit
class TestConstruction:
    def test_positional_components_get_generated_names(self):
        pipe = Pipeline(Standardizer(), double, LinearRegressor())
        assert list(pipe.named_components) == ["standardizer", "f", "linear_regressor"]

    def test_keyword_components_keep_their_names(self):
        std, lin = Standardizer(), LinearRegressor()
        pipe = Pipeline(scale=std, model=lin)
        assert list(pipe.named_components) == ["scale", "model"]
        assert pipe.components == (std, lin)

    def test_repeated_types_disambiguated(self):
        pipe = Pipeline(Scale(), Scale(factor=3.0), double, double)
        assert list(pipe.named_components) == ["scale", "scale2", "f", "f2"]

    def test_model_types_instantiated_with_defaults(self):
        pipe = Pipeline(Standardizer, LinearRegressor)
        assert isinstance(pipe.standardizer, Standardizer)
        assert pipe.linear_regressor.ridge == 0.0

    def test_mixed_specification_rejected(self):
        with pytest.raises(MixedSpecificationError):
            Pipeline(Standardizer(), model=LinearRegressor())

    def test_empty_rejected(self):
        with pytest.raises(EmptyPipelineError):
            Pipeline()

    def test_two_supervised_rejected(self):
        with pytest.raises(TooManySupervisedError):
            Pipeline(LinearRegressor(), Standardizer(), RangeInterval())

    def test_non_component_rejected(self):
        with pytest.raises(TypeError, match="models, model types or callables"):
            Pipeline(Standardizer(), 3)

    @pytest.mark.parametrize("name", ["predict", "fit", "clone", "named_components"])
    def test_reserved_keyword_rejected(self, name):
        with pytest.raises(ReservedNameError):
            Pipeline(**{name: Standardizer()})

    @pytest.mark.parametrize("name", ["_cache", "_named_components", "_composite_type"])
    def test_private_keyword_rejected(self, name):
        with pytest.raises(ReservedNameError):
            Pipeline(**{name: Standardizer(), "model": LinearRegressor()})

    def test_invalid_operation(self):
        with pytest.raises(InvalidOperationError):
            Pipeline(LinearRegressor(), operation="inverse_transform")

    def test_invalid_prediction_type(self):
        with pytest.raises(InvalidPredictionTypeError):
            Pipeline(LinearRegressor(), prediction_type="fuzzy")

    def test_prediction_type_conflict(self):
        with pytest.raises(PredictionTypeConflictError):
            Pipeline(Standardizer(), LinearRegressor(), prediction_type="interval")

    def test_prediction_type_ignored_without_supervised(self):
        with pytest.warns(UserWarning, match="Ignoring declaration"):
            pipe = Pipeline(Standardizer(), prediction_type="probabilistic")
        assert pipe.capability is Capability.UNSUPERVISED

    def test_cache_defaults_true(self):
        assert Pipeline(Standardizer()).cache is True

    def test_cache_default_from_environment(self, monkeypatch):
        monkeypatch.setenv("LEARNET_CACHE", "false")
        assert Pipeline(Standardizer()).cache is False

    def test_is_a_model(self):
        assert isinstance(Pipeline(double), Model)


@pytest.mark.unit
class TestCategories:
    @pytest.mark.parametrize(
        "components, kwargs, type_name",
        [
            ((Standardizer(), LinearRegressor()), {}, "DeterministicPipeline"),
            ((Standardizer(), NormalRegressor()), {}, "ProbabilisticPipeline"),
            ((RangeInterval(),), {}, "IntervalPipeline"),
            ((Standardizer(), double), {}, "UnsupervisedPipeline"),
            ((Scale(), double), {}, "StaticPipeline"),
            ((NormalRegressor(),), {"operation": "predict_mode"}, "DeterministicPipeline"),
            ((LinearRegressor(), double), {"prediction_type": "interval"}, "IntervalPipeline"),
        ],
    )
    def test_type_names(self, components, kwargs, type_name):
        assert Pipeline(*components, **kwargs).type_name == type_name

    def test_static_pipeline_does_not_predict(self):
        pipe = Pipeline(Scale(), double)
        with pytest.raises(NotImplementedError, match="StaticPipeline"):
            pipe.predict(None, X)

    def test_deterministic_pipeline_has_no_point_predictions(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        with pytest.raises(NotImplementedError, match="predict_mean"):
            pipe.predict_mean(None, X)


@pytest.mark.unit
class TestPropertyAccess:
    def test_read_component(self):
        std = Standardizer()
        pipe = Pipeline(std, LinearRegressor())
        assert pipe.standardizer is std

    def test_read_unknown(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        with pytest.raises(UnknownPropertyError, match="DeterministicPipeline has no property 'nope'"):
            pipe.nope
        assert not hasattr(pipe, "nope")

    def test_replace_with_same_abstract_type(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        replacement = LinearRegressor(ridge=1.0)
        pipe.linear_regressor = replacement
        assert pipe.linear_regressor is replacement
        assert pipe.capability is Capability.DETERMINISTIC

    def test_replace_unsupervised_with_another_unsupervised_type(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        pipe.standardizer = Thresholder
        assert isinstance(pipe.standardizer, Thresholder)
        # the name is kept even though the type changed
        assert list(pipe.named_components) == ["standardizer", "linear_regressor"]

    def test_replace_callable_with_callable(self):
        pipe = Pipeline(Standardizer(), double)
        pipe.f = abs
        assert pipe.f is abs

    @pytest.mark.parametrize(
        "name, value",
        [
            ("linear_regressor", NormalRegressor()),
            ("standardizer", Scale()),
            ("f", Scale()),
        ],
    )
    def test_replace_with_other_abstract_type_rejected(self, name, value):
        pipe = Pipeline(Standardizer(), double, LinearRegressor())
        before = pipe.components
        with pytest.raises(CapabilityMismatchError):
            setattr(pipe, name, value)
        assert pipe.components == before
        assert pipe.type_name == "DeterministicPipeline"

    def test_write_unknown(self):
        pipe = Pipeline(Standardizer())
        with pytest.raises(UnknownPropertyError) as excinfo:
            pipe.nope = Standardizer()
        assert excinfo.value.name == "nope"

    def test_write_cache(self):
        pipe = Pipeline(Standardizer())
        pipe.cache = False
        assert pipe.cache is False

    def test_property_names(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        assert pipe.propertynames() == ("standardizer", "linear_regressor", "cache")
        assert set(pipe.params()) == {"standardizer", "linear_regressor", "cache"}

    def test_dir_lists_components(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        listing = dir(pipe)
        assert "standardizer" in listing and "cache" in listing and "fit" in listing


@pytest.mark.unit
class TestCopying:
    def test_repr(self):
        pipe = Pipeline(Standardizer(), LinearRegressor(), cache=False)
        assert repr(pipe) == (
            "DeterministicPipeline(standardizer=Standardizer(center=True), "
            "linear_regressor=LinearRegressor(ridge=0.0), cache=False)"
        )

    def test_clone_is_independent(self):
        pipe = Pipeline(Standardizer(), double, NormalRegressor(), operation="predict_mean")
        cloned = pipe.clone()
        assert repr(cloned) == repr(pipe)
        assert cloned.operation == "predict_mean"
        assert cloned.standardizer is not pipe.standardizer
        assert cloned.f is pipe.f
        cloned.standardizer.center = False
        assert pipe.standardizer.center is True

    def test_deepcopy(self):
        pipe = Pipeline(Standardizer(), LinearRegressor())
        copied = copy.deepcopy(pipe)
        assert copied.type_name == pipe.type_name
        assert copied.standardizer is not pipe.standardizer
