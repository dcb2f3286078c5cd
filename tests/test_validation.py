"""Tests for configuration and input validation."""

import dataclasses

import numpy as np
import pytest

from graph_layout3d.config import DEFAULT_CONFIG, LayoutConfig
from graph_layout3d.validation import (
    DegenerateSeparationError,
    DuplicateVertexError,
    EdgeNotFoundError,
    GraphError,
    InternalInvariantViolation,
    InvalidConfigError,
    InvalidVectorError,
    NotFoundError,
    NumericalInstabilityWarning,
    ValidationError,
    VertexNotFoundError,
    validate_friction,
    validate_iterations,
    validate_non_negative,
    validate_positive,
    validate_seed,
    validate_vector,
)


class TestVectorValidation:
    """Tests for validate_vector."""

    def test_tuple(self):
        """Tuples become float arrays."""
        arr = validate_vector((1, 2, 3))
        assert arr.dtype == np.float64
        assert np.array_equal(arr, [1.0, 2.0, 3.0])

    def test_returns_copy(self):
        """Arrays are copied."""
        src = np.array([1.0, 2.0, 3.0])
        arr = validate_vector(src)
        arr[0] = 9.0
        assert src[0] == 1.0

    def test_wrong_length(self):
        """Vectors must have three components."""
        with pytest.raises(InvalidVectorError, match="3 elements"):
            validate_vector([1, 2, 3, 4], "velocity")

    def test_not_numeric(self):
        """Non-numeric input raises InvalidVectorError."""
        with pytest.raises(InvalidVectorError, match="sequence of 3 numbers"):
            validate_vector(["a", "b", "c"])

    def test_infinite(self):
        """Infinite components are rejected."""
        with pytest.raises(InvalidVectorError, match="finite"):
            validate_vector([0, float("inf"), 0])

    def test_is_validation_error(self):
        """InvalidVectorError is a ValueError."""
        assert issubclass(InvalidVectorError, ValidationError)
        assert issubclass(InvalidVectorError, ValueError)


class TestScalarValidation:
    """Tests for scalar validators."""

    def test_non_negative(self):
        """Zero and positive values pass."""
        assert validate_non_negative(0, "x") == 0.0
        assert validate_non_negative(2, "x") == 2.0
        with pytest.raises(InvalidConfigError, match="x must be >= 0"):
            validate_non_negative(-1, "x")

    def test_positive(self):
        """Zero is rejected by validate_positive."""
        assert validate_positive(0.5, "y") == 0.5
        with pytest.raises(InvalidConfigError, match="y must be positive"):
            validate_positive(0, "y")

    def test_nan_rejected(self):
        """NaN is never a valid parameter."""
        with pytest.raises(InvalidConfigError, match="finite"):
            validate_non_negative(float("nan"), "z")

    def test_non_number_rejected(self):
        """Strings are rejected."""
        with pytest.raises(InvalidConfigError, match="must be a number"):
            validate_positive("fast", "speed")

    def test_friction_range(self):
        """Friction must lie in [0, 1]."""
        assert validate_friction(0.0) == 0.0
        assert validate_friction(1.0) == 1.0
        with pytest.raises(InvalidConfigError, match=r"friction must be in \[0, 1\]"):
            validate_friction(1.2)

    def test_iterations(self):
        """Iterations must be a positive integer."""
        assert validate_iterations(3) == 3
        with pytest.raises(InvalidConfigError, match="iterations must be >= 1"):
            validate_iterations(0)
        with pytest.raises(InvalidConfigError, match="integer"):
            validate_iterations(2.5)

    def test_seed(self):
        """Seeds are ints or None."""
        assert validate_seed(None) is None
        assert validate_seed(7) == 7
        with pytest.raises(InvalidConfigError, match="random_seed"):
            validate_seed("7")


class TestLayoutConfig:
    """Tests for LayoutConfig."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = LayoutConfig()
        assert config.epsilon == 0.1
        assert config.attraction == 0.1
        assert config.friction == 0.6
        assert config.repulsion == 50.0
        assert config.inner_distance == 0.36
        assert config.min_separation == 1e-9
        assert DEFAULT_CONFIG == config

    def test_frozen(self):
        """Configs cannot be mutated."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            LayoutConfig().friction = 0.1  # type: ignore[misc]

    def test_normalizes_ints(self):
        """Integer inputs are stored as floats."""
        config = LayoutConfig(repulsion=10)
        assert isinstance(config.repulsion, float)

    def test_replace(self):
        """replace() returns a new validated copy."""
        base = LayoutConfig()
        changed = base.replace(friction=0.9)
        assert changed.friction == 0.9
        assert base.friction == 0.6
        with pytest.raises(InvalidConfigError):
            base.replace(friction=2.0)

    def test_replace_unknown_key(self):
        """replace() rejects unknown keys."""
        with pytest.raises(InvalidConfigError, match="Unknown"):
            LayoutConfig().replace(theta=0.5)

    def test_from_mapping(self):
        """from_mapping merges mapping and overrides."""
        config = LayoutConfig.from_mapping({"epsilon": 0.3, "friction": 0.5}, friction=0.7)
        assert config.epsilon == 0.3
        assert config.friction == 0.7

    def test_as_dict_round_trip(self):
        """as_dict() feeds back into from_mapping()."""
        config = LayoutConfig(epsilon=0.2, random_seed=3)
        assert LayoutConfig.from_mapping(config.as_dict()) == config

    @pytest.mark.parametrize(
        "field, value",
        [
            ("epsilon", -0.1),
            ("attraction", -1.0),
            ("repulsion", float("inf")),
            ("inner_distance", -0.5),
            ("initial_extent", 0.0),
            ("iterations", 0),
            ("tolerance", -1.0),
        ],
    )
    def test_invalid_values(self, field, value):
        """Out-of-range values raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError, match=field):
            LayoutConfig(**{field: value})


class TestErrorHierarchy:
    """Tests for the exception hierarchy."""

    def test_not_found(self):
        """Not-found errors share a base and are KeyErrors."""
        assert issubclass(VertexNotFoundError, NotFoundError)
        assert issubclass(EdgeNotFoundError, NotFoundError)
        assert issubclass(NotFoundError, GraphError)
        assert issubclass(NotFoundError, KeyError)

    def test_not_found_message(self):
        """Messages are not wrapped in quotes like plain KeyErrors."""
        assert str(VertexNotFoundError("Vertex 3 is not in the graph")) == "Vertex 3 is not in the graph"

    def test_invariant_errors(self):
        """Tree invariant errors are assertions."""
        assert issubclass(DuplicateVertexError, InternalInvariantViolation)
        assert issubclass(InternalInvariantViolation, AssertionError)

    def test_degenerate_separation(self):
        """Degenerate separation is an arithmetic error."""
        assert issubclass(DegenerateSeparationError, ArithmeticError)

    def test_instability_warning(self):
        """Instability is reported as a RuntimeWarning."""
        assert issubclass(NumericalInstabilityWarning, RuntimeWarning)
