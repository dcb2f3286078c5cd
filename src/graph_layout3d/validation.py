"""
Errors, warnings and input validation for the 3D layout engine.

Provides the exception hierarchy raised by graph mutation, force
evaluation and tree construction, plus centralized validation functions
for configuration values and 3-vectors. Validators return normalized
values or raise descriptive exceptions.
"""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidConfigError(ValidationError):
    """Raised when a layout configuration value is out of range."""

    pass


class InvalidVectorError(ValidationError):
    """Raised when a position or velocity is not a finite 3-vector."""

    pass


class GraphError(Exception):
    """Base exception for graph mutation and query failures."""

    pass


class UnknownVertexError(GraphError, KeyError):
    """Raised when an edge endpoint is not a vertex of the graph."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class NotFoundError(GraphError, KeyError):
    """Raised when removing or querying an element that is not in the graph."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class VertexNotFoundError(NotFoundError):
    """Raised when a vertex id is not in the graph."""

    pass


class EdgeNotFoundError(NotFoundError):
    """Raised when an edge id is not in the graph."""

    pass


class DegenerateSeparationError(ArithmeticError):
    """Raised when repulsion is evaluated between coincident points without clamping."""

    pass


class InternalInvariantViolation(AssertionError):
    """Raised when the spatial tree reaches a state its construction forbids."""

    pass


class DuplicateVertexError(InternalInvariantViolation):
    """Raised when the same vertex id is inserted twice into one tree."""

    pass


class NumericalInstabilityWarning(RuntimeWarning):
    """Warning issued when a tick produces non-finite vertex state."""

    pass


def validate_vector(value: Any, name: str = "vector") -> np.ndarray:
    """
    Validate and normalize a 3D vector.

    Args:
        value: Sequence of three real numbers (tuple, list, ndarray)
        name: Field name used in error messages

    Returns:
        New float64 array of shape (3,)

    Raises:
        InvalidVectorError: If value does not hold exactly three finite numbers
    """
    try:
        arr = np.array(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidVectorError(f"{name} must be a sequence of 3 numbers, got {value!r}") from exc

    if arr.shape != (3,):
        raise InvalidVectorError(f"{name} must have 3 elements (x, y, z), got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InvalidVectorError(f"{name} must be finite, got {tuple(arr.tolist())}")

    return arr


def validate_non_negative(value: float, name: str) -> float:
    """
    Validate a real parameter is finite and >= 0.

    Raises:
        InvalidConfigError: If value is negative, NaN or infinite
    """
    value = _as_float(value, name)
    if value < 0:
        raise InvalidConfigError(f"{name} must be >= 0, got {value}")
    return value


def validate_positive(value: float, name: str) -> float:
    """
    Validate a real parameter is finite and > 0.

    Raises:
        InvalidConfigError: If value is zero, negative, NaN or infinite
    """
    value = _as_float(value, name)
    if value <= 0:
        raise InvalidConfigError(f"{name} must be positive, got {value}")
    return value


def validate_friction(friction: float) -> float:
    """
    Validate friction coefficient is in [0, 1].

    Friction above 1 reverses velocity every tick, which the integrator
    does not support.

    Raises:
        InvalidConfigError: If friction not in [0, 1]
    """
    friction = _as_float(friction, "friction")
    if friction < 0 or friction > 1:
        raise InvalidConfigError(f"friction must be in [0, 1], got {friction}")
    return friction


def validate_iterations(iterations: int) -> int:
    """
    Validate iteration count is positive.

    Raises:
        InvalidConfigError: If iterations < 1
    """
    if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
        raise InvalidConfigError(f"iterations must be an integer, got {iterations!r}")
    if iterations < 1:
        raise InvalidConfigError(f"iterations must be >= 1, got {iterations}")
    return int(iterations)


def validate_seed(seed: Optional[int]) -> Optional[int]:
    """Validate an optional random seed."""
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise InvalidConfigError(f"random_seed must be an integer or None, got {seed!r}")
    return int(seed)


def _as_float(value: Any, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(result):
        raise InvalidConfigError(f"{name} must be finite, got {result}")
    return result


__all__ = [
    "ValidationError",
    "InvalidConfigError",
    "InvalidVectorError",
    "GraphError",
    "UnknownVertexError",
    "NotFoundError",
    "VertexNotFoundError",
    "EdgeNotFoundError",
    "DegenerateSeparationError",
    "InternalInvariantViolation",
    "DuplicateVertexError",
    "NumericalInstabilityWarning",
    "validate_vector",
    "validate_non_negative",
    "validate_positive",
    "validate_friction",
    "validate_iterations",
    "validate_seed",
]
