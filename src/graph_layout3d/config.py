"""
Layout configuration.

Each graph owns one immutable LayoutConfig. Changing parameters means
building a new value (``config.replace(friction=0.8)``), so independently
configured graphs never share mutable defaults.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .validation import (
    InvalidConfigError,
    validate_friction,
    validate_iterations,
    validate_non_negative,
    validate_positive,
    validate_seed,
)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Physical and numerical parameters of the force-directed layout.

    Attributes:
        epsilon: Softening term added to separation in the repulsion denominator
        attraction: Default spring constant for edges (per-edge override allowed)
        friction: Fraction of velocity removed every tick (0 to 1)
        repulsion: Repulsion strength between every pair of vertices
        inner_distance: Clustering radius of octree nodes
        min_separation: Lower clamp for separation in repulsion (0 disables
            clamping and makes coincident points an error)
        initial_extent: Edge length of the cube random positions are drawn from
        random_seed: Seed for reproducible initial positions
        iterations: Default tick budget for Graph.run()
        tolerance: Convergence threshold on per-tick max displacement
    """

    epsilon: float = 0.1
    attraction: float = 0.1
    friction: float = 0.60
    repulsion: float = 50.0
    inner_distance: float = 0.36
    min_separation: float = 1e-9
    initial_extent: float = 1.0
    random_seed: Optional[int] = None
    iterations: int = 300
    tolerance: float = 1e-3

    def __post_init__(self) -> None:
        # frozen: normalize through object.__setattr__
        set_ = object.__setattr__
        set_(self, "epsilon", validate_non_negative(self.epsilon, "epsilon"))
        set_(self, "attraction", validate_non_negative(self.attraction, "attraction"))
        set_(self, "friction", validate_friction(self.friction))
        set_(self, "repulsion", validate_non_negative(self.repulsion, "repulsion"))
        set_(self, "inner_distance", validate_non_negative(self.inner_distance, "inner_distance"))
        set_(self, "min_separation", validate_non_negative(self.min_separation, "min_separation"))
        set_(self, "initial_extent", validate_positive(self.initial_extent, "initial_extent"))
        set_(self, "random_seed", validate_seed(self.random_seed))
        set_(self, "iterations", validate_iterations(self.iterations))
        set_(self, "tolerance", validate_non_negative(self.tolerance, "tolerance"))

    def replace(self, **changes: Any) -> LayoutConfig:
        """Return a new validated config with the given fields changed."""
        _check_fields(changes)
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain dict."""
        return dataclasses.asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None, **overrides: Any) -> LayoutConfig:
        """
        Build a config from a mapping plus keyword overrides.

        Args:
            mapping: Partial configuration (missing keys take defaults)
            **overrides: Fields that take precedence over mapping

        Raises:
            InvalidConfigError: On unknown keys or out-of-range values
        """
        values: dict[str, Any] = dict(mapping or {})
        values.update(overrides)
        _check_fields(values)
        return cls(**values)


_FIELDS = frozenset(f.name for f in dataclasses.fields(LayoutConfig))


def _check_fields(values: Mapping[str, Any]) -> None:
    unknown = sorted(set(values) - _FIELDS)
    if unknown:
        raise InvalidConfigError(
            f"Unknown layout configuration key(s): {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(_FIELDS))}"
        )


DEFAULT_CONFIG = LayoutConfig()


__all__ = ["LayoutConfig", "DEFAULT_CONFIG"]
