"""
Attractor configuration and advisory validation.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

from quattractor.core.errors import ConfigError
from quattractor.core.quaternion import IDENTITY, sum_of_squares, vector3

logger = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class SideFlipVariation(enum.IntEnum):
    """How a candidate that leaves the unit ball is corrected."""

    PLAIN_FLIP = 0
    FLIP_SMALLEST = 1
    FLIP_ALL_EXCEPT_LARGEST = 2


class Side(enum.IntEnum):
    """Hemisphere label attached to every generated point."""

    NORTH = 1
    SOUTH = -1

    def flipped(self) -> "Side":
        return Side.SOUTH if self is Side.NORTH else Side.NORTH


def _coerce_components(name: str, value: Any, size: int) -> np.ndarray:
    try:
        arr = np.array(value, dtype=np.float32)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be {size} numbers, got {value!r}") from exc
    if arr.shape != (size,):
        raise ConfigError(f"{name} must have {size} components, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ConfigError(f"{name} has non-finite components: {arr.tolist()}")
    return arr


def _coerce_variation(value: Any) -> SideFlipVariation:
    if isinstance(value, str):
        try:
            return SideFlipVariation[value.upper()]
        except KeyError:
            raise ConfigError(f"unknown side flip variation: {value!r}") from None
    try:
        return SideFlipVariation(int(value))
    except (TypeError, ValueError):
        raise ConfigError(
            f"side flip variation must be 0, 1 or 2, got {value!r}"
        ) from None


@dataclass(eq=False)
class AttractorConfig:
    """Parameters of one attractor trajectory."""

    seed: int = 0
    step_vector: np.ndarray = field(default_factory=lambda: vector3(0.1, 0.1, 0.1))
    initial_position: np.ndarray = field(default_factory=lambda: vector3(0.0, 0.0, 0.0))
    side_flip_variation: SideFlipVariation = SideFlipVariation.PLAIN_FLIP
    global_rotation: np.ndarray = field(default_factory=IDENTITY.copy)

    def __post_init__(self):
        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
            raise ConfigError(f"seed must be an integer, got {self.seed!r}")
        self.seed = int(self.seed)
        if not INT32_MIN <= self.seed <= INT32_MAX:
            raise ConfigError(f"seed {self.seed} is outside the signed 32-bit range")

        # Always copies, so callers keep ownership of what they passed in
        self.step_vector = _coerce_components("step_vector", self.step_vector, 3)
        self.initial_position = _coerce_components(
            "initial_position", self.initial_position, 3
        )
        self.global_rotation = _coerce_components(
            "global_rotation", self.global_rotation, 4
        )
        self.side_flip_variation = _coerce_variation(self.side_flip_variation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "step_vector": self.step_vector.tolist(),
            "initial_position": self.initial_position.tolist(),
            "side_flip_variation": int(self.side_flip_variation),
            "global_rotation": self.global_rotation.tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttractorConfig":
        """Build a config from the ``to_dict`` shape; missing keys use defaults."""
        if not isinstance(data, dict):
            raise ConfigError(f"config must be a mapping, got {type(data).__name__}")
        known = {"seed", "step_vector", "initial_position", "side_flip_variation", "global_rotation"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown config keys: {sorted(unknown)}")
        return cls(**data)


@dataclass
class ValidationResult:
    """Outcome of ``validate_config``."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_config(config: AttractorConfig) -> ValidationResult:
    """
    Report settings that are legal but probably not what the caller wants.

    Hard errors are already rejected by ``AttractorConfig`` itself; this only
    fills ``errors`` for values mutated after construction.
    """
    result = ValidationResult()

    for name, size in (("step_vector", 3), ("initial_position", 3), ("global_rotation", 4)):
        value = getattr(config, name)
        if not isinstance(value, np.ndarray) or value.shape != (size,):
            result.errors.append(f"{name} must have {size} components")
        elif not np.all(np.isfinite(value)):
            result.errors.append(f"{name} has non-finite components")
    if result.errors:
        return result

    if np.any(config.step_vector <= 0.0):
        result.warnings.append("step_vector components are expected to be positive")

    if sum_of_squares(config.initial_position) > 1.0:
        result.warnings.append("initial_position lies outside the unit ball")

    rotation_norm2 = float(sum_of_squares(config.global_rotation))
    if abs(rotation_norm2 - 1.0) > 1e-4:
        result.warnings.append(
            f"global_rotation is not a unit quaternion (|q|^2 = {rotation_norm2:.6f})"
        )

    for warning in result.warnings:
        logger.debug("config warning: %s", warning)
    return result
