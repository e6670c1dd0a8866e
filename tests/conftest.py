"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from quattractor.core.config import AttractorConfig, SideFlipVariation
from quattractor.core.quaternion import normalize


@pytest.fixture
def unit_quaternions() -> list[np.ndarray]:
    """
    A reproducible batch of unit quaternions.

    Returns:
        List of float32 (w, x, y, z) arrays of length 1.
    """
    rng = np.random.default_rng(42)
    return [normalize(q) for q in rng.normal(size=(32, 4))]


@pytest.fixture
def plain_flip_config() -> AttractorConfig:
    """Single-axis walk that reaches the unit sphere on its second step."""
    return AttractorConfig(
        seed=7,
        step_vector=[0.5, 0.0, 0.0],
        initial_position=[0.0, 0.0, 0.0],
        side_flip_variation=SideFlipVariation.PLAIN_FLIP,
        global_rotation=[1.0, 0.0, 0.0, 0.0],
    )


@pytest.fixture
def rotating_config() -> AttractorConfig:
    """Three-axis walk with a non-trivial global rotation."""
    return AttractorConfig(
        seed=123,
        step_vector=[0.05, 0.05, 0.05],
        initial_position=[0.3, 0.2, 0.1],
        side_flip_variation=SideFlipVariation.FLIP_SMALLEST,
        global_rotation=[0.9, 0.1, 0.2, 0.3],
    )
