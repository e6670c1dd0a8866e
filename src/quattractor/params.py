"""
Seeded construction of attractor configurations.

The engine's trajectory does not depend on the seed; the seed earns its keep
here, picking the step vector, start point, rotation and variation of a
configuration before the engine ever sees it.
"""

import math
from typing import Optional

import numpy as np

from quattractor.core.config import AttractorConfig, SideFlipVariation
from quattractor.core.rng import DeterministicRandom

PHI = (1.0 + math.sqrt(5.0)) / 2.0


def phyllotaxis_vector(rng: DeterministicRandom, variation: float = 0.1) -> np.ndarray:
    """
    Step vector near (1/φ, 1/φ², 1/φ³), each axis jittered by ±``variation``.
    """
    base = (1.0 / PHI, 1.0 / PHI ** 2, 1.0 / PHI ** 3)
    return np.array(
        [b * (1.0 + rng.next_float(-variation, variation)) for b in base],
        dtype=np.float32,
    )


def small_rotation(rng: DeterministicRandom, max_angle: float = 0.05) -> np.ndarray:
    """Unit quaternion rotating by an angle in [0, max_angle) about a random axis."""
    angle = rng.next_float(0.0, max_angle)
    axis = rng.next_point_on_sphere()
    half = angle / 2.0
    q = np.empty(4, dtype=np.float32)
    q[0] = math.cos(half)
    q[1:] = axis * np.float32(math.sin(half))
    return q


def random_config(
    seed: int,
    variation: Optional[SideFlipVariation] = None,
    rotation_angle: float = 0.05,
) -> AttractorConfig:
    """
    Derive a full configuration from ``seed``. Equal seeds give equal configs.

    Args:
        seed: Signed 32-bit seed; also stored on the returned config.
        variation: Force a side-flip variation instead of drawing one.
        rotation_angle: Upper bound (radians) of the global rotation angle.
            ``0`` yields the identity rotation.
    """
    rng = DeterministicRandom(seed)

    step_vector = phyllotaxis_vector(rng)
    radius = rng.next_float(0.0, 0.5)
    initial_position = rng.next_point_on_sphere() * np.float32(radius)
    global_rotation = small_rotation(rng, rotation_angle)
    drawn = SideFlipVariation(rng.next_int(len(SideFlipVariation)))

    return AttractorConfig(
        seed=seed,
        step_vector=step_vector,
        initial_position=initial_position,
        side_flip_variation=drawn if variation is None else variation,
        global_rotation=global_rotation,
    )
