"""
Attractor engine.

Iterates a position inside the unit ball of ℝ³. Each step adds the step
vector (signed by the current hemisphere side); a step that leaves the ball
is corrected by the configured side-flip variation and toggles the side. An
optional global rotation is applied on S³ after every step. Points are
written into a fixed-capacity float32 buffer laid out as (x, y, z, side).
"""

import logging
from dataclasses import dataclass, replace
from typing import NamedTuple, Optional, Tuple

import numpy as np

from quattractor.core.config import AttractorConfig, Side, SideFlipVariation
from quattractor.core.errors import CapacityExceeded
from quattractor.core.quaternion import (
    inverse_stereographic_projection,
    is_identity,
    multiply,
    normalize,
    sum_of_squares,
)
from quattractor.core.rng import DeterministicRandom

logger = logging.getLogger(__name__)

POINT_STRIDE = 4


class AttractorPoint(NamedTuple):
    x: float
    y: float
    z: float
    side: Side


@dataclass(frozen=True)
class AttractorStatistics:
    """Snapshot of the engine counters and current state."""

    total_steps: int
    side_flip_count: int
    point_count: int
    current_position: Tuple[float, float, float]
    current_side: Side

    def as_array(self) -> np.ndarray:
        """[total_steps, side_flip_count, point_count, x, y, z, side] as float32."""
        return np.array(
            [
                self.total_steps,
                self.side_flip_count,
                self.point_count,
                *self.current_position,
                int(self.current_side),
            ],
            dtype=np.float32,
        )


def flip_smallest(v: np.ndarray) -> np.ndarray:
    """Negate the component with the smallest magnitude (x wins ties, then y)."""
    ax, ay, az = np.abs(v)
    out = v.copy()
    if ax <= ay and ax <= az:
        out[0] = -out[0]
    elif ay <= ax and ay <= az:
        out[1] = -out[1]
    else:
        out[2] = -out[2]
    return out


def flip_all_except_largest(v: np.ndarray) -> np.ndarray:
    """Negate every component but the largest in magnitude (x wins ties, then y)."""
    ax, ay, az = np.abs(v)
    if ax >= ay and ax >= az:
        keep = 0
    elif ay >= ax and ay >= az:
        keep = 1
    else:
        keep = 2
    out = -v
    out[keep] = v[keep]
    return out


class AttractorEngine:
    """
    Generates attractor point sequences into a pre-allocated buffer.

    An engine is not thread-safe; run independent trajectories on independent
    engines.
    """

    def __init__(self, max_points: int, config: Optional[AttractorConfig] = None):
        if max_points < 0:
            raise ValueError(f"max_points must be >= 0, got {max_points}")
        self._max_points = int(max_points)
        self.cfg = replace(config) if config is not None else AttractorConfig()

        self._points = np.zeros(self._max_points * POINT_STRIDE, dtype=np.float32)
        self._random = DeterministicRandom(self.cfg.seed)

        # Iteration state
        self._position = self.cfg.initial_position.copy()
        self._side = Side.NORTH
        self._index = 0

        # Counters
        self._total_steps = 0
        self._side_flip_count = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_points(self) -> int:
        return self._max_points

    @property
    def point_count(self) -> int:
        return self._index

    @property
    def config(self) -> AttractorConfig:
        """A copy of the active configuration."""
        return replace(self.cfg)

    @property
    def random(self) -> DeterministicRandom:
        return self._random

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def generate_points(self, count: int) -> None:
        """
        Restart the trajectory from the configured initial state and
        generate ``count`` points.

        Raises:
            CapacityExceeded: ``count`` is larger than ``max_points``. Nothing
                is reset or written in that case.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if count > self._max_points:
            raise CapacityExceeded(count, self._max_points)

        self.reset()
        rotating = not is_identity(self.cfg.global_rotation)
        for _ in range(count):
            self._next_point(rotating)
            self._total_steps += 1

        logger.debug(
            "generated %d points (%d side flips, variation=%s, rotating=%s)",
            self._index,
            self._side_flip_count,
            self.cfg.side_flip_variation.name,
            rotating,
        )

    def reset(self) -> None:
        """Return to the configured initial state without touching the config."""
        self._index = 0
        self._side_flip_count = 0
        self._total_steps = 0
        self._position = self.cfg.initial_position.copy()
        self._side = Side.NORTH
        # The seed never feeds the iteration rule; it is reseeded so that
        # consumers drawing from ``random`` see a reproducible stream.
        self._random.set_seed(self.cfg.seed)

    def update_config(self, new_config: AttractorConfig) -> None:
        """
        Replace the configuration. The current trajectory is left as is; call
        ``reset`` or ``generate_points`` to start a fresh one.
        """
        self.cfg = replace(new_config)
        self._random.set_seed(self.cfg.seed)

    def get_points(self) -> np.ndarray:
        """
        Read-only view of the generated points, length ``point_count * 4``.

        The view shares storage with the engine and is overwritten by the
        next generation; copy it to keep it.
        """
        view = self._points[: self._index * POINT_STRIDE]
        view.flags.writeable = False
        return view

    def get_point_range(self, start: int, count: int) -> np.ndarray:
        """Copy of up to ``count`` points from ``start``, clamped to what exists."""
        start = min(max(int(start), 0), self._index)
        n = max(0, min(int(count), self._index - start))
        lo = start * POINT_STRIDE
        return self._points[lo: lo + n * POINT_STRIDE].copy()

    def get_current_state(self) -> AttractorPoint:
        x, y, z = (float(c) for c in self._position)
        return AttractorPoint(x, y, z, self._side)

    def get_statistics(self) -> AttractorStatistics:
        return AttractorStatistics(
            total_steps=self._total_steps,
            side_flip_count=self._side_flip_count,
            point_count=self._index,
            current_position=tuple(float(c) for c in self._position),
            current_side=self._side,
        )

    # ------------------------------------------------------------------
    # Iteration rule
    # ------------------------------------------------------------------

    def _next_point(self, rotating: bool) -> None:
        candidate = self._position + self.cfg.step_vector * np.float32(self._side)

        # |c| > 1  <=>  |c|^2 > 1
        if sum_of_squares(candidate) > 1.0:
            self._position = self._apply_side_flip_variation(candidate)
            self._side = self._side.flipped()
            self._side_flip_count += 1
        else:
            self._position = candidate

        # Runs after the boundary rule and may override its side
        if rotating:
            self._apply_global_rotation()

        self._store_current_point()

    def _apply_side_flip_variation(self, candidate: np.ndarray) -> np.ndarray:
        variation = self.cfg.side_flip_variation
        if variation is SideFlipVariation.FLIP_SMALLEST:
            return flip_smallest(candidate)
        if variation is SideFlipVariation.FLIP_ALL_EXCEPT_LARGEST:
            return flip_all_except_largest(candidate)
        # PLAIN_FLIP keeps the last accepted position; only the side changes
        return self._position

    def _apply_global_rotation(self) -> None:
        q = inverse_stereographic_projection(self._position)
        q = normalize(multiply(self.cfg.global_rotation, q))

        im = q[1:]
        denom = sum_of_squares(im) + np.float32(1.0)
        self._position = (im * np.float32(2.0) / denom).astype(np.float32)
        self._side = Side.NORTH if q[0] >= 0.0 else Side.SOUTH

    def _store_current_point(self) -> None:
        i = self._index * POINT_STRIDE
        self._points[i: i + 3] = self._position
        self._points[i + 3] = float(self._side)
        self._index += 1
