"""
Point buffer to image renderer.

Projects the engine's (x, y, z, side) points onto a 2D canvas, accumulates
them into a float RGB grid coloured by hemisphere, smooths the grid, maps it
to 8-bit colour and finishes with glow and vignette.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image
from scipy.ndimage import gaussian_filter

from quattractor.core.engine import POINT_STRIDE, AttractorEngine
from quattractor.core.quaternion import IDENTITY, rotation_matrix
from quattractor.render.colorgrade import add_glow, hsv_to_rgb, tone_map_soft, vignette

logger = logging.getLogger(__name__)

PROJECTIONS = ("simple", "sphere")
NORMALIZATIONS = ("logarithmic", "statistics")

# Log-domain midpoint and spread of the sigmoid normalization, independent
# of the number of points rendered.
_LOG_MIDPOINT = 4.5
_LOG_SPREAD = 1.0


@dataclass
class RenderConfig:
    """Configuration for the attractor renderer."""

    width: int = 800
    height: int = 600
    scale: Optional[float] = None  # pixels per unit; None = 45% of shorter side

    # Projection
    projection: str = "simple"  # "simple" or "sphere"
    camera_rotation: np.ndarray = field(default_factory=IDENTITY.copy)

    # Tone
    blur_sigma: float = 1.0
    normalization: str = "logarithmic"  # "logarithmic" or "statistics"

    # Colour
    north_hue: float = 0.55
    south_hue: float = 0.08
    saturation: float = 0.8

    # Post-processing
    glow_intensity: float = 0.25
    glow_radius: int = 6
    vignette_strength: float = 0.2

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.projection not in PROJECTIONS:
            raise ValueError(f"projection must be one of {PROJECTIONS}, got {self.projection!r}")
        if self.normalization not in NORMALIZATIONS:
            raise ValueError(
                f"normalization must be one of {NORMALIZATIONS}, got {self.normalization!r}"
            )
        self.camera_rotation = np.array(self.camera_rotation, dtype=np.float32)
        if self.camera_rotation.shape != (4,):
            raise ValueError("camera_rotation must have 4 components")

    def pixel_scale(self) -> float:
        if self.scale is not None:
            return float(self.scale)
        return 0.45 * min(self.width, self.height)


@dataclass
class GridStatistics:
    """Per-channel statistics over the lit pixels of an accumulation grid."""

    min: np.ndarray
    max: np.ndarray
    mean: np.ndarray
    stdev: np.ndarray
    lit_pixels: int = 0


def _as_point_rows(points: np.ndarray) -> np.ndarray:
    return np.asarray(points, dtype=np.float32).reshape(-1, POINT_STRIDE)


def project_points(points: np.ndarray, cfg: RenderConfig) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map flat (x, y, z, side) points to pixel coordinates.

    Returns:
        (px, py) float arrays; y grows downward as in image space.
    """
    rows = _as_point_rows(points)
    xyz = rows[:, :3] @ rotation_matrix(cfg.camera_rotation).T

    x = xyz[:, 0]
    y = xyz[:, 1]
    if cfg.projection == "sphere":
        mag = np.sqrt((xyz ** 2).sum(axis=1))
        factor = np.ones_like(mag)
        nonzero = mag > 0
        factor[nonzero] = 1.0 + xyz[nonzero, 2] / mag[nonzero]
        x = x * factor
        y = y * factor

    scale = cfg.pixel_scale()
    px = cfg.width / 2.0 + x * scale
    py = cfg.height / 2.0 - y * scale
    return px, py


def hemisphere_colors(cfg: RenderConfig) -> np.ndarray:
    """(2, 3) RGB rows for the north (+1) and south (-1) hemispheres."""
    hues = np.array([cfg.north_hue, cfg.south_hue], dtype=np.float32) % 1.0
    return hsv_to_rgb(hues, cfg.saturation, 1.0)


def accumulate(points: np.ndarray, cfg: RenderConfig) -> np.ndarray:
    """
    Sum hemisphere colours of all points into an (H, W, 3) float32 grid.

    Points that project outside the canvas are dropped.
    """
    rows = _as_point_rows(points)
    grid = np.zeros((cfg.height, cfg.width, 3), dtype=np.float32)
    if len(rows) == 0:
        return grid

    px, py = project_points(rows, cfg)
    ix = np.rint(px).astype(np.int64)
    iy = np.rint(py).astype(np.int64)
    inside = (ix >= 0) & (ix < cfg.width) & (iy >= 0) & (iy < cfg.height)

    color_index = (rows[:, 3] < 0).astype(np.int64)
    colors = hemisphere_colors(cfg)
    np.add.at(grid, (iy[inside], ix[inside]), colors[color_index[inside]])
    return grid


def grid_statistics(grid: np.ndarray) -> GridStatistics:
    """Min/max/mean/stdev per channel over pixels with any energy."""
    lit = grid[(grid > 0).any(axis=2)]
    if len(lit) == 0:
        zeros = np.zeros(3, dtype=np.float32)
        return GridStatistics(zeros, zeros.copy(), zeros.copy(), zeros.copy(), 0)
    return GridStatistics(
        min=lit.min(axis=0),
        max=lit.max(axis=0),
        mean=lit.mean(axis=0),
        stdev=lit.std(axis=0),
        lit_pixels=len(lit),
    )


def normalize_grid(
    grid: np.ndarray,
    mode: str = "logarithmic",
    stats: Optional[GridStatistics] = None,
) -> np.ndarray:
    """
    Map accumulated energy to uint8.

    ``logarithmic`` applies a fixed log + sigmoid curve, independent of the
    point count. ``statistics`` stretches each channel's lit min..max range.
    """
    if mode == "logarithmic":
        log_value = np.log(np.abs(grid) * 255.0 + 1.0)
        sig = 1.0 / (1.0 + np.exp(-(log_value - _LOG_MIDPOINT) / _LOG_SPREAD))
        # Rescale so zero energy lands exactly on black
        floor = 1.0 / (1.0 + np.exp(_LOG_MIDPOINT / _LOG_SPREAD))
        out = np.where(grid > 0, (sig - floor) / (1.0 - floor) * 255.0, 0.0)
    elif mode == "statistics":
        stats = stats or grid_statistics(grid)
        span = stats.max - stats.min
        safe_span = np.where(span > 0, span, 1.0)
        out = (grid - stats.min) / safe_span * 255.0
        out = np.where(span > 0, out, 0.0)
    else:
        raise ValueError(f"normalization must be one of {NORMALIZATIONS}, got {mode!r}")
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


class AttractorRenderer:
    """
    Renders attractor point buffers to RGB images.
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.cfg = config or RenderConfig()
        self.last_statistics: Optional[GridStatistics] = None

    def render(self, points: np.ndarray) -> np.ndarray:
        """
        Render a flat (x, y, z, side) buffer.

        Returns:
            (H, W, 3) uint8 RGB array.
        """
        t0 = time.perf_counter()
        cfg = self.cfg

        grid = accumulate(points, cfg)
        if cfg.blur_sigma > 0:
            grid = gaussian_filter(grid, sigma=(cfg.blur_sigma, cfg.blur_sigma, 0))

        stats = grid_statistics(grid)
        frame = normalize_grid(grid, cfg.normalization, stats)

        if cfg.glow_intensity > 0:
            frame = add_glow(frame, intensity=cfg.glow_intensity, radius=cfg.glow_radius)
        if cfg.vignette_strength > 0:
            frame = vignette(frame, strength=cfg.vignette_strength)
        frame = tone_map_soft(frame)

        self.last_statistics = stats
        logger.debug(
            "rendered %d points to %dx%d in %.3fs (%d lit pixels)",
            _as_point_rows(points).shape[0],
            cfg.width,
            cfg.height,
            time.perf_counter() - t0,
            stats.lit_pixels,
        )
        return frame

    def render_engine(self, engine: AttractorEngine) -> np.ndarray:
        """Render everything the engine generated last."""
        return self.render(engine.get_points())


def save_png(image: np.ndarray, path: Union[str, Path]) -> Path:
    """Write an (H, W, 3) uint8 image as PNG, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(image)).save(path, format="PNG")
    return path
