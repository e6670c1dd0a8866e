"""
Colour helpers for attractor images.

Hemisphere hues are turned into RGB here, and the finished 8-bit frame gets
bloom, corner darkening and highlight compression.
"""

import numpy as np
from PIL import Image, ImageChops, ImageFilter

# For each of the six hue sectors, which of (v, t, p, q) feeds R, G and B
_SECTOR_SOURCES = np.array(
    [
        [0, 1, 2],
        [3, 0, 2],
        [2, 0, 1],
        [2, 3, 0],
        [1, 2, 0],
        [0, 2, 3],
    ],
    dtype=np.int64,
)


def hsv_to_rgb(h, s, v) -> np.ndarray:
    """
    Vectorized HSV to RGB.

    ``s`` and ``v`` broadcast against ``h``; all inputs are in [0, 1].

    Returns:
        float32 array of shape ``h.shape + (3,)``.
    """
    h = np.asarray(h, dtype=np.float32)
    s = np.broadcast_to(np.asarray(s, dtype=np.float32), h.shape)
    v = np.broadcast_to(np.asarray(v, dtype=np.float32), h.shape)

    scaled = (h % 1.0) * 6.0
    sector = np.minimum(scaled.astype(np.int64), 5)
    frac = scaled - sector

    candidates = np.stack(
        [
            v,
            v * (1.0 - s * (1.0 - frac)),
            v * (1.0 - s),
            v * (1.0 - s * frac),
        ],
        axis=-1,
    )
    rgb = np.take_along_axis(candidates, _SECTOR_SOURCES[sector], axis=-1)
    return rgb.astype(np.float32)


def tone_map_soft(frame: np.ndarray, shoulder: float = 0.78) -> np.ndarray:
    """
    Roll off highlights above ``shoulder`` (fraction of full scale).

    Darker values are returned unchanged; brighter ones approach 255 along
    ``knee + x * room / (x + room)``.
    """
    knee = shoulder * 255.0
    room = 255.0 - knee

    values = frame.astype(np.float32)
    excess = values - knee
    rolled = knee + excess * room / (np.maximum(excess, 0.0) + room)
    return np.where(excess > 0, rolled, values).astype(np.uint8)


def add_glow(frame: np.ndarray, intensity: float = 0.25, radius: int = 6) -> np.ndarray:
    """
    Bloom: screen a blurred, dimmed copy of ``frame`` over itself.

    Args:
        frame: (H, W, 3) uint8 RGB image.
        intensity: Opacity of the blurred layer; ``0`` disables the effect.
        radius: Gaussian blur radius in pixels.
    """
    if intensity <= 0:
        return frame

    base = Image.fromarray(frame)
    halo = base.filter(ImageFilter.GaussianBlur(radius=radius))
    halo = halo.point(lambda level: level * intensity)
    return np.array(ImageChops.screen(base, halo))


def vignette(frame: np.ndarray, strength: float = 0.2) -> np.ndarray:
    """Darken toward the corners; ``strength`` 1 turns the corners black."""
    if strength <= 0:
        return frame

    height, width = frame.shape[:2]
    rows, cols = np.ogrid[:height, :width]
    radius = np.hypot(rows - height / 2.0, cols - width / 2.0)
    radius /= np.hypot(height / 2.0, width / 2.0)

    falloff = 1.0 - np.clip(radius * strength, 0.0, 1.0) ** 2
    return (frame * falloff[..., None]).astype(np.uint8)
