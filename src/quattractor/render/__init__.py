"""
Rendering of attractor point buffers to images.
"""

from quattractor.render.renderer import (
    AttractorRenderer,
    GridStatistics,
    RenderConfig,
    accumulate,
    grid_statistics,
    normalize_grid,
    project_points,
    save_png,
)
