"""
Quattractor - deterministic quaternion attractors on the unit ball.
"""

from quattractor.core import (
    AttractorConfig,
    AttractorEngine,
    AttractorError,
    AttractorPoint,
    AttractorStatistics,
    CapacityExceeded,
    ConfigError,
    DeterministicRandom,
    Side,
    SideFlipVariation,
    validate_config,
)
from quattractor.params import random_config

__version__ = "0.1.0"
