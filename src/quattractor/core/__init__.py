"""
Attractor generation core: quaternion math, deterministic randomness and the
iteration engine.
"""

from quattractor.core.config import (
    AttractorConfig,
    Side,
    SideFlipVariation,
    ValidationResult,
    validate_config,
)
from quattractor.core.engine import AttractorEngine, AttractorPoint, AttractorStatistics
from quattractor.core.errors import AttractorError, CapacityExceeded, ConfigError
from quattractor.core.rng import DeterministicRandom
