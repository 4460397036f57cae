"""
Random pattern configurations.

The bulge layout itself is driven by the seeded sin hash; this module only
picks the configuration values, the way a "Randomize" button in a UI
would. A NumPy Generator is used so a whole batch of configurations can be
replayed from one seed.
"""

import math
from typing import Optional

import numpy as np

from .grid_renderer import PatternConfig

SEED_RANGE = 1000.0


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a Generator; ``None`` draws fresh OS entropy."""
    return np.random.default_rng(seed)


def default_config(seed: Optional[float] = None, rng: Optional[np.random.Generator] = None) -> PatternConfig:
    """Initial configuration with a random seed unless one is given."""
    if seed is None:
        seed = float((rng or make_rng()).random() * SEED_RANGE)
    return PatternConfig(seed=float(seed))


def random_config(rng: Optional[np.random.Generator] = None) -> PatternConfig:
    """Draw a configuration from the randomizer ranges."""
    rng = rng or make_rng()
    return PatternConfig(
        grid_size=30 + float(rng.random()) * 30,
        bulge_strength=40 + float(rng.random()) * 80,
        bulge_count=2 + math.floor(float(rng.random()) * 4),
        seed=float(rng.random()) * SEED_RANGE,
        line_opacity=0.1 + float(rng.random()) * 0.2,
        rotation=float(rng.random()) * 360,
    )
