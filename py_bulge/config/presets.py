"""
Named pattern presets and the value ranges exposed to interactive controls.
"""

from typing import Dict, List, Tuple

from ..core.grid_renderer import PatternConfig

# (min, max) per field for interactive slider controls
CONTROL_RANGES: Dict[str, Tuple[float, float]] = {
    "grid_size": (20.0, 80.0),
    "bulge_strength": (10.0, 120.0),
    "bulge_count": (1, 6),
    "line_opacity": (0.05, 0.4),
    "rotation": (0.0, 360.0),
}

PRESETS: Dict[str, PatternConfig] = {
    "default": PatternConfig(),
    "fine_mesh": PatternConfig(
        grid_size=20.0, bulge_strength=35.0, bulge_count=4, seed=137.0, line_opacity=0.12
    ),
    "wide_swell": PatternConfig(
        grid_size=64.0, bulge_strength=110.0, bulge_count=2, seed=512.0, line_opacity=0.22
    ),
    "tilted": PatternConfig(
        grid_size=36.0, bulge_strength=70.0, bulge_count=5, seed=42.0, line_opacity=0.18,
        rotation=30.0,
    ),
    "flat": PatternConfig(
        grid_size=40.0, bulge_strength=0.0, bulge_count=0, seed=0.0, line_opacity=0.15
    ),
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str) -> PatternConfig:
    """Return the preset called ``name``; raises KeyError if unknown."""
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset: {name}. Available: {', '.join(list_presets())}") from None
