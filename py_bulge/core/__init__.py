"""
Core pattern generation functionality.
"""

from .seeded_random import rand
from .bulge_field import BulgeDescriptor, generate_bulges, displace, displace_points
from .surface import RasterSurface, parse_color
from .grid_renderer import PatternConfig, LatticeExtent, lattice_extent, render, smooth_path
from .randomizer import default_config, random_config, make_rng
from .gallery import render_gallery, random_gallery, export_filename

__all__ = ['rand', 'BulgeDescriptor', 'generate_bulges', 'displace', 'displace_points',
           'RasterSurface', 'parse_color', 'PatternConfig', 'LatticeExtent', 'lattice_extent',
           'render', 'smooth_path', 'default_config', 'random_config', 'make_rng',
           'render_gallery', 'random_gallery', 'export_filename']
