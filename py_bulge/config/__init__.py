"""
Configuration for pattern generation.

Named presets live in ``py_bulge.config.presets``.
"""

from .config import settings, Settings

__all__ = ['settings', 'Settings']
