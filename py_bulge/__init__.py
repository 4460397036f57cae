"""
py-bulge: procedural grid patterns distorted by seeded bulge fields.
"""

__version__ = "0.1.0"
