"""
Constellation: connect the stars, claim the sky.
"""

__version__ = "1.0.0"
