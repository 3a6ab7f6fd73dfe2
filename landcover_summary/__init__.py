"""Boundary Land-Cover Summary.

Clips a categorical land-cover raster to an administrative boundary
polygon and reports the share of each land-cover class inside it.
"""

__version__ = "0.1.0"
