"""
hictools - output and interpolation utilities for heavy-ion collision
transport simulations.

Components:
  - HDF5Output: per-event particle and collision tables in one HDF5 file
  - CubicSplineInterpolator: natural cubic spline with constant extrapolation
  - DataLinearInterpolator / LinearSegment: piecewise linear companions
"""
__version__ = "0.1.0"
