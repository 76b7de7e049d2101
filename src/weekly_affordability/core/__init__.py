"""
Core alignment and estimation engine.

This package contains the interpolation kernel, the estimation strategies,
the per-series aligners and the affordability compositor.
"""
