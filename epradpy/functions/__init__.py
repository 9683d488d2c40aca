"""Low-level numerical kernels and special functions.

This subpackage contains the dilogarithm-based special functions of the
virtual correction and the Numba-accelerated bremsstrahlung kernels.
"""
