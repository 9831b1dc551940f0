"""
Configuration & Constants
=========================
This module serves as the central registry for package-wide constants.

Why is this file needed?
------------------------
1. Consistency: refinement patterns, the child composer and the tests must
   agree on the lattice resolution, otherwise shared vertices of neighboring
   cells stop matching bit for bit.
2. Discoverability: numerical defaults are kept in one place instead of being
   scattered as magic numbers throughout the code.

Exports:
    DEFAULT_LATTICE_CONST (int): Lattice resolution used for child polygons.
    LATTICE_BASE (int): Every lattice constant must be a multiple of this.
    DEFAULT_QUAD_ORDER (int): Quadrature order used by ``volume`` for affine geometries.
    CURVED_QUAD_ORDER (int): Quadrature order used by ``volume`` for non-affine geometries.
"""

# Halves and thirds of the reference cell land on integer points for multiples of 6
LATTICE_BASE: int = 6
DEFAULT_LATTICE_CONST: int = LATTICE_BASE

# Affine maps have a constant integration element
DEFAULT_QUAD_ORDER: int = 2

# Non-affine maps (curved segments, quads embedded in 3D) have a non-polynomial
# integration element, so their volume is only approximated
CURVED_QUAD_ORDER: int = 20
