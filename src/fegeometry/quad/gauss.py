from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy.special import roots_jacobi, roots_legendre

from fegeometry.base.ref_el import RefEl, RefElType
from fegeometry.errors import ConfigurationError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuadRule:
    """
    Quadrature rule on a reference element.

    Attributes:
        ref_el: Reference element the rule integrates over.
        order: Maximal polynomial degree integrated exactly.
        points: ``(dimension, n)`` array of quadrature points.
        weights: ``(n,)`` array of weights, summing to the reference volume.
    """
    ref_el: RefEl
    order: int
    points: npt.NDArray[np.float64]
    weights: npt.NDArray[np.float64]

    @property
    def num_points(self) -> int:
        """Number of quadrature points."""
        return self.weights.shape[0]


def gauss_points_weights_edge(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate Gauss-Legendre points and weights on the unit interval [0, 1].

    Args:
        n_points: Number of integration points.

    Raises:
        ConfigurationError: If `n_points` is smaller than 1.

    Returns:
        A tuple containing the Gauss points and weights.
    """
    if n_points < 1:
        msg = f"Unsupported number of Gauss points: {n_points}. 'n_points' must be at least 1."
        logger.error(msg)
        raise ConfigurationError(msg)
    x, w = roots_legendre(n_points)
    return (x + 1.0) / 2.0, w / 2.0


def gauss_points_weights_triangle(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate collapsed Gauss points and weights on the unit triangle.

    The square [0, 1]^2 is mapped onto the triangle by (s, t) -> (s, t(1 - s)).
    The Jacobian (1 - s) is absorbed into a Gauss-Jacobi rule in s.

    Args:
        n_points: Number of integration points per direction.

    Raises:
        ConfigurationError: If `n_points` is smaller than 1.

    Returns:
        A tuple containing the ``(2, n_points**2)`` Gauss points and their weights.
    """
    t, w_t = gauss_points_weights_edge(n_points)
    x, w_x = roots_jacobi(n_points, 1.0, 0.0)
    s = (x + 1.0) / 2.0
    w_s = w_x / 4.0

    s_grid, t_grid = np.meshgrid(s, t, indexing="ij")
    points = np.array([s_grid.ravel(), (t_grid * (1.0 - s_grid)).ravel()])
    weights = np.outer(w_s, w_t).ravel()
    return points, weights


def make_quad_rule(ref_el: RefEl, order: int) -> QuadRule:
    """
    Build a quadrature rule that is exact for polynomials up to ``order``.

    Args:
        ref_el: Reference element to integrate over.
        order: Required degree of exactness.

    Raises:
        ConfigurationError: If ``order`` is negative.

    Returns:
        The quadrature rule.
    """
    if order < 0:
        msg = f"Quadrature order must be non-negative, got {order}."
        logger.error(msg)
        raise ConfigurationError(msg)

    # n Gauss points integrate degree 2n - 1 exactly
    n_points = order // 2 + 1

    if ref_el.type == RefElType.POINT:
        points, weights = np.zeros((0, 1)), np.array([1.0])
    elif ref_el.type == RefElType.SEGMENT:
        x, weights = gauss_points_weights_edge(n_points)
        points = x[np.newaxis, :]
    elif ref_el.type == RefElType.TRIA:
        points, weights = gauss_points_weights_triangle(n_points)
    else:
        x, w = gauss_points_weights_edge(n_points)
        x_grid, y_grid = np.meshgrid(x, x, indexing="ij")
        points = np.array([x_grid.ravel(), y_grid.ravel()])
        weights = np.outer(w, w).ravel()

    points.setflags(write=False)
    weights.setflags(write=False)
    return QuadRule(ref_el=ref_el, order=order, points=points, weights=weights)
