# kernels.py
from __future__ import annotations

import numpy as np
import numpy.typing as npt
import numba as nb


@nb.njit(cache=True)
def _inv2(
    a11: float,
    a12: float,
    a21: float,
    a22: float
) -> tuple[tuple[float, float, float, float], float]:
    """
    Compute the inverse and determinant of a 2×2 matrix [[a11, a12], [a21, a22]].

    Args:
        a11, a12, a21, a22: Elements of the 2x2 matrix.

    Returns:
        A tuple containing the elements of the inverse matrix and the determinant.
    """
    det = a11 * a22 - a12 * a21
    inv = (a22 / det, -a12 / det, -a21 / det, a11 / det)
    return inv, det


@nb.njit(cache=True)
def gramian_kernel(
    jac: npt.NDArray[np.float64],
    dim_local: int
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Blockwise J (JᵀJ)⁻¹ and sqrt(det(JᵀJ)) for a batch of Jacobians.

    Args:
        jac: (dim_global, n*dim_local) horizontally stacked Jacobians, dim_local in {1, 2}.
        dim_local: Number of columns of each Jacobian block.

    Returns:
        jig: (dim_global, n*dim_local) array of J (JᵀJ)⁻¹ blocks.
        dets: (n, ) array of integration elements.
    """
    dim_global = jac.shape[0]
    n_points = jac.shape[1] // dim_local
    jig = np.empty_like(jac)
    dets = np.empty(n_points, dtype=np.float64)

    for p in range(n_points):
        c = p * dim_local
        if dim_local == 1:
            g = 0.0
            for r in range(dim_global):
                g += jac[r, c] * jac[r, c]
            dets[p] = np.sqrt(g)
            for r in range(dim_global):
                jig[r, c] = jac[r, c] / g
        elif dim_global == 2:
            # Square case: J (JᵀJ)⁻¹ = J⁻ᵀ
            inv, det = _inv2(jac[0, c], jac[0, c + 1], jac[1, c], jac[1, c + 1])
            i00, i01, i10, i11 = inv
            dets[p] = abs(det)
            jig[0, c] = i00
            jig[0, c + 1] = i10
            jig[1, c] = i01
            jig[1, c + 1] = i11
        else:
            g00 = 0.0
            g01 = 0.0
            g11 = 0.0
            for r in range(dim_global):
                g00 += jac[r, c] * jac[r, c]
                g01 += jac[r, c] * jac[r, c + 1]
                g11 += jac[r, c + 1] * jac[r, c + 1]
            inv, det = _inv2(g00, g01, g01, g11)
            i00, i01, i10, i11 = inv
            dets[p] = np.sqrt(det)
            for r in range(dim_global):
                a = jac[r, c]
                b = jac[r, c + 1]
                jig[r, c] = a * i00 + b * i10
                jig[r, c + 1] = a * i01 + b * i11

    return jig, dets
