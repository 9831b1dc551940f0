"""
Refinement patterns on integer lattices.

A refinement pattern describes how a reference element is split into
children. Each child is given as a polygon whose vertices are integer lattice
coordinates; dividing by the lattice constant yields reference coordinates.
Since the lattice constant is a multiple of 6, edge midpoints and the
triangle centroid are exact lattice points, so vertices shared by children of
neighboring cells coincide exactly whatever anchors the neighbors use.

Recipes are written for anchor 0. Vertex tokens are ``nK`` (node K), ``mK``
(midpoint of edge K) and ``c`` (centroid). For anchored patterns node and edge
indices are shifted by the anchor modulo the number of edges, so the anchor
edge always plays the role of edge 0.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NoReturn

import numpy as np

from fegeometry.base.ref_el import RefEl, RefElType
from fegeometry.config import DEFAULT_LATTICE_CONST, LATTICE_BASE
from fegeometry.errors import AnchorNotSetError, ConfigurationError
from fegeometry.geometry.factory import make_geometry
from fegeometry.refinement.ref_pat import CHILD_COUNT, RefPat, needs_anchor

if TYPE_CHECKING:
    import numpy.typing as npt
    from fegeometry.geometry.geometry import Geometry

logger = logging.getLogger(__name__)


_RECIPES: dict[tuple[RefElType, RefPat], tuple[tuple[str, ...], ...]] = {
    (RefElType.POINT, RefPat.NIL): (),
    (RefElType.POINT, RefPat.COPY): (("n0",),),

    (RefElType.SEGMENT, RefPat.NIL): (),
    (RefElType.SEGMENT, RefPat.COPY): (("n0", "n1"),),
    (RefElType.SEGMENT, RefPat.SPLIT): (("n0", "m0"), ("m0", "n1")),

    (RefElType.TRIA, RefPat.NIL): (),
    (RefElType.TRIA, RefPat.COPY): (("n0", "n1", "n2"),),
    # Anchor edge bisected
    (RefElType.TRIA, RefPat.BISECT): (
        ("n0", "m0", "n2"),
        ("n1", "m0", "n2"),
    ),
    # Anchor edge, then the next edge (counterclockwise)
    (RefElType.TRIA, RefPat.TRISECT): (
        ("n0", "m0", "n2"),
        ("n1", "m0", "m1"),
        ("n2", "m0", "m1"),
    ),
    # Anchor edge, then the previous edge
    (RefElType.TRIA, RefPat.TRISECT_LEFT): (
        ("n0", "m0", "m2"),
        ("n1", "m0", "n2"),
        ("n2", "m0", "m2"),
    ),
    (RefElType.TRIA, RefPat.QUADSECT): (
        ("n0", "m0", "m2"),
        ("n1", "m0", "m1"),
        ("n2", "m0", "m1"),
        ("n2", "m0", "m2"),
    ),
    (RefElType.TRIA, RefPat.REGULAR): (
        ("n0", "m0", "m2"),
        ("n1", "m0", "m1"),
        ("n2", "m2", "m1"),
        ("m0", "m1", "m2"),
    ),
    (RefElType.TRIA, RefPat.BARYCENTRIC): (
        ("n0", "m0", "c"),
        ("n1", "m0", "c"),
        ("n1", "m1", "c"),
        ("n2", "m1", "c"),
        ("n2", "m2", "c"),
        ("n0", "m2", "c"),
    ),

    (RefElType.QUAD, RefPat.NIL): (),
    (RefElType.QUAD, RefPat.COPY): (("n0", "n1", "n2", "n3"),),
    # Three triangles sharing the anchor midpoint
    (RefElType.QUAD, RefPat.TRISECT): (
        ("m0", "n2", "n3"),
        ("m0", "n0", "n3"),
        ("m0", "n1", "n2"),
    ),
    # Four triangles, anchor edge and the next edge split
    (RefElType.QUAD, RefPat.QUADSECT): (
        ("n0", "n3", "m0"),
        ("n1", "m1", "m0"),
        ("n2", "n3", "m1"),
        ("m0", "m1", "n3"),
    ),
    # Two quads separated by the line through the anchor midpoint and the opposite midpoint
    (RefElType.QUAD, RefPat.SPLIT): (
        ("n0", "m0", "m2", "n3"),
        ("n1", "n2", "m2", "m0"),
    ),
    # One quad and three triangles, all edges but the one opposite the anchor split
    (RefElType.QUAD, RefPat.THREEEDGE): (
        ("n2", "n3", "m3", "m1"),
        ("n0", "m0", "m3"),
        ("n1", "m0", "m1"),
        ("m0", "m1", "m3"),
    ),
    (RefElType.QUAD, RefPat.REGULAR): (
        ("n0", "m0", "c", "m3"),
        ("n1", "m1", "c", "m0"),
        ("n2", "m1", "c", "m2"),
        ("n3", "m2", "c", "m3"),
    ),
}
_RECIPES[(RefElType.QUAD, RefPat.BISECT)] = _RECIPES[(RefElType.QUAD, RefPat.SPLIT)]
_RECIPES[(RefElType.QUAD, RefPat.BARYCENTRIC)] = _RECIPES[(RefElType.QUAD, RefPat.REGULAR)]


def lattice_points(ref_el: RefEl, lattice_const: int) -> dict[str, npt.NDArray[np.int64]]:
    """
    Lattice coordinates of the special points of a reference element.

    Args:
        ref_el: Reference element.
        lattice_const: Lattice resolution, a positive multiple of 6.

    Returns:
        Mapping ``"n"`` -> nodes, ``"m"`` -> edge midpoints, ``"c"`` -> centroid,
        each an integer array with one column per point.
    """
    one = lattice_const
    half = lattice_const // 2
    third = lattice_const // 3

    if ref_el.type == RefElType.POINT:
        return {"n": np.zeros((0, 1), dtype=np.int64)}
    if ref_el.type == RefElType.SEGMENT:
        return {
            "n": np.array([[0, one]], dtype=np.int64),
            "m": np.array([[half]], dtype=np.int64),
        }
    if ref_el.type == RefElType.TRIA:
        return {
            "n": np.array([[0, one, 0], [0, 0, one]], dtype=np.int64),
            "m": np.array([[half, half, 0], [0, half, half]], dtype=np.int64),
            "c": np.array([[third], [third]], dtype=np.int64),
        }
    return {
        "n": np.array([[0, one, one, 0], [0, 0, one, one]], dtype=np.int64),
        "m": np.array([[half, one, half, 0], [0, half, one, half]], dtype=np.int64),
        "c": np.array([[half], [half]], dtype=np.int64),
    }


class RefinementPattern:
    """
    A refinement pattern applied to a reference element.

    Combines the reference element, the pattern, an optional anchor edge and
    the lattice constant. Construction validates the combination; an
    illegal pattern or a missing anchor is a fatal configuration error.
    """

    def __init__(
        self,
        ref_el: RefEl,
        ref_pat: RefPat | str,
        anchor: int | None = None,
        lattice_const: int = DEFAULT_LATTICE_CONST
    ) -> None:
        """
        Initialize the refinement pattern.

        Args:
            ref_el: Reference element to refine.
            ref_pat: Name of the refinement pattern.
            anchor: Local index of the anchor edge, ``None`` if not set.
            lattice_const: Lattice resolution, a positive multiple of 6.

        Raises:
            ConfigurationError: If the pattern is unknown or illegal for the
                reference element, or the anchor or lattice constant is invalid.
            AnchorNotSetError: If the pattern requires an anchor and none is given.
        """
        try:
            ref_pat = RefPat(ref_pat)
        except ValueError:
            self._fail(ConfigurationError, f"Unknown refinement pattern '{ref_pat}'.")

        if (ref_el.type, ref_pat) not in CHILD_COUNT:
            self._fail(
                ConfigurationError,
                f"Refinement pattern '{ref_pat}' is illegal for reference element '{ref_el}' "
                f"(anchor={anchor})."
            )
        valid_anchor = isinstance(anchor, (int, np.integer)) and not isinstance(anchor, bool) and anchor >= 0
        if anchor is not None and not valid_anchor:
            self._fail(
                ConfigurationError,
                f"Anchor must be a non-negative integer, got {anchor!r} "
                f"for ({ref_el}, {ref_pat})."
            )
        if needs_anchor(ref_el.type, ref_pat) and anchor is None:
            self._fail(
                AnchorNotSetError,
                f"Anchor must be set for refinement pattern '{ref_pat}' of reference element '{ref_el}'."
            )
        if lattice_const <= 0 or lattice_const % LATTICE_BASE != 0:
            self._fail(
                ConfigurationError,
                f"Lattice constant must be a positive multiple of {LATTICE_BASE}, got {lattice_const}."
            )

        self._ref_el = ref_el
        self._ref_pat = ref_pat
        self._anchor = None if anchor is None else int(anchor)
        self._lattice_const = lattice_const
        logger.debug(f"Created {self!r}.")

    def __repr__(self) -> str:
        """String representation of the refinement pattern."""
        return (f"{self.__class__.__name__}(ref_el={self._ref_el}, ref_pat={self._ref_pat}, "
                f"anchor={self._anchor}, lattice_const={self._lattice_const})")

    def __str__(self) -> str:
        if self._anchor is None:
            return f"{self._ref_pat}"
        return f"{self._ref_pat}@{self._anchor}"

    @property
    def ref_el(self) -> RefEl:
        """Reference element being refined."""
        return self._ref_el

    @property
    def ref_pat(self) -> RefPat:
        """Name of the pattern."""
        return self._ref_pat

    @property
    def anchor(self) -> int | None:
        """Local index of the anchor edge, ``None`` if not set."""
        return self._anchor

    @property
    def anchor_set(self) -> bool:
        """Whether an anchor was given (distinguishes anchor 0 from no anchor)."""
        return self._anchor is not None

    @property
    def lattice_const(self) -> int:
        """Number of lattice intervals per unit reference length."""
        return self._lattice_const

    def child_count(self) -> int:
        """Number of children produced by the pattern."""
        return CHILD_COUNT[(self._ref_el.type, self._ref_pat)]

    def child_polygons(self) -> list[npt.NDArray[np.int64]]:
        """
        Lattice polygons of the children.

        Returns:
            One integer array per child, shaped ``(dimension, n_vertices)``:
            ``(0, 1)`` for a point, ``(1, 2)`` for a segment, ``(2, 3)`` for a
            triangle and ``(2, 4)`` for a quadrilateral.
        """
        points = lattice_points(self._ref_el, self._lattice_const)
        shift = 0
        if needs_anchor(self._ref_el.type, self._ref_pat):
            shift = self._anchor % self._ref_el.num_nodes

        polygons = []
        for recipe in _RECIPES[(self._ref_el.type, self._ref_pat)]:
            columns = [self._vertex(points, token, shift) for token in recipe]
            polygons.append(np.stack(columns, axis=1))
        return polygons

    def child_geometries_in_parent(self) -> list[Geometry]:
        """
        Children as geometries in the reference coordinates of the parent.

        These relative geometries map a child's reference element into the
        parent's reference element, as needed to transfer functions between
        refinement levels.
        """
        return make_geometry(self._ref_el, self._ref_el.node_coords).child_geometry(self)

    def _vertex(
        self,
        points: dict[str, npt.NDArray[np.int64]],
        token: str,
        shift: int
    ) -> npt.NDArray[np.int64]:
        kind = token[0]
        if kind == "c":
            return points["c"][:, 0]
        index = (int(token[1:]) + shift) % points[kind].shape[1]
        return points[kind][:, index]

    @staticmethod
    def _fail(error_type: type[ConfigurationError], msg: str) -> NoReturn:
        logger.error(msg)
        raise error_type(msg)
