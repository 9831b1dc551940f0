import logging

import numpy as np
import pytest

from fegeometry import AnchorNotSetError, ConfigurationError, RefEl, RefinementPattern, RefPat
from fegeometry.refinement import is_legal, legal_patterns, needs_anchor
from fegeometry.refinement.refinement_pattern import lattice_points

ALL_REF_ELS = (RefEl.POINT, RefEl.SEGMENT, RefEl.TRIA, RefEl.QUAD)


def _all_patterns():
    for ref_el in ALL_REF_ELS:
        for ref_pat in legal_patterns(ref_el.type):
            anchors = range(ref_el.num_nodes) if needs_anchor(ref_el.type, ref_pat) else (None,)
            for anchor in anchors:
                yield ref_el, ref_pat, anchor


def _shoelace_area(polygon: np.ndarray) -> float:
    x, y = polygon.astype(np.float64)
    return 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


# =============================================================================
# Child counts and polygon shapes
# =============================================================================

@pytest.mark.parametrize("ref_el, ref_pat, expected", [
    (RefEl.POINT, RefPat.NIL, 0),
    (RefEl.POINT, RefPat.COPY, 1),
    (RefEl.SEGMENT, RefPat.SPLIT, 2),
    (RefEl.TRIA, RefPat.BISECT, 2),
    (RefEl.TRIA, RefPat.TRISECT, 3),
    (RefEl.TRIA, RefPat.TRISECT_LEFT, 3),
    (RefEl.TRIA, RefPat.QUADSECT, 4),
    (RefEl.TRIA, RefPat.REGULAR, 4),
    (RefEl.TRIA, RefPat.BARYCENTRIC, 6),
    (RefEl.QUAD, RefPat.SPLIT, 2),
    (RefEl.QUAD, RefPat.BISECT, 2),
    (RefEl.QUAD, RefPat.TRISECT, 3),
    (RefEl.QUAD, RefPat.QUADSECT, 4),
    (RefEl.QUAD, RefPat.THREEEDGE, 4),
    (RefEl.QUAD, RefPat.REGULAR, 4),
    (RefEl.QUAD, RefPat.BARYCENTRIC, 4),
])
def test_child_count(ref_el, ref_pat, expected):
    pattern = RefinementPattern(ref_el, ref_pat, anchor=0)
    assert pattern.child_count() == expected
    assert len(pattern.child_polygons()) == expected


def test_polygons_match_child_count_and_cover_reference_element():
    for ref_el, ref_pat, anchor in _all_patterns():
        pattern = RefinementPattern(ref_el, ref_pat, anchor)
        polygons = pattern.child_polygons()
        assert len(polygons) == pattern.child_count()

        lattice_const = pattern.lattice_const
        for polygon in polygons:
            assert polygon.dtype == np.int64
            assert polygon.shape[0] == ref_el.dimension
            assert np.all(polygon >= 0)
            assert np.all(polygon <= lattice_const)

        if ref_pat == RefPat.NIL or ref_el.dimension < 2:
            continue
        area = sum(_shoelace_area(polygon) for polygon in polygons) / lattice_const ** 2
        assert area == pytest.approx(ref_el.volume), f"{ref_el} {pattern}"


def _inside(polygon: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Mask of the points strictly inside a convex polygon of either orientation."""
    if polygon.shape[0] == 1:
        lo, hi = sorted(polygon[0])
        return (points[0] > lo) & (points[0] < hi)
    crosses = []
    for a, b in zip(polygon.T, np.roll(polygon, -1, axis=1).T):
        crosses.append((b[0] - a[0]) * (points[1] - a[1]) - (b[1] - a[1]) * (points[0] - a[0]))
    crosses = np.array(crosses)
    return np.all(crosses > 0.0, axis=0) | np.all(crosses < 0.0, axis=0)


def _interior_samples(ref_el: RefEl, n_samples: int = 4000) -> np.ndarray:
    rng = np.random.default_rng(20)
    points = rng.random((ref_el.dimension, n_samples))
    if ref_el == RefEl.TRIA:
        points = points[:, points.sum(axis=0) < 1.0]
    return points


def test_children_tile_reference_element():
    for ref_el, ref_pat, anchor in _all_patterns():
        if ref_pat == RefPat.NIL or ref_el.dimension == 0:
            continue
        pattern = RefinementPattern(ref_el, ref_pat, anchor)
        points = _interior_samples(ref_el)

        hits = np.zeros(points.shape[1], dtype=int)
        for polygon in pattern.child_polygons():
            hits += _inside(polygon / pattern.lattice_const, points)

        assert np.all(hits == 1), f"{ref_el} {pattern}: points covered {sorted(set(hits.tolist()))} times"


def test_trisect_covers_corner_opposite_anchor_edge():
    # Triangle (m0, m1, n2) belongs to exactly one child, and the corner at m2 is not covered twice
    polygons = RefinementPattern(RefEl.TRIA, RefPat.TRISECT, anchor=0).child_polygons()
    points = np.array([[1.0 / 3.0, 0.05], [0.5, 0.6]])
    hits = sum(_inside(polygon / 6.0, points).astype(int) for polygon in polygons)
    np.testing.assert_array_equal(hits, [1, 1])


def test_point_polygons():
    assert RefinementPattern(RefEl.POINT, RefPat.NIL).child_polygons() == []
    (polygon,) = RefinementPattern(RefEl.POINT, RefPat.COPY).child_polygons()
    assert polygon.shape == (0, 1)


def test_segment_split_polygons():
    polygons = RefinementPattern(RefEl.SEGMENT, RefPat.SPLIT).child_polygons()
    np.testing.assert_array_equal(polygons[0], [[0, 3]])
    np.testing.assert_array_equal(polygons[1], [[3, 6]])


def test_tria_barycentric_uses_exact_centroid():
    polygons = RefinementPattern(RefEl.TRIA, RefPat.BARYCENTRIC, lattice_const=12).child_polygons()
    for polygon in polygons:
        np.testing.assert_array_equal(polygon[:, 2], [4, 4])


def test_quad_split_shared_edge_through_midpoints():
    lattice = lattice_points(RefEl.QUAD, 6)
    for anchor in range(4):
        first, second = RefinementPattern(RefEl.QUAD, RefPat.SPLIT, anchor).child_polygons()
        assert first.shape == second.shape == (2, 4)
        shared = {tuple(v) for v in first.T} & {tuple(v) for v in second.T}
        assert shared == {tuple(lattice["m"][:, anchor]), tuple(lattice["m"][:, (anchor + 2) % 4])}


def test_trisect_anchor_rotation():
    lattice = lattice_points(RefEl.TRIA, 6)
    base = RefinementPattern(RefEl.TRIA, RefPat.TRISECT, 0).child_polygons()

    for anchor in range(3):
        # Relabel nodes and midpoints by rotating their indices
        relabel = {}
        for kind in ("n", "m"):
            for i in range(3):
                relabel[tuple(lattice[kind][:, i])] = tuple(lattice[kind][:, (i + anchor) % 3])

        rotated = RefinementPattern(RefEl.TRIA, RefPat.TRISECT, anchor).child_polygons()
        assert len(rotated) == len(base)
        for polygon_0, polygon_k in zip(base, rotated):
            expected = np.array([relabel[tuple(v)] for v in polygon_0.T]).T
            np.testing.assert_array_equal(polygon_k, expected)


def test_anchor_is_taken_modulo_edge_count():
    for ref_pat in (RefPat.BISECT, RefPat.QUADSECT):
        a = RefinementPattern(RefEl.TRIA, ref_pat, 1).child_polygons()
        b = RefinementPattern(RefEl.TRIA, ref_pat, 4).child_polygons()
        for polygon_a, polygon_b in zip(a, b):
            np.testing.assert_array_equal(polygon_a, polygon_b)


def test_lattice_const_scales_polygons():
    coarse = RefinementPattern(RefEl.QUAD, RefPat.THREEEDGE, 2).child_polygons()
    fine = RefinementPattern(RefEl.QUAD, RefPat.THREEEDGE, 2, lattice_const=18).child_polygons()
    for polygon_c, polygon_f in zip(coarse, fine):
        np.testing.assert_array_equal(3 * polygon_c, polygon_f)


def test_symmetric_patterns_ignore_anchor():
    a = RefinementPattern(RefEl.TRIA, RefPat.REGULAR).child_polygons()
    b = RefinementPattern(RefEl.TRIA, RefPat.REGULAR, 2).child_polygons()
    for polygon_a, polygon_b in zip(a, b):
        np.testing.assert_array_equal(polygon_a, polygon_b)


# =============================================================================
# Accessors and failures
# =============================================================================

def test_anchor_zero_differs_from_unset():
    assert RefinementPattern(RefEl.TRIA, RefPat.REGULAR).anchor_set is False
    pattern = RefinementPattern(RefEl.TRIA, RefPat.BISECT, 0)
    assert pattern.anchor_set is True
    assert pattern.anchor == 0
    assert pattern.ref_pat == RefPat.BISECT
    assert pattern.ref_el == RefEl.TRIA


def test_pattern_accepts_names():
    assert RefinementPattern(RefEl.QUAD, "threeedge", 1).ref_pat is RefPat.THREEEDGE


@pytest.mark.parametrize("ref_el, ref_pat", [
    (RefEl.POINT, RefPat.SPLIT),
    (RefEl.SEGMENT, RefPat.REGULAR),
    (RefEl.TRIA, RefPat.SPLIT),
    (RefEl.TRIA, RefPat.THREEEDGE),
    (RefEl.QUAD, RefPat.TRISECT_LEFT),
])
def test_illegal_pattern(ref_el, ref_pat, caplog):
    assert not is_legal(ref_el.type, ref_pat)
    with caplog.at_level(logging.ERROR, logger="fegeometry"):
        with pytest.raises(ConfigurationError, match=str(ref_pat)):
            RefinementPattern(ref_el, ref_pat, anchor=0)
    assert "illegal" in caplog.text


def test_unknown_pattern():
    with pytest.raises(ConfigurationError):
        RefinementPattern(RefEl.TRIA, "pentasect")


@pytest.mark.parametrize("ref_el, ref_pat", [
    (RefEl.TRIA, RefPat.BISECT),
    (RefEl.TRIA, RefPat.TRISECT),
    (RefEl.TRIA, RefPat.TRISECT_LEFT),
    (RefEl.TRIA, RefPat.QUADSECT),
    (RefEl.QUAD, RefPat.SPLIT),
    (RefEl.QUAD, RefPat.BISECT),
    (RefEl.QUAD, RefPat.TRISECT),
    (RefEl.QUAD, RefPat.QUADSECT),
    (RefEl.QUAD, RefPat.THREEEDGE),
])
def test_missing_anchor(ref_el, ref_pat):
    with pytest.raises(AnchorNotSetError):
        RefinementPattern(ref_el, ref_pat)


@pytest.mark.parametrize("anchor", [-1, 1.5, True])
def test_invalid_anchor(anchor):
    with pytest.raises(ConfigurationError):
        RefinementPattern(RefEl.TRIA, RefPat.BISECT, anchor)


@pytest.mark.parametrize("lattice_const", [0, 4, -6, 9])
def test_invalid_lattice_const(lattice_const):
    with pytest.raises(ConfigurationError):
        RefinementPattern(RefEl.TRIA, RefPat.REGULAR, lattice_const=lattice_const)


def test_child_geometries_in_parent():
    pattern = RefinementPattern(RefEl.QUAD, RefPat.QUADSECT, 1)
    relative = pattern.child_geometries_in_parent()
    assert len(relative) == 4
    for geom, polygon in zip(relative, pattern.child_polygons()):
        assert geom.dim_global == 2
        np.testing.assert_allclose(geom.coords, polygon / pattern.lattice_const)
