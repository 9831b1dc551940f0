"""Refinement pattern names and the table of legal (reference element, pattern) pairs."""
from __future__ import annotations

from enum import StrEnum

from fegeometry.base.ref_el import RefElType


class RefPat(StrEnum):
    """Named recipes for subdividing a reference element."""
    NIL = "nil"
    COPY = "copy"
    SPLIT = "split"
    BISECT = "bisect"
    TRISECT = "trisect"
    TRISECT_LEFT = "trisect_left"
    QUADSECT = "quadsect"
    REGULAR = "regular"
    BARYCENTRIC = "barycentric"
    THREEEDGE = "threeedge"


# Number of children for every legal combination; missing keys are illegal
CHILD_COUNT: dict[tuple[RefElType, RefPat], int] = {
    (RefElType.POINT, RefPat.NIL): 0,
    (RefElType.POINT, RefPat.COPY): 1,

    (RefElType.SEGMENT, RefPat.NIL): 0,
    (RefElType.SEGMENT, RefPat.COPY): 1,
    (RefElType.SEGMENT, RefPat.SPLIT): 2,

    (RefElType.TRIA, RefPat.NIL): 0,
    (RefElType.TRIA, RefPat.COPY): 1,
    (RefElType.TRIA, RefPat.BISECT): 2,
    (RefElType.TRIA, RefPat.TRISECT): 3,
    (RefElType.TRIA, RefPat.TRISECT_LEFT): 3,
    (RefElType.TRIA, RefPat.QUADSECT): 4,
    (RefElType.TRIA, RefPat.REGULAR): 4,
    (RefElType.TRIA, RefPat.BARYCENTRIC): 6,

    (RefElType.QUAD, RefPat.NIL): 0,
    (RefElType.QUAD, RefPat.COPY): 1,
    (RefElType.QUAD, RefPat.SPLIT): 2,
    (RefElType.QUAD, RefPat.BISECT): 2,
    (RefElType.QUAD, RefPat.TRISECT): 3,
    (RefElType.QUAD, RefPat.QUADSECT): 4,
    (RefElType.QUAD, RefPat.THREEEDGE): 4,
    (RefElType.QUAD, RefPat.REGULAR): 4,
    (RefElType.QUAD, RefPat.BARYCENTRIC): 4,
}

# Patterns that single out one edge and therefore need an anchor
ANCHORED: frozenset[tuple[RefElType, RefPat]] = frozenset({
    (RefElType.TRIA, RefPat.BISECT),
    (RefElType.TRIA, RefPat.TRISECT),
    (RefElType.TRIA, RefPat.TRISECT_LEFT),
    (RefElType.TRIA, RefPat.QUADSECT),
    (RefElType.QUAD, RefPat.SPLIT),
    (RefElType.QUAD, RefPat.BISECT),
    (RefElType.QUAD, RefPat.TRISECT),
    (RefElType.QUAD, RefPat.QUADSECT),
    (RefElType.QUAD, RefPat.THREEEDGE),
})


def is_legal(ref_el_type: RefElType, ref_pat: RefPat) -> bool:
    """Whether ``ref_pat`` can be applied to a reference element of the given type."""
    return (ref_el_type, ref_pat) in CHILD_COUNT


def needs_anchor(ref_el_type: RefElType, ref_pat: RefPat) -> bool:
    """Whether ``ref_pat`` breaks the symmetry of the element and requires an anchor edge."""
    return (ref_el_type, ref_pat) in ANCHORED


def legal_patterns(ref_el_type: RefElType) -> list[RefPat]:
    """All patterns legal for a reference element type, in declaration order."""
    return [ref_pat for ref_pat in RefPat if (ref_el_type, ref_pat) in CHILD_COUNT]
