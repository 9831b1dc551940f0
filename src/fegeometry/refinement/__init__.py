from fegeometry.refinement.ref_pat import RefPat, is_legal, legal_patterns, needs_anchor
from fegeometry.refinement.refinement_pattern import RefinementPattern

__all__ = ["RefPat", "RefinementPattern", "is_legal", "legal_patterns", "needs_anchor"]
