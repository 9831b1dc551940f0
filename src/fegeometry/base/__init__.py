from fegeometry.base.ref_el import RefEl, RefElType

__all__ = ["RefEl", "RefElType"]
