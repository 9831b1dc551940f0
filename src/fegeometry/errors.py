"""Exceptions raised by geometries and refinement patterns."""


class GeometryError(Exception):
    """Base class for all errors raised by fegeometry."""


class ConfigurationError(GeometryError, ValueError):
    """
    A caller supplied an invalid configuration.

    Raised for refinement patterns that are illegal for a reference element,
    malformed node coordinates, unsupported codimensions or sub-entity
    indices and invalid lattice constants. These indicate a programming error
    in the caller and are never retried.
    """


class AnchorNotSetError(ConfigurationError):
    """An asymmetric refinement pattern was requested without an anchor."""
