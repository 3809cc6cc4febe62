"""Catalog and cap operations for convex regular-faced polyhedra."""

from .catalog import Catalog, get_solid_data, is_valid_solid
from .errors import InvalidNameError, JohnsonError, OperationError, StructuralError
from .face import Face
from .operations import OperationKind, apply_operation, augment, diminish, gyrate
from .peak import Peak, PeakType
from .polyhedron import Polyhedron

__all__ = [
    "Catalog",
    "Face",
    "InvalidNameError",
    "JohnsonError",
    "OperationError",
    "OperationKind",
    "Peak",
    "PeakType",
    "Polyhedron",
    "StructuralError",
    "apply_operation",
    "augment",
    "diminish",
    "get_solid_data",
    "gyrate",
    "is_valid_solid",
]
