"""Exception types raised by the polyhedron core."""


class JohnsonError(Exception):
    """Base class for every error raised by this package."""


class InvalidNameError(JohnsonError, KeyError):
    """Catalog lookup for a solid name that is not registered."""

    def __init__(self, name):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Invalid solid name: {self.name}"


class StructuralError(JohnsonError, ValueError):
    """Malformed geometry or topology (planes, edges, vertex fans)."""


class OperationError(JohnsonError, ValueError):
    """An augment/diminish/gyrate precondition does not hold."""


__all__ = ["JohnsonError", "InvalidNameError", "StructuralError", "OperationError"]
