"""Exceptions raised by meshkit."""


class MeshError(Exception):
    """Base class for all meshkit errors."""


class InvalidParameterError(MeshError, ValueError):
    """A shape, profile or instancing parameter is out of range."""


class InvalidOperationError(MeshError, RuntimeError):
    """The mesh cannot be used for the requested operation (e.g. no vertices)."""


class MeshIOError(MeshError, OSError):
    """Reading or writing a mesh file failed."""
