from __future__ import annotations


class VellumError(Exception):
    """Base class for every error raised while resolving or exporting shapes."""


class GeometryError(VellumError, ValueError):
    """A shape tree whose geometry cannot be resolved, e.g. a curve without a start point."""


class BackendError(VellumError):
    """A backend failed while handling an exporter callback."""


class ResourceError(BackendError):
    """Font or image bytes required by a backend are missing or unreadable."""
