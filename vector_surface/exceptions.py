"""Exception hierarchy for vector-surface.

Every error raised by the library derives from VectorSurfaceError so callers
can catch a single type. Each exception carries an optional ``details`` dict
with machine-readable context (offending argument, feature name, ...).
"""

from __future__ import annotations

from typing import Any


class VectorSurfaceError(Exception):
    """Base exception for all vector-surface errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class InvalidArgumentError(VectorSurfaceError, ValueError):
    """Raised when a required argument is missing or out of range."""

    def __init__(self, message: str, argument: str | None = None, **details: Any) -> None:
        if argument is not None:
            details["argument"] = argument
        super().__init__(message, details)
        self.argument = argument


class UnsupportedFeatureError(VectorSurfaceError):
    """Raised when a backend cannot express the requested operation."""

    def __init__(self, feature: str, backend: str | None = None, message: str | None = None) -> None:
        details: dict[str, Any] = {"feature": feature}
        if backend:
            details["backend"] = backend
        super().__init__(message or f"Operation not supported: {feature}", details)
        self.feature = feature
        self.backend = backend


class UnsupportedPaintError(UnsupportedFeatureError):
    """Raised when a paint object is not a color or a known gradient."""

    def __init__(self, paint: object, backend: str | None = None) -> None:
        super().__init__(
            "paint",
            backend,
            message=f"Unsupported paint type: {type(paint).__name__}",
        )
        self.paint = paint


class NonInvertibleTransformError(VectorSurfaceError):
    """Raised when the inverse of a singular transform is requested."""

    def __init__(self, determinant: float) -> None:
        super().__init__(
            "Transform is not invertible", {"determinant": determinant}
        )
        self.determinant = determinant


class ImageEncodingError(VectorSurfaceError):
    """Raised when a raster image cannot be encoded for embedding."""


class DuplicateElementIdError(VectorSurfaceError):
    """Raised when an element or group id is used twice in one document."""

    def __init__(self, element_id: str) -> None:
        super().__init__(
            f"The element id {element_id!r} is already used",
            {"element_id": element_id},
        )
        self.element_id = element_id


class SurfaceDisposedError(VectorSurfaceError):
    """Raised when a disposed surface receives a drawing call."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot call {operation}() on a disposed surface",
            {"operation": operation},
        )
        self.operation = operation


class ConfigError(VectorSurfaceError):
    """Raised when configuration values are missing or invalid."""
