"""2x3 affine transform.

Matrix layout follows the SVG ``matrix(a,b,c,d,e,f)`` convention::

    | a c e |     x' = a*x + c*y + e
    | b d f |     y' = b*x + d*y + f
    | 0 0 1 |

so ``(a, b, c, d, e, f) == (scaleX, shearY, shearX, scaleY, translateX,
translateY)``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator

from vector_surface.exceptions import InvalidArgumentError, NonInvertibleTransformError

Matrix = tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def _mat_mul(m1: Matrix, m2: Matrix) -> Matrix:
    """Return m1 x m2 (m2 is applied first)."""
    a1, b1, c1, d1, e1, f1 = m1
    a2, b2, c2, d2, e2, f2 = m2
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def _sin_cos(theta: float) -> tuple[float, float]:
    # Quadrant angles give exact 0/1 entries so axis-aligned shapes stay rectangles.
    sin, cos = math.sin(theta), math.cos(theta)
    if abs(sin) < 1e-15:
        sin, cos = 0.0, math.copysign(1.0, cos)
    elif abs(cos) < 1e-15:
        sin, cos = math.copysign(1.0, sin), 0.0
    return sin, cos


def _check_finite(values: Iterable[float]) -> None:
    for v in values:
        if not math.isfinite(v):
            raise InvalidArgumentError("Transform values must be finite", "transform", value=v)


class AffineTransform:
    """Mutable 2D affine transform."""

    __slots__ = ("a", "b", "c", "d", "e", "f")

    def __init__(
        self,
        a: float = 1.0,
        b: float = 0.0,
        c: float = 0.0,
        d: float = 1.0,
        e: float = 0.0,
        f: float = 0.0,
    ) -> None:
        self._set((a, b, c, d, e, f))

    # Factories

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> AffineTransform:
        return cls(1.0, 0.0, 0.0, 1.0, tx, ty)

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> AffineTransform:
        return cls(sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0)

    @classmethod
    def rotation(
        cls, theta: float, x: float | None = None, y: float | None = None
    ) -> AffineTransform:
        """Rotation by ``theta`` radians, optionally about the point (x, y)."""
        sin, cos = _sin_cos(theta)
        t = cls(cos, sin, -sin, cos, 0.0, 0.0)
        if x is None and y is None:
            return t
        x = x or 0.0
        y = y or 0.0
        result = cls.translation(x, y)
        result.concatenate(t)
        result.concatenate(cls.translation(-x, -y))
        return result

    @classmethod
    def shearing(cls, shx: float, shy: float) -> AffineTransform:
        return cls(1.0, shy, shx, 1.0, 0.0, 0.0)

    # Accessors

    def as_tuple(self) -> Matrix:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    def __iter__(self) -> Iterator[float]:
        return iter(self.as_tuple())

    @property
    def scale_x(self) -> float:
        return self.a

    @property
    def shear_y(self) -> float:
        return self.b

    @property
    def shear_x(self) -> float:
        return self.c

    @property
    def scale_y(self) -> float:
        return self.d

    @property
    def translate_x(self) -> float:
        return self.e

    @property
    def translate_y(self) -> float:
        return self.f

    @property
    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    @property
    def is_identity(self) -> bool:
        return self.as_tuple() == IDENTITY

    @property
    def is_axis_aligned(self) -> bool:
        """True when the transform has no rotation or shear component."""
        return self.b == 0.0 and self.c == 0.0

    def copy(self) -> AffineTransform:
        return AffineTransform(*self.as_tuple())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "AffineTransform({}, {}, {}, {}, {}, {})".format(*self.as_tuple())

    def almost_equals(self, other: AffineTransform, tolerance: float = 1e-9) -> bool:
        return all(abs(x - y) <= tolerance for x, y in zip(self, other))

    # Mutation

    def _set(self, m: Matrix) -> None:
        _check_finite(m)
        self.a, self.b, self.c, self.d, self.e, self.f = (float(v) for v in m)

    def set_transform(self, other: AffineTransform) -> None:
        self._set(other.as_tuple())

    def set_to_identity(self) -> None:
        self._set(IDENTITY)

    def concatenate(self, other: AffineTransform) -> AffineTransform:
        """Right-multiply: ``other`` is applied before the existing transform."""
        self._set(_mat_mul(self.as_tuple(), other.as_tuple()))
        return self

    def pre_concatenate(self, other: AffineTransform) -> AffineTransform:
        """Left-multiply: ``other`` is applied after the existing transform."""
        self._set(_mat_mul(other.as_tuple(), self.as_tuple()))
        return self

    def translate(self, tx: float, ty: float) -> AffineTransform:
        return self.concatenate(AffineTransform.translation(tx, ty))

    def scale(self, sx: float, sy: float | None = None) -> AffineTransform:
        return self.concatenate(AffineTransform.scaling(sx, sy))

    def rotate(
        self, theta: float, x: float | None = None, y: float | None = None
    ) -> AffineTransform:
        return self.concatenate(AffineTransform.rotation(theta, x, y))

    def shear(self, shx: float, shy: float) -> AffineTransform:
        return self.concatenate(AffineTransform.shearing(shx, shy))

    def create_inverse(self) -> AffineTransform:
        """Return the inverse transform.

        Raises:
            NonInvertibleTransformError: If the determinant is zero.
        """
        det = self.determinant
        if det == 0.0 or not math.isfinite(det):
            raise NonInvertibleTransformError(det)
        a, b, c, d, e, f = self.as_tuple()
        return AffineTransform(
            d / det,
            -b / det,
            -c / det,
            a / det,
            (c * f - d * e) / det,
            (b * e - a * f) / det,
        )

    # Application

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.a * x + self.c * y + self.e,
            self.b * x + self.d * y + self.f,
        )
