"""HTML5 canvas backend.

Output is a JavaScript statement sequence against a 2D context named
``ctx``. Canvas style is cumulative context state, so a style property is
only written when its value differs from the last value written; the
canvas defaults count as already written. Transform changes are written as
they happen and geometry is emitted in user space.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from vector_surface.composite import AlphaComposite, CompositeRule
from vector_surface.config import Config
from vector_surface.exceptions import InvalidArgumentError, UnsupportedFeatureError
from vector_surface.geometry.affine import AffineTransform
from vector_surface.geometry.segments import SegmentType, iter_segments
from vector_surface.geometry.shapes import Shape, ShapeKind
from vector_surface.paint import (
    Color,
    CycleMethod,
    GradientPaint,
    GradientRegistry,
    Paint,
    RadialGradientPaint,
)
from vector_surface.surface import Surface

logger = logging.getLogger(__name__)

CANVAS_DEFAULTS: dict[str, str] = {
    "fillStyle": '"#000000"',
    "strokeStyle": '"#000000"',
    "lineWidth": "1",
    "lineCap": '"butt"',
    "lineJoin": '"miter"',
    "miterLimit": "10",
    "lineDash": "[]",
    "font": '"10px sans-serif"',
    "globalAlpha": "1",
    "globalCompositeOperation": '"source-over"',
}

COMPOSITE_OPERATIONS: dict[CompositeRule, str] = {
    CompositeRule.SRC: "copy",
    CompositeRule.SRC_OVER: "source-over",
    CompositeRule.DST_OVER: "destination-over",
    CompositeRule.SRC_IN: "source-in",
    CompositeRule.DST_IN: "destination-in",
    CompositeRule.SRC_OUT: "source-out",
    CompositeRule.DST_OUT: "destination-out",
    CompositeRule.SRC_ATOP: "source-atop",
    CompositeRule.DST_ATOP: "destination-atop",
    CompositeRule.XOR: "xor",
}


@dataclass
class _CanvasScript:
    """Statement buffer and context state shared by a surface and its children.

    ``emitted`` and ``transform`` mirror what the context holds once the
    statements so far have run; ``saved`` mirrors its save() stack. Every
    surface drawing into the script compares against these, so a write by
    one surface is seen by all the others.
    """

    statements: list[str] = field(default_factory=list)
    gradients: GradientRegistry = field(default_factory=GradientRegistry)
    emitted: dict[str, str] = field(default_factory=lambda: dict(CANVAS_DEFAULTS))
    transform: AffineTransform = field(default_factory=AffineTransform)
    saved: list[tuple[dict[str, str], AffineTransform]] = field(default_factory=list)

    def save(self) -> None:
        self.statements.append("ctx.save();")
        self.saved.append((dict(self.emitted), self.transform.copy()))

    def restore(self) -> None:
        self.statements.append("ctx.restore();")
        self.emitted, self.transform = self.saved.pop()


class CanvasSurface(Surface):
    """Surface that records drawing calls as canvas JavaScript."""

    backend_name = "canvas"

    def __init__(
        self,
        canvas_id: str,
        config: Config | None = None,
        *,
        _parent: CanvasSurface | None = None,
    ) -> None:
        if not canvas_id or not isinstance(canvas_id, str):
            raise InvalidArgumentError("'canvas_id' must be a non-empty string", "canvas_id")
        self.canvas_id = canvas_id
        if _parent is None:
            super().__init__(config)
            self._script = _CanvasScript()
            self._script.gradients.prefix = self.config.resolved_defs_key_prefix()
        else:
            super().__init__(_parent.config, _parent._state)
            self.font_mapper = _parent.font_mapper.copy()
            self._script = _parent._script
        self._parent = _parent

    def get_script(self) -> str:
        """Return all statements written so far, in order."""
        return "".join(self._script.statements)

    def get_statements(self) -> list[str]:
        return list(self._script.statements)

    # Lifecycle

    def _create_child(self) -> CanvasSurface:
        self._script.save()
        return CanvasSurface(self.canvas_id, _parent=self)

    def _on_dispose(self) -> None:
        parent = self._parent
        if parent is None:
            return
        self._script.restore()
        if not parent.is_disposed:
            parent._sync_transform()

    # State hooks

    def _check_composite(self, composite: AlphaComposite) -> None:
        if composite.rule not in COMPOSITE_OPERATIONS:
            raise UnsupportedFeatureError(
                f"composite rule {composite.rule.name}", self.backend_name
            )

    def _matrix_args(self, transform: AffineTransform) -> str:
        return self._tfm.join(transform)

    def _transform_changed(self, concatenated: AffineTransform | None) -> None:
        script = self._script
        current = self._state.transform.current
        if concatenated is not None:
            context = script.transform.copy().concatenate(concatenated)
            if context == current:
                script.statements.append(f"ctx.transform({self._matrix_args(concatenated)});")
                script.transform = context
                return
        script.statements.append(f"ctx.setTransform({self._matrix_args(current)});")
        script.transform = current.copy()

    def _sync_transform(self) -> None:
        """Bring the context matrix back to this surface's transform."""
        current = self._state.transform.current
        if self._script.transform != current:
            self._script.statements.append(f"ctx.setTransform({self._matrix_args(current)});")
            self._script.transform = current.copy()

    # Style

    def _color_value(self, color: Color) -> str:
        return f'"rgba({color.red},{color.green},{color.blue},{self._tfm(color.opacity)})"'

    def _gradient_definition(self, ref: str, paint: Paint) -> str:
        g = self._geom
        if isinstance(paint, RadialGradientPaint):
            (cx, cy), (fx, fy) = paint.center, paint.focus
            create = (
                f"ctx.createRadialGradient({g(fx)},{g(fy)},0,{g(cx)},{g(cy)},{g(paint.radius)})"
            )
        else:
            if isinstance(paint, GradientPaint):
                (x1, y1), (x2, y2) = paint.point1, paint.point2
            else:
                (x1, y1), (x2, y2) = paint.start, paint.end
            create = f"ctx.createLinearGradient({g(x1)},{g(y1)},{g(x2)},{g(y2)})"
        parts = [f"var {ref}={create};"]
        for fraction, color in zip(paint.fractions, paint.colors):
            parts.append(f"{ref}.addColorStop({self._tfm(fraction)},{self._color_value(color)});")
        return "".join(parts)

    def _paint_value(self, paint: Paint, pending: list[str]) -> str:
        if isinstance(paint, Color):
            return self._color_value(paint)
        registry = self._script.gradients
        ref = registry.get(paint)
        if ref is None:
            if paint.cycle_method is not CycleMethod.NO_CYCLE:
                logger.warning(
                    "Canvas gradients cannot %s; drawing with padded ends",
                    paint.cycle_method.value,
                )
            ref = registry.register(paint)
            pending.append(self._gradient_definition(ref, paint))
        return ref

    def _style_updates(
        self, stroke: bool, fill: bool, text: bool = False
    ) -> tuple[list[str], dict[str, str]]:
        """Statements (and new cache values) bringing the context up to date."""
        wanted: dict[str, str] = {}
        statements: list[str] = []
        state = self._state
        composite = state.composite
        wanted["globalAlpha"] = self._tfm(composite.alpha)
        wanted["globalCompositeOperation"] = f'"{COMPOSITE_OPERATIONS[composite.rule]}"'
        if fill or text:
            wanted["fillStyle"] = self._paint_value(state.paint, statements)
        if stroke:
            bs = state.stroke
            width = bs.width if bs.width > 0 else self.config.zero_stroke_width
            wanted["strokeStyle"] = self._paint_value(state.paint, statements)
            wanted["lineWidth"] = self._geom(width)
            wanted["lineCap"] = f'"{bs.cap.value}"'
            wanted["lineJoin"] = f'"{bs.join.value}"'
            wanted["miterLimit"] = self._geom(bs.miter_limit)
            wanted["lineDash"] = f"[{self._geom.join(bs.dash)}]"
        if text:
            font = state.font
            style = ("italic " if font.italic else "") + ("bold " if font.bold else "")
            family = self.font_mapper(font.family)
            wanted["font"] = json.dumps(f"{style}{self._geom(font.size)}px {family}")
        emitted = self._script.emitted
        changed = {k: v for k, v in wanted.items() if emitted.get(k) != v}
        for key, value in changed.items():
            if key == "lineDash":
                statements.append(f"ctx.setLineDash({value});")
            else:
                statements.append(f"ctx.{key}={value};")
        return statements, changed

    # Geometry

    def _path_statements(self, shape: Shape, transform: AffineTransform | None = None) -> list[str]:
        g = self._geom
        out = ["ctx.beginPath();"]
        for seg_type, coords in iter_segments(shape, transform):
            if seg_type is SegmentType.MOVE_TO:
                out.append(f"ctx.moveTo({g.join(coords)});")
            elif seg_type is SegmentType.LINE_TO:
                out.append(f"ctx.lineTo({g.join(coords)});")
            elif seg_type is SegmentType.QUAD_TO:
                out.append(f"ctx.quadraticCurveTo({g.join(coords)});")
            elif seg_type is SegmentType.CUBIC_TO:
                out.append(f"ctx.bezierCurveTo({g.join(coords)});")
            else:
                out.append("ctx.closePath();")
        return out

    def _clipped(self, body: list[str]) -> list[str]:
        clip = self._state.clip.device_clip
        if clip is None:
            return body
        current = self._state.transform.current
        return [
            "ctx.save();",
            "ctx.setTransform(1,0,0,1,0,0);",
            *self._path_statements(clip),
            "ctx.clip();",
            f"ctx.setTransform({self._matrix_args(current)});",
            *body,
            "ctx.restore();",
        ]

    def _commit(self, style: list[str], changed: dict[str, str], body: list[str]) -> None:
        self._sync_transform()
        self._script.statements.extend(style)
        self._script.statements.extend(self._clipped(body))
        self._script.emitted.update(changed)

    def _draw_shape(self, shape: Shape, kind: ShapeKind) -> None:
        if kind is ShapeKind.RECTANGLE:
            g = self._geom
            body = [
                "ctx.beginPath();",
                f"ctx.rect({g(shape.x)},{g(shape.y)},{g(shape.width)},{g(shape.height)});",
            ]
        else:
            body = self._path_statements(shape)
        body.append("ctx.stroke();")
        style, changed = self._style_updates(stroke=True, fill=False)
        self._commit(style, changed, body)

    def _fill_shape(self, shape: Shape, kind: ShapeKind) -> None:
        if kind is ShapeKind.RECTANGLE:
            g = self._geom
            body = [f"ctx.fillRect({g(shape.x)},{g(shape.y)},{g(shape.width)},{g(shape.height)});"]
        else:
            body = self._path_statements(shape)
            body.append("ctx.fill();")
        style, changed = self._style_updates(stroke=False, fill=True)
        self._commit(style, changed, body)

    def _draw_text(self, text: str, x: float, y: float) -> None:
        body = [f"ctx.fillText({json.dumps(text)},{self._geom(x)},{self._geom(y)});"]
        style, changed = self._style_updates(stroke=False, fill=False, text=True)
        self._commit(style, changed, body)
