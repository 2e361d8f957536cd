"""
The contract between the shape tree and output backends.

A backend implements `Exporter`. `export` walks a shape tree, resolves every
leaf and calls the backend in draw order, bracketing each styled draw call
with `start_style`/`end_style`. Primitives the backend cannot draw natively
are lowered first, as declared by its `capabilities`.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Self

from .base import Curve, Ellipse, Image, Line, Shape, Text
from .core import Transform
from .errors import BackendError, GeometryError, VellumError
from .fonts import FontCache, FontRegistry
from .position import (
    CurvePosition,
    EllipsePosition,
    ImagePosition,
    Placement,
    StylePosition,
    TextPosition,
    bounding_box,
    resolve,
    resolve_ellipse,
    walk,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """Primitives a backend draws natively; anything else is lowered to curves."""

    ellipse: bool = False


@dataclass
class ExportOptions:
    """
    Settings for a standalone export.

    `size` fixes the document size; when None it comes from the shape's
    bounding box grown by `padding`. `fonts` supplies font bytes for text.
    `font_cache` maps (font, weight) to the handle of a face already present
    in the document: listed faces are never embedded again. Backends copy it,
    so one options object can serve any number of documents.
    """

    size: tuple[float, float] | None = None
    padding: float = 0.0
    fonts: FontRegistry | None = None
    font_cache: FontCache = field(default_factory=dict)


class Exporter(ABC):
    capabilities: ClassVar[Capabilities] = Capabilities()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        if cls.capabilities.ellipse and cls.export_ellipse is Exporter.export_ellipse:
            raise TypeError(
                f"{cls.__name__} declares native ellipses but does not override export_ellipse"
            )

    @abstractmethod
    def start_style(self, style: StylePosition) -> None:
        pass

    @abstractmethod
    def end_style(self) -> None:
        """Restores the default draw state, whatever start_style changed."""
        pass

    @abstractmethod
    def export_curve(self, curve: CurvePosition) -> None:
        pass

    @abstractmethod
    def export_text(self, text: TextPosition) -> None:
        pass

    @abstractmethod
    def export_image(self, image: ImagePosition) -> None:
        pass

    def export_ellipse(self, ellipse: EllipsePosition) -> None:
        """Only called when `capabilities.ellipse` is set."""
        raise NotImplementedError(f"{type(self).__name__} cannot draw ellipses natively")


class DocumentExporter(Exporter):
    """An exporter that owns the document it writes into."""

    @classmethod
    @abstractmethod
    def create(cls, width: float, height: float, options: ExportOptions) -> Self:
        pass

    @abstractmethod
    def finish(self) -> Any:
        """Returns the finished document."""
        pass


def export(
    shape: Shape,
    exporter: Exporter,
    parent_transform: Transform | None = None,
) -> None:
    """
    Draws `shape` into an already open document.

    Stops at the first error: geometry and backend errors propagate as they
    are, anything else raised by the backend is wrapped in BackendError. The
    partially written document is left to the caller to discard.
    """
    logger.debug("Exporting %s with %s", type(shape).__name__, type(exporter).__name__)

    try:
        for placement in walk(shape, parent_transform):
            _export_placement(placement, exporter)
    except VellumError as exc:
        logger.debug("Export aborted: %s", exc)
        raise


def export_standalone(
    shape: Shape,
    exporter_cls: type[DocumentExporter],
    options: ExportOptions | None = None,
) -> Any:
    """
    Creates a fresh document for `shape`, draws it, and returns the result
    of the backend's `finish()`.

    With an explicit size the shape's origin lands in the middle of the
    page. Otherwise the page is sized to the bounding box (plus padding) and
    the geometry is moved so the box fills it.
    """
    options = options or ExportOptions()

    if options.size is not None:
        width, height = options.size
        parent_transform = Transform.translation(width / 2, height / 2)
    else:
        box = bounding_box(shape).padded(options.padding)
        width, height = box.width, box.height
        parent_transform = Transform.translation(-box.x, -box.y)

    exporter = _call(exporter_cls.create, width, height, options)
    export(shape, exporter, parent_transform)
    document = _call(exporter.finish)

    logger.debug("Finished %sx%s document with %s", width, height, exporter_cls.__name__)
    return document


def _export_placement(placement: Placement, exporter: Exporter) -> None:
    shape, parent = placement.shape, placement.transform
    style = placement.style

    match shape:
        case Ellipse() if exporter.capabilities.ellipse:
            draw = (exporter.export_ellipse, resolve_ellipse(shape, parent))
        case Ellipse() | Curve() | Line():
            curve = resolve(shape, parent)
            if curve.is_degenerate:
                return
            draw = (exporter.export_curve, curve)
        case Text():
            draw = (exporter.export_text, resolve(shape, parent))
        case Image():
            draw = (exporter.export_image, resolve(shape, parent))
        case _:
            raise GeometryError(f"Cannot export shape of type {type(shape).__name__}")

    styled = style is not None and not style.is_empty

    if styled:
        _call(exporter.start_style, style)

    _call(*draw)

    if styled:
        _call(exporter.end_style)


def _call(callback: Callable[..., Any], *args: Any) -> Any:
    try:
        return callback(*args)
    except VellumError:
        raise
    except Exception as exc:
        name = getattr(callback, "__qualname__", repr(callback))
        raise BackendError(f"{name} failed: {exc}") from exc
