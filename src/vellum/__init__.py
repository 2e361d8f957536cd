import logging

from .canvas import Canvas
from .core import Bounds, Point, Transform, deg
from .color import Color, Colors, rgb, rgba
from .base import (
    Bezier,
    Curve,
    DashedStroke,
    Ellipse,
    FullStroke,
    Group,
    Image,
    Line,
    Shape,
    Style,
    Text,
)
from .errors import BackendError, GeometryError, ResourceError, VellumError
from .export import (
    Capabilities,
    DocumentExporter,
    ExportOptions,
    Exporter,
    export,
    export_standalone,
)
from .fonts import Font, FontGroup, FontRef, FontRegistry
from .position import bounding_box, resolve, resolve_ellipse
from .svg import SvgExporter, to_svg
from .sketch import SketchExporter
from .pdf import to_pdf

import vellum.contrib as contrib

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
