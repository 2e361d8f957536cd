import pytest
from vellum.export import Capabilities, DocumentExporter, ExportOptions


class RecordingExporter(DocumentExporter):
    """Records every callback as (name, argument) pairs."""

    capabilities = Capabilities(ellipse=False)

    def __init__(self, width: float = 0, height: float = 0) -> None:
        self.width = width
        self.height = height
        self.calls = []

    @classmethod
    def create(cls, width, height, options: ExportOptions):
        return cls(width, height)

    def start_style(self, style):
        self.calls.append(("start_style", style))

    def end_style(self):
        self.calls.append(("end_style", None))

    def export_curve(self, curve):
        self.calls.append(("curve", curve))

    def export_text(self, text):
        self.calls.append(("text", text))

    def export_image(self, image):
        self.calls.append(("image", image))

    def finish(self):
        return self

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def args(self, name: str) -> list:
        return [arg for n, arg in self.calls if n == name]


class NativeEllipseExporter(RecordingExporter):
    capabilities = Capabilities(ellipse=True)

    def export_ellipse(self, ellipse):
        self.calls.append(("ellipse", ellipse))


@pytest.fixture
def recorder():
    return RecordingExporter()


@pytest.fixture
def native_recorder():
    return NativeEllipseExporter()
