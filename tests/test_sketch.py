import pytest
from vellum import Ellipse, Group, Point, Text
from vellum.contrib import circle, polyline, rectangle
from vellum.export import Capabilities, ExportOptions, export, export_standalone
from vellum.sketch import SketchExporter


def sketch(shape, **kwargs) -> str:
    exporter = SketchExporter(100, 100, **kwargs)
    export(shape, exporter)
    return exporter.finish()


def test_sketch_has_no_native_ellipses():
    assert SketchExporter.capabilities == Capabilities(ellipse=False)


def test_sketch_renders_wobbly_paths():
    svg = sketch(rectangle(10, 10))

    # Straight edges become cubic bezier passes
    assert "C" in svg
    assert "M" in svg
    assert " L " not in svg


def test_sketch_draws_ellipses_as_paths():
    svg = export_standalone(circle(10), SketchExporter)
    assert "<ellipse" not in svg
    assert "<path" in svg


def test_sketch_unwraps_groups():
    svg = sketch(Group([Group([rectangle(10, 10)])]))
    assert svg.count("<path") == 1


def test_sketch_parameters():
    s = SketchExporter(roughness=2.0, seed=123)
    assert s.roughness == 2.0

    # With same seed, should be identical
    assert sketch(rectangle(10, 10), seed=123) == sketch(rectangle(10, 10), seed=123)
    assert sketch(rectangle(10, 10), seed=123) != sketch(rectangle(10, 10), seed=7)


def test_sketch_double_strokes():
    svg = sketch(polyline([Point(0, 0), Point(50, 0)]))
    # One segment is drawn twice
    assert svg.count("M ") == 2


def test_sketch_closes_curves():
    open_svg = sketch(polyline([Point(0, 0), Point(50, 0), Point(50, 50)]))
    closed_svg = sketch(polyline([Point(0, 0), Point(50, 0), Point(50, 50)], closed=True))

    assert open_svg.count("M ") == 4
    assert closed_svg.count("M ") == 6


def test_sketch_bezier():
    svg = sketch(Ellipse().translated(50, 50).scaled(10))
    # Four quadrants, two passes each
    assert svg.count("M ") == 8


def test_sketch_very_short_line():
    # Too short to wobble: nothing is drawn
    svg = sketch(polyline([Point(0, 0), Point(0.01, 0.01)]))
    assert 'd=""' in svg


def test_sketch_keeps_text():
    svg = export_standalone(Text("hand drawn"), SketchExporter, ExportOptions(size=(100, 100)))
    assert ">hand drawn</text>" in svg


@pytest.mark.parametrize("roughness", [0.0, 0.5, 3.0])
def test_sketch_roughness_range(roughness):
    svg = sketch(rectangle(10, 10), roughness=roughness)
    assert svg.startswith("<svg")
