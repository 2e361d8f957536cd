import pytest
from vellum import Canvas, Point, Bounds, Colors, Style
from vellum.contrib import rectangle
from vellum.fonts import Font, FontGroup, FontRef, FontRegistry
from vellum.base import Text


def test_canvas_init():
    c = Canvas(width=500, height=400)
    assert c.width == 500
    assert c.height == 400
    assert c._viewbox == (0, 0, 500, 400)


def test_canvas_fit_basic():
    c = Canvas()
    r = rectangle(100, 100).translated(50, 50)
    c.add(r)

    # rectangle(100,100) centered at (50,50) means bounds are (0, 0, 100, 100)
    c.fit(padding=0)
    assert c._viewbox == (0.0, 0.0, 100.0, 100.0)
    assert c.width == 100.0
    assert c.height == 100.0


def test_canvas_fit_with_padding():
    c = Canvas()
    r = rectangle(10, 10).translated(5, 5)  # Bounds (0,0,10,10)
    c.add(r)
    c.fit(padding=5)
    # Padded bounds: (-5, -5, 20, 20)
    assert c._viewbox == (-5.0, -5.0, 20.0, 20.0)


def test_canvas_fit_no_crop():
    c = Canvas(width=1000, height=1000)
    r = rectangle(100, 100).translated(50, 50)
    c.add(r)
    c.fit(crop=False)
    assert c._viewbox == (0.0, 0.0, 100.0, 100.0)
    assert c.width == 1000
    assert c.height == 1000


def test_canvas_fit_to_bounds():
    c = Canvas()
    b = Bounds(10, 10, 50, 50)
    c.fit(bounds=b)
    assert c._viewbox == (10.0, 10.0, 50.0, 50.0)


def test_canvas_fit_empty():
    c = Canvas()
    # Should not crash and return self
    assert c.fit() == c


def test_canvas_svg_output():
    c = Canvas(width=100, height=100)
    with c:
        Style(rectangle(50, 50), fill=Colors.Red).translated(50, 50)
    svg = str(c)
    assert '<svg width="100" height="100"' in svg
    assert 'viewBox="0 0 100 100"' in svg
    assert '<path d="M 25 25 L 75 25 L 75 75 L 25 75 Z"' in svg
    assert 'fill="rgba(255,0,0,1.0)"' in svg


def test_canvas_transform_applies():
    c = Canvas(width=100, height=100)
    c.add(rectangle(2, 2))
    c.scaled(10)
    assert "M -10 -10 L 10 -10" in str(c)


def test_canvas_fonts():
    fonts = FontRegistry()
    fonts.register("Hand", FontGroup(regular=Font(b"glyphs")))
    c = Canvas(fonts=fonts)
    with c:
        Text("one", font=FontRef("Hand")).translated(10, 10)
        Text("two", font=FontRef("Hand")).translated(10, 30)

    svg = c._build_svg()
    assert svg.count("@font-face") == 1

    # Each render is a fresh document
    assert c._build_svg().count("@font-face") == 1


def test_canvas_save_svg(tmp_path):
    c = Canvas()
    with c:
        rectangle(10, 10)
    path = tmp_path / "test.svg"
    c.save(path)
    assert path.exists()
    with open(path, "r") as f:
        assert "<svg" in f.read()


def test_canvas_save_png(tmp_path):
    c = Canvas()
    with c:
        rectangle(10, 10).translated(5, 5)
    path = tmp_path / "test.png"
    try:
        c.save(path)
        assert path.exists()
    except ImportError:
        pytest.skip("cairosvg not installed")


def test_canvas_save_pdf(tmp_path):
    c = Canvas()
    with c:
        rectangle(10, 10).translated(5, 5)
    path = tmp_path / "test.pdf"
    try:
        c.save(path)
    except ImportError:
        pytest.skip("cairosvg not installed")

    assert path.read_bytes().startswith(b"%PDF")


def test_canvas_save_unsupported(tmp_path):
    c = Canvas()
    path = tmp_path / "test.txt"
    with pytest.raises(ValueError, match="Unsupported"):
        c.save(path)


def test_canvas_display_no_ipython(monkeypatch):
    # Mock sys.modules to simulate IPython not being installed
    import sys

    monkeypatch.setitem(sys.modules, "IPython.display", None)
    c = Canvas()
    with pytest.raises(ImportError, match="IPython is required"):
        c.display()


def test_canvas_display_success(monkeypatch):
    from unittest.mock import MagicMock

    mock_display = MagicMock()
    mock_svg = MagicMock()

    # Create a mock module structure
    class MockIPython:
        SVG = mock_svg
        display = mock_display

    import sys

    monkeypatch.setitem(sys.modules, "IPython.display", MockIPython)

    c = Canvas()
    c.display()
    assert mock_display.called


def test_repr_svg():
    c = Canvas(width=10, height=10)
    c.add(rectangle(2, 2).translated(5, 5))
    assert c._repr_svg_() == str(c)
