import math
import pytest
from vellum.core import Point, Transform, Bounds, deg


def close(p: Point, q: Point, tol: float = 1e-9) -> bool:
    return math.isclose(p.x, q.x, abs_tol=tol) and math.isclose(p.y, q.y, abs_tol=tol)


# --- Point Tests ---


def test_additive_identity():
    p = Point(12.5, -4.0)
    assert p + Point(0, 0) == p
    assert p - Point(0, 0) == p


def test_commutativity():
    p1 = Point(1, 5)
    p2 = Point(-2, 3)
    assert p1 + p2 == p2 + p1


def test_normalization_contract():
    p = Point(3, 4)  # Magnitude 5
    norm = p.normalize()
    assert math.isclose(norm.magnitude(), 1.0)
    assert math.isclose(norm.x, 0.6)
    assert math.isclose(norm.y, 0.8)


def test_zero_vector_safety():
    # Should not raise division by zero
    zero = Point(0, 0)
    assert zero.normalize() == zero
    assert zero.magnitude() == 0.0


def test_lerp_boundaries():
    start = Point(0, 0)
    end = Point(10, 10)
    assert start.lerp(end, 0.0) == start
    assert start.lerp(end, 1.0) == end
    assert start.lerp(end, 0.5) == Point(5, 5)


def test_point_math_more():
    p = Point(10, 20)
    assert p / 2 == Point(5, 10)
    assert p * 2 == Point(20, 40)
    assert -p == Point(-10, -20)
    assert math.isclose(Point(0, 1).angle(), math.pi / 2)


# --- Transform Tests ---


def test_identity_mapping():
    t = Transform.identity()
    p = Point(42, -99)
    assert t.map(p) == p
    assert t.is_identity()


def test_translation_equivalence():
    t = Transform.translation(5, -5)
    p = Point(10, 10)
    assert t.map(p) == p + Point(5, -5)


def test_rotation_cyclicity():
    p = Point(10, 0)
    t = Transform.rotation(2 * math.pi)
    assert close(t.map(p), p)


def test_rotation_direction():
    """Invariant: a positive angle takes the x axis towards +y."""
    t = Transform.rotation(math.pi / 2)
    assert close(t.map(Point(1, 0)), Point(0, 1))


def test_composition_applies_right_operand_first():
    translate = Transform.translation(10, 0)
    scale = Transform.scaling(2)
    p = Point(1, 0)

    # Scale first: 1 * 2 + 10 = 12
    assert (translate @ scale).map(p) == Point(12, 0)
    # Translate first: (1 + 10) * 2 = 22
    assert (scale @ translate).map(p) == Point(22, 0)


def test_composition_matches_sequential_mapping():
    a = Transform.rotation(0.3) @ Transform.translation(1, 2)
    b = Transform.scaling(2, -1) @ Transform.rotation(-1.1)
    p = Point(3.5, -7)
    assert close((a @ b).map(p), a.map(b.map(p)))


def test_composition_is_associative():
    a = Transform.translation(3, 4)
    b = Transform.rotation(0.7)
    c = Transform.scaling(2, 5)
    p = Point(1, 1)
    assert close(((a @ b) @ c).map(p), (a @ (b @ c)).map(p))


def test_map_vector_ignores_translation():
    t = Transform.translation(100, 100) @ Transform.scaling(2)
    assert t.map_vector(Point(1, 1)) == Point(2, 2)


def test_inverse_round_trip():
    t = Transform.translation(4, -2) @ Transform.rotation(0.5) @ Transform.scaling(3, 2)
    p = Point(-1.5, 8)
    assert close(t.inverse().map(t.map(p)), p)


def test_inverse_singular():
    with pytest.raises(ValueError):
        Transform.scaling(0).inverse()


def test_decomposition():
    t = Transform.translation(10, 20) @ Transform.rotation(math.pi / 4) @ Transform.scaling(2, 3)
    assert t.tx == 10
    assert t.ty == 20
    assert math.isclose(t.angle, math.pi / 4)
    assert math.isclose(t.sx, 2)
    assert math.isclose(t.sy, 3)
    assert math.isclose(t.determinant, 6)
    assert math.isclose(t.uniform_scale, math.sqrt(6))


def test_reflection_keeps_sign():
    t = Transform.scaling(1, -1)
    assert math.isclose(t.sy, -1)
    assert math.isclose(t.uniform_scale, 1)


def test_transforms_are_immutable():
    t = Transform.translation(1, 1)
    with pytest.raises(AttributeError):
        t.e = 5


# --- Bounds Tests ---


def test_union_containment():
    b1 = Bounds(0, 0, 10, 10)
    b2 = Bounds(20, 20, 10, 10)
    u = Bounds.union(b1, b2)

    # Union must start at min x/y and end at max right/bottom
    assert u.x <= b1.x and u.y <= b1.y
    assert u.bottomright.x >= b2.bottomright.x and u.bottomright.y >= b2.bottomright.y
    assert u == Bounds(0, 0, 30, 30)


def test_union_of_nothing():
    assert Bounds.union() == Bounds(0, 0, 0, 0)


def test_enclosing():
    b = Bounds.enclosing([Point(1, 5), Point(-3, 2), Point(4, -1)])
    assert b == Bounds(-3, -1, 7, 6)
    assert Bounds.enclosing([]) == Bounds(0, 0, 0, 0)


def test_padding_invariant():
    b = Bounds(10, 10, 50, 50)
    padded = b.padded(5)

    # X/Y move out by padding
    assert padded.x == b.x - 5
    assert padded.y == b.y - 5
    # Width/Height grow by 2x padding
    assert padded.width == b.width + 10
    assert padded.height == b.height + 10


def test_corners_order():
    b = Bounds(0, 0, 2, 1)
    assert b.corners() == [Point(0, 0), Point(2, 0), Point(2, 1), Point(0, 1)]


def test_deg_function():
    assert math.isclose(deg(180), math.pi)
    assert math.isclose(deg(90), math.pi / 2)
