import pytest

from runic.geometry import Color, HitRecord, Ray, Vec3


def test_axis_cross_products():
    x, y, z = Vec3(1, 0, 0), Vec3(0, 1, 0), Vec3(0, 0, 1)
    assert x.cross(y) == z
    assert y.cross(z) == x
    assert z.cross(x) == y


def test_cross_is_orthogonal_to_operands():
    a, b = Vec3(1.5, -2.0, 3.0), Vec3(-0.5, 4.0, 2.0)
    c = a.cross(b)
    assert c.dot(a) == pytest.approx(0.0)
    assert c.dot(b) == pytest.approx(0.0)


def test_cross_is_anticommutative():
    a, b = Vec3(1, 2, 3), Vec3(4, 5, 6)
    assert a.cross(b) == -b.cross(a)


def test_dot_of_orthogonal_axes_is_zero():
    assert Vec3(1, 0, 0).dot(Vec3(0, 0, 1)) == 0


def test_length_squared_matches_dot():
    v = Vec3(2.0, -3.0, 6.0)
    assert v.length() ** 2 == pytest.approx(v.dot(v))


def test_normalized_has_unit_length_and_same_direction():
    v = Vec3(3.0, -1.0, 7.0)
    n = v.normalized()
    assert n.length() == pytest.approx(1.0)
    assert tuple(n * v.length()) == pytest.approx(tuple(v))


def test_normalize_zero_vector_raises():
    with pytest.raises(ValueError):
        Vec3().normalized()


def test_vector_arithmetic_round_trip():
    a, b = Vec3(1, 2, 3), Vec3(-4, 0.5, 9)
    assert (a + b) - b == a
    assert tuple((a * 4) / 4) == pytest.approx(tuple(a))
    assert 2 * a == a * 2


def test_ray_point_at():
    origin, direction = Vec3(1, 2, 3), Vec3(0, 0, -2)
    ray = Ray(origin, direction)
    assert ray.point_at(0) == origin
    assert ray.point_at(1) == origin + direction
    assert ray.point_at(2.5) == origin + 2.5 * direction


def test_color_defaults_to_black():
    assert Color() == Color(0.0, 0.0, 0.0)
    assert Color(0.25, 0.5, 1.0).g == 0.5


def test_hit_record_defaults():
    rec = HitRecord()
    assert rec.t == 0
    assert rec.p == Vec3()
    assert rec.normal == Vec3()
    assert rec.material is None