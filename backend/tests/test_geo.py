from types import SimpleNamespace

from fynd.geo import GeoPoint, distance_between, distance_km, format_distance, point_of


def test_distance_is_symmetric():
    a = (31.7683, 35.2137)
    b = (32.0853, 34.7818)
    assert distance_km(*a, *b) == distance_km(*b, *a)


def test_distance_to_self_is_zero():
    assert distance_km(31.77, 35.21, 31.77, 35.21) == 0.0


def test_distance_jerusalem_tel_aviv():
    d = distance_km(31.7683, 35.2137, 32.0853, 34.7818)
    assert 50 < d < 60
    # one decimal place
    assert d == round(d, 1)


def test_distance_between_points():
    assert distance_between(GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0)) == 111.2


def test_point_of_requires_both_coordinates():
    assert point_of(SimpleNamespace(latitude=1.0, longitude=None)) is None
    assert point_of(SimpleNamespace(latitude=None, longitude=2.0)) is None
    assert point_of(SimpleNamespace()) is None
    assert point_of(SimpleNamespace(latitude=1, longitude=2)) == GeoPoint(1.0, 2.0)


def test_format_distance():
    assert format_distance(0.4) == "0.4 km"
    assert format_distance(12.6) == "13 km"
    assert format_distance(10, "mi") == "6 mi"
    assert format_distance(1, "mi") == "0.6 mi"
