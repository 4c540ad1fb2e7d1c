# =============================================================================
# tests/test_geo.py - Geo Distance Tests
# =============================================================================

import pytest

from lib.geo import calculate_geo_distance

LONDON = (51.5074, -0.1278)
PARIS = (48.8566, 2.3522)
NEW_YORK = (40.7128, -74.0060)


class TestCalculateGeoDistance:
    """Haversine distance in kilometres."""

    def test_identical_points_are_zero(self):
        assert calculate_geo_distance(*LONDON, *LONDON) == 0

    def test_symmetric(self):
        there = calculate_geo_distance(*LONDON, *NEW_YORK)
        back = calculate_geo_distance(*NEW_YORK, *LONDON)

        assert there == pytest.approx(back)

    def test_london_to_paris(self):
        distance = calculate_geo_distance(*LONDON, *PARIS)

        assert 343 <= distance <= 344

    def test_antipodes_are_half_the_circumference(self):
        distance = calculate_geo_distance(0, 0, 0, 180)

        assert distance == pytest.approx(20015.09, rel=1e-4)
