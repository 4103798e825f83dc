"""
Tests for atmospheric refraction on alt-az vectors.
"""
import math

import numpy as np
import pytest

from atmosphere.refraction import Refraction
from core.coords import horizontal_to_vector
from core.units import Pressure, Temperature


def _alt(vec):
    v = np.asarray(vec)
    return math.degrees(math.asin(v[2] / np.linalg.norm(v)))


@pytest.fixture
def refraction():
    return Refraction(Pressure(1013.0), Temperature(15.0))


class TestForward:

    def test_ten_degrees(self, refraction):
        out = refraction.forward(horizontal_to_vector(120.0, 10.0))
        assert _alt(out) - 10.0 == pytest.approx(0.089, abs=2e-3)

    def test_horizon(self, refraction):
        out = refraction.forward(horizontal_to_vector(0.0, 0.0))
        assert _alt(out) == pytest.approx(0.48, abs=0.05)

    def test_zenith_unchanged(self, refraction):
        out = refraction.forward(np.array([0.0, 0.0, 1.0]))
        assert _alt(out) == pytest.approx(90.0)

    def test_far_below_horizon(self, refraction):
        vec = horizontal_to_vector(45.0, -6.0)
        assert refraction.forward(vec) == pytest.approx(vec)

    def test_transition_is_continuous(self, refraction):
        just_above = _alt(refraction.forward(horizontal_to_vector(0.0, -3.5399))) + 3.5399
        just_below = _alt(refraction.forward(horizontal_to_vector(0.0, -3.5401))) + 3.5401
        assert just_above == pytest.approx(just_below, abs=1e-3)

    def test_keeps_length_and_azimuth(self, refraction):
        vec = 3.0 * horizontal_to_vector(77.0, 5.0)
        out = refraction.forward(vec)
        assert np.linalg.norm(out) == pytest.approx(3.0)
        assert math.degrees(math.atan2(out[1], out[0])) == pytest.approx(77.0)

    def test_zero_vector(self, refraction):
        assert refraction.forward(np.zeros(3)) == pytest.approx(np.zeros(3))

    def test_thin_cold_air(self):
        dense = Refraction(Pressure(1013.0), Temperature(-10.0))
        thin = Refraction(Pressure(700.0), Temperature(-10.0))
        vec = horizontal_to_vector(0.0, 5.0)
        assert _alt(thin.forward(vec)) < _alt(dense.forward(vec))


class TestBackward:

    @pytest.mark.parametrize("alt", [2.0, 10.0, 45.0, 80.0])
    def test_round_trip(self, refraction, alt):
        vec = horizontal_to_vector(200.0, alt)
        back = refraction.backward(refraction.forward(vec))
        assert _alt(back) == pytest.approx(alt, abs=2e-3)

    def test_lowers_altitude(self, refraction):
        out = refraction.backward(horizontal_to_vector(0.0, 20.0))
        assert _alt(out) < 20.0

    def test_far_below_horizon(self, refraction):
        vec = horizontal_to_vector(0.0, -6.0)
        assert refraction.backward(vec) == pytest.approx(vec)
