"""Tests for pole RA/Dec -> obliquity and ascending node."""
import math

import numpy as np
import pytest

from core.coords import rect_to_sph
from core.frames import MAT_VSOP87_TO_J2000
from core.rotation import RotationElements, compute, compute_deg
from core.settings import EPS_0_DEG


class TestRotationElements:

    def test_neptune_pole(self):
        rot = compute_deg(299.36, 43.46)
        assert rot.obliquity == pytest.approx(0.489152978736078, abs=1e-12)
        assert rot.ascending_node == pytest.approx(0.8593144058841349, abs=1e-12)

    def test_degrees_and_radians_agree(self):
        a = compute_deg(40.589, 83.537)
        b = compute(math.radians(40.589), math.radians(83.537))
        assert a.obliquity == pytest.approx(b.obliquity)
        assert a.ascending_node == pytest.approx(b.ascending_node)

    def test_earth_pole_is_the_obliquity(self):
        rot = compute_deg(0.0, 90.0)
        assert rot.obliquity == pytest.approx(math.radians(EPS_0_DEG), abs=1e-9)
        assert rot.ascending_node == pytest.approx(math.pi, abs=1e-9)

    def test_pole_on_ecliptic_pole_is_degenerate_not_an_error(self):
        # Ecliptic north pole in equatorial coordinates
        rot = compute_deg(270.0, 90.0 - EPS_0_DEG)
        assert rot.obliquity == pytest.approx(0.0, abs=1e-6)
        assert 0.0 <= rot.ascending_node < 2.0 * math.pi

    def test_pole_on_vsop87_axis_has_zero_longitude(self):
        ra, dec = rect_to_sph(MAT_VSOP87_TO_J2000 @ np.array([0.0, 0.0, 1.0]))
        rot = compute(ra, dec)
        assert rot.obliquity == pytest.approx(0.0, abs=1e-9)
        assert rot.ascending_node == pytest.approx(math.pi / 2)
        assert rot.offset == 0.0

    @pytest.mark.parametrize("ra,dec", [
        (286.13, 63.87), (281.0103, 61.4155), (272.76, 67.16),
        (317.269202, 54.432516), (268.056595, 64.495303),
        (257.311, -15.175), (132.993, -6.163), (269.9949, 66.5392),
    ])
    def test_ranges(self, ra, dec):
        rot = compute_deg(ra, dec)
        assert 0.0 <= rot.obliquity <= math.pi
        assert 0.0 <= rot.ascending_node < 2.0 * math.pi

    def test_retrograde_pole_tilted_past_ninety(self):
        # Uranus pole lies south of the ecliptic
        assert compute_deg(257.311, -15.175).obliquity > math.pi / 2

    def test_offset_carries_prime_meridian(self):
        assert compute_deg(299.36, 43.46).offset != compute_deg(299.36, 43.46, 10.0).offset


class TestPoleVector:

    def test_unit_length(self):
        v = compute_deg(40.589, 83.537).pole_vector()
        assert float(np.linalg.norm(v)) == pytest.approx(1.0)

    def test_earth_pole_vector(self):
        eps = math.radians(EPS_0_DEG)
        v = compute_deg(0.0, 90.0).pole_vector()
        assert v == pytest.approx(np.array([0.0, math.sin(eps), math.cos(eps)]), abs=1e-9)

    def test_named_tuple(self):
        rot = RotationElements(0.1, 0.2)
        assert rot.offset == 0.0
        obliquity, node, offset = rot
        assert (obliquity, node) == (0.1, 0.2)
