"""Tests for the fixed frame matrices and precession."""
import math

import numpy as np
import pytest

from core.frames import (
    MAT_J2000_TO_VSOP87,
    MAT_VSOP87_TO_J2000,
    ecliptic_to_equatorial_matrix,
    mean_obliquity,
    precession_matrix,
)
from core.settings import EPS_0_DEG


def _assert_rotation(m):
    assert m @ m.T == pytest.approx(np.identity(3), abs=1e-12)
    assert np.linalg.det(m) == pytest.approx(1.0, abs=1e-12)


class TestFrameMatrices:

    def test_orthonormal(self):
        _assert_rotation(MAT_J2000_TO_VSOP87)
        _assert_rotation(MAT_VSOP87_TO_J2000)

    def test_inverse(self):
        product = MAT_VSOP87_TO_J2000 @ MAT_J2000_TO_VSOP87
        assert product == pytest.approx(np.identity(3), abs=1e-15)

    def test_equatorial_pole_in_ecliptic_frame(self):
        eps = math.radians(EPS_0_DEG)
        v = MAT_J2000_TO_VSOP87 @ np.array([0.0, 0.0, 1.0])
        assert v == pytest.approx(np.array([0.0, math.sin(eps), math.cos(eps)]), abs=1e-9)

    def test_read_only(self):
        with pytest.raises(ValueError):
            MAT_J2000_TO_VSOP87[0, 0] = 2.0


class TestPrecession:

    def test_identity_at_j2000(self):
        assert np.array_equal(precession_matrix(0.0), np.identity(3))

    @pytest.mark.parametrize("T", [-2.0, -0.5, 0.25, 1.0])
    def test_is_rotation(self, T):
        _assert_rotation(precession_matrix(T))

    def test_equinox_moves_about_fifty_arcsec_per_year(self):
        # Vernal equinox of date seen in J2000: longitude grows ~50.3"/yr
        T = 0.01  # one year
        x = precession_matrix(T) @ np.array([1.0, 0.0, 0.0])
        lng_arcsec = math.degrees(math.atan2(x[1], x[0])) * 3600.0
        assert lng_arcsec == pytest.approx(-50.29, abs=0.2)


class TestObliquity:

    def test_mean_obliquity_at_j2000(self):
        assert math.degrees(mean_obliquity(0.0)) == pytest.approx(23.4392911111)

    def test_mean_obliquity_decreases(self):
        assert mean_obliquity(1.0) < mean_obliquity(0.0)

    def test_ecliptic_pole_maps_to_equatorial(self):
        eps = mean_obliquity(0.0)
        v = ecliptic_to_equatorial_matrix(eps) @ np.array([0.0, 0.0, 1.0])
        assert v == pytest.approx(np.array([0.0, -math.sin(eps), math.cos(eps)]), abs=1e-12)
