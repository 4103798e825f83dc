"""
Tests for the observer: horizontal coordinates of the Sun, refraction and
extinction along the line of sight.
"""
import pytest

from core.astro_time import jd_to_jde
from universe import build_solar_system
from universe.magnitude import MUELLER
from universe.observer import Observer

# 2024 June 20, 12h UT: near the solstice, Sun close to the Greenwich meridian
NOON = 2460482.0
MIDNIGHT = 2460481.5


@pytest.fixture(scope="module")
def system():
    return build_solar_system()


@pytest.fixture
def observer(system):
    return Observer(home=system["Earth"], jd=NOON, latitude_deg=45.0, longitude_deg=0.0)


class TestConstruction:

    def test_algorithm_by_name(self, system):
        obs = Observer(home=system["Earth"], jd=NOON, algorithm="Mueller 1893")
        assert obs.algorithm is MUELLER

    def test_unknown_algorithm(self, system):
        with pytest.raises(ValueError):
            Observer(home=system["Earth"], jd=NOON, algorithm="bogus")

    @pytest.mark.parametrize("lat", [-90.5, 91.0])
    def test_latitude_range(self, system, lat):
        with pytest.raises(ValueError):
            Observer(home=system["Earth"], jd=NOON, latitude_deg=lat)

    def test_jde(self, observer):
        assert observer.jde == jd_to_jde(NOON)
        assert observer.jde > observer.jd


class TestSun:

    def test_noon_altitude(self, system, observer):
        # 90 - 45 + 23.44
        assert observer.altitude_deg(system.sun) == pytest.approx(68.4, abs=0.5)
        assert observer.is_above_horizon(system.sun)

    def test_sun_near_south(self, system, observer):
        az, _ = observer.horizontal(system.sun)
        assert az == pytest.approx(180.0, abs=3.0)

    def test_declination_at_solstice(self, system, observer):
        _, dec = observer.radec_of_date(system.sun)
        assert dec == pytest.approx(23.44, abs=0.05)

    def test_midnight(self, system):
        obs = Observer(home=system["Earth"], jd=MIDNIGHT, latitude_deg=45.0)
        assert not obs.is_above_horizon(system.sun)
        assert system.sun.airmass(obs) == 0.0

    def test_refraction_lifts(self, system, observer):
        geometric = observer.altitude_deg(system.sun)
        apparent = observer.altitude_deg(system.sun, refract=True)
        assert 0.0 < apparent - geometric < 0.01

    def test_unit_vector(self, system, observer):
        vec = observer.altaz_vector(system.sun)
        assert float((vec ** 2).sum()) == pytest.approx(1.0)


class TestExtinction:

    def test_airmass_above_one(self, system, observer):
        x = system.sun.airmass(observer)
        assert 1.0 < x < 1.2

    def test_extinction_dims(self, system, observer):
        saturn = system["Saturn"]
        dimmed = saturn.visual_magnitude_with_extinction(observer)
        bare = saturn.visual_magnitude(observer)
        if observer.is_above_horizon(saturn):
            assert dimmed > bare
        else:
            assert dimmed == bare


class TestVectors:

    def test_home_position(self, system, observer):
        pos = observer.heliocentric_position()
        assert pos == pytest.approx(system["Earth"].heliocentric_position(observer.jde))
        assert 1.01 < float((pos ** 2).sum()) ** 0.5 < 1.02

    def test_j2000_and_of_date_agree_in_length(self, system, observer):
        j2000 = observer.equatorial_j2000(system["Mars"])
        of_date = observer.equatorial_of_date(system["Mars"])
        assert float((j2000 ** 2).sum()) == pytest.approx(float((of_date ** 2).sum()))
        assert float((j2000 ** 2).sum()) ** 0.5 == pytest.approx(system["Mars"].distance(observer))

    def test_sun_direction_j2000(self, system, observer):
        # Near the June solstice the Sun sits at RA 6h, Dec +23.4
        x, y, z = observer.equatorial_j2000(system.sun)
        r = float((x * x + y * y + z * z) ** 0.5)
        assert z / r == pytest.approx(0.3978, abs=2e-3)
        assert abs(x / r) < 0.02
