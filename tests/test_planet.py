"""
Tests for Planet: hierarchy, shadow cone, phase geometry.

Bodies sit at fixed positions so every quantity can be checked by hand.
"""
import math

import numpy as np
import pytest

from core.settings import AU_KM
from universe.magnitude import sun_model
from universe.observer import Observer
from universe.orbit import Orbit, StaticOrbit
from universe.planet import Planet, PlanetType, Ring

JD = 2460482.0


class ConstantOrbit(Orbit):
    """Fixed offset from the parent, at rest."""

    def __init__(self, x, y=0.0, z=0.0):
        self.pos = np.array([x, y, z], dtype=float)

    def position_at(self, jde):
        return self.pos.copy(), np.zeros(3)


def _sun():
    return Planet(name="Sun", planet_type=PlanetType.STAR,
                  radius=695700.0 / AU_KM, orbit=StaticOrbit(),
                  albedo=-1.0, magnitude_model=sun_model)


def _earth(sun):
    return Planet(name="Earth", planet_type=PlanetType.PLANET,
                  radius=6378.1366 / AU_KM, orbit=ConstantOrbit(1.0), parent=sun)


def _moon(earth, x, y=0.0, planet_type=PlanetType.MOON):
    return Planet(name="Moon", planet_type=planet_type,
                  radius=1737.4 / AU_KM, orbit=ConstantOrbit(x, y), parent=earth)


class TestConstruction:

    def test_rejects_non_positive_radius(self):
        with pytest.raises(ValueError):
            Planet(name="X", planet_type=PlanetType.PLANET, radius=0.0, orbit=StaticOrbit())

    @pytest.mark.parametrize("oblateness", [-0.1, 1.0, 1.5])
    def test_rejects_bad_oblateness(self, oblateness):
        with pytest.raises(ValueError):
            Planet(name="X", planet_type=PlanetType.PLANET, radius=1e-5,
                   orbit=StaticOrbit(), oblateness=oblateness)

    def test_pole_needs_both_coordinates(self):
        with pytest.raises(ValueError):
            Planet(name="X", planet_type=PlanetType.PLANET, radius=1e-5,
                   orbit=StaticOrbit(), pole_ra=10.0)

    def test_no_pole_no_rotation(self):
        sun = _sun()
        assert sun.rotation is None

    def test_polar_radius(self):
        p = Planet(name="X", planet_type=PlanetType.PLANET, radius=2e-5,
                   orbit=StaticOrbit(), oblateness=0.1)
        assert p.polar_radius == pytest.approx(1.8e-5)

    def test_ring_from_km(self):
        ring = Ring.from_km(74510.0, 140390.0)
        assert ring.size == ring.max_radius
        assert ring.max_radius * AU_KM == pytest.approx(140390.0)


class TestHierarchy:

    def test_positions_compose(self):
        sun = _sun()
        earth = _earth(sun)
        moon = _moon(earth, 0.0025, 0.001)
        pos, vel = moon.compute_position(JD)
        assert pos == pytest.approx(np.array([1.0025, 0.001, 0.0]))
        assert vel == pytest.approx(np.zeros(3))

    def test_root(self):
        sun = _sun()
        moon = _moon(_earth(sun), 0.0025)
        assert moon.root is sun
        assert sun.root is sun

    def test_identity_not_value_equality(self):
        sun = _sun()
        assert _earth(sun) != _earth(sun)


class TestShadow:

    def setup_method(self):
        self.sun = _sun()
        self.earth = _earth(self.sun)
        self.observer = Observer(home=self.earth, jd=JD)

    def test_umbra_keeps_refracted_light_on_moon(self):
        moon = _moon(self.earth, 0.00257)
        assert moon.shadow_factor(self.observer) == 2.718e-5

    def test_umbra_for_other_bodies(self):
        rock = _moon(self.earth, 0.00257, planet_type=PlanetType.ASTEROID)
        assert rock.shadow_factor(self.observer) == 1e-9

    def test_partial(self):
        moon = _moon(self.earth, 0.00257, 3e-5)
        factor = moon.shadow_factor(self.observer)
        assert 0.0 < factor < 1.0

    def test_outside_cone(self):
        moon = _moon(self.earth, 0.00257, 0.001)
        assert moon.shadow_factor(self.observer) == 1.0

    def test_sunward_of_parent(self):
        moon = _moon(self.earth, -0.01)
        assert moon.shadow_factor(self.observer) == 1.0

    def test_planets_are_never_shadowed(self):
        assert self.earth.shadow_factor(self.observer) == 1.0
        assert self.sun.shadow_factor(self.observer) == 1.0

    def test_eclipse_dims_the_moon(self):
        lit = _moon(self.earth, 0.00257, 0.001)
        eclipsed = _moon(self.earth, 0.00257)
        assert eclipsed.visual_magnitude(self.observer) > lit.visual_magnitude(self.observer) + 8.0


class TestPhase:

    def setup_method(self):
        self.sun = _sun()
        self.earth = _earth(self.sun)
        self.outer = Planet(name="Outer", planet_type=PlanetType.PLANET,
                            radius=50000.0 / AU_KM, orbit=ConstantOrbit(5.0),
                            parent=self.sun, pole_ra=0.0, pole_dec=90.0,
                            ring=Ring.from_km(60000.0, 100000.0))
        self.observer = Observer(home=self.earth, jd=JD)

    def test_opposition(self):
        assert self.outer.phase_angle(self.observer) == pytest.approx(0.0, abs=1e-7)
        assert self.outer.illumination(self.observer) == pytest.approx(1.0)
        assert self.outer.elongation(self.observer) == pytest.approx(math.pi)

    def test_distance_and_size(self):
        assert self.outer.distance(self.observer) == pytest.approx(4.0)
        expected = 2.0 * math.degrees(math.atan2(100000.0 / AU_KM, 4.0))
        assert self.outer.angular_size(self.observer) == pytest.approx(expected)

    def test_quadrature_half_lit(self):
        inner = Planet(name="Inner", planet_type=PlanetType.PLANET,
                       radius=1e-5, orbit=ConstantOrbit(0.5, 0.5), parent=self.sun)
        assert inner.phase_angle(self.observer) == pytest.approx(math.pi / 2)
        assert inner.illumination(self.observer) == pytest.approx(0.5)
        assert inner.elongation(self.observer) == pytest.approx(math.pi / 4)

    def test_ring_seen_edge_on(self):
        # The pole lies in the y-z plane, the line of sight along x
        assert self.outer.ring_sin_tilt(self.observer) == pytest.approx(0.0, abs=1e-12)

    def test_no_ring_no_tilt(self):
        assert self.earth.ring_sin_tilt(self.observer) is None

    def test_sun_magnitude(self):
        assert self.sun.visual_magnitude(self.observer) == pytest.approx(-26.74, abs=0.01)

    def test_sun_geometry(self):
        g = self.sun.magnitude_geometry(self.observer)
        assert g.phase_angle == 0.0
        assert g.d == 0.0

    def test_home_body_geometry(self):
        g = self.earth.magnitude_geometry(self.observer)
        assert g.observer_planet_rq == 0.0
        assert g.phase_angle == 0.0
        assert g.cos_chi == 1.0
        assert self.earth.illumination(self.observer) == 1.0
        assert self.earth.elongation(self.observer) == 0.0
        assert self.earth.visual_magnitude(self.observer) == math.inf

    def test_sun_as_home_body(self):
        observer = Observer(home=self.sun, jd=JD)
        assert self.sun.visual_magnitude(observer) == math.inf
        assert self.outer.elongation(observer) == 0.0
        assert math.isfinite(self.outer.visual_magnitude(observer))
