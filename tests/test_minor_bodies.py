"""
Tests for MPC parsing and the minor-body factories.
"""
import logging
import math

import numpy as np
import pytest

from universe import build_solar_system
from universe.magnitude import ES2013, MagnitudeGeometry
from universe.minor_bodies import (
    MinorBodyElements,
    _unpack_mpc_epoch,
    build_minor_bodies,
    coma_diameter_and_tail_length,
    estimate_radius_km,
    load_mpc_file,
    minor_planet,
    parse_mpc_line,
)
from universe.orbit import KeplerOrbit
from universe.planet import PlanetType


def _mpc_line(designation="00001", H=3.34, G=0.12, epoch="K249S", name="Ceres"):
    head = (f"{designation:<7} {H:5.2f} {G:5.2f} {epoch} {188.70269:9.5f}  "
            f"{73.27343:9.5f}  {80.25221:9.5f}  {10.58780:9.5f}  {0.0795572:9.7f} "
            f"{0.21424651:11.8f} {2.7660512:11.7f}")
    return (head.ljust(166) + name).ljust(194)


@pytest.fixture(scope="module")
def sun():
    return build_solar_system().sun


class TestPackedEpoch:

    @pytest.mark.parametrize("packed,jd", [
        ("K249S", 2460581.5),    # 2024 Sep 28
        ("K0011", 2451544.5),    # 2000 Jan 1
        ("J9611", 2450083.5),    # 1996 Jan 1
    ])
    def test_unpack(self, packed, jd):
        assert _unpack_mpc_epoch(packed) == pytest.approx(jd)

    @pytest.mark.parametrize("packed", ["L2411", "K24D1", "K241W", "K24"])
    def test_invalid(self, packed):
        with pytest.raises(ValueError):
            _unpack_mpc_epoch(packed)


class TestParseLine:

    def test_ceres(self):
        elems = parse_mpc_line(_mpc_line())
        assert elems.designation == "00001"
        assert elems.name == "Ceres"
        assert elems.H == 3.34
        assert elems.G == 0.12
        assert elems.epoch_jd == pytest.approx(2460581.5)
        assert elems.M0 == pytest.approx(188.70269)
        assert elems.omega == pytest.approx(73.27343)
        assert elems.Om == pytest.approx(80.25221)
        assert elems.i == pytest.approx(10.58780)
        assert elems.e == pytest.approx(0.0795572)
        assert elems.daily_motion == pytest.approx(0.21424651)
        assert elems.a == pytest.approx(2.7660512)

    def test_trailing_newline(self):
        assert parse_mpc_line(_mpc_line() + "\n") is not None

    @pytest.mark.parametrize("line", ["", "   ", "# MPCORB header"])
    def test_blank_and_comment(self, line, caplog):
        with caplog.at_level(logging.WARNING, logger="universe.minor_bodies"):
            assert parse_mpc_line(line) is None
        assert caplog.records == []

    def test_short_line(self, caplog):
        with caplog.at_level(logging.WARNING, logger="universe.minor_bodies"):
            assert parse_mpc_line("00001  3.34  0.12 K249S") is None
        assert "length" in caplog.text

    def test_bad_epoch(self, caplog):
        with caplog.at_level(logging.WARNING, logger="universe.minor_bodies"):
            assert parse_mpc_line(_mpc_line(epoch="X249S")) is None
        assert "malformed" in caplog.text

    def test_bad_number(self, caplog):
        line = _mpc_line()
        line = line[:8] + "abcde" + line[13:]
        with caplog.at_level(logging.WARNING, logger="universe.minor_bodies"):
            assert parse_mpc_line(line) is None
        assert len(caplog.records) == 1


class TestElements:

    def test_mean_motion_from_daily_motion(self):
        elems = MinorBodyElements(a=2.0, daily_motion=0.5)
        assert elems.n == pytest.approx(math.radians(0.5))

    def test_mean_motion_from_kepler(self):
        elems = MinorBodyElements(a=4.0)
        assert elems.n == pytest.approx(0.01720209895 / 8.0)

    def test_perihelion_time(self):
        elems = MinorBodyElements(epoch_jd=2460000.5, a=2.0, e=0.1, M0=10.0, daily_motion=0.5)
        assert elems.perihelion_jd == pytest.approx(2460000.5 - 20.0)

    def test_orbit_starts_at_perihelion(self):
        elems = parse_mpc_line(_mpc_line())
        orbit = elems.to_orbit()
        assert isinstance(orbit, KeplerOrbit)
        pos, _ = orbit.position_at(elems.perihelion_jd)
        assert float(np.linalg.norm(pos)) == pytest.approx(elems.q, abs=1e-9)

    def test_radius_estimate(self):
        assert estimate_radius_km(3.34, 0.09) == 476
        assert estimate_radius_km(-99.0) == 1.0


class TestFactories:

    def test_minor_planet(self, sun):
        body = minor_planet("Ceres", sun, parse_mpc_line(_mpc_line()))
        assert body.parent is sun
        assert body.planet_type is PlanetType.ASTEROID
        assert body.sidereal_period == pytest.approx(4.6 * 365.25, rel=0.01)
        assert body.mean_opposition_magnitude == pytest.approx(
            3.34 + 5.0 * math.log10(2.7660512 * 1.7660512))

    def test_minor_planet_uses_hg(self, sun):
        elems = parse_mpc_line(_mpc_line())
        body = minor_planet("Ceres", sun, elems)
        assert body.magnitude_model(ES2013, _opposition()) is not None

    def test_missing_slope_falls_back(self, sun):
        elems = parse_mpc_line(_mpc_line(G=-10.0))
        body = minor_planet("X", sun, elems)
        assert body.magnitude_model(ES2013, _opposition()) is None

    def test_coma_and_tail(self):
        D, L = coma_diameter_and_tail_length(5.0, 4.0, 1.0)
        assert D == pytest.approx(585300.0, rel=2e-3)
        assert L == pytest.approx(9.080e6, rel=2e-3)

    def test_coma_shrinks_far_out(self):
        near, _ = coma_diameter_and_tail_length(5.0, 4.0, 1.0)
        far, _ = coma_diameter_and_tail_length(5.0, 4.0, 5.0)
        assert far < near


def _opposition():
    return MagnitudeGeometry.from_squared_distances(1.0, 6.25, 2.25)


class TestLoader:

    def test_load_file(self, tmp_path, sun):
        path = tmp_path / "MPCORB.DAT"
        path.write_text("\n".join([
            "MINOR PLANET CENTER ORBIT DATABASE (MPCORB)",
            "-" * 160,
            _mpc_line(),
            _mpc_line(designation="00002", H=12.5, name=""),
            "",
        ]))
        bodies = load_mpc_file(path, sun)
        assert [b.name for b in bodies] == ["Ceres", "00002"]
        assert len(load_mpc_file(path, sun, max_H=10.0)) == 1
        assert len(load_mpc_file(path, sun, max_objects=1)) == 1

    def test_missing_file(self, tmp_path, sun):
        with pytest.raises(FileNotFoundError):
            load_mpc_file(tmp_path / "nope.dat", sun)


class TestCatalogue:

    def test_bodies(self, sun):
        bodies = build_minor_bodies(sun)
        assert len(bodies) == 9
        by_name = {b.name: b for b in bodies}
        assert by_name["Ceres"].planet_type is PlanetType.DWARF_PLANET
        assert by_name["1P/Halley"].planet_type is PlanetType.COMET
        assert all(b.parent is sun for b in bodies)

    def test_halley_period(self, sun):
        halley = {b.name: b for b in build_minor_bodies(sun)}["1P/Halley"]
        assert 74.0 * 365.25 < halley.sidereal_period < 77.0 * 365.25

    def test_halley_perihelion_1986(self, sun):
        halley = {b.name: b for b in build_minor_bodies(sun)}["1P/Halley"]
        pos, _ = halley.orbit.position_at(2446470.96)
        assert float(np.linalg.norm(pos)) == pytest.approx(0.586, abs=1e-3)
