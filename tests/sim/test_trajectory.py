"""Tests for the simulated trajectory."""

import logging
import math

import pytest

from tracksense.sim import Trajectory, TrajectoryConfig, TrajectoryMode
from tracksense.sim.trajectory import METERS_PER_DEGREE

BASE = (-22.9559, -43.1659)
CIRCLE = TrajectoryConfig(enabled=True, radius_m=20.0, period_s=20.0)


class TestTrajectoryConfig:
    def test_defaults(self):
        config = TrajectoryConfig()
        assert config.enabled is False
        assert config.radius_m == 20.0
        assert config.period_s == 120.0
        assert config.mode is TrajectoryMode.STATIC

    def test_enabled_is_circular(self):
        assert CIRCLE.mode is TrajectoryMode.CIRCULAR

    def test_zero_radius_allowed(self):
        assert TrajectoryConfig(radius_m=0.0).radius_m == 0.0

    @pytest.mark.parametrize("radius", [-1.0, math.nan, math.inf])
    def test_invalid_radius(self, radius):
        with pytest.raises(ValueError, match="radius"):
            TrajectoryConfig(radius_m=radius)

    @pytest.mark.parametrize("period", [0.0, -5.0, math.nan])
    def test_invalid_period(self, period):
        with pytest.raises(ValueError, match="period"):
            TrajectoryConfig(period_s=period)


class TestStaticTrajectory:
    def test_offset_is_zero(self):
        trajectory = Trajectory(*BASE)
        assert trajectory.offset(37.0) == (0.0, 0.0)

    def test_position_is_base(self):
        assert Trajectory(*BASE).position(100.0) == pytest.approx(BASE)


class TestCircularTrajectory:
    def test_start_offset_is_near_zero(self):
        dlat, dlon = Trajectory(*BASE, CIRCLE).offset(0.0)
        assert dlat == pytest.approx(0.0, abs=1e-3)
        assert dlon == pytest.approx(0.0, abs=1e-3)

    def test_start_offset_is_east_of_base(self):
        dlat, dlon = Trajectory(*BASE, CIRCLE).offset(0.0)
        expected = 20.0 / (METERS_PER_DEGREE * math.cos(math.radians(BASE[0])))
        assert dlat == pytest.approx(0.0, abs=1e-12)
        assert dlon == pytest.approx(expected)

    def test_quarter_period(self):
        dlat, dlon = Trajectory(*BASE, CIRCLE).offset(5.0)
        assert dlat == pytest.approx(20.0 / METERS_PER_DEGREE)
        assert dlon == pytest.approx(0.0, abs=1e-9)

    def test_periodic(self):
        trajectory = Trajectory(*BASE, CIRCLE)
        assert trajectory.offset(23.0) == pytest.approx(trajectory.offset(3.0))

    def test_radius_in_meters(self):
        trajectory = Trajectory(*BASE, CIRCLE)
        cos_latitude = math.cos(math.radians(BASE[0]))
        for t in (1.0, 7.5, 13.0):
            dlat, dlon = trajectory.offset(t)
            north = dlat * METERS_PER_DEGREE
            east = dlon * METERS_PER_DEGREE * cos_latitude
            assert math.hypot(north, east) == pytest.approx(20.0)

    def test_position_adds_offset(self):
        trajectory = Trajectory(*BASE, CIRCLE)
        latitude, longitude = trajectory.position(5.0)
        assert latitude == pytest.approx(BASE[0] + 20.0 / METERS_PER_DEGREE)
        assert longitude == pytest.approx(BASE[1], abs=1e-9)

    def test_zero_radius_stays_put(self):
        config = TrajectoryConfig(enabled=True, radius_m=0.0)
        assert Trajectory(*BASE, config).position(12.0) == pytest.approx(BASE)


class TestPolarBase:
    def test_pole_clamps_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            trajectory = Trajectory(90.0, 10.0, CIRCLE)
        assert "pole" in caplog.text
        _, longitude = trajectory.position(0.0)
        assert math.isfinite(longitude)
        assert -180.0 <= longitude < 180.0

    def test_static_pole_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            Trajectory(90.0, 10.0)
        assert caplog.text == ""

    def test_longitude_wraps_at_antimeridian(self):
        config = TrajectoryConfig(enabled=True, radius_m=1000.0, period_s=20.0)
        _, longitude = Trajectory(0.0, 179.9999, config).position(0.0)
        assert -180.0 <= longitude < 0.0
