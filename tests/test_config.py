"""Tests for run configuration."""

import pytest

from tracksense.config import SimulatorConfig, TrackerConfig


class TestSimulatorConfig:
    def test_defaults(self):
        config = SimulatorConfig()
        assert config.base_latitude == -22.9559
        assert config.base_longitude == -43.1659
        assert config.base_altitude == 10.0
        assert config.update_hz == 1.0
        assert config.speed_mps == 5.14
        assert config.pty_baudrate == 115200
        assert config.trajectory.enabled is False
        assert config.trajectory.radius_m == 20.0
        assert config.trajectory.period_s == 120.0


class TestTrackerConfig:
    def test_defaults(self):
        config = TrackerConfig()
        assert config.serial_port == "/dev/ttySTM2"
        assert config.baudrate == 9600
        assert (config.dest_host, config.dest_port) == ("127.0.0.1", 9000)
        assert config.strict_checksum is False

    def test_from_empty_env(self):
        assert TrackerConfig.from_env({}) == TrackerConfig()

    def test_from_env(self):
        config = TrackerConfig.from_env(
            {
                "TRACKSENSE_SERIAL_PORT": "/dev/ttyUSB0",
                "TRACKSENSE_BAUDRATE": "38400",
                "TRACKSENSE_DEST_HOST": "10.0.0.5",
                "TRACKSENSE_DEST_PORT": "9100",
                "TRACKSENSE_STRICT_CHECKSUM": "true",
            }
        )
        assert config == TrackerConfig("/dev/ttyUSB0", 38400, "10.0.0.5", 9100, True)

    @pytest.mark.parametrize("value", ["0", "false", "", "no"])
    def test_strict_checksum_off(self, value):
        env = {"TRACKSENSE_STRICT_CHECKSUM": value}
        assert TrackerConfig.from_env(env).strict_checksum is False

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("TRACKSENSE_DEST_PORT", "9555")
        assert TrackerConfig.from_env().dest_port == 9555

    def test_invalid_port(self):
        with pytest.raises(ValueError):
            TrackerConfig.from_env({"TRACKSENSE_DEST_PORT": "ninety"})
