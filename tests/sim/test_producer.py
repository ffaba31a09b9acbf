"""Tests for SentenceProducer."""

import logging
import threading
from unittest.mock import MagicMock

import pytest

from tests.helpers import wait_until
from tracksense.nmea import SentenceType, decode_sentence, validate_checksum
from tracksense.sim import SentenceProducer, TrajectoryConfig

BASE = (-22.9559, -43.1659)


class RecordingEndpoint:
    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            self.writes.append(data)
        return len(data)


def _lines(payload: bytes) -> list[str]:
    return payload.decode("ascii").split("\r\n")[:-1]


class TestSentences:
    def test_rmc_then_gga(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE, 760.0)
        lines = _lines(producer.sentences(*BASE))
        assert len(lines) == 2
        assert lines[0].startswith("$GPRMC,")
        assert lines[1].startswith("$GPGGA,")
        assert all(validate_checksum(line) for line in lines)

    def test_crlf_terminated(self):
        payload = SentenceProducer(RecordingEndpoint(), *BASE).sentences(*BASE)
        assert payload.endswith(b"\r\n")

    def test_speed_reported_in_knots(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE, speed_mps=5.14)
        rmc = decode_sentence(_lines(producer.sentences(*BASE))[0])
        assert rmc.data.speed_knots == pytest.approx(10.0)
        assert rmc.data.speed_meters_per_second == pytest.approx(5.14)

    def test_gga_fields(self):
        producer = SentenceProducer(
            RecordingEndpoint(), *BASE, 760.0, satellites=7, hdop=1.2
        )
        gga = decode_sentence(_lines(producer.sentences(*BASE))[1])
        assert gga.sentence_type is SentenceType.GGA
        assert gga.data.latitude_degrees == pytest.approx(BASE[0], abs=1e-4)
        assert gga.data.longitude_degrees == pytest.approx(BASE[1], abs=1e-4)
        assert gga.data.altitude_meters == pytest.approx(760.0)
        assert gga.data.num_satellites == 7
        assert gga.data.horizontal_dilution_of_precision == pytest.approx(1.2)

    def test_defaults(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE)
        gga = decode_sentence(_lines(producer.sentences(*BASE))[1])
        assert gga.data.num_satellites == 10
        assert gga.data.horizontal_dilution_of_precision == pytest.approx(0.8)
        assert gga.data.altitude_meters == pytest.approx(10.0)


class TestUpdateRate:
    def test_tick_interval(self):
        assert SentenceProducer(RecordingEndpoint(), *BASE, update_hz=4.0).tick_interval_ms == 250

    @pytest.mark.parametrize("rate", [0.0, -2.0])
    def test_invalid_rate_falls_back_to_one_hz(self, rate, caplog):
        with caplog.at_level(logging.WARNING):
            producer = SentenceProducer(RecordingEndpoint(), *BASE, update_hz=rate)
        assert producer.tick_interval_ms == 1000
        assert "update rate" in caplog.text


class TestProducerThread:
    def test_first_tick_is_base_position(self):
        endpoint = RecordingEndpoint()
        circle = TrajectoryConfig(enabled=True, radius_m=20.0, period_s=20.0)
        with SentenceProducer(endpoint, *BASE, update_hz=10.0, trajectory=circle):
            assert wait_until(lambda: len(endpoint.writes) >= 1)
        gga = decode_sentence(_lines(endpoint.writes[0])[1])
        assert gga.data.latitude_degrees == pytest.approx(BASE[0], abs=1e-4)
        assert gga.data.longitude_degrees == pytest.approx(BASE[1], abs=1e-4)

    def test_emits_periodically(self):
        endpoint = RecordingEndpoint()
        with SentenceProducer(endpoint, *BASE, update_hz=50.0):
            assert wait_until(lambda: len(endpoint.writes) >= 3)

    def test_stop_interrupts_long_wait(self):
        endpoint = RecordingEndpoint()
        producer = SentenceProducer(endpoint, *BASE, update_hz=0.01)
        producer.start()
        assert wait_until(lambda: len(endpoint.writes) == 1)
        stopped = threading.Event()
        threading.Thread(target=lambda: (producer.stop(), stopped.set())).start()
        assert stopped.wait(2.0)
        assert not producer.alive

    def test_write_failure_is_logged_and_ticking_continues(self, caplog):
        endpoint = MagicMock()
        endpoint.write.side_effect = BlockingIOError("buffer full")
        with caplog.at_level(logging.WARNING):
            with SentenceProducer(endpoint, *BASE, update_hz=50.0) as producer:
                assert wait_until(lambda: endpoint.write.call_count >= 3)
                assert producer.alive
        assert "buffer full" in caplog.text


class TestProducerLifecycle:
    def test_start_twice_spawns_one_thread(self, monkeypatch):
        spawned = MagicMock(side_effect=threading.Thread)
        monkeypatch.setattr(threading, "Thread", spawned)
        producer = SentenceProducer(RecordingEndpoint(), *BASE)
        producer.start()
        producer.start()
        producer.stop()
        assert spawned.call_count == 1

    def test_stop_before_start_is_noop(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE)
        producer.stop()
        assert not producer.running

    def test_stop_twice(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE)
        producer.start()
        producer.stop()
        producer.stop()
        assert not producer.alive

    def test_configure_trajectory_while_stopped(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE)
        circle = TrajectoryConfig(enabled=True)
        producer.configure_trajectory(circle)
        assert producer.trajectory.config is circle
        assert producer.trajectory.base == BASE

    def test_configure_trajectory_while_running_raises(self):
        producer = SentenceProducer(RecordingEndpoint(), *BASE)
        with producer, pytest.raises(RuntimeError):
            producer.configure_trajectory(TrajectoryConfig(enabled=True))
