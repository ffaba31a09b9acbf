"""Tests for fix payloads on the websocket and the /fix endpoint."""

import pytest
from fastapi.testclient import TestClient

from server.formatters import fix_to_dict, format_fix_message
from server.main import app
from tests.helpers import GGA, RMC, ControlledSource, RecordingSink, wait_until
from tracksense.gnss import Fix


def test_gga_message(source: ControlledSource) -> None:
    with TestClient(app) as client, client.websocket_connect("/ws") as websocket:
        source.message_queue.put(GGA)
        data = websocket.receive_json()
    assert data["type"] == "fix"
    assert data["lat"] == pytest.approx(-22.9559)
    assert data["lon"] == pytest.approx(-43.1659)
    assert data["alt"] == pytest.approx(760.0)
    assert data["num_satellites"] == 10
    assert data["utc_time"] == "120000"
    assert data["speed_ms"] is None


def test_rmc_adds_speed(source: ControlledSource) -> None:
    with TestClient(app) as client, client.websocket_connect("/ws") as websocket:
        source.message_queue.put(GGA)
        source.message_queue.put(RMC)
        websocket.receive_json()
        data = websocket.receive_json()
    assert data["speed_ms"] == pytest.approx(5.14)
    assert data["alt"] == pytest.approx(760.0)


def test_unknown_sentences_not_broadcast(source: ControlledSource) -> None:
    with TestClient(app) as client, client.websocket_connect("/ws") as websocket:
        source.message_queue.put("$GPGSV,1,1,00*79")
        source.message_queue.put(GGA)
        assert websocket.receive_json()["num_satellites"] == 10


def test_records_forwarded_to_sink(source: ControlledSource, sink: RecordingSink) -> None:
    with TestClient(app):
        source.message_queue.put(GGA)
        assert wait_until(lambda: len(sink.records) == 1)
    assert sink.records == ["120000,-22.955900,-43.165900,,760.0,10,0.8\n"]


def test_fix_endpoint_before_first_fix() -> None:
    with TestClient(app) as client:
        response = client.get("/fix")
    assert response.status_code == 200
    assert response.json() == {
        "utc_time": None,
        "lat": None,
        "lon": None,
        "alt": None,
        "speed_ms": None,
        "num_satellites": None,
        "hdop": None,
    }


def test_fix_endpoint_returns_latest(source: ControlledSource, sink: RecordingSink) -> None:
    with TestClient(app) as client:
        source.message_queue.put(GGA)
        assert wait_until(lambda: len(sink.records) == 1)
        data = client.get("/fix").json()
    assert data["hdop"] == pytest.approx(0.8)
    assert data["lat"] == pytest.approx(-22.9559)


def test_serial_port_from_environment(
    source: ControlledSource, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TRACKSENSE_SERIAL_PORT", "/dev/ttyUSB3")
    monkeypatch.setenv("TRACKSENSE_BAUDRATE", "4800")
    with TestClient(app):
        pass
    source.opened_with.assert_called_once_with("/dev/ttyUSB3", 4800)


def test_format_fix_message() -> None:
    assert format_fix_message(Fix()).startswith('{"type": "fix"')
    assert fix_to_dict(Fix(hdop=1.5))["hdop"] == 1.5
