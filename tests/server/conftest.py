"""Pytest fixtures for server module testing."""

from collections.abc import Iterator
from unittest.mock import patch

import pytest

from tests.helpers import ControlledSource, RecordingSink


@pytest.fixture(autouse=True)
def mock_receiver() -> Iterator[tuple[ControlledSource, RecordingSink]]:
    source = ControlledSource()
    sink = RecordingSink()
    with (
        patch("server.sensors.SerialSource", return_value=source) as source_cls,
        patch("server.sensors.DatagramSink", return_value=sink),
    ):
        source.opened_with = source_cls
        yield source, sink


@pytest.fixture
def source(mock_receiver: tuple[ControlledSource, RecordingSink]) -> ControlledSource:
    return mock_receiver[0]


@pytest.fixture
def sink(mock_receiver: tuple[ControlledSource, RecordingSink]) -> RecordingSink:
    return mock_receiver[1]
