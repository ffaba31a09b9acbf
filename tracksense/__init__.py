"""TrackSense: NMEA 0183 GNSS simulator and serial-to-UDP relay."""

from tracksense.errors import DecodeError, PortUnavailableError, TrackSenseError
from tracksense.gnss import Fix, SentenceConsumer, SerialSource
from tracksense.net import DatagramSink
from tracksense.nmea import (
    GGAData,
    RMCData,
    SentenceType,
    build_gga,
    build_rmc,
    decode_sentence,
    validate_checksum,
)
from tracksense.sim import SentenceProducer, TrajectoryConfig, VirtualSerialLink

__all__ = [
    "DatagramSink",
    "DecodeError",
    "Fix",
    "GGAData",
    "PortUnavailableError",
    "RMCData",
    "SentenceConsumer",
    "SentenceProducer",
    "SentenceType",
    "SerialSource",
    "TrackSenseError",
    "TrajectoryConfig",
    "VirtualSerialLink",
    "build_gga",
    "build_rmc",
    "decode_sentence",
    "validate_checksum",
]
