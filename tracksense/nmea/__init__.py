"""NMEA 0183 codec for GGA and RMC sentences."""

from tracksense.nmea.checksum import checksum, finalize, validate_checksum
from tracksense.nmea.classify import classify
from tracksense.nmea.decoder import DECODERS, DecodedSentence, decode_sentence
from tracksense.nmea.fields import dms_to_decimal, format_angle, parse_line
from tracksense.nmea.gga import build_gga, decode_gga
from tracksense.nmea.rmc import (
    KNOTS_TO_METERS_PER_SECOND,
    build_rmc,
    decode_rmc,
)
from tracksense.nmea.types import GGAData, RMCData, SentenceType

__all__ = [
    "DECODERS",
    "KNOTS_TO_METERS_PER_SECOND",
    "DecodedSentence",
    "GGAData",
    "RMCData",
    "SentenceType",
    "build_gga",
    "build_rmc",
    "checksum",
    "classify",
    "decode_gga",
    "decode_rmc",
    "decode_sentence",
    "dms_to_decimal",
    "finalize",
    "format_angle",
    "parse_line",
    "validate_checksum",
]
