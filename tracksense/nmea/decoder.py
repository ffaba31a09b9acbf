"""Tag-dispatched sentence decoding.

``decode_sentence`` turns one received line into a ``DecodedSentence``:
split once, classify once, then look up the decoder registered for the
tag. Supporting a new sentence type means registering a decoder in
``DECODERS``; callers such as the consumer's read loop stay unchanged.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from tracksense.errors import DecodeError
from tracksense.nmea.checksum import validate_checksum
from tracksense.nmea.classify import classify
from tracksense.nmea.fields import parse_line
from tracksense.nmea.gga import decode_gga
from tracksense.nmea.rmc import decode_rmc
from tracksense.nmea.types import GGAData, RMCData, SentenceType

__all__ = ["DECODERS", "DecodedSentence", "decode_sentence"]

logger = logging.getLogger(__name__)

SentenceData = GGAData | RMCData

DECODERS: dict[SentenceType, Callable[[list[str]], SentenceData]] = {
    SentenceType.GGA: decode_gga,
    SentenceType.RMC: decode_rmc,
}


@dataclass(frozen=True)
class DecodedSentence:
    """A received line paired with its sentence type tag and decoded fields."""

    sentence_type: SentenceType
    data: SentenceData


def decode_sentence(
    line: str,
    strict_checksum: bool = False,
) -> DecodedSentence | None:
    """Decode one line of receiver output.

    Lines whose type has no registered decoder (other NMEA sentences, boot
    banners, line noise) return None without logging above DEBUG. A
    checksum mismatch is always logged and drops the sentence only when
    ``strict_checksum`` is set. A line holding more than one ``$`` is two
    sentences run together and is always dropped.

    Returns:
        The decoded sentence, or None if the line was ignored or could not
        be decoded. Never raises for malformed input.
    """
    if line.count("$") > 1:
        logger.warning("Dropping line with more than one sentence: %r", line)
        return None

    fields = parse_line(line)
    sentence_type = classify(fields)
    decoder = DECODERS.get(sentence_type)
    if decoder is None:
        logger.debug("Ignoring line: %r", line)
        return None

    if not validate_checksum(line):
        if strict_checksum:
            logger.warning("Dropping %s with bad checksum: %r", fields[0], line)
            return None
        logger.warning("Checksum mismatch in %s: %r", fields[0], line)

    try:
        data = decoder(fields)
    except DecodeError as e:
        logger.warning("Could not decode %s: %s", fields[0], e)
        return None

    return DecodedSentence(sentence_type=sentence_type, data=data)
