"""Sentence-type classification.

The address field (``fields[0]``) of an NMEA sentence is a two-character
talker ID followed by a three-character sentence type, e.g. ``GPGGA`` or
``GNRMC``. It is parsed once into a ``SentenceType`` tag; everything
downstream dispatches on the tag instead of searching the raw line.
"""

from tracksense.nmea.fields import VALID_TALKER_IDS
from tracksense.nmea.types import SentenceType

__all__ = ["classify"]

_TYPES_BY_CODE = {
    member.value: member
    for member in SentenceType
    if member is not SentenceType.UNKNOWN
}


def classify(fields: list[str]) -> SentenceType:
    """Return the sentence type tag for a split sentence.

    Checks that:
    1. The address field has exactly 5 characters (2 talker + 3 type)
    2. The talker ID is a supported GNSS constellation
    3. The sentence type is one of the supported tags

    Anything else, including non-NMEA text, is ``SentenceType.UNKNOWN``.

    Example:
        fields[0] = "GPGGA" -> SentenceType.GGA
        fields[0] = "GNRMC" -> SentenceType.RMC
        fields[0] = "GPGSV" -> SentenceType.UNKNOWN (unsupported type)
        fields[0] = "XXGGA" -> SentenceType.UNKNOWN (unsupported talker)
    """
    if not fields:
        return SentenceType.UNKNOWN

    address = fields[0]
    if len(address) != 5:
        return SentenceType.UNKNOWN

    talker_id = address[:2]
    sentence_code = address[2:]

    if talker_id not in VALID_TALKER_IDS:
        return SentenceType.UNKNOWN

    return _TYPES_BY_CODE.get(sentence_code, SentenceType.UNKNOWN)
