"""XOR checksum and sentence framing shared by the builders and decoders.

A sentence on the wire is ``$<body>*<HH>\\r\\n``, where ``HH`` is the XOR of
every body character as two uppercase hex digits. ``finalize`` produces
that form; ``validate_checksum`` accepts a received line only if
re-finalizing its body reproduces the transmitted digits.
"""

from functools import reduce

__all__ = ["checksum", "finalize", "validate_checksum"]

_SENTENCE_TERMINATOR = "\r\n"


def checksum(body: str) -> int:
    """XOR of the character codes of *body* (0 for an empty body).

    >>> checksum("GPGGA")
    86
    """
    return reduce(lambda acc, character: acc ^ ord(character), body, 0)


def finalize(body: str) -> str:
    """Wrap *body* as ``$body*HH\\r\\n``.

    >>> finalize("GPGGA,123519")
    '$GPGGA,123519*77\\r\\n'
    """
    return f"${body}*{checksum(body):02X}{_SENTENCE_TERMINATOR}"


def validate_checksum(sentence: str) -> bool:
    """Return True if *sentence* carries the checksum of its own body.

    Surrounding whitespace is ignored and the hex digits may be lowercase.
    A line without a leading ``$``, without ``*``, or with anything other
    than two characters after the ``*`` is invalid.
    """
    text = sentence.strip()
    if not text.startswith("$"):
        return False
    body, star, provided = text[1:].partition("*")
    if not star or len(provided) != 2:
        return False
    return finalize(body) == f"${body}*{provided.upper()}{_SENTENCE_TERMINATOR}"
