"""GNSS receiving side: serial line source, fix merging and forwarding."""

from tracksense.gnss.consumer import SentenceConsumer
from tracksense.gnss.framing import LineAssembler
from tracksense.gnss.source import SerialSource
from tracksense.gnss.types import CSV_COLUMNS, Fix

__all__ = ["CSV_COLUMNS", "Fix", "LineAssembler", "SentenceConsumer", "SerialSource"]
