"""Calendar document codec, reader, writer and importer."""

from feedcal.ics.importer import ICSImporter
from feedcal.ics.reader import ICSReader
from feedcal.ics.writer import ICSWriter

__all__ = [
    "ICSImporter",
    "ICSReader",
    "ICSWriter",
]
