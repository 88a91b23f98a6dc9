"""
CSV reader for contact uploads.

Streams a byte file into row dictionaries keyed by header name, detects the
character encoding, and checks that the required contact columns are present.
Field contents are not validated here (see services/validation.py).
"""
import codecs
import csv
import io
import logging
from typing import BinaryIO, Dict, Iterator, List, Optional

import chardet

from contactbook.core.exceptions import MalformedInputError, MissingHeadersError

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = ("correo", "nombre", "telefono", "ciudad")
OPTIONAL_HEADERS = ("notas",)

# Bytes inspected by chardet before streaming the rest of the file
ENCODING_SAMPLE_SIZE = 64 * 1024


class _PrefixedStream(io.RawIOBase):
    """Replays an already-consumed prefix before reading the rest of a stream."""

    def __init__(self, prefix: bytes, stream: BinaryIO):
        self._prefix = prefix
        self._stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._prefix:
            size = min(len(buffer), len(self._prefix))
            buffer[:size] = self._prefix[:size]
            self._prefix = self._prefix[size:]
            return size
        data = self._stream.read(len(buffer))
        buffer[:len(data)] = data
        return len(data)


def detect_encoding(sample: bytes) -> str:
    """
    Detect file encoding using chardet.

    UTF-8 and ASCII samples map to utf-8-sig so a spreadsheet BOM never ends
    up glued to the first header name.

    Args:
        sample: Leading bytes of the file

    Returns:
        Codec name usable with io.TextIOWrapper
    """
    if sample.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"

    result = chardet.detect(sample)
    encoding = result['encoding'] or 'utf-8'

    encoding_lower = encoding.lower()
    if 'utf-8' in encoding_lower or encoding_lower == 'ascii':
        return 'utf-8-sig'
    elif 'iso-8859' in encoding_lower or 'latin' in encoding_lower:
        return 'iso-8859-1'
    elif 'windows' in encoding_lower or 'cp125' in encoding_lower:
        return 'windows-1252'

    return encoding


def normalize_header(name: Optional[str]) -> str:
    return (name or "").strip().lower()


class CSVReader:
    """
    Lazy, single-use reader over a CSV byte stream.

    The first line is the header. Iterating yields one dict per data row;
    blank lines are skipped. Any read, decode or CSV-structure failure is
    raised as MalformedInputError, including failures that only surface
    mid-file.

    Usage:
        reader = CSVReader(stream)
        headers = reader.headers
        for row in reader:
            ...
    """

    def __init__(self, stream: BinaryIO):
        try:
            sample = stream.read(ENCODING_SAMPLE_SIZE)
            if stream.seekable():
                stream.seek(0)
                raw: BinaryIO = stream
            else:
                raw = io.BufferedReader(_PrefixedStream(sample, stream))
        except OSError as e:
            raise MalformedInputError(f"Could not read the uploaded file: {e}") from e

        self.encoding = detect_encoding(sample)
        logger.debug(f"Detected CSV encoding {self.encoding}")

        try:
            self._text = io.TextIOWrapper(raw, encoding=self.encoding, newline="")
        except LookupError as e:
            raise MalformedInputError(f"Unsupported file encoding: {self.encoding}") from e

        self._reader = csv.reader(self._text)
        self._headers: Optional[List[str]] = None
        self._consumed = False

    @property
    def headers(self) -> List[str]:
        """Normalized header names from the first line (empty for an empty file)."""
        if self._headers is None:
            first = self._next_raw()
            self._headers = [normalize_header(h) for h in first] if first is not None else []
        return self._headers

    def _next_raw(self) -> Optional[List[str]]:
        try:
            return next(self._reader)
        except StopIteration:
            return None
        except (csv.Error, UnicodeDecodeError, OSError) as e:
            raise MalformedInputError(
                f"Could not parse CSV near line {self._reader.line_num}: {e}"
            ) from e

    def __iter__(self) -> Iterator[Dict[str, Optional[str]]]:
        if self._consumed:
            raise RuntimeError("CSVReader can only be iterated once")
        self._consumed = True

        headers = self.headers
        while True:
            values = self._next_raw()
            if values is None:
                return
            if not values:
                continue
            row: Dict[str, Optional[str]] = {}
            for index, header in enumerate(headers):
                row[header] = values[index] if index < len(values) else None
            yield row


def check_headers(headers: List[str]) -> None:
    """
    Ensure every required contact column is present.

    Raises:
        MissingHeadersError: listing all absent required headers at once
    """
    present = set(headers)
    missing = [header for header in REQUIRED_HEADERS if header not in present]
    if missing:
        raise MissingHeadersError(missing)

