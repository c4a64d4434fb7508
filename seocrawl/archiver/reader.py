"""Reads response records back out of a WACZ web archive."""

from __future__ import annotations

import bisect
import logging
import struct
import zipfile
from pathlib import Path

from seocrawl.archiver.writer import INDEX_NAME, WARC_NAME, IndexEntry, _searchable_url

log = logging.getLogger(__name__)

_LOCAL_HEADER = struct.Struct("<4s2B4HL2L2H")
_LOCAL_SIGNATURE = b"PK\x03\x04"


def _data_offset(path: Path, info: zipfile.ZipInfo) -> int:
    """Return the position in the file where a member's data starts."""
    with path.open("rb") as fh:
        fh.seek(info.header_offset)
        header = fh.read(_LOCAL_HEADER.size)
    if len(header) != _LOCAL_HEADER.size:
        raise ValueError("truncated local file header")
    fields = _LOCAL_HEADER.unpack(header)
    if fields[0] != _LOCAL_SIGNATURE:
        raise ValueError("bad local file header signature")
    name_length, extra_length = fields[-2], fields[-1]
    return info.header_offset + _LOCAL_HEADER.size + name_length + extra_length


def _search_lines(lines: list[str], target: str) -> str:
    """Binary search the index lines for the first one starting with target."""
    index = bisect.bisect_left(range(len(lines)), True, key=lambda i: lines[i] >= target)
    if index < len(lines) and lines[index].startswith(target):
        return lines[index]
    raise LookupError(f"no line starting with {target!r} found")


def _warc_content(record: bytes) -> bytes:
    """Return the content block of a single WARC record."""
    end = record.find(b"\r\n\r\n")
    if end == -1:
        raise ValueError("WARC record has no header terminator")
    version, *header_lines = record[:end].split(b"\r\n")
    if not version.startswith(b"WARC/"):
        raise ValueError("not a WARC record")

    headers = {}
    for line in header_lines:
        key, sep, value = line.partition(b":")
        if sep:
            headers[key.strip().lower()] = value.strip()

    start = end + 4
    length = headers.get(b"content-length")
    if length is None:
        return record[start:]
    return record[start : start + int(length)]


class ArchiveReader:
    """Looks up URLs in a WACZ file and returns their archived content."""

    def __init__(self, wacz_path: str | Path) -> None:
        self.path = Path(wacz_path)

    def read_archive(self, url: str) -> str:
        """Return the archived record content for the URL, or "" if it is not there."""
        try:
            with zipfile.ZipFile(self.path) as wacz:
                entry = self._cdx_entry(wacz, url)
                warc_offset = _data_offset(self.path, wacz.getinfo(WARC_NAME))

            with self.path.open("rb") as fh:
                fh.seek(warc_offset + entry.offset)
                record = fh.read(entry.length)

            return _warc_content(record).decode("utf-8", errors="replace")
        except (OSError, zipfile.BadZipFile, LookupError, ValueError) as exc:
            log.debug("cannot read %s from %s: %s", url, self.path, exc)
            return ""

    def _cdx_entry(self, wacz: zipfile.ZipFile, url: str) -> IndexEntry:
        lines = wacz.read(INDEX_NAME).decode("utf-8", errors="replace").split("\n")
        line = _search_lines(lines, _searchable_url(url))

        json_start = line.find("{")
        if json_start == -1:
            raise ValueError(f"invalid index entry {line!r}")
        return IndexEntry.from_json(line[json_start:])