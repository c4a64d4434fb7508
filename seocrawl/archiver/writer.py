"""Writes crawled HTTP responses into a WACZ web archive."""

from __future__ import annotations

import hashlib
import json
import time
import uuid
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlsplit

WARC_NAME = "data/data.warc"
INDEX_NAME = "indexes/index.cdx"
PAGES_NAME = "pages/pages.jsonl"
DATAPACKAGE_NAME = "datapackage.json"
DATAPACKAGE_DIGEST_NAME = "datapackage-digest.json"
WACZ_VERSION = "1.1.1"

_INDEX_FILENAME = "data/data.warc.gz"
_PAGES_HEADER = '{"format": "json-pages-1.0", "id": "pages", "title": "All Pages"}\n'
_CHUNK = 64 * 1024

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_html(text: str) -> str:
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def _compact_json(value: Any) -> str:
    return _escape_html(json.dumps(value, separators=(",", ":"), ensure_ascii=False))


def _indented_json(value: Any) -> str:
    return _escape_html(json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False))


def _rfc3339(moment: datetime) -> str:
    text = moment.isoformat(timespec="seconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _hostname(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1 : host.find("]")] if "]" in host else host[1:]
    return host.split(":", 1)[0]


def _searchable_url(url: str) -> str:
    """Return the CDX lookup key of a URL: reversed host, ')' and request URI."""
    parts = urlsplit(url)
    host = ",".join(reversed(_hostname(parts.netloc).split(".")))
    request_uri = parts.path or "/"
    if parts.query:
        request_uri += "?" + parts.query
    return f"{host}){request_uri}"


def _warc_record(headers: list[tuple[str, str]], content: bytes) -> bytes:
    lines = ["WARC/1.0", *(f"{key}: {value}" for key, value in headers)]
    lines.append(f"Content-Length: {len(content)}")
    head = ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")
    return head + content + b"\r\n\r\n"


def _header(headers: Any, name: str) -> str:
    wanted = name.lower()
    return next((str(v) for k, v in headers.items() if str(k).lower() == wanted), "")


def _response_url(response: Any) -> str:
    request = getattr(response, "request", None)
    url = getattr(request, "url", None) if request is not None else None
    return str(url or response.url)


@dataclass
class IndexEntry:
    """One line of the archive's CDX index."""

    url: str
    offset: int
    status: str
    length: int
    mime: str
    filename: str
    digest: str
    record_digest: str
    time: datetime | None = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "offset": self.offset,
            "status": self.status,
            "length": self.length,
            "mime": self.mime,
            "filename": self.filename,
            "digest": self.digest,
            "recordDigest": self.record_digest,
        }

    def to_json(self) -> str:
        return _compact_json(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> IndexEntry:
        """Build an entry from its JSON form; keys match case-insensitively."""
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError("index entry must be a JSON object")
        data = {str(k).lower(): v for k, v in raw.items()}
        return cls(
            url=str(data.get("url", "")),
            offset=int(data.get("offset", 0)),
            status=str(data.get("status", "")),
            length=int(data.get("length", 0)),
            mime=str(data.get("mime", "")),
            filename=str(data.get("filename", "")),
            digest=str(data.get("digest", "")),
            record_digest=str(data.get("recorddigest", "")),
        )


@dataclass
class PageEntry:
    """One line of the archive's pages list."""

    url: str
    ts: str

    def to_json(self) -> str:
        return _compact_json({"url": self.url, "ts": self.ts})


class Archiver:
    """Builds a WACZ file from HTTP responses.

    Responses are written as WARC records as they are added; the index,
    the pages list and the datapackage files are written on close.
    """

    def __init__(self, wacz_path: str | Path) -> None:
        self.path = Path(wacz_path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._entries: list[IndexEntry] = []
        self._offset = 0
        self._closed = False

        self._zip = zipfile.ZipFile(self.path, "w")
        info = zipfile.ZipInfo(WARC_NAME, date_time=time.localtime()[:6])
        info.compress_type = zipfile.ZIP_STORED
        try:
            self._warc = self._zip.open(info, "w")
        except Exception:
            self._zip.close()
            raise

    def __enter__(self) -> Archiver:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def add_record(self, response: Any) -> IndexEntry:
        """Append a response record to the archive and return its index entry."""
        if self._closed:
            raise ValueError("archive is closed")

        body = bytes(response.content or b"")
        content = self._http_head(response) + body
        url = _response_url(response)
        mime = _header(response.headers, "Content-Type")
        now = datetime.now().astimezone()

        record = _warc_record(
            [
                ("WARC-Type", "response"),
                ("WARC-Date", _rfc3339(now)),
                ("WARC-Target-URI", url),
                ("Content-Type", mime),
                ("WARC-Record-ID", f"<urn:uuid:{uuid.uuid4()}>"),
            ],
            content,
        )
        self._warc.write(record)

        entry = IndexEntry(
            url=url,
            offset=self._offset,
            status=str(response.status_code),
            length=len(record),
            mime=mime,
            filename=_INDEX_FILENAME,
            digest="sha-256:" + hashlib.sha256(body).hexdigest(),
            record_digest="sha256:" + hashlib.sha256(content).hexdigest(),
            time=now,
        )
        self._entries.append(entry)
        self._offset += len(record)
        return entry

    def close(self) -> None:
        """Finish the archive, writing the index, pages and datapackage files."""
        if self._closed:
            return
        self._closed = True
        try:
            self._warc.close()
            self._create_index()
            self._create_pages()
        finally:
            self._zip.close()
        self._create_datapackage()

    @staticmethod
    def _http_head(response: Any) -> bytes:
        version = getattr(getattr(response, "raw", None), "version", None) or 11
        major, minor = divmod(int(version), 10)
        code = response.status_code
        status = f"{code} {getattr(response, 'reason', '') or ''}"
        lines = [f"HTTP/{major}.{minor} {code} {status}\r\n"]
        lines.extend(f"{key}: {value}\r\n" for key, value in response.headers.items())
        lines.append("\r\n")
        return "".join(lines).encode("utf-8")

    def _create_index(self) -> None:
        lines = sorted(
            f"{_searchable_url(entry.url)} "
            f"{(entry.time or datetime.now()).strftime('%Y%m%d%H%M%S')} "
            f"{entry.to_json()}\n"
            for entry in self._entries
        )
        info = zipfile.ZipInfo(INDEX_NAME, date_time=time.localtime()[:6])
        info.compress_type = zipfile.ZIP_STORED
        self._zip.writestr(info, "".join(lines))

    def _create_pages(self) -> None:
        pages = [_PAGES_HEADER]
        for entry in self._entries:
            moment = entry.time or datetime.now().astimezone()
            pages.append(PageEntry(url=entry.url, ts=_rfc3339(moment)).to_json() + "\n")
        self._zip.writestr(PAGES_NAME, "".join(pages), compress_type=zipfile.ZIP_DEFLATED)

    def _create_datapackage(self) -> None:
        with zipfile.ZipFile(self.path, "a") as archive:
            resources = [
                {
                    "name": PurePosixPath(info.filename).name,
                    "path": info.filename,
                    "hash": "sha256:" + self._hash_member(archive, info),
                    "bytes": info.file_size,
                }
                for info in archive.infolist()
            ]
            datapackage = _indented_json(
                {"profile": "data-package", "wacz_version": WACZ_VERSION, "resources": resources}
            ).encode("utf-8")
            archive.writestr(DATAPACKAGE_NAME, datapackage, compress_type=zipfile.ZIP_DEFLATED)

            digest = _indented_json(
                {
                    "path": DATAPACKAGE_NAME,
                    "hash": "sha256" + hashlib.sha256(datapackage).hexdigest(),
                }
            )
            archive.writestr(DATAPACKAGE_DIGEST_NAME, digest, compress_type=zipfile.ZIP_DEFLATED)

    @staticmethod
    def _hash_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> str:
        digest = hashlib.sha256()
        with archive.open(info) as member:
            for chunk in iter(lambda: member.read(_CHUNK), b""):
                digest.update(chunk)
        return digest.hexdigest()