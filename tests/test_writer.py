import hashlib
import json
import zipfile
from dataclasses import dataclass, field

import pytest

from seocrawl.archiver.writer import Archiver, IndexEntry

PAGES_HEADER = '{"format": "json-pages-1.0", "id": "pages", "title": "All Pages"}'


@dataclass
class FakeResponse:
    url: str
    content: bytes
    status_code: int = 200
    reason: str = "OK"
    headers: dict = field(default_factory=lambda: {"Content-Type": "text/html"})


def build(tmp_path, responses):
    path = tmp_path / "nested" / "dir" / "archive.wacz"
    with Archiver(path) as archiver:
        for response in responses:
            archiver.add_record(response)
    return path


def index_lines(path):
    with zipfile.ZipFile(path) as zf:
        return zf.read("indexes/index.cdx").decode().splitlines()


def test_archive_contains_all_files(tmp_path):
    path = build(tmp_path, [FakeResponse("https://example.com/", b"<p>hi</p>")])
    with zipfile.ZipFile(path) as zf:
        names = zf.namelist()
    assert sorted(names) == sorted(
        [
            "data/data.warc",
            "indexes/index.cdx",
            "pages/pages.jsonl",
            "datapackage.json",
            "datapackage-digest.json",
        ]
    )


def test_warc_and_index_are_stored(tmp_path):
    path = build(tmp_path, [FakeResponse("https://example.com/", b"body")])
    with zipfile.ZipFile(path) as zf:
        assert zf.getinfo("data/data.warc").compress_type == zipfile.ZIP_STORED
        assert zf.getinfo("indexes/index.cdx").compress_type == zipfile.ZIP_STORED


def test_index_entry_fields(tmp_path):
    body = b"<html>content</html>"
    path = build(tmp_path, [FakeResponse("https://example.com/page?x=1", body)])
    lines = index_lines(path)
    assert len(lines) == 1
    key, stamp, data = lines[0].split(" ", 2)
    assert key == "com,example)/page?x=1"
    assert len(stamp) == 14 and stamp.isdigit()
    entry = json.loads(data)
    assert list(entry) == [
        "url", "offset", "status", "length", "mime", "filename", "digest", "recordDigest",
    ]
    assert entry["url"] == "https://example.com/page?x=1"
    assert entry["status"] == "200"
    assert entry["offset"] == 0
    assert entry["mime"] == "text/html"
    assert entry["filename"] == "data/data.warc.gz"
    assert entry["digest"] == "sha-256:" + hashlib.sha256(body).hexdigest()


def test_index_lines_are_sorted(tmp_path):
    path = build(
        tmp_path,
        [
            FakeResponse("https://example.com/zeta", b"z"),
            FakeResponse("https://example.com/alpha", b"a"),
        ],
    )
    lines = index_lines(path)
    assert len(lines) == 2
    assert lines == sorted(lines)


def test_offsets_point_at_records(tmp_path):
    path = build(
        tmp_path,
        [
            FakeResponse("https://example.com/one", b"first body"),
            FakeResponse("https://example.com/two", b"second body"),
        ],
    )
    with zipfile.ZipFile(path) as zf:
        warc = zf.read("data/data.warc")
    entries = sorted(
        (json.loads(line.split(" ", 2)[2]) for line in index_lines(path)),
        key=lambda e: e["offset"],
    )
    assert entries[1]["offset"] == entries[0]["offset"] + entries[0]["length"]
    assert sum(e["length"] for e in entries) == len(warc)
    for entry in entries:
        chunk = warc[entry["offset"] : entry["offset"] + entry["length"]]
        assert chunk.startswith(b"WARC/1.0\r\n")
        assert entry["url"].encode() in chunk


def test_record_digest_covers_headers_and_body(tmp_path):
    body = b"payload"
    path = build(tmp_path, [FakeResponse("https://example.com/", body)])
    entry = json.loads(index_lines(path)[0].split(" ", 2)[2])
    assert entry["recordDigest"].startswith("sha256:")
    assert entry["recordDigest"] != "sha256:" + hashlib.sha256(body).hexdigest()


def test_pages_file(tmp_path):
    path = build(tmp_path, [FakeResponse("https://example.com/a", b"x")])
    with zipfile.ZipFile(path) as zf:
        lines = zf.read("pages/pages.jsonl").decode().splitlines()
    assert lines[0] == PAGES_HEADER
    assert len(lines) == 2
    page = json.loads(lines[1])
    assert page["url"] == "https://example.com/a"
    assert list(page) == ["url", "ts"]


def test_datapackage_resources(tmp_path):
    path = build(tmp_path, [FakeResponse("https://example.com/", b"data")])
    with zipfile.ZipFile(path) as zf:
        package = json.loads(zf.read("datapackage.json"))
        assert package["profile"] == "data-package"
        assert package["wacz_version"] == "1.1.1"
        paths = {res["path"] for res in package["resources"]}
        assert paths == {"data/data.warc", "indexes/index.cdx", "pages/pages.jsonl"}
        for res in package["resources"]:
            content = zf.read(res["path"])
            assert res["hash"] == "sha256:" + hashlib.sha256(content).hexdigest()
            assert res["bytes"] == len(content)
            assert res["name"] == res["path"].rsplit("/", 1)[-1]


def test_datapackage_digest(tmp_path):
    path = build(tmp_path, [FakeResponse("https://example.com/", b"data")])
    with zipfile.ZipFile(path) as zf:
        digest = json.loads(zf.read("datapackage-digest.json"))
        package = zf.read("datapackage.json")
    assert digest["path"] == "datapackage.json"
    assert digest["hash"] == "sha256" + hashlib.sha256(package).hexdigest()


def test_add_record_after_close_raises(tmp_path):
    archiver = Archiver(tmp_path / "a.wacz")
    archiver.close()
    with pytest.raises(ValueError):
        archiver.add_record(FakeResponse("https://example.com/", b""))


def test_close_is_idempotent(tmp_path):
    archiver = Archiver(tmp_path / "a.wacz")
    archiver.add_record(FakeResponse("https://example.com/", b"x"))
    archiver.close()
    archiver.close()
    with zipfile.ZipFile(tmp_path / "a.wacz") as zf:
        assert len(zf.namelist()) == 5


def test_index_entry_json_round_trip_and_escaping():
    entry = IndexEntry(
        url="https://example.com/?a=1&b=<2>",
        offset=10,
        status="301",
        length=20,
        mime="text/html",
        filename="data/data.warc.gz",
        digest="sha-256:abc",
        record_digest="sha256:def",
    )
    text = entry.to_json()
    assert "&" not in text and "<" not in text
    assert json.loads(text)["url"] == entry.url
    assert IndexEntry.from_json(text) == entry