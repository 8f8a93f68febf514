from __future__ import annotations

import base64
import io
import json
import tarfile
from pathlib import Path

from curator.core.result import Err, Ok, Result
from curator.services.release.http_client import (
    HttpError,
    HttpPublishClient,
    HttpRequest,
    distro_csv,
    doc_map,
)
from curator.services.release.model import Credentials, SnapshotContents, UploadRequest

from ._release_fakes import PLAN


class FakeTransport:
    def __init__(self, responses: list[Result[bytes, HttpError]] | None = None) -> None:
        self.sent: list[HttpRequest] = []
        self._responses = responses or []

    def send(self, request: HttpRequest) -> Result[bytes, HttpError]:
        self.sent.append(request)
        if self._responses:
            return self._responses.pop(0)
        return Ok(b"ok\n")


def _client(transport: FakeTransport) -> HttpPublishClient:
    return HttpPublishClient(archive_url="https://archive.test", transport=transport)


def test_upload_bundle_v2(tmp_path: Path) -> None:
    bundle = tmp_path / "curator-lts-5.10.bundle"
    bundle.write_bytes(b"BUNDLE")
    transport = FakeTransport([Ok(b"https://snapshots.test/lts-5.10\n")])

    result = _client(transport).upload_bundle_v2(
        server="https://snapshots.test/", token="tok", bundle=bundle
    )

    assert result == Ok("https://snapshots.test/lts-5.10")
    sent = transport.sent[0]
    assert (sent.method, sent.url) == ("PUT", "https://snapshots.test/upload2")
    assert sent.body == b"BUNDLE"
    assert sent.headers["Authorization"] == "tok"


def test_upload_bundle_v2_missing_file(tmp_path: Path) -> None:
    transport = FakeTransport()
    result = _client(transport).upload_bundle_v2(
        server="https://snapshots.test", token="tok", bundle=tmp_path / "missing.bundle"
    )
    assert isinstance(result, Err)
    assert transport.sent == []


def test_upload_bundle_legacy() -> None:
    transport = FakeTransport([Ok(b'{"ident": "abc123", "location": "https://s.test/p/1"}')])
    request = UploadRequest(
        contents=SnapshotContents(created_at=10, title="T", slug="lts-5.10", plan=PLAN),
        auth_token="tok",
        server="https://snapshots.test",
        lts="5.10",
    )

    result = _client(transport).upload_bundle(request)

    assert isinstance(result, Ok)
    assert result.value.ident == "abc123"
    assert result.value.location == "https://s.test/p/1"
    body = json.loads(transport.sent[0].body)
    assert body["lts"] == "5.10"
    assert body["nightly"] is None
    assert body["plan"]["compiler"] == "9.8.4"


def test_upload_bundle_without_ident() -> None:
    transport = FakeTransport([Ok(b"{}")])
    request = UploadRequest(
        contents=SnapshotContents(created_at=10, title="T", slug="s", plan=PLAN),
        auth_token="tok",
        server="https://snapshots.test",
    )
    result = _client(transport).upload_bundle(request)
    assert isinstance(result, Err)
    assert "no ident" in result.error.message


def test_http_error_becomes_engine_error() -> None:
    transport = FakeTransport([Err(HttpError(url="https://s.test/upload", status=503, message="down"))])
    request = UploadRequest(
        contents=SnapshotContents(created_at=10, title="T", slug="s", plan=PLAN),
        auth_token="tok",
        server="https://s.test",
    )
    result = _client(transport).upload_bundle(request)
    assert isinstance(result, Err)
    assert result.error.message == "HTTP 503: down (https://s.test/upload)"


def test_upload_docs_sends_tarball(tmp_path: Path) -> None:
    docs = tmp_path / "doc"
    (docs / "text-2.1").mkdir(parents=True)
    (docs / "text-2.1" / "Data-Text.html").write_text("<html/>", encoding="utf-8")
    transport = FakeTransport()

    result = _client(transport).upload_docs(
        server="https://s.test", token="tok", docs_dir=docs, ident="abc"
    )

    assert result == Ok("ok")
    sent = transport.sent[0]
    assert sent.url == "https://s.test/upload-docs/abc"
    with tarfile.open(fileobj=io.BytesIO(sent.body), mode="r:gz") as tar:
        assert "text-2.1/Data-Text.html" in tar.getnames()


def test_upload_docs_missing_directory(tmp_path: Path) -> None:
    result = _client(FakeTransport()).upload_docs(
        server="https://s.test", token="tok", docs_dir=tmp_path / "doc", ident="abc"
    )
    assert isinstance(result, Err)


def test_doc_map_lists_documented_packages(tmp_path: Path) -> None:
    pkg = tmp_path / "aeson-2.2.1.0"
    pkg.mkdir()
    for page in ("index", "Data-Aeson", "Data-Aeson-Types"):
        (pkg / f"{page}.html").write_text("", encoding="utf-8")

    assert doc_map(PLAN, tmp_path) == {
        "aeson": {"version": "2.2.1.0", "modules": ["Data-Aeson", "Data-Aeson-Types"]}
    }


def test_upload_distro_uses_basic_auth() -> None:
    transport = FakeTransport()

    result = _client(transport).upload_distro(
        distro_name="CuratedLTS", plan=PLAN, credentials=Credentials("curator", "pw")
    )

    assert isinstance(result, Ok)
    sent = transport.sent[0]
    assert sent.url == "https://archive.test/distro/CuratedLTS/packages.csv"
    expected = base64.b64encode(b"curator:pw").decode("ascii")
    assert sent.headers["Authorization"] == f"Basic {expected}"


def test_distro_csv() -> None:
    assert distro_csv(PLAN, "https://archive.test/") == (
        '"aeson","2.2.1.0","https://archive.test/package/aeson-2.2.1.0"\n'
        '"text","2.1","https://archive.test/package/text-2.1"\n'
    )
