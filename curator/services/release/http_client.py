"""HTTP implementation of the publish client.

Snapshot-server endpoints authenticate with the publish token; the package
archive's distro endpoint uses basic auth with the side-file credentials.
The transport is injectable so tests never touch the network.
"""

from __future__ import annotations

import base64
import csv
import io
import json
import ssl
import tarfile
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from curator.core.result import Err, Ok, Result
from curator.core.structured import as_str_dict, get_str
from curator.services.release.errors import EngineError
from curator.services.release.model import (
    BuildPlan,
    Credentials,
    UploadedSnapshot,
    UploadRequest,
)
from curator.services.release.plan_file import plan_to_dict
from curator.services.release.timeouts import UPLOAD_TIMEOUT_SECONDS

USER_AGENT = "curator/0.4"


@dataclass(frozen=True, slots=True)
class HttpError:
    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    url: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)


class HttpTransport(Protocol):
    def send(self, request: HttpRequest) -> Result[bytes, HttpError]: ...


class UrllibTransport:
    """Transport using urllib with system certificates."""

    def __init__(self, timeout: float = UPLOAD_TIMEOUT_SECONDS) -> None:
        self.timeout = timeout
        self._ssl_context = ssl.create_default_context()

    def send(self, request: HttpRequest) -> Result[bytes, HttpError]:
        url = request.url
        try:
            req = urllib.request.Request(
                url,
                data=request.body,
                method=request.method,
                headers={"User-Agent": USER_AGENT, **request.headers},
            )
            with urllib.request.urlopen(
                req, timeout=self.timeout, context=self._ssl_context
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


def _join(base: str, path: str) -> str:
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def _docs_tarball(docs_dir: Path) -> Result[bytes, EngineError]:
    if not docs_dir.is_dir():
        return Err(EngineError(message=f"docs directory not found: {docs_dir}"))
    buf = io.BytesIO()
    try:
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            for entry in sorted(docs_dir.iterdir()):
                tar.add(entry, arcname=entry.name)
    except OSError as e:
        return Err(EngineError(message=f"failed to pack docs: {e}"))
    return Ok(buf.getvalue())


def doc_map(plan: BuildPlan, docs_dir: Path) -> dict[str, object]:
    """Package -> documented module pages, for packages with built docs."""
    out: dict[str, object] = {}
    for p in plan.packages:
        pkg_dir = docs_dir / f"{p.name}-{p.version}"
        if not pkg_dir.is_dir():
            continue
        pages = sorted(f.stem for f in pkg_dir.glob("*.html") if f.stem != "index")
        out[p.name] = {"version": p.version, "modules": pages}
    return out


def distro_csv(plan: BuildPlan, archive_url: str) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for p in plan.packages:
        writer.writerow([p.name, p.version, _join(archive_url, f"package/{p.name}-{p.version}")])
    return buf.getvalue()


class HttpPublishClient:
    def __init__(self, *, archive_url: str, transport: HttpTransport | None = None) -> None:
        self.archive_url = archive_url
        self._transport: HttpTransport = transport or UrllibTransport()

    def _send(self, request: HttpRequest) -> Result[bytes, EngineError]:
        result = self._transport.send(request)
        if isinstance(result, Err):
            return Err(EngineError(message=str(result.error)))
        return Ok(result.value)

    def _send_text(self, request: HttpRequest) -> Result[str, EngineError]:
        body = self._send(request)
        if isinstance(body, Err):
            return body
        return Ok(body.value.decode("utf-8", errors="replace").strip())

    def upload_bundle_v2(
        self, *, server: str, token: str, bundle: Path
    ) -> Result[str, EngineError]:
        try:
            data = bundle.read_bytes()
        except OSError as e:
            return Err(EngineError(message=f"failed to read bundle: {e}"))
        return self._send_text(
            HttpRequest(
                method="PUT",
                url=_join(server, "upload2"),
                body=data,
                headers={"Authorization": token, "Content-Type": "application/octet-stream"},
            )
        )

    def upload_bundle(self, request: UploadRequest) -> Result[UploadedSnapshot, EngineError]:
        contents = request.contents
        payload = {
            "title": contents.title,
            "slug": contents.slug,
            "created_at": contents.created_at,
            "nightly": request.nightly,
            "lts": request.lts,
            "plan": plan_to_dict(contents.plan),
        }
        url = _join(request.server, "upload")
        body = self._send(
            HttpRequest(
                method="POST",
                url=url,
                body=json.dumps(payload).encode("utf-8"),
                headers={
                    "Authorization": request.auth_token,
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        )
        if isinstance(body, Err):
            return body

        try:
            obj: object = json.loads(body.value.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(EngineError(message=f"invalid upload response from {url}: {e}"))
        data = as_str_dict(obj)
        ident = get_str(data, "ident") if data is not None else None
        if data is None or ident is None:
            return Err(EngineError(message=f"upload response from {url} has no ident"))
        return Ok(UploadedSnapshot(ident=ident, location=get_str(data, "location")))

    def upload_docs(
        self, *, server: str, token: str, docs_dir: Path, ident: str
    ) -> Result[str, EngineError]:
        tarball = _docs_tarball(docs_dir)
        if isinstance(tarball, Err):
            return tarball
        return self._send_text(
            HttpRequest(
                method="PUT",
                url=_join(server, f"upload-docs/{ident}"),
                body=tarball.value,
                headers={"Authorization": token, "Content-Type": "application/gzip"},
            )
        )

    def upload_doc_map(
        self, *, server: str, token: str, ident: str, docs_dir: Path, plan: BuildPlan
    ) -> Result[str, EngineError]:
        payload = {"snapshot": ident, "docs": doc_map(plan, docs_dir)}
        return self._send_text(
            HttpRequest(
                method="POST",
                url=_join(server, "upload-doc-map"),
                body=json.dumps(payload).encode("utf-8"),
                headers={"Authorization": token, "Content-Type": "application/json"},
            )
        )

    def upload_distro(
        self, *, distro_name: str, plan: BuildPlan, credentials: Credentials
    ) -> Result[str, EngineError]:
        basic = base64.b64encode(
            f"{credentials.username}:{credentials.password}".encode("utf-8")
        ).decode("ascii")
        return self._send_text(
            HttpRequest(
                method="PUT",
                url=_join(self.archive_url, f"distro/{distro_name}/packages.csv"),
                body=distro_csv(plan, self.archive_url).encode("utf-8"),
                headers={"Authorization": f"Basic {basic}", "Content-Type": "text/csv"},
            )
        )
