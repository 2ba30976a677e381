"""Unit tests for the HTTP tool-call server."""

from __future__ import annotations

import json
import sys
from hashlib import sha256
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from ayb64.converter.http_server import ServerSettings

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


def _client(allow_files: bool = False) -> TestClient:
    pytest.importorskip("fastapi")
    pytest.importorskip("httpx")

    from fastapi.testclient import TestClient

    module = __import__("ayb64.converter.http_server", fromlist=["create_app"])

    return TestClient(module.create_app(ServerSettings(allow_files=allow_files)))


def test_health_and_readiness() -> None:
    """Expose liveness and readiness probes."""
    client = _client()

    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/readyz").json() == {"status": "ready", "formats": 9}


def test_formats_listing() -> None:
    """Describe every registered format."""
    formats = _client().get("/v1/formats").json()["formats"]

    by_name = {item["name"]: item for item in formats}
    assert by_name["yaml"]["aliases"] == ["yml"]
    assert by_name["json"]["media_type"] == "application/json"
    assert len(formats) == 9


def test_encode_text_then_recall_from_memory() -> None:
    """Store the first job and recall it for an identical request."""
    client = _client()
    body = {"data": "Hello", "format": "JSON", "include_metadata": True}

    first = client.post("/v1/encode", json=body)
    second = client.post("/v1/encode", json=body)

    assert first.status_code == 200
    payload = first.json()
    assert payload["format"] == "json"
    assert payload["recalled"] is False
    assert payload["checksum"] == sha256(b"Hello").hexdigest()
    assert json.loads(payload["content"])["data"] == "SGVsbG8="
    assert second.json()["recalled"] is True
    assert second.json()["job_id"] == payload["job_id"]


def test_encode_unknown_format_is_bad_request() -> None:
    """Map unsupported formats to 400."""
    response = _client().post("/v1/encode", json={"data": "Hello", "format": "toml"})

    assert response.status_code == 400
    assert "Unsupported output format: toml" in response.json()["detail"]


def test_encode_file_inputs_are_gated() -> None:
    """Refuse server-side paths unless enabled."""
    response = _client().post("/v1/encode", json={"data": "/etc/hosts", "is_file": True})

    assert response.status_code == 403


def test_encode_file_when_allowed(tmp_path: Path) -> None:
    """Read server-side files when enabled."""
    path = tmp_path / "hello.txt"
    path.write_text("Hello", encoding="utf-8")
    client = _client(allow_files=True)

    ok = client.post("/v1/encode", json={"data": str(path), "is_file": True})
    missing = client.post("/v1/encode", json={"data": str(tmp_path / "gone"), "is_file": True})

    assert ok.status_code == 200
    assert ok.json()["content"] == "SGVsbG8="
    assert ok.json()["metadata"]["filename"] == "hello.txt"
    assert missing.status_code == 400
    assert "File not found" in missing.json()["detail"]


def test_encode_upload_returns_rendered_artifact() -> None:
    """Return the rendered artifact with integrity and job headers."""
    pytest.importorskip("multipart")
    client = _client()

    response = client.post(
        "/v1/encode/upload",
        files={"artifact": ("hello.txt", b"Hello", "text/plain")},
        data={"format": "json", "include_metadata": "true"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.headers["x-content-sha256"] == sha256(b"Hello").hexdigest()
    assert response.headers["x-job-id"].startswith("job_")
    assert 'filename="hello.json"' in response.headers["content-disposition"]
    payload = response.json()
    assert payload["data"] == "SGVsbG8="
    assert payload["metadata"]["filename"] == "hello.txt"


def test_decode_returns_text_and_canonical_base64() -> None:
    """Decode leniently and echo canonical base64."""
    response = _client().post("/v1/decode", json={"data": "SGVsbG8"})

    assert response.status_code == 200
    assert response.json() == {
        "text": "Hello",
        "size": 5,
        "base64": "SGVsbG8=",
        "mime_type": "application/octet-stream",
    }


def test_decode_invalid_is_bad_request() -> None:
    """Report decode policy violations as 400."""
    response = _client().post("/v1/decode", json={"data": "SGVs*G8"})

    assert response.status_code == 400
    assert "Invalid base64 format" in response.json()["detail"]


def test_datauri_for_text_and_override() -> None:
    """Build data URIs with detected or explicit MIME types."""
    client = _client()

    detected = client.post("/v1/datauri", json={"input": "Hello"}).json()
    explicit = client.post(
        "/v1/datauri", json={"input": "Hello", "mime_type": "text/markdown"}
    ).json()

    assert detected["data_uri"] == "data:text/plain;base64,SGVsbG8="
    assert explicit["data_uri"] == "data:text/markdown;base64,SGVsbG8="
    assert explicit["size"] == 5


def test_jobs_listing_detail_and_memory_management() -> None:
    """List, re-render, report and clear stored jobs."""
    client = _client()
    job_id = client.post("/v1/encode", json={"data": "Hello"}).json()["job_id"]
    client.post("/v1/encode", json={"data": "World"})

    jobs = client.get("/v1/jobs", params={"limit": 1}).json()["jobs"]
    assert len(jobs) == 1

    detail = client.get(f"/v1/jobs/{job_id}", params={"format": "xml"}).json()
    assert detail["job"]["id"] == job_id
    assert "<content>SGVsbG8=</content>" in detail["content"]

    missing = client.get("/v1/jobs/job_0_000000")
    assert missing.status_code == 404
    assert "Recent jobs:" in missing.json()["detail"]

    assert client.get("/v1/memory/stats").json()["total_jobs"] == 2
    assert client.delete("/v1/memory").json() == {"cleared": 2}
    assert client.get("/v1/memory/stats").json()["total_jobs"] == 0


def test_jobs_limit_is_validated() -> None:
    """Reject limits outside 1..50."""
    client = _client()

    assert client.get("/v1/jobs", params={"limit": 0}).status_code == 422
    assert client.get("/v1/jobs", params={"limit": 51}).status_code == 422


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read host, port, file gate and memory size from the environment."""
    monkeypatch.setenv("AYB64_HTTP_HOST", "0.0.0.0")
    monkeypatch.setenv("AYB64_HTTP_PORT", "9000")
    monkeypatch.setenv("AYB64_HTTP_ALLOW_FILES", "yes")
    monkeypatch.setenv("AYB64_JOB_MEMORY_SIZE", "5")

    assert ServerSettings.from_env() == ServerSettings(
        host="0.0.0.0", port=9000, allow_files=True, job_memory_size=5
    )


def test_main_runs_uvicorn_with_cli_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Forward host and port to uvicorn."""
    pytest.importorskip("fastapi")
    import ayb64.converter.http_server as module

    seen: dict[str, object] = {}

    class _FakeUvicorn:
        @staticmethod
        def run(app_ref: str, **kwargs: object) -> None:
            seen["app_ref"] = app_ref
            seen.update(kwargs)

    monkeypatch.setattr(module, "uvicorn", _FakeUvicorn)
    monkeypatch.setattr(sys, "argv", ["ayb64-http", "--port", "9999"])
    module.main()

    assert seen["app_ref"] == "ayb64.converter.http_server:app"
    assert seen["port"] == 9999
    assert seen["host"] == "127.0.0.1"
