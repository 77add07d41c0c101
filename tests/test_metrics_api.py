import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from grazer.config import Settings
from grazer.main import app
from grazer.routers import metrics as metrics_router
from grazer.services.filesystem import LocalFileSystem

BRANCHY = "export function f(a) {\n  // check\n  if (a && a.ok) {\n    return 1;\n  }\n  return 0;\n}\n"

REPORT_KEYS = {
    "kind",
    "fileName",
    "cyclomaticComplexity",
    "cognitiveComplexity",
    "nestingDepth",
    "halstead",
    "maintainabilityIndex",
    "loc",
    "sloc",
    "commentLines",
    "commentDensity",
    "characterCount",
    "fanOut",
}


def _client() -> TestClient:
    return TestClient(app)


def test_post_metrics_for_file(tmp_path: Path) -> None:
    source = tmp_path / "f.ts"
    source.write_text(BRANCHY, encoding="utf-8")

    resp = _client().post("/api/metrics", json={"path": str(source)})

    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == REPORT_KEYS
    assert data["kind"] == "file"
    assert data["fileName"] == "f.ts"
    assert data["cyclomaticComplexity"] == 3
    assert data["cognitiveComplexity"] == 3
    assert data["commentLines"] == 1
    assert set(data["halstead"]) == {"volume", "effort", "difficulty", "length", "vocabulary"}


def test_get_metrics_for_directory(tmp_path: Path) -> None:
    (tmp_path / "f.ts").write_text(BRANCHY, encoding="utf-8")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "g.js").write_text(BRANCHY, encoding="utf-8")

    resp = _client().get("/api/metrics", params={"path": str(tmp_path)})

    assert resp.status_code == 200
    data = resp.json()
    assert data["kind"] == "directory"
    assert data["fileName"] == tmp_path.name
    assert data["cyclomaticComplexity"] == 6
    assert data["commentLines"] == 2


def test_missing_path_is_404(tmp_path: Path) -> None:
    missing = tmp_path / "missing.ts"

    resp = _client().post("/api/metrics", json={"path": str(missing)})

    assert resp.status_code == 404
    assert resp.json()["detail"] == f"Path does not exist: {missing}"


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs named pipes")
def test_special_file_is_400(tmp_path: Path) -> None:
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)

    resp = _client().post("/api/metrics", json={"path": str(fifo)})

    assert resp.status_code == 400


def test_unparseable_file_is_422(tmp_path: Path) -> None:
    broken = tmp_path / "broken.ts"
    broken.write_text("function f( {", encoding="utf-8")

    resp = _client().post("/api/metrics", json={"path": str(broken)})

    assert resp.status_code == 422
    assert "broken.ts" in resp.json()["detail"]


def test_unparseable_file_inside_directory_is_skipped(tmp_path: Path) -> None:
    (tmp_path / "broken.ts").write_text("function f( {", encoding="utf-8")
    (tmp_path / "ok.ts").write_text(BRANCHY, encoding="utf-8")

    resp = _client().post("/api/metrics", json={"path": str(tmp_path)})

    assert resp.status_code == 200
    assert resp.json()["cyclomaticComplexity"] == 3


def test_read_failure_is_500(tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "f.ts"
    source.write_text(BRANCHY, encoding="utf-8")

    def deny(path):
        raise PermissionError(f"denied: {path}")

    monkeypatch.setattr(LocalFileSystem, "_read_text", staticmethod(deny))

    resp = _client().post("/api/metrics", json={"path": str(source)})

    assert resp.status_code == 500
    assert "denied" in resp.json()["detail"]


@pytest.mark.parametrize("body", [{}, {"path": ""}, {"path": 42}])
def test_bad_request_body_is_rejected(body) -> None:
    resp = _client().post("/api/metrics", json=body)

    assert resp.status_code == 422


def test_get_requires_path() -> None:
    resp = _client().get("/api/metrics")

    assert resp.status_code == 422


def test_vendored_directories_follow_settings(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "f.ts").write_text(BRANCHY, encoding="utf-8")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "dep.js").write_text(BRANCHY, encoding="utf-8")

    client = _client()
    monkeypatch.setattr(metrics_router, "SETTINGS", Settings(skip_vendored=False))
    everything = client.post("/api/metrics", json={"path": str(tmp_path)}).json()

    monkeypatch.setattr(metrics_router, "SETTINGS", Settings(skip_vendored=True))
    first_party = client.post("/api/metrics", json={"path": str(tmp_path)}).json()

    assert everything["cyclomaticComplexity"] == 6
    assert first_party["cyclomaticComplexity"] == 3


def test_status_endpoint() -> None:
    resp = _client().get("/api-status")

    assert resp.status_code == 200
    assert "running" in resp.json()["message"]
