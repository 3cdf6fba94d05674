"""Integration tests for the v1 conversion routers.

The JSON and ZIP endpoints run against the real conversion pipeline; the
failure paths use a lightweight stub handler via dependency overrides.
"""
from __future__ import annotations

import base64
import re
import zipfile
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from pagerender import main
from pagerender.api.v1 import dependencies
from pagerender.application.commands.convert_batch import FileConversionOutcome
from pagerender.config import Settings
from pagerender.domain.value_objects.processing_mode import ProcessingMode
from pagerender.main import app


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    """Ensure dependency overrides do not leak between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


class _FailingBatchHandler:
    def __init__(self):
        self.commands = []

    def handle(self, command, cancel_event=None):  # noqa: ANN001 - FastAPI passes command object
        self.commands.append(command)
        return [
            FileConversionOutcome(
                filename=upload.filename,
                error="Could not decode image",
                error_type="DecodeError",
            )
            for upload in command.files
        ]


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_convert_returns_data_url_pages(client: TestClient, jpeg_bytes: bytes, pdf_factory) -> None:
    response = client.post(
        "/api/convert?mode=lossless",
        files=[
            ("files", ("photo.jpg", jpeg_bytes, "image/jpeg")),
            ("files", ("report.pdf", pdf_factory(2), "application/pdf")),
        ],
    )
    assert response.status_code == 200

    photo, report = response.json()["files"]
    assert photo["originalFileName"] == "photo.jpg"
    assert photo["error"] is None
    (page,) = photo["pages"]
    assert page["mimeType"] == "image/jpeg"
    assert page["suggestedFileName"] == "photo-page-001.jpg"
    prefix = "data:image/jpeg;base64,"
    assert page["dataUrl"].startswith(prefix)
    assert base64.b64decode(page["dataUrl"][len(prefix):]) == jpeg_bytes
    assert page["sizeBytes"] == len(jpeg_bytes)

    assert [p["pageNumber"] for p in report["pages"]] == [1, 2]
    assert all(p["mimeType"] == "image/png" for p in report["pages"])


def test_convert_reports_failed_file_without_aborting(client: TestClient, png_bytes: bytes) -> None:
    response = client.post(
        "/api/convert",
        files=[
            ("files", ("broken.png", b"not an image", "image/png")),
            ("files", ("chart.png", png_bytes, "image/png")),
        ],
    )
    assert response.status_code == 200

    broken, chart = response.json()["files"]
    assert broken["pages"] == []
    assert broken["error"]
    assert broken["errorType"] == "DecodeError"
    assert chart["error"] is None
    assert len(chart["pages"]) == 1


def test_convert_uses_configured_default_mode(client: TestClient, png_bytes: bytes) -> None:
    stub = _FailingBatchHandler()
    app.dependency_overrides[dependencies.get_convert_batch_handler] = lambda: stub
    app.dependency_overrides[dependencies.get_app_settings] = lambda: Settings(DEFAULT_PROCESSING_MODE="auto")

    response = client.post("/api/convert", files=[("files", ("a.png", png_bytes, "image/png"))])
    assert response.status_code == 200
    assert stub.commands[0].mode is ProcessingMode.AUTO


def test_convert_without_files_is_rejected(client: TestClient) -> None:
    response = client.post("/api/convert", data={"mode": "auto"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No files uploaded."


def test_convert_with_unknown_mode_is_rejected(client: TestClient, png_bytes: bytes) -> None:
    response = client.post(
        "/api/convert?mode=extreme",
        files=[("files", ("a.png", png_bytes, "image/png"))],
    )
    assert response.status_code == 400
    assert "extreme" in response.json()["detail"]


def test_oversize_request_is_rejected(client: TestClient, png_bytes: bytes, monkeypatch) -> None:
    monkeypatch.setattr(main, "get_settings", lambda: Settings(MAX_UPLOAD_BYTES=16))

    response = client.post("/api/convert", files=[("files", ("a.png", png_bytes, "image/png"))])
    assert response.status_code == 413


def test_zip_archive_layout(client: TestClient, jpeg_bytes: bytes, pdf_factory) -> None:
    response = client.post(
        "/api/convert/zip?mode=AUTO",
        files=[
            ("files", ("photo.jpg", jpeg_bytes, "image/jpeg")),
            ("files", ("report.pdf", pdf_factory(2), "application/pdf")),
        ],
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    disposition = response.headers["content-disposition"]
    assert re.search(r'filename="converted-\d{8}-\d{6}\.zip"', disposition)

    with zipfile.ZipFile(BytesIO(response.content)) as archive:
        names = archive.namelist()
        assert names[0] == "photo-page-001.jpg"
        assert len(names) == 3
        assert all(re.fullmatch(r"report/report-page-00[12]\.(png|jpg)", name) for name in names[1:])
        with archive.open(names[0]) as entry:
            assert Image.open(entry).format == "JPEG"


def test_zip_with_failed_files_returns_422(client: TestClient, png_bytes: bytes) -> None:
    app.dependency_overrides[dependencies.get_convert_batch_handler] = lambda: _FailingBatchHandler()

    response = client.post("/api/convert/zip", files=[("files", ("a.png", png_bytes, "image/png"))])
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["files"] == [{"fileName": "a.png", "error": "Could not decode image"}]
