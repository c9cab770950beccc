"""HTTP tests for the FastAPI routes using TestClient."""

import io
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.main import app, create_app
from app.schemas.bill import AnalysisResult
from app.schemas.envelope import AnalysisFailure, AnalysisSuccess
from app.services.analyzer import MAX_FILE_SIZE, analyze_bill
from helpers import CLEAN_AUDIT, CLEAN_BILL, RecordingStore

client = TestClient(app)


def _post(content: bytes, content_type: str, filename: str = "bill.pdf"):
    """POST to /api/analyze and return the response."""
    return client.post(
        "/api/analyze",
        files={"file": (filename, io.BytesIO(content), content_type)},
    )


def test_health_endpoint() -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_reject_plain_text() -> None:
    resp = _post(b"hello", "text/plain", filename="notes.txt")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Only JPEG, PNG, WebP images and PDFs are supported."}


def test_reject_empty_file() -> None:
    resp = _post(b"", "application/pdf")
    assert resp.status_code == 400
    assert resp.json() == {"error": "File is empty."}


def test_missing_file_field() -> None:
    resp = client.post("/api/analyze")
    assert resp.status_code == 422


@patch("app.api.routes.analyze_bill")
def test_success_returns_data_envelope(mock_analyze: MagicMock) -> None:
    result = AnalysisResult.model_validate({
        "extractedData": CLEAN_BILL,
        "errorAnalysis": CLEAN_AUDIT,
        "appealLetter": "",
    })
    mock_analyze.return_value = AnalysisSuccess(data=result)

    resp = _post(b"%PDF-1.7", "application/pdf")

    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {"data"}
    assert body["data"]["extractedData"]["patientName"] == "Jane Doe"
    assert body["data"]["appealLetter"] == ""
    mock_analyze.assert_called_once_with(b"%PDF-1.7", "application/pdf")


@patch("app.api.routes.analyze_bill")
def test_pipeline_failure_returns_error_envelope(mock_analyze: MagicMock) -> None:
    mock_analyze.return_value = AnalysisFailure(
        error="Failed to save analysis to the database: timeout"
    )

    resp = _post(b"%PDF-1.7", "application/pdf")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to save analysis to the database: timeout"}


def test_end_to_end_with_stubbed_collaborators(clean_pdf, clean_capability) -> None:
    store = RecordingStore()

    with patch("app.services.analyzer.get_capability", return_value=clean_capability), \
            patch("app.services.analyzer.get_store", return_value=store):
        resp = _post(clean_pdf, "application/pdf")

    assert resp.status_code == 200
    body = resp.json()
    assert body["data"]["errorAnalysis"]["errorsDetected"] is False
    assert body["data"]["appealLetter"] == ""
    assert len(store.records) == 1


def test_oversized_upload_read_is_bounded() -> None:
    with patch("app.api.routes.analyze_bill", wraps=analyze_bill) as spy:
        resp = _post(b"\xff" * (6 * 1024 * 1024), "image/jpeg", filename="bill.jpg")

    assert resp.status_code == 400
    assert resp.json() == {"error": "File size exceeds 5MB."}
    content, content_type = spy.call_args.args
    assert len(content) == MAX_FILE_SIZE + 1
    assert content_type == "image/jpeg"


def test_create_app_mounts_routes() -> None:
    paths = {route.path for route in create_app().routes}
    assert {"/api/analyze", "/health"} <= paths
