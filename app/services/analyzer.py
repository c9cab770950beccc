"""Bill analysis orchestrator: validates uploads and runs the analysis graph."""

import logging
from typing import Optional

from app.errors import BillAnalysisError, UploadValidationError
from app.graph.nodes.llm_client import CerebrasCapability, GenerativeCapability
from app.graph.reference import BILLING_ERROR_REFERENCE
from app.graph.workflow import run_analysis_workflow
from app.schemas.envelope import AnalysisFailure, AnalysisResponse, AnalysisSuccess
from app.services.document_reader import IMAGE_CONTENT_TYPES, PDF_CONTENT_TYPE, to_data_uri
from app.services.storage import AnalysisStore, get_analysis_store

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_CONTENT_TYPES: set[str] = IMAGE_CONTENT_TYPES | {PDF_CONTENT_TYPE}

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred during analysis."

_capability: Optional[GenerativeCapability] = None
_store: Optional[AnalysisStore] = None


def get_capability() -> GenerativeCapability:
    """Return the process-wide generative capability, created on first use."""
    global _capability
    if _capability is None:
        _capability = CerebrasCapability()
    return _capability


def get_store() -> AnalysisStore:
    """Return the process-wide analysis store, created on first use."""
    global _store
    if _store is None:
        _store = get_analysis_store()
    return _store


def validate_upload(content: Optional[bytes], content_type: Optional[str]) -> list[str]:
    """Check an upload against the presence, size and type constraints.

    Returns:
        Messages for every violated constraint; empty when the upload is valid.
    """
    violations: list[str] = []
    size = len(content) if content else 0
    if size == 0:
        violations.append("File is empty.")
    if size > MAX_FILE_SIZE:
        violations.append("File size exceeds 5MB.")
    if content_type not in ALLOWED_CONTENT_TYPES:
        violations.append("Only JPEG, PNG, WebP images and PDFs are supported.")
    return violations


def error_message(exc: BaseException) -> str:
    """Extract the message to report for an unexpected exception."""
    cause = exc.__cause__
    if cause is not None and str(cause):
        return str(cause)
    return str(exc) or UNKNOWN_ERROR_MESSAGE


def analyze_bill(
    content: Optional[bytes],
    content_type: Optional[str],
    *,
    capability: Optional[GenerativeCapability] = None,
    store: Optional[AnalysisStore] = None,
    billing_error_reference: str = BILLING_ERROR_REFERENCE,
) -> AnalysisResponse:
    """Validate an uploaded bill, analyse it, persist the result.

    Never raises: every failure is returned as an :class:`AnalysisFailure`.

    Args:
        content: Raw bytes of the uploaded file.
        content_type: MIME type reported for the upload.
        capability: Generative capability; defaults to the Cerebras one.
        store: Analysis store; defaults to Supabase or the null store.
        billing_error_reference: Error taxonomy for the audit agent.

    Returns:
        ``AnalysisSuccess`` with the result, or ``AnalysisFailure`` with a message.
    """
    try:
        violations = validate_upload(content, content_type)
        if violations:
            raise UploadValidationError(violations)

        result = run_analysis_workflow(
            to_data_uri(content, content_type),
            capability or get_capability(),
            store or get_store(),
            billing_error_reference,
        )
        return AnalysisSuccess(data=result)

    except UploadValidationError as exc:
        logger.warning("Rejected upload — %s", exc)
        return AnalysisFailure(error=str(exc))
    except BillAnalysisError as exc:
        logger.error("Bill analysis failed — %s", exc)
        return AnalysisFailure(error=str(exc) or UNKNOWN_ERROR_MESSAGE)
    except Exception as exc:
        logger.exception("Unexpected error during bill analysis")
        return AnalysisFailure(error=error_message(exc))
