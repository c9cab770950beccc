"""Schemas for every value crossing an AI-call boundary."""
from app.schemas.bill import (
    AnalysisResult,
    AppealLetter,
    AppealLetterInput,
    BillRecord,
    BillTextInput,
    DetectErrorsInput,
    ErrorAuditResult,
    ExtractBillInput,
    LineItem,
)
from app.schemas.envelope import AnalysisFailure, AnalysisResponse, AnalysisSuccess

__all__ = [
    "AnalysisFailure",
    "AnalysisResponse",
    "AnalysisResult",
    "AnalysisSuccess",
    "AppealLetter",
    "AppealLetterInput",
    "BillRecord",
    "BillTextInput",
    "DetectErrorsInput",
    "ErrorAuditResult",
    "ExtractBillInput",
    "LineItem",
]
