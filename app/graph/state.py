"""Shared state definition for the bill analysis LangGraph workflow."""

from typing import Optional, TypedDict

from app.schemas.bill import AnalysisResult, BillRecord, ErrorAuditResult


class AnalysisState(TypedDict):
    """Typed state passed through every node in the bill analysis graph.

    Attributes:
        document_data_uri: The uploaded bill as a base64 data URI.
        extracted_data: Bill record produced by the extraction agent.
        error_analysis: Audit verdict produced by the audit agent.
        appeal_letter: Letter drafted by the letter agent, empty when no
            errors were detected.
        result: The aggregate persisted by the persist node.
    """

    document_data_uri: str
    extracted_data: Optional[BillRecord]
    error_analysis: Optional[ErrorAuditResult]
    appeal_letter: str
    result: Optional[AnalysisResult]
