"""Persist node — assembles the analysis result and stores it."""

import logging
from typing import Any

from app.graph.state import AnalysisState
from app.schemas.bill import AnalysisResult
from app.services.storage import AnalysisStore

logger = logging.getLogger(__name__)


def to_storage_record(result: AnalysisResult) -> dict[str, Any]:
    """Flatten an analysis result into one row for the analysis store."""
    bill = result.extracted_data
    audit = result.error_analysis
    return {
        "patient_name": bill.patient_name,
        "bill_date": bill.bill_date,
        "provider_name": bill.provider_name,
        "total_amount": bill.total_amount,
        "account_number": bill.account_number,
        "insurance_name": bill.insurance_name,
        "errors_detected": audit.errors_detected,
        "error_summary": audit.error_summary,
        "detailed_report": audit.detailed_report,
        "procedures": [item.model_dump(mode="json") for item in bill.procedures],
        "tests": [item.model_dump(mode="json") for item in bill.tests],
        "medications": [item.model_dump(mode="json") for item in bill.medications],
        "appeal_letter": result.appeal_letter,
    }


def make_persist_node(store: AnalysisStore):
    """Bind the persistence step to a store as a graph node."""

    def persist_node(state: AnalysisState) -> dict[str, Any]:
        result = AnalysisResult(
            extracted_data=state["extracted_data"],
            error_analysis=state["error_analysis"],
            appeal_letter=state["appeal_letter"],
        )
        store.insert(to_storage_record(result))
        logger.info(
            "Persist — provider=%s errors_detected=%s",
            result.extracted_data.provider_name,
            result.error_analysis.errors_detected,
        )
        return {"result": result}

    return persist_node
