"""Extraction Agent node — turns an uploaded bill into a structured record."""

import logging
from typing import Any

from pydantic import ValidationError

from app.errors import DocumentReadError, ExtractionFailed, GenerationError
from app.graph.nodes.llm_client import GenerativeCapability, PromptSpec
from app.graph.state import AnalysisState
from app.schemas.bill import BillRecord, BillTextInput, ExtractBillInput
from app.services.document_reader import read_document

logger = logging.getLogger(__name__)

EXTRACT_PROMPT = PromptSpec(
    name="extractMedicalBillData",
    system="""You are an expert data extraction specialist for medical bills.

Given the text of a medical bill, extract the following information:

- Patient Name: The name of the patient.
- Bill Date: The date on the medical bill.
- Provider Name: The name of the healthcare provider.
- Total Amount: The total amount due on the bill.
- Account Number: The account number for the bill.
- Insurance Name: The name of the insurance company.

Then, carefully analyze all line items on the bill. Categorize each line item into exactly one of the following groups: 'procedures', 'tests', or 'medications'. For each line item, extract its description, any associated billing code (like a CPT code), and the charge amount as a number.

Rules:
- Every visible line item must appear in exactly one group. If an item is ambiguous, place it in the best-fit group; never drop it.
- Omit "code" when the bill shows no billing code for an item.
- Use an empty string for any header field that is not present on the bill.
- Do NOT hallucinate items not present in the text.""",
    template="Medical bill text:\n\n{document_text}",
)


def extract_bill_data(
    capability: GenerativeCapability,
    variables: dict[str, Any],
) -> BillRecord:
    """Extract a structured bill record from an encoded document.

    Args:
        capability: The generative capability to delegate to.
        variables: Values for :class:`ExtractBillInput` (``document_data_uri``).

    Returns:
        The validated bill record.

    Raises:
        ExtractionFailed: If the document cannot be read or the model
            does not produce a schema-valid record.
    """
    try:
        request = ExtractBillInput.model_validate(variables)
        document_text = read_document(request.document_data_uri)
    except (ValidationError, DocumentReadError) as exc:
        logger.warning("Extraction Agent — unreadable document: %s", exc)
        raise ExtractionFailed(f"Could not read the uploaded bill: {exc}") from exc

    try:
        record = capability.generate(
            EXTRACT_PROMPT,
            BillTextInput,
            BillRecord,
            {"document_text": document_text},
        )
    except GenerationError as exc:
        logger.error("Extraction Agent — generation failed: %s", exc)
        raise ExtractionFailed(f"Bill extraction failed: {exc}") from exc

    logger.info(
        "Extraction Agent — provider=%s procedures=%d tests=%d medications=%d",
        record.provider_name,
        len(record.procedures),
        len(record.tests),
        len(record.medications),
    )
    return record


def make_extract_node(capability: GenerativeCapability):
    """Bind the extraction stage to a capability as a graph node."""

    def extract_node(state: AnalysisState) -> dict[str, Any]:
        record = extract_bill_data(
            capability, {"document_data_uri": state["document_data_uri"]}
        )
        return {"extracted_data": record}

    return extract_node
