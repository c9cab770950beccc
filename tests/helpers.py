"""Test helpers: stub generative capability, stub stores, sample bills."""

from typing import Any

import fitz  # PyMuPDF
from pydantic import BaseModel

from app.errors import PersistenceFailed
from app.graph.nodes.llm_client import PromptSpec


class StubCapability:
    """Returns canned outputs keyed by prompt name and records every call."""

    def __init__(self, outputs: dict[str, Any]) -> None:
        self.outputs = outputs
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def generate(
        self,
        prompt: PromptSpec,
        input_schema: type[BaseModel],
        output_schema: type[BaseModel],
        variables: dict[str, Any],
    ) -> BaseModel:
        self.calls.append((prompt.name, variables))
        input_schema.model_validate(variables)
        outcome = self.outputs[prompt.name]
        if isinstance(outcome, Exception):
            raise outcome
        return output_schema.model_validate(outcome)

    def prompt_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class RecordingStore:
    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def insert(self, record: dict[str, Any]) -> None:
        self.records.append(record)


class FailingStore:
    def insert(self, record: dict[str, Any]) -> None:
        raise PersistenceFailed("Failed to save analysis to the database: connection refused")


def build_pdf(page_texts: list[str]) -> bytes:
    """Create an in-memory PDF with the given page texts."""
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=11)
    raw = doc.tobytes()
    doc.close()
    return raw


CLEAN_BILL: dict[str, Any] = {
    "patientName": "Jane Doe",
    "billDate": "2024-03-14",
    "providerName": "Riverside General Hospital",
    "totalAmount": 850.0,
    "accountNumber": "ACC-55821",
    "insuranceName": "Blue Shield",
    "procedures": [
        {"description": "Office visit, established patient", "code": "99213", "charge": 150.0},
        {"description": "Chest X-ray, 2 views", "code": "71046", "charge": 300.0},
        {"description": "Electrocardiogram", "code": "93000", "charge": 400.0},
    ],
    "tests": [],
    "medications": [],
}

DUPLICATE_BILL: dict[str, Any] = {
    **CLEAN_BILL,
    "totalAmount": 450.0,
    "procedures": [
        {"description": "Office visit, established patient", "code": "99213", "charge": 150.0},
        {"description": "Office visit, established patient", "code": "99213", "charge": 150.0},
        {"description": "Venipuncture", "code": "36415", "charge": 150.0},
    ],
}

CLEAN_AUDIT: dict[str, Any] = {
    "errorsDetected": False,
    "errorSummary": "No billing errors were found.",
    "detailedReport": "The bill appears to be transparent and accurate based on the provided information.",
}

DUPLICATE_AUDIT: dict[str, Any] = {
    "errorsDetected": True,
    "errorSummary": "One duplicate charge was found.",
    "detailedReport": (
        "Duplicate Billing: 'Office visit, established patient' (99213, $150.00) "
        "appears twice with no justification."
    ),
}

DUPLICATE_LETTER = (
    "To Whom It May Concern at Riverside General Hospital,\n\n"
    "Patient: Jane Doe, Account Number: ACC-55821.\n"
    "I am writing regarding the bill dated 2024-03-14 ...\n"
    "The office visit (99213, $150.00) is billed twice.\n\n"
    "Sincerely,\n[Your Name]"
)


