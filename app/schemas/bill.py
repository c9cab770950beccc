"""Bill schemas shared by every stage of the analysis pipeline."""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


# Prose fields must carry at least one non-whitespace character.
Narrative = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base model exposing camelCase keys on the wire and snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LineItem(CamelModel):
    """One billed service, test or medication."""

    description: str = Field(..., description="Description of the service or item.")
    code: Optional[str] = Field(
        default=None,
        description="Billing code (e.g., CPT, HCPCS) for the item.",
    )
    charge: float = Field(..., description="The amount charged for the item.")


class BillRecord(CamelModel):
    """Structured content of one uploaded medical bill."""

    patient_name: str = Field(..., description="The patient's name.")
    bill_date: str = Field(..., description="The date on the medical bill.")
    provider_name: str = Field(..., description="The name of the healthcare provider.")
    total_amount: float = Field(..., description="The total amount due on the bill.")
    account_number: str = Field(..., description="The account number for the bill.")
    insurance_name: str = Field(..., description="The name of the insurance company.")
    procedures: list[LineItem] = Field(
        default_factory=list, description="A list of all medical procedures."
    )
    tests: list[LineItem] = Field(
        default_factory=list, description="A list of all diagnostic tests."
    )
    medications: list[LineItem] = Field(
        default_factory=list, description="A list of all prescribed medications."
    )

    def line_items(self) -> list[LineItem]:
        """Return every line item across the three buckets."""
        return [*self.procedures, *self.tests, *self.medications]


class ErrorAuditResult(CamelModel):
    """Audit verdict for one bill."""

    errors_detected: bool = Field(
        ..., description="Whether any potential billing errors were detected."
    )
    error_summary: Narrative = Field(
        ...,
        description="A summary of the potential billing errors detected.",
    )
    detailed_report: Narrative = Field(
        ...,
        description=(
            "A detailed report of each potential billing error, including the "
            "specific charge, the potential error, and the reasoning."
        ),
    )


class AppealLetter(CamelModel):
    appeal_letter: str = Field(..., description="The generated appeal letter draft.")


class ExtractBillInput(CamelModel):
    document_data_uri: str = Field(
        ...,
        pattern=r"^data:[\w.+-]+/[\w.+-]+;base64,",
        description=(
            "A medical bill as a data URI that must include a MIME type and use "
            "Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'"
        ),
    )


class BillTextInput(CamelModel):
    document_text: str = Field(
        ..., min_length=1, description="Text read from the pages of the medical bill."
    )


class DetectErrorsInput(CamelModel):
    extracted_data: str = Field(
        ...,
        description=(
            "Extracted data from the medical bill, including charges, codes, "
            "and descriptions."
        ),
    )
    billing_error_database: str = Field(
        ...,
        description="A database of common billing errors, overcharges, and fraud indicators.",
    )


class AppealLetterInput(CamelModel):
    extracted_data: BillRecord
    error_analysis: ErrorAuditResult


class AnalysisResult(CamelModel):
    """Aggregate returned to the caller and persisted."""

    extracted_data: BillRecord
    error_analysis: ErrorAuditResult
    appeal_letter: str = ""
