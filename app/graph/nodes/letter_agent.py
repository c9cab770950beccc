"""Letter Agent node — drafts an appeal letter when billing errors were found."""

import logging
from typing import Any

from app.errors import GenerationError, LetterGenerationFailed
from app.graph.nodes.llm_client import GenerativeCapability, PromptSpec
from app.graph.state import AnalysisState
from app.schemas.bill import AppealLetter, AppealLetterInput, BillRecord, ErrorAuditResult

logger = logging.getLogger(__name__)

LETTER_PROMPT = PromptSpec(
    name="generateAppealLetter",
    system="""You are a patient advocate and an expert in medical billing correspondence. Your task is to write a professional and clear appeal letter to a healthcare provider based on a medical bill analysis.

Letter Requirements:
1. Tone: Polite, respectful, but firm and clear.
2. Structure:
   - Patient Information: Start by clearly identifying the patient by name and account number.
   - Purpose: State that the letter is regarding the bill on the given date and that you are seeking clarification on potential billing discrepancies.
   - Details: Reference the specific errors identified in the Detailed Report, one paragraph per error. For each error, clearly state the service or charge in question and why it appears to be an error. Use the detailed report as the only source for this section.
   - Request: Politely request a detailed, itemized review of the charges and a corrected bill to be sent.
   - Closing: End with a professional closing ("Sincerely,") and the placeholder "[Your Name]".
3. Content: Do not add any information not present in the context.

Generate the appeal letter as a single block of text.""",
    template="""Address the letter to the provider, opening with: "To Whom It May Concern at {extracted_data.provider_name},"

Patient Name: {extracted_data.patient_name}
Account Number: {extracted_data.account_number}
Bill Date: {extracted_data.bill_date}

Error Analysis Report:
{error_analysis.detailed_report}""",
)


def generate_appeal_letter(
    capability: GenerativeCapability,
    record: BillRecord,
    error_analysis: ErrorAuditResult,
) -> AppealLetter:
    """Draft an appeal letter for the audited bill.

    Returns an empty letter without calling the model when the audit
    found no errors.

    Raises:
        LetterGenerationFailed: If the model fails or returns an empty
            letter for a bill with errors.
    """
    if not error_analysis.errors_detected:
        logger.info("Letter Agent — no errors detected, skipping letter")
        return AppealLetter(appeal_letter="")

    variables = {"extracted_data": record, "error_analysis": error_analysis}
    try:
        letter = capability.generate(
            LETTER_PROMPT, AppealLetterInput, AppealLetter, variables
        )
    except GenerationError as exc:
        logger.error("Letter Agent — generation failed: %s", exc)
        raise LetterGenerationFailed(f"Appeal letter generation failed: {exc}") from exc

    if not letter.appeal_letter.strip():
        raise LetterGenerationFailed(
            "Appeal letter generation failed: the model returned an empty letter."
        )

    logger.info("Letter Agent — drafted letter chars=%d", len(letter.appeal_letter))
    return letter


def make_letter_node(capability: GenerativeCapability):
    """Bind the letter stage to a capability as a graph node."""

    def letter_node(state: AnalysisState) -> dict[str, Any]:
        letter = generate_appeal_letter(
            capability, state["extracted_data"], state["error_analysis"]
        )
        return {"appeal_letter": letter.appeal_letter}

    return letter_node
