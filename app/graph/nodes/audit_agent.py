"""Audit Agent node — checks an extracted bill for common billing errors."""

import logging
from typing import Any

from app.errors import AuditFailed, GenerationError
from app.graph.nodes.llm_client import GenerativeCapability, PromptSpec
from app.graph.state import AnalysisState
from app.schemas.bill import BillRecord, DetectErrorsInput, ErrorAuditResult

logger = logging.getLogger(__name__)

AUDIT_PROMPT = PromptSpec(
    name="detectBillingErrors",
    system="""You are an expert medical billing auditor focused on accountability and transparency. Your primary goal is to identify potential overcharges and duplicate billings.

Analyze the extracted line items from the medical bill. Your analysis should be based on the provided list of common billing errors.

Your Tasks:
1. Check for Duplicate Services: Scrutinize the list of procedures, tests, and medications for any identical line items (same description, code, and charge) that appear more than once without clear justification.
2. Flag Potential Overcharges (Upcoding): While you cannot know the exact service provided, look for charges that seem unusually high for a given description, or services that are commonly bundled but billed separately. Use the provided billing error guide for guidance.
3. Generate a Report: Based on your findings, provide a clear summary and a detailed report. The tone should be objective and factual.

- If you find duplicates, list them clearly.
- If you suspect overcharges, explain why.
- If no definite errors are found, set errorsDetected to false and state in both the summary and the report that the bill appears to be transparent and accurate based on the provided information. Never leave them empty.

Be conservative and only flag issues with a high degree of certainty.""",
    template="""Extracted Data:
{extracted_data}

Common Billing Errors Guide:
{billing_error_database}""",
)


def detect_billing_errors(
    capability: GenerativeCapability,
    record: BillRecord,
    billing_error_reference: str,
) -> ErrorAuditResult:
    """Audit a bill record against a taxonomy of known billing errors.

    Args:
        capability: The generative capability to delegate to.
        record: The extracted bill.
        billing_error_reference: Text enumerating the error categories.

    Returns:
        The audit verdict with a non-empty summary and report.

    Raises:
        AuditFailed: If the model does not produce a schema-valid result.
    """
    variables = {
        "extracted_data": record.model_dump_json(by_alias=True),
        "billing_error_database": billing_error_reference,
    }
    try:
        result = capability.generate(
            AUDIT_PROMPT, DetectErrorsInput, ErrorAuditResult, variables
        )
    except GenerationError as exc:
        logger.error("Audit Agent — generation failed: %s", exc)
        raise AuditFailed(f"Billing error detection failed: {exc}") from exc

    logger.info(
        "Audit Agent — errors_detected=%s summary=%s",
        result.errors_detected,
        result.error_summary,
    )
    return result


def make_audit_node(capability: GenerativeCapability, billing_error_reference: str):
    """Bind the audit stage to a capability and taxonomy as a graph node."""

    def audit_node(state: AnalysisState) -> dict[str, Any]:
        result = detect_billing_errors(
            capability, state["extracted_data"], billing_error_reference
        )
        return {"error_analysis": result}

    return audit_node
