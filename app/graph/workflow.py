"""LangGraph workflow definition for the bill analysis pipeline."""

import logging

from langgraph.graph import END, START, StateGraph

from app.graph.nodes.audit_agent import make_audit_node
from app.graph.nodes.extract_agent import make_extract_node
from app.graph.nodes.letter_agent import make_letter_node
from app.graph.nodes.llm_client import GenerativeCapability
from app.graph.nodes.persist import make_persist_node
from app.graph.reference import BILLING_ERROR_REFERENCE
from app.graph.state import AnalysisState
from app.schemas.bill import AnalysisResult
from app.services.storage import AnalysisStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def build_analysis_graph(
    capability: GenerativeCapability,
    store: AnalysisStore,
    billing_error_reference: str = BILLING_ERROR_REFERENCE,
):
    """Compile the extract -> audit -> letter -> persist graph."""
    graph_builder = StateGraph(AnalysisState)

    # Nodes
    graph_builder.add_node("extract", make_extract_node(capability))
    graph_builder.add_node("audit", make_audit_node(capability, billing_error_reference))
    graph_builder.add_node("letter", make_letter_node(capability))
    graph_builder.add_node("persist", make_persist_node(store))

    # Edges
    graph_builder.add_edge(START, "extract")
    graph_builder.add_edge("extract", "audit")
    graph_builder.add_edge("audit", "letter")
    graph_builder.add_edge("letter", "persist")
    graph_builder.add_edge("persist", END)

    return graph_builder.compile()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def run_analysis_workflow(
    document_data_uri: str,
    capability: GenerativeCapability,
    store: AnalysisStore,
    billing_error_reference: str = BILLING_ERROR_REFERENCE,
) -> AnalysisResult:
    """Execute the full bill analysis graph.

    Args:
        document_data_uri: The uploaded bill as a base64 data URI.
        capability: Generative capability used by every agent node.
        store: Store receiving the finished analysis.
        billing_error_reference: Error taxonomy handed to the audit agent.

    Returns:
        The persisted analysis result.
    """
    workflow = build_analysis_graph(capability, store, billing_error_reference)
    initial_state: AnalysisState = {
        "document_data_uri": document_data_uri,
        "extracted_data": None,
        "error_analysis": None,
        "appeal_letter": "",
        "result": None,
    }

    logger.info("Workflow started — payload_chars=%d", len(document_data_uri))
    final_state = workflow.invoke(initial_state)
    logger.info("Workflow completed")

    return final_state["result"]
