"""Build the onboarding StateGraph.

``build_onboarding_graph()`` wires one node per conversation state behind a
single routing edge.  A turn is one pass through the graph::

    START -> read_utterance -> (route_turn) -> <state handler> -> END
"""

from typing import Any

from langgraph.graph import END, START, StateGraph

from profile_onboarding.graph.edges import route_turn
from profile_onboarding.graph.nodes import (
    Extractor,
    Summarizer,
    confirming_extracted_profile_node,
    make_awaiting_node,
    make_enriching_node,
    make_extracting_node,
    make_interviewing_node,
    read_utterance_node,
    ready_to_generate_node,
)
from profile_onboarding.graph.state import TurnState
from profile_onboarding.infrastructure.config import ConversationConfig

HANDLER_NODES = (
    "awaiting_url_or_name",
    "extracting_from_url",
    "confirming_extracted_profile",
    "interviewing_user",
    "enriching_with_url",
    "ready_to_generate",
)


def build_onboarding_graph(
    extractor: Extractor,
    config: ConversationConfig | None = None,
    summarizer: Summarizer | None = None,
) -> Any:
    """Build and compile the onboarding StateGraph.

    Parameters
    ----------
    extractor:
        Extraction collaborator, any ``url -> ExtractionResult`` callable
        (``BaseExtractor`` instances qualify).
    config:
        Conversation settings; defaults to ``ConversationConfig()``.
    summarizer:
        Optional replacement for ``generate_extraction_summary``.

    Returns
    -------
    CompiledStateGraph
        A compiled graph ready for ``.invoke()``.
    """
    config = config or ConversationConfig()
    config.validate()

    graph = StateGraph(TurnState)

    graph.add_node("read_utterance", read_utterance_node)
    graph.add_node("awaiting_url_or_name", make_awaiting_node(config))
    graph.add_node("extracting_from_url", make_extracting_node(extractor, config, summarizer))
    graph.add_node("confirming_extracted_profile", confirming_extracted_profile_node)
    graph.add_node("interviewing_user", make_interviewing_node(config))
    graph.add_node("enriching_with_url", make_enriching_node(extractor, config))
    graph.add_node("ready_to_generate", ready_to_generate_node)

    graph.add_edge(START, "read_utterance")
    graph.add_conditional_edges(
        "read_utterance",
        route_turn,
        {name: name for name in HANDLER_NODES},
    )
    for name in HANDLER_NODES:
        graph.add_edge(name, END)

    return graph.compile()
