"""LangGraph rendition of the onboarding state machine.

Public API
----------
build_onboarding_graph
    Build and compile the per-turn graph.
TurnState
    The TypedDict flowing through the graph.

Node functions (for advanced customisation):
    read_utterance_node, make_awaiting_node, make_extracting_node,
    confirming_extracted_profile_node, make_interviewing_node,
    make_enriching_node, ready_to_generate_node

Edge functions:
    route_turn
"""

from profile_onboarding.graph.edges import route_turn
from profile_onboarding.graph.graph import HANDLER_NODES, build_onboarding_graph
from profile_onboarding.graph.nodes import (
    confirming_extracted_profile_node,
    make_awaiting_node,
    make_enriching_node,
    make_extracting_node,
    make_interviewing_node,
    read_utterance_node,
    ready_to_generate_node,
    safe_extract,
)
from profile_onboarding.graph.state import TurnState

__all__ = [
    "build_onboarding_graph",
    "HANDLER_NODES",
    "TurnState",
    "route_turn",
    "read_utterance_node",
    "make_awaiting_node",
    "make_extracting_node",
    "confirming_extracted_profile_node",
    "make_interviewing_node",
    "make_enriching_node",
    "ready_to_generate_node",
    "safe_extract",
]
