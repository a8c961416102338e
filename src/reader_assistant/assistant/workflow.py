import logging
from langgraph.graph import StateGraph, START, END
from reader_assistant.assistant.graph.state import GraphState
from reader_assistant.agents import assistant_agent, search_agent

logger = logging.getLogger(__name__)

def route_entry(state: GraphState) -> str:
    """Searches first only when search is enabled for this request."""
    if state.get("search_enabled"):
        logger.debug("Routing from START to Search")
        return "search"
    logger.debug("Routing from START to Generate (search disabled)")
    return "generate"

# --- Build the Graph ---
def create_graph():
    """Creates the LangGraph workflow: optional search, then generate."""
    workflow = StateGraph(GraphState)

    # --- Add Nodes ---
    workflow.add_node("search", search_agent.search_node)
    workflow.add_node("generate", assistant_agent.generate_response_node)

    # --- Define Control Flow ---
    workflow.add_conditional_edges(
        START,
        route_entry,
        {
            "search": "search",
            "generate": "generate",
        },
    )

    # Search never fails the request, so it always hands over to generation
    workflow.add_edge("search", "generate")
    workflow.add_edge("generate", END)

    # Compile the graph
    try:
        graph_app = workflow.compile()
        logger.info("LangGraph query workflow compiled successfully.")
        return graph_app
    except Exception as e:
        logger.error(f"Error compiling LangGraph workflow: {e}", exc_info=True)
        raise

# Create the graph instance
graph_app = create_graph()
