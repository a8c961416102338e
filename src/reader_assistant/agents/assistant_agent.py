import logging
from langchain_core.runnables import RunnableConfig
from reader_assistant.assistant.graph.state import GraphState
from reader_assistant.llms.provider import call_vision_model

logger = logging.getLogger(__name__)

# --- Generate Response ---
async def generate_response_node(state: GraphState, config: RunnableConfig) -> dict:
    """
    Calls the selected vision model with the (possibly search-augmented) prompt.
    Errors propagate unchanged: the primary answer is not optional.
    """
    logger.info("--- Assistant: Generating Response Node ---")
    configurable = config.get("configurable", {})
    result = await call_vision_model(
        configurable["http_client"],
        configurable["settings"],
        state["image"],
        state.get("prompt_for_model") or state["prompt"],
        state["provider"],
        state.get("model"),
    )
    logger.info(f"Assistant generated response with {result.provider}/{result.model}.")
    return {"result": result}
