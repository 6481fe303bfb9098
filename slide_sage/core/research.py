"""Web-search-grounded research chat."""

import logging
from typing import Any, Dict, Optional, Union

from ..models.gemini import GeminiChatModel
from ..utils.schemas import ConversationTurn, ResearchInput, ResearchOutput
from .prompts import RESEARCH_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


async def research_agent(
    payload: Union[ResearchInput, Dict[str, Any]],
    model: Optional[GeminiChatModel] = None,
) -> ResearchOutput:
    """
    Answer a question, grounding the model with Google Search.

    Args:
        payload: The user's question and prior conversation
        model: Chat model, defaults to a Gemini model from environment configuration

    Returns:
        ResearchOutput with the model's answer
    """
    research_input = ResearchInput.model_validate(
        payload.model_dump() if isinstance(payload, ResearchInput) else payload
    )
    history = [*research_input.history, ConversationTurn(role="user", content=research_input.prompt)]

    logger.info(f"[RESEARCH] Query with {len(research_input.history)} prior messages")
    turn = await (model or GeminiChatModel()).generate(
        system_instruction=RESEARCH_SYSTEM_PROMPT,
        history=history,
        google_search=True,
    )
    return ResearchOutput(response=turn.text)
