"""
Flow entry points.

Validate input against the declared schema, run the flow, validate the output.
Malformed input raises pydantic.ValidationError before anything executes.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from ..utils.schemas import AgentInput, AgentOutput, ConversationTurn
from .agent import ConversationalAgent

logger = logging.getLogger(__name__)

_default_agent: Optional[ConversationalAgent] = None


def get_agent() -> ConversationalAgent:
    """Get the shared agent built from environment configuration."""
    global _default_agent
    if _default_agent is None:
        _default_agent = ConversationalAgent()
    return _default_agent


async def conversational_agent(
    payload: Union[AgentInput, Dict[str, Any]],
    agent: Optional[ConversationalAgent] = None,
) -> AgentOutput:
    """
    Run the conversational agent for one user message.

    Args:
        payload: AgentInput or a dict using snake_case or camelCase keys
        agent: Agent to use, defaults to the shared one

    Returns:
        Validated AgentOutput

    Raises:
        pydantic.ValidationError: If the payload or the produced output is malformed
        ModelInvocationError: If the model call fails
    """
    agent_input = AgentInput.model_validate(
        payload.model_dump() if isinstance(payload, AgentInput) else payload
    )
    output = await (agent or get_agent()).run(agent_input)
    return AgentOutput.model_validate(output.model_dump())


def next_history(history: Sequence[ConversationTurn], prompt: str, response: str) -> List[ConversationTurn]:
    """
    History to submit on the next call.

    Returns a new list; the given history is left untouched and is a strict prefix of the result.
    """
    return [
        *history,
        ConversationTurn(role="user", content=prompt),
        ConversationTurn(role="assistant", content=response),
    ]
