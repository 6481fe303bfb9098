"""
Gemini model boundary.

Everything that talks to google-genai lives here so flows and the agent only
see ConversationTurn / ToolCall / ModelTurn.
"""

import re
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from google.genai import errors as genai_errors
from google.genai import types

from ..core.config import get_genai_client, get_model_name
from ..exceptions import ModelInvocationError
from ..utils.schemas import ConversationTurn, ModelTurn, ToolCall, ToolResult

logger = logging.getLogger(__name__)


def to_contents(history: Sequence[ConversationTurn]) -> List[types.Content]:
    """Map conversation turns onto Gemini contents ('assistant' becomes 'model')."""
    return [
        types.Content(
            role="model" if turn.role == "assistant" else "user",
            parts=[types.Part.from_text(text=turn.content)],
        )
        for turn in history
    ]


def tool_exchange_contents(tool_results: Sequence[Tuple[ToolCall, ToolResult]]) -> List[types.Content]:
    """Contents replaying executed tool calls and their results to the model."""
    calls = types.Content(
        role="model",
        parts=[types.Part.from_function_call(name=call.name, args=call.args) for call, _ in tool_results],
    )
    responses = types.Content(
        role="user",
        parts=[
            types.Part.from_function_response(
                name=call.name,
                response={"result": result.message} if result.ok else {"error": result.message},
            )
            for call, result in tool_results
        ],
    )
    return [calls, responses]


def parse_response(response: types.GenerateContentResponse) -> ModelTurn:
    """Split a response into visible text and function calls, in the order returned."""
    text_parts: List[str] = []
    tool_calls: List[ToolCall] = []

    candidates = response.candidates or []
    content = candidates[0].content if candidates else None
    for part in (content.parts if content and content.parts else []):
        if part.function_call:
            tool_calls.append(
                ToolCall(name=part.function_call.name or "", args=dict(part.function_call.args or {}))
            )
        elif part.text and not part.thought:
            text_parts.append(part.text)

    return ModelTurn(text="".join(text_parts), tool_calls=tool_calls)


class GeminiChatModel:
    """
    Chat model backed by Gemini with manual function calling.

    Tool declarations are sent to the model but never executed by the SDK:
    the caller receives the requested calls and runs them itself.
    """

    def __init__(self, model: Optional[str] = None, client=None):
        self.model = model or get_model_name()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    async def generate(
        self,
        system_instruction: str,
        history: Sequence[ConversationTurn],
        tools: Optional[List[types.FunctionDeclaration]] = None,
        temperature: Optional[float] = None,
        tool_results: Optional[Sequence[Tuple[ToolCall, ToolResult]]] = None,
        google_search: bool = False,
    ) -> ModelTurn:
        """
        Run one model turn.

        Args:
            system_instruction: System instruction that defines model behavior
            history: Conversation so far, ending with the latest user message
            tools: Function declarations the model may call
            temperature: Sampling temperature
            tool_results: Executed tool calls to replay after the history
            google_search: Ground the answer with Google Search

        Returns:
            ModelTurn with the response text and any requested tool calls

        Raises:
            ModelInvocationError: If the provider call fails
        """
        contents = to_contents(history)
        if tool_results:
            contents.extend(tool_exchange_contents(tool_results))

        config_params: Dict[str, Any] = {"system_instruction": system_instruction}
        if temperature is not None:
            config_params["temperature"] = temperature

        config_tools: List[types.Tool] = []
        if tools:
            config_tools.append(types.Tool(function_declarations=list(tools)))
            config_params["automatic_function_calling"] = types.AutomaticFunctionCallingConfig(disable=True)
        if google_search:
            config_tools.append(types.Tool(google_search=types.GoogleSearch()))
        if config_tools:
            config_params["tools"] = config_tools

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(**config_params),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error(f"[MODEL] ❌ {self.model} call failed: {e}")
            raise ModelInvocationError(f"Model call failed: {e}") from e

        turn = parse_response(response)
        logger.debug(f"[MODEL] {len(turn.text)} chars, {len(turn.tool_calls)} tool call(s)")
        return turn


async def gemini_model(
    system: str,
    user: str,
    temperature: Optional[float] = None,
    model: Optional[str] = None,
    schema: Optional[Dict[str, Any]] = None,
    extra_config: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Calls a Gemini model and returns cleaned response text.

    Args:
        system: System instruction that defines model behavior
        user: User prompt/message
        temperature: Sampling temperature (0.0-2.0)
        model: Model ID, defaults to SLIDE_SAGE_MODEL
        schema: Optional JSON schema for structured output
        extra_config: Optional additional config parameters (max_output_tokens, top_p, etc.)

    Returns:
        Response text with markdown fences and thinking tokens stripped

    Raises:
        ModelInvocationError: If the call fails or returns no text
    """
    model = model or get_model_name()

    config_params: Dict[str, Any] = {
        "system_instruction": [system] if system else None,
    }
    if temperature is not None:
        config_params["temperature"] = temperature
    if schema:
        config_params["response_mime_type"] = "application/json"
        config_params["response_schema"] = schema
    if extra_config:
        config_params.update(extra_config)

    try:
        response = await get_genai_client().aio.models.generate_content(
            model=model,
            contents=user,
            config=types.GenerateContentConfig(**config_params),
        )
    except (genai_errors.APIError, httpx.HTTPError) as e:
        logger.error(f"[MODEL] ❌ {model} call failed: {e}")
        raise ModelInvocationError(f"Model call failed: {e}") from e

    if not response.text:
        raise ModelInvocationError(f"Model {model} returned an empty response")

    return re.sub(r'^.*?</think>\s*|```json\s*|\s*```', '', response.text, flags=re.DOTALL).strip()
