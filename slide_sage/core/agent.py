"""
Conversational Agent Orchestrator

Builds the model prompt, attaches tools and history, invokes the model once,
executes the requested tool calls in order and assembles the AgentOutput.
"""

import logging
from typing import List, Optional, Tuple

from ..constants import ADD_COMMENT_TOOL, AGENT_TEMPERATURE, CREATE_SLIDE_TOOL
from ..exceptions import ModelInvocationError
from ..models.gemini import GeminiChatModel
from ..services.google_slides import GoogleSlidesService, get_slides_service
from ..utils.schemas import (
    AddCommentArgs,
    AgentInput,
    AgentOutput,
    CommentAdded,
    ConversationTurn,
    SlideAdded,
    ToolCall,
    ToolContext,
    ToolResult,
)
from .prompts import AGENT_FOLLOWUP_PROMPT, AGENT_SYSTEM_PROMPT
from .tools import Tool, default_tools

logger = logging.getLogger(__name__)


class ConversationalAgent:
    """
    Tool-using presentation agent.

    Flow per call:
    1. Compose the system instruction from the analysis goal and current slide
    2. Invoke the model with history, the new prompt and the tool declarations
    3. Execute requested tool calls sequentially, in the order returned
    4. If tools ran but the model produced no text, ask it once more (no tools)
       to phrase the outcome

    When the model calls the same tool kind more than once, the last successful
    call is the one surfaced in `comment_added` / `slide_added`.

    The agent holds no per-conversation state; callers resubmit history.
    """

    def __init__(
        self,
        model=None,
        service: Optional[GoogleSlidesService] = None,
        tools: Optional[List[Tool]] = None,
        temperature: float = AGENT_TEMPERATURE,
    ):
        self.model = model or GeminiChatModel()
        self.service = service or get_slides_service()
        self.tools = tools if tools is not None else default_tools(self.service)
        self.temperature = temperature
        self._tools_by_name = {tool.name: tool for tool in self.tools}

    async def run(self, agent_input: AgentInput) -> AgentOutput:
        """
        Run one conversational turn.

        Args:
            agent_input: Validated agent input

        Returns:
            AgentOutput with the response text and any surfaced side effects

        Raises:
            ModelInvocationError: If the primary model call fails
        """
        system_instruction = AGENT_SYSTEM_PROMPT(
            analysis_prompt=agent_input.analysis_prompt,
            slide_number=agent_input.slide_number,
            slide_content=agent_input.slide_content,
        )
        history = [*agent_input.history, ConversationTurn(role="user", content=agent_input.prompt)]

        logger.info(f"[AGENT] Turn with {len(agent_input.history)} prior messages")

        turn = await self.model.generate(
            system_instruction=system_instruction,
            history=history,
            tools=[tool.declaration() for tool in self.tools],
            temperature=self.temperature,
        )

        context = agent_input.tool_context()
        comment_added: Optional[CommentAdded] = None
        slide_added: Optional[SlideAdded] = None
        executed: List[Tuple[ToolCall, ToolResult]] = []

        for call in turn.tool_calls:
            result = await self._run_tool(call, context)
            executed.append((call, result))

            if not result.ok:
                continue
            if call.name == ADD_COMMENT_TOOL:
                args = AddCommentArgs.model_validate(call.args)
                comment_added = CommentAdded(
                    slide_number=args.slide_number or agent_input.slide_number,
                    comment_text=args.comment_text,
                )
            elif call.name == CREATE_SLIDE_TOOL and result.slide_id:
                slide_added = SlideAdded(slide_id=result.slide_id)

        response = turn.text
        if executed and not response.strip():
            response = await self._describe_tool_results(system_instruction, history, executed)

        logger.info(
            f"[AGENT] ✅ Done ({len(executed)} tool call(s), "
            f"comment={'yes' if comment_added else 'no'}, slide={'yes' if slide_added else 'no'})"
        )
        return AgentOutput(response=response, comment_added=comment_added, slide_added=slide_added)

    async def _run_tool(self, call: ToolCall, context: ToolContext) -> ToolResult:
        tool = self._tools_by_name.get(call.name)
        if tool is None:
            logger.warning(f"[AGENT] Model requested unknown tool: {call.name}")
            return ToolResult(ok=False, message=f"Error: Unknown tool {call.name}.")

        logger.info(f"[AGENT] Executing {call.name}")
        return await tool.run(call.args, context)

    async def _describe_tool_results(
        self,
        system_instruction: str,
        history: List[ConversationTurn],
        executed: List[Tuple[ToolCall, ToolResult]],
    ) -> str:
        """Single follow-up turn so the model can phrase the tool outcome."""
        fallback = " ".join(result.message for _, result in executed)
        try:
            followup = await self.model.generate(
                system_instruction=f"{system_instruction}\n{AGENT_FOLLOWUP_PROMPT}",
                history=history,
                tools=None,
                temperature=self.temperature,
                tool_results=executed,
            )
        except ModelInvocationError as e:
            # Tool side effects are already applied
            logger.error(f"[AGENT] Follow-up model call failed, using tool messages: {e}")
            return fallback

        return followup.text if followup.text.strip() else fallback
