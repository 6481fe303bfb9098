"""
Slide Sage Tool Definitions

Callable units the conversational agent exposes to the model. Arguments come
from the model; presentation, slide and credentials come from the ToolContext
built from caller input.

Tools never raise from `run`: context errors, invalid arguments and upstream
API failures all become a failure ToolResult the model can read.
"""

import logging
from typing import Any, Dict, List, Type

from google.genai import types
from pydantic import BaseModel, ValidationError

from ..constants import ADD_COMMENT_TOOL, CREATE_SLIDE_TOOL
from ..exceptions import PresentationServiceError, ToolExecutionError
from ..services.google_slides import GoogleSlidesService
from ..utils.schemas import AddCommentArgs, CreateSlideArgs, ToolContext, ToolResult

logger = logging.getLogger(__name__)


class Tool:
    """Base class for agent tools."""

    name: str = ""
    description: str = ""
    args_model: Type[BaseModel] = BaseModel
    failure_message: str = "Tool failed."

    def __init__(self, service: GoogleSlidesService):
        self.service = service

    def parameters(self) -> Dict[str, Any]:
        """JSON schema of the camelCase arguments, derived from the args model."""
        return self.args_model.model_json_schema(by_alias=True)

    def declaration(self) -> types.FunctionDeclaration:
        return types.FunctionDeclaration(
            name=self.name,
            description=self.description,
            parameters_json_schema=self.parameters(),
        )

    async def execute(self, args: Any, context: ToolContext) -> ToolResult:
        raise NotImplementedError

    async def run(self, raw_args: Dict[str, Any], context: ToolContext) -> ToolResult:
        """
        Validate model-supplied arguments and execute the tool.

        Args:
            raw_args: Arguments from the model's function call
            context: Caller-supplied routing and credentials

        Returns:
            ToolResult describing success or failure
        """
        try:
            args = self.args_model.model_validate(raw_args or {})
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            logger.warning(f"[TOOL] {self.name} called with invalid arguments: {fields}")
            return ToolResult(ok=False, message=f"Error: Invalid arguments for {self.name} ({fields}).")

        try:
            result = await self.execute(args, context)
        except ToolExecutionError as e:
            logger.warning(f"[TOOL] {self.name} missing context: {e}")
            return ToolResult(ok=False, message=f"Error: {e}")
        except PresentationServiceError as e:
            logger.error(f"[TOOL] ❌ {self.name} failed: {e}")
            return ToolResult(ok=False, message=f"{self.failure_message} Error: {e.message}")

        logger.info(f"[TOOL] ✅ {self.name}: {result.message}")
        return result


class AddCommentToSlideTool(Tool):
    name = ADD_COMMENT_TOOL
    description = (
        "Adds a comment to the slide the user is currently viewing. "
        "Only call this once the text of the comment is known."
    )
    args_model = AddCommentArgs
    failure_message = "Failed to add comment."

    async def execute(self, args: AddCommentArgs, context: ToolContext) -> ToolResult:
        if not (context.presentation_id and context.slide_id and context.access_token):
            raise ToolExecutionError("Missing presentation, slide, or authentication details.")

        await self.service.create_comment(
            context.access_token,
            context.presentation_id,
            context.slide_id,
            args.comment_text,
        )

        # The comment is anchored to the context slide, whatever number the model passed
        target = f"slide {context.slide_number}" if context.slide_number else "the current slide"
        return ToolResult(ok=True, message=f"Successfully added comment to {target}.")


class CreateSlideTool(Tool):
    name = CREATE_SLIDE_TOOL
    description = (
        "Creates a new slide at the end of the presentation with a title and body content. "
        "Only call this once both the title and the content are known."
    )
    args_model = CreateSlideArgs
    failure_message = "Failed to create slide."

    async def execute(self, args: CreateSlideArgs, context: ToolContext) -> ToolResult:
        if not (context.presentation_id and context.access_token):
            raise ToolExecutionError("Missing presentation or authentication details.")

        slide_id = await self.service.create_slide(
            context.access_token,
            context.presentation_id,
            args.title,
            args.content,
        )
        return ToolResult(
            ok=True,
            message=f"Successfully created slide with ID {slide_id}.",
            slide_id=slide_id,
        )


def default_tools(service: GoogleSlidesService) -> List[Tool]:
    """Tool set of the conversational agent."""
    return [AddCommentToSlideTool(service), CreateSlideTool(service)]
