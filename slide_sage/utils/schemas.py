"""
Slide Sage Schemas

Pydantic models for conversations, agent calls, tools and presentations.
Wire-facing models serialize with camelCase aliases (slideNumber, commentText, ...).
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Conversation
# ============================================================================

class ConversationTurn(CamelModel):
    """A single message in a conversation."""
    role: Literal["user", "assistant"]
    content: str


# ============================================================================
# Tools
# ============================================================================

class ToolCall(CamelModel):
    """Tool invocation requested by the model."""
    name: str = Field(description="Name of the declared tool")
    args: Dict[str, Any] = Field(default_factory=dict, description="Arguments matching the tool's input schema")


class ToolResult(CamelModel):
    """Structured outcome of a tool execution.

    `message` is what the model reads; `slide_id` is set when a slide was created.
    """
    ok: bool
    message: str
    slide_id: Optional[str] = None


class ToolContext(BaseModel):
    """
    Routing and credential fields for tool execution.

    Built from caller input only. Tool argument models never carry these fields,
    so model output cannot redirect a tool to another presentation or slide.
    """
    model_config = ConfigDict(frozen=True)

    presentation_id: Optional[str] = None
    slide_id: Optional[str] = None
    slide_number: Optional[int] = None
    access_token: Optional[str] = Field(default=None, repr=False)


class AddCommentArgs(CamelModel):
    """Arguments of the add-comment tool."""
    comment_text: str = Field(min_length=1, description="The constructive feedback or comment to add to the slide.")
    slide_number: Optional[int] = Field(default=None, ge=1, description="The slide number the comment applies to.")


class CreateSlideArgs(CamelModel):
    """Arguments of the create-slide tool."""
    title: str = Field(min_length=1, description="The title of the new slide.")
    content: str = Field(description="The body text of the new slide.")


class ModelTurn(CamelModel):
    """Text and tool calls returned by one model invocation."""
    text: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)


# ============================================================================
# Agent
# ============================================================================

class CommentAdded(CamelModel):
    slide_number: Optional[int] = None
    comment_text: str


class SlideAdded(CamelModel):
    slide_id: str


class AgentInput(CamelModel):
    """Input of the conversational agent."""
    prompt: str = Field(min_length=1, description="The user's latest message.")
    history: List[ConversationTurn] = Field(default_factory=list, description="The history of the conversation.")
    presentation_id: str = Field(min_length=1, description="The ID of the Google Slides presentation.")
    slide_id: Optional[str] = Field(default=None, description="The ID of the current slide page object.")
    slide_number: Optional[int] = Field(default=None, ge=1, description="The current slide number being viewed.")
    slide_content: Optional[str] = Field(default=None, description="The text content of the current slide.")
    analysis_prompt: Optional[str] = Field(default=None, description="The overall analysis goal set by the user.")
    access_token: str = Field(min_length=1, repr=False, description="The Google OAuth2 access token for API calls.")

    def tool_context(self) -> ToolContext:
        return ToolContext(
            presentation_id=self.presentation_id,
            slide_id=self.slide_id,
            slide_number=self.slide_number,
            access_token=self.access_token,
        )


class AgentOutput(CamelModel):
    """Output of the conversational agent."""
    response: str = Field(description="The agent's response to the user.")
    comment_added: Optional[CommentAdded] = Field(default=None, description="The comment that was added, if any.")
    slide_added: Optional[SlideAdded] = Field(default=None, description="The slide that was created, if any.")


# ============================================================================
# Presentations
# ============================================================================

class PresentationFile(CamelModel):
    """Drive listing entry for a presentation."""
    id: str
    name: str
    thumbnail_link: Optional[str] = None


class Slide(CamelModel):
    id: str = Field(description="Slide page object ID")
    title: str
    content: str = ""


class Presentation(CamelModel):
    id: str
    title: str
    slides: List[Slide] = Field(default_factory=list)


# ============================================================================
# Analysis flows
# ============================================================================

class AnalysisComment(CamelModel):
    """Comment suggested by the analysis flow."""
    slide_number: int = Field(ge=1, description="The slide number the comment applies to.")
    comment_text: str = Field(description="The comment text suggested by the LLM.")


class AnalyzePresentationInput(CamelModel):
    presentation_content: str = Field(description="The entire text of the Google Slides presentation.")
    prompt: str = Field(min_length=1, description="The prompt to use for analyzing the presentation (e.g., brand consistency).")


class AnalyzePresentationOutput(CamelModel):
    comments: List[AnalysisComment] = Field(default_factory=list)


class AppliedComment(CamelModel):
    """Result of attaching one analysis comment to its slide."""
    slide_number: int
    comment_text: str
    comment_id: Optional[str] = None
    error: Optional[str] = None


class SummarizeCommentsInput(CamelModel):
    comments: List[str] = Field(min_length=1, description="Comments formatted as 'Slide N: text'.")
    summary_type: Literal["overall", "slide-by-slide"] = "overall"
    slide_titles: Optional[List[str]] = None


class SummarizeCommentsOutput(CamelModel):
    summary: str


class RefineAnalysisInput(CamelModel):
    initial_prompt: str = Field(min_length=1, description="The initial analysis prompt provided by the user.")
    slide_content: str = Field(description="The content of the slide to be analyzed.")
    conversation_history: List[ConversationTurn] = Field(default_factory=list)


class RefineAnalysisOutput(CamelModel):
    refined_analysis: str
    conversation_history: List[ConversationTurn]


class ResearchInput(CamelModel):
    prompt: str = Field(min_length=1, description="The user's query or question.")
    history: List[ConversationTurn] = Field(default_factory=list)


class ResearchOutput(CamelModel):
    response: str
