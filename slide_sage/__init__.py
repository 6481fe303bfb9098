"""
Slide Sage Package

LLM assistants over Google Slides presentations: analysis, comment summaries,
conversational refinement, a tool-using agent that comments on and creates
slides, and web-search-grounded research.
"""

__version__ = "0.1.0"

# Core flows
from slide_sage.core import (
    ConversationalAgent,
    conversational_agent,
    next_history,
    analyze_presentation,
    apply_comments,
    summarize_comments,
    refine_analysis,
    research_agent,
)

# Schemas
from slide_sage.utils.schemas import (
    ConversationTurn,
    AgentInput,
    AgentOutput,
    CommentAdded,
    SlideAdded,
    Presentation,
    Slide,
)

# Services
from slide_sage.services import GoogleSlidesService, get_slides_service

# Errors
from slide_sage.exceptions import (
    SlideSageError,
    ToolExecutionError,
    PresentationServiceError,
    ModelInvocationError,
)

__all__ = [
    # Core flows
    "ConversationalAgent",
    "conversational_agent",
    "next_history",
    "analyze_presentation",
    "apply_comments",
    "summarize_comments",
    "refine_analysis",
    "research_agent",
    # Schemas
    "ConversationTurn",
    "AgentInput",
    "AgentOutput",
    "CommentAdded",
    "SlideAdded",
    "Presentation",
    "Slide",
    # Services
    "GoogleSlidesService",
    "get_slides_service",
    # Errors
    "SlideSageError",
    "ToolExecutionError",
    "PresentationServiceError",
    "ModelInvocationError",
]
