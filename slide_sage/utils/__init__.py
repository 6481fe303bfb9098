"""
Slide Sage Utils Package

Schemas and presentation text helpers.
"""

from .schemas import (
    ConversationTurn,
    ToolCall,
    ToolResult,
    ToolContext,
    AddCommentArgs,
    CreateSlideArgs,
    ModelTurn,
    CommentAdded,
    SlideAdded,
    AgentInput,
    AgentOutput,
    PresentationFile,
    Slide,
    Presentation,
    AnalysisComment,
    AnalyzePresentationInput,
    AnalyzePresentationOutput,
    AppliedComment,
    SummarizeCommentsInput,
    SummarizeCommentsOutput,
    RefineAnalysisInput,
    RefineAnalysisOutput,
    ResearchInput,
    ResearchOutput,
)

from .slides import (
    extract_text_from_page,
    collapse_whitespace,
    slide_from_page,
    format_presentation_content,
    format_comments,
    slide_id_for_number,
)

__all__ = [
    # Schemas
    "ConversationTurn",
    "ToolCall",
    "ToolResult",
    "ToolContext",
    "AddCommentArgs",
    "CreateSlideArgs",
    "ModelTurn",
    "CommentAdded",
    "SlideAdded",
    "AgentInput",
    "AgentOutput",
    "PresentationFile",
    "Slide",
    "Presentation",
    "AnalysisComment",
    "AnalyzePresentationInput",
    "AnalyzePresentationOutput",
    "AppliedComment",
    "SummarizeCommentsInput",
    "SummarizeCommentsOutput",
    "RefineAnalysisInput",
    "RefineAnalysisOutput",
    "ResearchInput",
    "ResearchOutput",
    # Slides
    "extract_text_from_page",
    "collapse_whitespace",
    "slide_from_page",
    "format_presentation_content",
    "format_comments",
    "slide_id_for_number",
]
