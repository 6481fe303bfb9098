"""
Slide Sage Core Module

Agent, tools and flows.
"""

from .agent import ConversationalAgent
from .tools import Tool, AddCommentToSlideTool, CreateSlideTool, default_tools
from .flows import conversational_agent, next_history, get_agent
from .analysis import analyze_presentation, apply_comments, summarize_comments, refine_analysis
from .research import research_agent

__all__ = [
    "ConversationalAgent",
    "Tool",
    "AddCommentToSlideTool",
    "CreateSlideTool",
    "default_tools",
    "conversational_agent",
    "next_history",
    "get_agent",
    "analyze_presentation",
    "apply_comments",
    "summarize_comments",
    "refine_analysis",
    "research_agent",
]
