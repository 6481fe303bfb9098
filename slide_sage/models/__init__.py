"""
Slide Sage Models Module

AI model integrations.
"""

from .gemini import GeminiChatModel, gemini_model

__all__ = [
    "GeminiChatModel",
    "gemini_model",
]
