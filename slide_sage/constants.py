"""
Constants for Slide Sage

Google API endpoints, mime types and tool names shared across the package.
Keeping them here prevents naming mismatches between tools, prompts and the API layer.
"""

# Google REST endpoints
SLIDES_API_URL = "https://slides.googleapis.com/v1/presentations"
DRIVE_API_URL = "https://www.googleapis.com/drive/v3/files"

PRESENTATION_MIME_TYPE = "application/vnd.google-apps.presentation"

# Layout used for conversationally created slides
DEFAULT_SLIDE_LAYOUT = "TITLE_AND_BODY"

# Tool names exposed to the model
ADD_COMMENT_TOOL = "addCommentToSlide"
CREATE_SLIDE_TOOL = "createSlide"

# Sampling
AGENT_TEMPERATURE = 0.1  # Tool-bearing turns stay near-deterministic
ANALYSIS_TEMPERATURE = 0.2
SUMMARY_TEMPERATURE = 0.3

DEFAULT_ANALYSIS_PROMPT = (
    "Check for brand identity consistency. Our brand uses a confident and professional tone, "
    "with blue and green as primary colors. Ensure all text is concise."
)
