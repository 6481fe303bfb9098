from typing import List, Optional

from ..constants import ADD_COMMENT_TOOL, CREATE_SLIDE_TOOL
from ..utils.schemas import ConversationTurn


AGENT_RULES = f"""
## Rules
- Only call a tool once you know every argument it needs. If something is missing (for example the text of a comment, or the title of a new slide), ask the user a short clarifying question instead.
- When all arguments are known, call the tool directly. Do not ask for confirmation.
- Use `{ADD_COMMENT_TOOL}` to add a comment to the slide the user is viewing.
- Use `{CREATE_SLIDE_TOOL}` to add a new slide with a title and body content.
- After a successful tool call, respond with a short confirmation of what was done.
- If a tool reports an error, explain it briefly to the user.
"""


def AGENT_SYSTEM_PROMPT(
    analysis_prompt: Optional[str] = None,
    slide_number: Optional[int] = None,
    slide_content: Optional[str] = None,
) -> str:
    """System instruction for the conversational presentation agent."""
    prompt = "You are a presentation assistant working on a Google Slides presentation.\n"

    if analysis_prompt:
        prompt += f'The user wants help improving the presentation based on this goal: "{analysis_prompt}".\n'
    if slide_number is not None:
        prompt += f"The user is currently viewing Slide {slide_number}"
        prompt += f', which contains: "{slide_content}".\n' if slide_content else ".\n"

    return prompt + AGENT_RULES


AGENT_FOLLOWUP_PROMPT = (
    "The requested tools have run. Their results follow. "
    "Reply to the user with a short message describing the outcome."
)


ANALYSIS_SYSTEM_PROMPT = """
You are an expert presentation analyst. You will analyze a Google Slides presentation and provide comments based on a user-provided prompt.

## Instructions
- Based on the prompt, identify slides where changes are suggested and provide a comment for each slide.
- If no changes are needed for a slide, do not include it in the comments.
- Slide numbers are 1-based and must refer to slides present in the content.

## Output Format
Return a JSON object following this exact structure:

```json
{
    "comments": [
        {"slideNumber": 1, "commentText": "Consider adding a stronger call to action on this slide."},
        {"slideNumber": 3, "commentText": "The color scheme on this slide does not align with the brand guidelines."}
    ]
}
```
"""


def ANALYSIS_USER_PROMPT(presentation_content: str, prompt: str) -> str:
    return f"Presentation Content:\n{presentation_content}\n\nPrompt: {prompt}"


ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "comments": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "slideNumber": {"type": "INTEGER"},
                    "commentText": {"type": "STRING"},
                },
                "required": ["slideNumber", "commentText"],
            },
        }
    },
    "required": ["comments"],
}


SUMMARY_SYSTEM_PROMPT = """
You are an assistant that summarizes review comments left on a presentation.
Be concise and actionable. Group related feedback and keep the wording neutral.
"""


def SUMMARY_USER_PROMPT(comments: List[str], summary_type: str, slide_titles: Optional[List[str]] = None) -> str:
    """Build the summarization request for 'overall' or 'slide-by-slide' summaries."""
    if summary_type == "slide-by-slide":
        instruction = "Summarize the comments slide by slide, with one short section per slide that has comments."
    else:
        instruction = "Write a single overall summary of the main themes across all comments."

    prompt = f"{instruction}\n\nComments:\n" + "\n".join(f"- {c}" for c in comments)
    if slide_titles:
        prompt += "\n\nSlide titles:\n" + "\n".join(
            f"{i}. {title}" for i, title in enumerate(slide_titles, start=1)
        )
    return prompt


SUMMARY_SCHEMA = {
    "type": "OBJECT",
    "properties": {"summary": {"type": "STRING"}},
    "required": ["summary"],
}


REFINE_SYSTEM_PROMPT = """
You are a helpful assistant that helps refine an analysis of slide content based on a user-provided prompt.
Analyze the slide content based on the current analysis prompt and the conversation history, and return the refined analysis.
"""


def REFINE_USER_PROMPT(initial_prompt: str, slide_content: str, history: List[ConversationTurn]) -> str:
    prompt = f"Slide Content: {slide_content}\nCurrent Analysis Prompt: {initial_prompt}\nConversation History:\n"
    prompt += "\n".join(f"{turn.role}: {turn.content}" for turn in history)
    return prompt + "\n\nRefined Analysis:"


REFINE_SCHEMA = {
    "type": "OBJECT",
    "properties": {"refinedAnalysis": {"type": "STRING"}},
    "required": ["refinedAnalysis"],
}


RESEARCH_SYSTEM_PROMPT = (
    "You are a helpful research assistant. Use Google Search to answer the user's question "
    "when it requires recent information, and mention the sources you relied on."
)
