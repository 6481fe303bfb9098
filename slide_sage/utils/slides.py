import re
from typing import Any, Dict, Iterable, List, Optional

from .schemas import AnalysisComment, Presentation, Slide


def extract_text_from_page(page: Dict[str, Any]) -> str:
    """
    Concatenate the text runs of every shape on a Slides page.

    Args:
        page: Page resource as returned by the Slides API

    Returns:
        Raw text with the line breaks Slides stores in its text runs
    """
    text = ""
    for element in page.get("pageElements", []) or []:
        shape_text = (element.get("shape") or {}).get("text") or {}
        for text_element in shape_text.get("textElements", []) or []:
            content = (text_element.get("textRun") or {}).get("content")
            if content:
                text += content
    return text


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def slide_from_page(page: Dict[str, Any], index: int) -> Slide:
    """Build a Slide from a page; the first non-empty line is the title."""
    raw = extract_text_from_page(page)
    lines = [line.strip() for line in raw.splitlines() if line.strip()]

    title = lines[0] if lines else f"Slide {index + 1}"
    content = collapse_whitespace(" ".join(lines[1:]))

    return Slide(id=page.get("objectId", ""), title=title, content=content)


def format_presentation_content(presentation: Presentation) -> str:
    """Render a presentation as 'Slide N: title\\ncontent' blocks for analysis prompts."""
    return "\n\n".join(
        f"Slide {i}: {slide.title}\n{slide.content}"
        for i, slide in enumerate(presentation.slides, start=1)
    )


def format_comments(comments: Iterable[AnalysisComment]) -> List[str]:
    return [f"Slide {c.slide_number}: {c.comment_text}" for c in comments]


def slide_id_for_number(presentation: Presentation, slide_number: int) -> Optional[str]:
    """Resolve a 1-based slide number to its page object ID."""
    if 1 <= slide_number <= len(presentation.slides):
        return presentation.slides[slide_number - 1].id
    return None
