"""
Slide Sage - Runner

Walks through the flows against a real presentation.

Requires:
    SLIDE_SAGE_ACCESS_TOKEN: Google OAuth2 access token with Drive / Slides scopes
    SLIDE_SAGE_PRESENTATION_ID: Presentation to work on
"""

import asyncio
import logging
import os

from dotenv import load_dotenv

from slide_sage.constants import DEFAULT_ANALYSIS_PROMPT
from slide_sage.core import (
    analyze_presentation,
    conversational_agent,
    next_history,
    research_agent,
    summarize_comments,
)
from slide_sage.services import get_slides_service
from slide_sage.utils import format_comments, format_presentation_content

load_dotenv(override=True)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


async def example_analyze(token: str, presentation_id: str):
    """Example 1: Analyze a presentation and summarize the suggestions."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: ANALYZE + SUMMARIZE")
    print("=" * 60 + "\n")

    service = get_slides_service()
    presentation = await service.get_presentation(token, presentation_id)

    result = await analyze_presentation(
        {"presentation_content": format_presentation_content(presentation), "prompt": DEFAULT_ANALYSIS_PROMPT},
        slide_count=len(presentation.slides),
    )
    print(f"\n✅ {len(result.comments)} suggestions for '{presentation.title}':")
    for comment in result.comments:
        print(f"  📄 Slide {comment.slide_number}: {comment.comment_text}")

    if result.comments:
        summary = await summarize_comments({
            "comments": format_comments(result.comments),
            "summary_type": "overall",
            "slide_titles": [s.title for s in presentation.slides],
        })
        print(f"\n📝 Summary:\n{summary.summary}")


async def example_chat(token: str, presentation_id: str):
    """Example 2: Two agent turns on the first slide."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: CONVERSATIONAL AGENT")
    print("=" * 60 + "\n")

    presentation = await get_slides_service().get_presentation(token, presentation_id)
    first = presentation.slides[0]

    history = []
    for prompt in ("What could be improved on this slide?", "Add a comment saying 'tighten the headline'"):
        output = await conversational_agent({
            "prompt": prompt,
            "history": history,
            "presentation_id": presentation_id,
            "slide_id": first.id,
            "slide_number": 1,
            "slide_content": f"{first.title}\n{first.content}",
            "analysis_prompt": DEFAULT_ANALYSIS_PROMPT,
            "access_token": token,
        })
        print(f"👤 {prompt}\n🤖 {output.response}")
        if output.comment_added:
            print(f"   💬 Comment added on slide {output.comment_added.slide_number}")
        history = next_history(history, prompt, output.response)


async def example_research():
    """Example 3: Grounded research question."""
    output = await research_agent({"prompt": "What are current trends in AI-assisted presentation tools?"})
    print(f"\n🔍 {output.response}")


async def main():
    token = os.getenv("SLIDE_SAGE_ACCESS_TOKEN", "")
    presentation_id = os.getenv("SLIDE_SAGE_PRESENTATION_ID", "")

    try:
        await example_analyze(token, presentation_id)
        await example_chat(token, presentation_id)
        await example_research()
    finally:
        await get_slides_service().close()


if __name__ == "__main__":
    asyncio.run(main())
