"""
Analysis flows

Structured-output flows around the presentation review:
- analyze a presentation against a prompt and suggest per-slide comments
- attach suggested comments to their slides
- summarize comments (overall or slide-by-slide)
- refine an analysis conversationally
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..constants import ANALYSIS_TEMPERATURE, SUMMARY_TEMPERATURE
from ..exceptions import ModelInvocationError, PresentationServiceError
from ..models.gemini import gemini_model
from ..services.google_slides import GoogleSlidesService
from ..utils.schemas import (
    AnalysisComment,
    AnalyzePresentationInput,
    AnalyzePresentationOutput,
    AppliedComment,
    ConversationTurn,
    Presentation,
    RefineAnalysisInput,
    RefineAnalysisOutput,
    SummarizeCommentsInput,
    SummarizeCommentsOutput,
)
from ..utils.slides import slide_id_for_number
from .prompts import (
    ANALYSIS_SCHEMA,
    ANALYSIS_SYSTEM_PROMPT,
    ANALYSIS_USER_PROMPT,
    REFINE_SCHEMA,
    REFINE_SYSTEM_PROMPT,
    REFINE_USER_PROMPT,
    SUMMARY_SCHEMA,
    SUMMARY_SYSTEM_PROMPT,
    SUMMARY_USER_PROMPT,
)

logger = logging.getLogger(__name__)


def _parse_json(response_text: str, flow: str) -> Dict[str, Any]:
    try:
        data = json.loads(response_text)
    except json.JSONDecodeError as e:
        raise ModelInvocationError(f"{flow}: model returned invalid JSON") from e
    if not isinstance(data, dict):
        raise ModelInvocationError(f"{flow}: expected a JSON object")
    return data


async def analyze_presentation(
    payload: Union[AnalyzePresentationInput, Dict[str, Any]],
    slide_count: Optional[int] = None,
) -> AnalyzePresentationOutput:
    """
    Analyze a presentation and suggest comments.

    Args:
        payload: Presentation content and analysis prompt
        slide_count: When given, comments for slides outside 1..slide_count are dropped

    Returns:
        AnalyzePresentationOutput with one entry per commented slide
    """
    analysis_input = AnalyzePresentationInput.model_validate(
        payload.model_dump() if isinstance(payload, AnalyzePresentationInput) else payload
    )
    logger.info(f"[ANALYSIS] Analyzing presentation ({len(analysis_input.presentation_content)} chars)")

    response_text = await gemini_model(
        system=ANALYSIS_SYSTEM_PROMPT,
        user=ANALYSIS_USER_PROMPT(analysis_input.presentation_content, analysis_input.prompt),
        temperature=ANALYSIS_TEMPERATURE,
        schema=ANALYSIS_SCHEMA,
    )
    data = _parse_json(response_text, "analysis")

    try:
        output = AnalyzePresentationOutput.model_validate(data)
    except ValidationError as e:
        raise ModelInvocationError(f"analysis: unexpected output shape ({e.error_count()} errors)") from e

    if slide_count is not None:
        kept = [c for c in output.comments if c.slide_number <= slide_count]
        if len(kept) != len(output.comments):
            logger.warning(f"[ANALYSIS] Dropped {len(output.comments) - len(kept)} comments for unknown slides")
        output = AnalyzePresentationOutput(comments=kept)

    logger.info(f"[ANALYSIS] ✅ {len(output.comments)} suggestions")
    return output


async def apply_comments(
    comments: List[AnalysisComment],
    presentation: Presentation,
    access_token: str,
    service: GoogleSlidesService,
) -> List[AppliedComment]:
    """
    Attach analysis comments to their slides, one at a time and in order.

    A failure on one comment is recorded on its entry and does not stop the others.
    """
    applied: List[AppliedComment] = []

    for comment in comments:
        entry = AppliedComment(slide_number=comment.slide_number, comment_text=comment.comment_text)
        slide_id = slide_id_for_number(presentation, comment.slide_number)

        if slide_id is None:
            entry.error = f"Slide {comment.slide_number} does not exist"
        else:
            try:
                entry.comment_id = await service.create_comment(
                    access_token, presentation.id, slide_id, comment.comment_text
                )
            except PresentationServiceError as e:
                logger.error(f"[ANALYSIS] ❌ Comment on slide {comment.slide_number} failed: {e}")
                entry.error = f"Failed to add comment. Error: {e.message}"

        applied.append(entry)

    failed = sum(1 for a in applied if a.error)
    logger.info(f"[ANALYSIS] Applied {len(applied) - failed}/{len(applied)} comments")
    return applied


async def summarize_comments(payload: Union[SummarizeCommentsInput, Dict[str, Any]]) -> SummarizeCommentsOutput:
    """Summarize comments overall or slide by slide."""
    summary_input = SummarizeCommentsInput.model_validate(
        payload.model_dump() if isinstance(payload, SummarizeCommentsInput) else payload
    )
    logger.info(f"[SUMMARY] {summary_input.summary_type} summary of {len(summary_input.comments)} comments")

    response_text = await gemini_model(
        system=SUMMARY_SYSTEM_PROMPT,
        user=SUMMARY_USER_PROMPT(
            summary_input.comments,
            summary_input.summary_type,
            summary_input.slide_titles,
        ),
        temperature=SUMMARY_TEMPERATURE,
        schema=SUMMARY_SCHEMA,
    )
    data = _parse_json(response_text, "summary")

    summary = data.get("summary")
    if not isinstance(summary, str):
        raise ModelInvocationError("summary: missing 'summary' field")
    return SummarizeCommentsOutput(summary=summary)


async def refine_analysis(payload: Union[RefineAnalysisInput, Dict[str, Any]]) -> RefineAnalysisOutput:
    """
    Refine the analysis of a slide from the conversation so far.

    The returned history is the input history plus the refined analysis as an assistant turn.
    """
    refine_input = RefineAnalysisInput.model_validate(
        payload.model_dump() if isinstance(payload, RefineAnalysisInput) else payload
    )

    response_text = await gemini_model(
        system=REFINE_SYSTEM_PROMPT,
        user=REFINE_USER_PROMPT(
            refine_input.initial_prompt,
            refine_input.slide_content,
            refine_input.conversation_history,
        ),
        temperature=ANALYSIS_TEMPERATURE,
        schema=REFINE_SCHEMA,
    )
    data = _parse_json(response_text, "refine")

    refined = data.get("refinedAnalysis")
    if not isinstance(refined, str):
        raise ModelInvocationError("refine: missing 'refinedAnalysis' field")

    history = [
        *refine_input.conversation_history,
        ConversationTurn(role="assistant", content=refined),
    ]
    return RefineAnalysisOutput(refined_analysis=refined, conversation_history=history)
