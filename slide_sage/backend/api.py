# uvicorn slide_sage.backend.api:app --reload --host 0.0.0.0 --port 8000

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import Field, ValidationError

from ..core.agent import ConversationalAgent
from ..core.analysis import analyze_presentation, apply_comments, refine_analysis, summarize_comments
from ..core.flows import conversational_agent, get_agent
from ..core.research import research_agent
from ..exceptions import ModelInvocationError, PresentationServiceError
from ..services.google_slides import GoogleSlidesService, get_slides_service
from ..utils.schemas import (
    AnalysisComment,
    AnalyzePresentationInput,
    CamelModel,
    ConversationTurn,
    RefineAnalysisInput,
    ResearchInput,
    SummarizeCommentsInput,
)
from ..utils.slides import format_presentation_content

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await get_slides_service().close()
    logger.info("[API] Slides client closed")


app = FastAPI(title="Slide Sage API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ChatRequest(CamelModel):
    prompt: str
    history: List[ConversationTurn] = Field(default_factory=list)
    presentation_id: str
    slide_id: Optional[str] = None
    slide_number: Optional[int] = None
    slide_content: Optional[str] = None
    analysis_prompt: Optional[str] = None


class AnalyzeRequest(CamelModel):
    prompt: str
    presentation_id: Optional[str] = None
    presentation_content: Optional[str] = None


class ApplyCommentsRequest(CamelModel):
    presentation_id: str
    comments: List[AnalysisComment]


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_access_token(authorization: Optional[str] = Header(default=None)) -> str:
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing Google access token")
    return token


def get_optional_access_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    return _bearer_token(authorization)


def get_service() -> GoogleSlidesService:
    return get_slides_service()


def get_chat_agent() -> ConversationalAgent:
    return get_agent()


@app.exception_handler(PresentationServiceError)
async def presentation_error_handler(request: Request, exc: PresentationServiceError):
    return JSONResponse(status_code=exc.status_code or 502, content={"detail": exc.message})


@app.exception_handler(ModelInvocationError)
async def model_error_handler(request: Request, exc: ModelInvocationError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/presentations")
async def list_presentations(
    token: str = Depends(get_access_token),
    service: GoogleSlidesService = Depends(get_service),
):
    files = await service.list_presentations(token)
    return {"count": len(files), "items": [f.model_dump(by_alias=True, exclude_none=True) for f in files]}


@app.get("/presentations/{presentation_id}")
async def get_presentation(
    presentation_id: str,
    token: str = Depends(get_access_token),
    service: GoogleSlidesService = Depends(get_service),
):
    presentation = await service.get_presentation(token, presentation_id)
    return presentation.model_dump(by_alias=True)


@app.post("/agent/chat")
async def chat(
    payload: ChatRequest,
    token: str = Depends(get_access_token),
    agent: ConversationalAgent = Depends(get_chat_agent),
):
    result = await conversational_agent({**payload.model_dump(), "access_token": token}, agent=agent)
    return result.model_dump(by_alias=True, exclude_none=True)


@app.post("/analysis")
async def analyze(
    payload: AnalyzeRequest,
    token: Optional[str] = Depends(get_optional_access_token),
    service: GoogleSlidesService = Depends(get_service),
):
    slide_count = None
    content = payload.presentation_content

    if content is None:
        if not payload.presentation_id:
            raise HTTPException(status_code=422, detail="presentationId or presentationContent is required")
        if not token:
            raise HTTPException(status_code=401, detail="Missing Google access token")
        presentation = await service.get_presentation(token, payload.presentation_id)
        content = format_presentation_content(presentation)
        slide_count = len(presentation.slides)

    result = await analyze_presentation(
        AnalyzePresentationInput(presentation_content=content, prompt=payload.prompt),
        slide_count=slide_count,
    )
    return result.model_dump(by_alias=True)


@app.post("/analysis/apply")
async def apply(
    payload: ApplyCommentsRequest,
    token: str = Depends(get_access_token),
    service: GoogleSlidesService = Depends(get_service),
):
    presentation = await service.get_presentation(token, payload.presentation_id)
    applied = await apply_comments(payload.comments, presentation, token, service)
    return {"applied": [a.model_dump(by_alias=True, exclude_none=True) for a in applied]}


@app.post("/analysis/summary")
async def summarize(payload: SummarizeCommentsInput):
    result = await summarize_comments(payload)
    return result.model_dump(by_alias=True)


@app.post("/analysis/refine")
async def refine(payload: RefineAnalysisInput):
    result = await refine_analysis(payload)
    return result.model_dump(by_alias=True)


@app.post("/research")
async def research(payload: ResearchInput):
    result = await research_agent(payload)
    return result.model_dump(by_alias=True)

