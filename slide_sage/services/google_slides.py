"""
Google Slides Service - Async wrapper for the Drive and Slides REST APIs.

Every operation takes the caller's OAuth access token explicitly; the service
holds only the pooled HTTP client.
"""

import json
import uuid
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..constants import (
    DEFAULT_SLIDE_LAYOUT,
    DRIVE_API_URL,
    PRESENTATION_MIME_TYPE,
    SLIDES_API_URL,
)
from ..core.config import get_http_timeout
from ..exceptions import PresentationServiceError
from ..utils.schemas import Presentation, PresentationFile
from ..utils.slides import slide_from_page

logger = logging.getLogger(__name__)

# Global singleton
_slides_service_instance = None


def get_slides_service() -> 'GoogleSlidesService':
    """Get singleton instance of GoogleSlidesService."""
    global _slides_service_instance
    if _slides_service_instance is None:
        _slides_service_instance = GoogleSlidesService()
    return _slides_service_instance


def new_object_id(prefix: str) -> str:
    # Slides object IDs must be 5-50 characters
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


class GoogleSlidesService:
    """
    Presentation service client for Google Drive / Slides.

    Non-success responses raise PresentationServiceError; nothing is retried.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        self._client = client
        self.timeout = timeout if timeout is not None else get_http_timeout()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    @staticmethod
    def _auth_headers(access_token: str) -> Dict[str, str]:
        if not access_token:
            raise PresentationServiceError("Missing Google access token", status_code=401)
        return {"Authorization": f"Bearer {access_token}"}

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text or resp.reason_phrase
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return resp.text or resp.reason_phrase

    async def _request(self, method: str, url: str, access_token: str, **kwargs) -> Dict[str, Any]:
        """
        Perform an authenticated request and return the decoded JSON body.

        Raises:
            PresentationServiceError: On transport failure or any non-2xx status
        """
        headers = self._auth_headers(access_token)
        try:
            resp = await self._get_client().request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise PresentationServiceError(f"Request to Google API failed: {e}") from e

        if not resp.is_success:
            message = self._error_message(resp)
            logger.warning(f"[SLIDES] {method} {url} -> {resp.status_code}: {message}")
            raise PresentationServiceError(message, status_code=resp.status_code)

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"[SLIDES] {method} {url} -> {resp.status_code}: non-JSON body")
            raise PresentationServiceError("Invalid response from Google API", status_code=resp.status_code) from e

    async def list_presentations(self, access_token: str) -> List[PresentationFile]:
        """List the presentations visible to the authenticated user."""
        params = {
            "q": f"mimeType = '{PRESENTATION_MIME_TYPE}' and trashed = false",
            "fields": "files(id,name,thumbnailLink)",
        }
        body = await self._request("GET", DRIVE_API_URL, access_token, params=params)
        files = [PresentationFile.model_validate(f) for f in body.get("files", [])]

        logger.info(f"[SLIDES] Listed {len(files)} presentations")
        return files

    async def get_presentation(self, access_token: str, presentation_id: str) -> Presentation:
        """
        Fetch a presentation with the text of each slide.

        Args:
            access_token: Google OAuth2 access token
            presentation_id: Presentation (Drive file) ID

        Returns:
            Presentation with slides in deck order
        """
        body = await self._request("GET", f"{SLIDES_API_URL}/{presentation_id}", access_token)
        pages = body.get("slides", []) or []

        return Presentation(
            id=body.get("presentationId", presentation_id),
            title=body.get("title", ""),
            slides=[slide_from_page(page, i) for i, page in enumerate(pages)],
        )

    async def get_slide_thumbnail(self, access_token: str, presentation_id: str, page_object_id: str) -> str:
        """Return the content URL of a slide thumbnail."""
        body = await self._request(
            "GET",
            f"{SLIDES_API_URL}/{presentation_id}/pages/{page_object_id}/thumbnail",
            access_token,
        )
        return body.get("contentUrl", "")

    async def create_comment(self, access_token: str, presentation_id: str, slide_id: str, text: str) -> str:
        """
        Create a comment on a presentation anchored to a slide page object.

        Returns:
            ID of the created comment
        """
        payload = {
            "content": text,
            "anchor": json.dumps({"r": "head", "a": [{"page": {"p": slide_id}}]}),
        }
        body = await self._request(
            "POST",
            f"{DRIVE_API_URL}/{presentation_id}/comments",
            access_token,
            params={"fields": "id"},
            json=payload,
        )
        comment_id = body.get("id", "")

        logger.info(f"[SLIDES] ✅ Comment {comment_id} added to slide {slide_id}")
        return comment_id

    async def create_slide(self, access_token: str, presentation_id: str, title: str, content: str) -> str:
        """
        Append a title-and-body slide and fill its placeholders.

        Args:
            access_token: Google OAuth2 access token
            presentation_id: Target presentation ID
            title: Text for the title placeholder
            content: Text for the body placeholder (may be empty)

        Returns:
            Object ID of the new slide
        """
        slide_id = new_object_id("slide")
        title_id = f"{slide_id}_title"
        body_id = f"{slide_id}_body"

        requests: List[Dict[str, Any]] = [
            {
                "createSlide": {
                    "objectId": slide_id,
                    "slideLayoutReference": {"predefinedLayout": DEFAULT_SLIDE_LAYOUT},
                    "placeholderIdMappings": [
                        {"layoutPlaceholder": {"type": "TITLE", "index": 0}, "objectId": title_id},
                        {"layoutPlaceholder": {"type": "BODY", "index": 0}, "objectId": body_id},
                    ],
                }
            },
            {"insertText": {"objectId": title_id, "text": title, "insertionIndex": 0}},
        ]
        # insertText rejects empty strings
        if content:
            requests.append({"insertText": {"objectId": body_id, "text": content, "insertionIndex": 0}})

        body = await self._request(
            "POST",
            f"{SLIDES_API_URL}/{presentation_id}:batchUpdate",
            access_token,
            json={"requests": requests},
        )
        replies = body.get("replies") or [{}]
        created_id = (replies[0].get("createSlide") or {}).get("objectId") or slide_id

        logger.info(f"[SLIDES] ✅ Slide {created_id} created in {presentation_id}")
        return created_id

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
