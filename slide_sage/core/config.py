import os
import logging
from typing import Optional

from google import genai
from google.genai.types import HttpOptions
from google.oauth2.service_account import Credentials
from dotenv import load_dotenv

load_dotenv(override=True)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_HTTP_TIMEOUT = 20.0

# Global singleton
_genai_client_instance: Optional[genai.Client] = None


def get_model_name() -> str:
    return os.getenv("SLIDE_SAGE_MODEL", DEFAULT_MODEL)


def get_http_timeout() -> float:
    """REST timeout in seconds for the Drive / Slides client."""
    try:
        return float(os.getenv("SLIDE_SAGE_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT))
    except ValueError:
        logger.warning("Invalid SLIDE_SAGE_HTTP_TIMEOUT, using default")
        return DEFAULT_HTTP_TIMEOUT


def use_vertexai() -> bool:
    return os.getenv("GOOGLE_GENAI_USE_VERTEXAI", "false").strip().lower() in ("1", "true", "yes")


def get_genai_client() -> genai.Client:
    """
    Get singleton Gemini client.

    Uses Vertex AI with service account authentication when GOOGLE_GENAI_USE_VERTEXAI is set,
    otherwise the Gemini Developer API.

    Reads the following environment variables:
        GEMINI_API_KEY / GOOGLE_API_KEY: Developer API key
        GOOGLE_APPLICATION_CREDENTIALS: Path to service account JSON key file (Vertex)
        GOOGLE_CLOUD_PROJECT: GCP project ID (Vertex)
        GOOGLE_CLOUD_LOCATION: GCP region, defaults to 'global' (Vertex)

    Raises:
        ValueError: If the required credentials are not configured
    """
    global _genai_client_instance
    if _genai_client_instance is not None:
        return _genai_client_instance

    if use_vertexai():
        service_account_file = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        project = os.getenv("GOOGLE_CLOUD_PROJECT")
        if not service_account_file or not project:
            raise ValueError(
                "GOOGLE_APPLICATION_CREDENTIALS and GOOGLE_CLOUD_PROJECT must be set to use Vertex AI"
            )

        credentials = Credentials.from_service_account_file(
            service_account_file,
            scopes=["https://www.googleapis.com/auth/cloud-platform"],
        )
        _genai_client_instance = genai.Client(
            vertexai=True,
            project=project,
            location=os.getenv("GOOGLE_CLOUD_LOCATION", "global"),
            credentials=credentials,
            http_options=HttpOptions(api_version="v1"),
        )
        logger.info("Gemini client initialized (Vertex AI)")
    else:
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise ValueError("GEMINI_API_KEY (or GOOGLE_API_KEY) environment variable must be set")

        _genai_client_instance = genai.Client(api_key=api_key)
        logger.info("Gemini client initialized (Developer API)")

    return _genai_client_instance
