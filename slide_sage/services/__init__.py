"""
External services for Slide Sage.

Minimal wrapper for the Google Drive / Slides REST APIs.
"""

from .google_slides import GoogleSlidesService, get_slides_service

__all__ = [
    'GoogleSlidesService',
    'get_slides_service',
]
