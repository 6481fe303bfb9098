import pytest

from tests.fakes import FakeSlidesService


@pytest.fixture
def fake_service():
    return FakeSlidesService()


@pytest.fixture
def agent_payload():
    return {
        "prompt": "Add a comment saying 'fix the logo'",
        "slide_number": 2,
        "presentation_id": "P1",
        "slide_id": "S2",
        "access_token": "tok",
    }
