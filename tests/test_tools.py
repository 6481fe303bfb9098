"""Tests for the agent tools."""

import httpx
import pytest

from slide_sage.core.tools import AddCommentToSlideTool, CreateSlideTool, default_tools
from slide_sage.exceptions import PresentationServiceError
from slide_sage.utils.schemas import ToolContext
from tests.fakes import FakeSlidesService, mock_slides_service


FULL_CONTEXT = ToolContext(presentation_id="P1", slide_id="S2", slide_number=2, access_token="tok")


class TestAddCommentToSlideTool:
    """Tests for AddCommentToSlideTool."""

    @pytest.mark.asyncio
    async def test_adds_comment_using_context_targets(self):
        service = FakeSlidesService()
        tool = AddCommentToSlideTool(service)

        result = await tool.run({"commentText": "fix the logo", "slideNumber": 2}, FULL_CONTEXT)

        assert result.ok
        assert "slide 2" in result.message
        assert service.comments == [
            {"access_token": "tok", "presentation_id": "P1", "slide_id": "S2", "text": "fix the logo"}
        ]

    @pytest.mark.asyncio
    async def test_confirmation_falls_back_to_context_slide_number(self):
        tool = AddCommentToSlideTool(FakeSlidesService())

        result = await tool.run({"commentText": "shorter title"}, FULL_CONTEXT)

        assert result.ok
        assert "slide 2" in result.message

    @pytest.mark.asyncio
    async def test_model_cannot_redirect_target(self):
        service = FakeSlidesService()
        tool = AddCommentToSlideTool(service)

        await tool.run(
            {"commentText": "hi", "presentationId": "OTHER", "slideId": "EVIL", "accessToken": "stolen"},
            FULL_CONTEXT,
        )

        assert service.comments[0]["presentation_id"] == "P1"
        assert service.comments[0]["slide_id"] == "S2"
        assert service.comments[0]["access_token"] == "tok"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["presentation_id", "slide_id", "access_token"])
    async def test_missing_context_returns_error_string(self, missing):
        service = FakeSlidesService()
        tool = AddCommentToSlideTool(service)
        context = FULL_CONTEXT.model_copy(update={missing: None})

        result = await tool.run({"commentText": "fix the logo"}, context)

        assert not result.ok
        assert result.message.startswith("Error:")
        assert service.comments == []

    @pytest.mark.asyncio
    async def test_upstream_error_returns_failure_string(self):
        service = FakeSlidesService(error=PresentationServiceError("The caller does not have permission", 403))
        tool = AddCommentToSlideTool(service)

        result = await tool.run({"commentText": "fix the logo"}, FULL_CONTEXT)

        assert not result.ok
        assert "Failed" in result.message
        assert "The caller does not have permission" in result.message

    @pytest.mark.asyncio
    async def test_invalid_arguments_return_error_string(self):
        tool = AddCommentToSlideTool(FakeSlidesService())

        result = await tool.run({}, FULL_CONTEXT)

        assert not result.ok
        assert "commentText" in result.message

    @pytest.mark.asyncio
    async def test_confirmation_names_the_slide_actually_commented(self):
        service = FakeSlidesService()
        tool = AddCommentToSlideTool(service)

        result = await tool.run({"commentText": "fix the logo", "slideNumber": 3}, FULL_CONTEXT)

        assert result.ok
        assert result.message == "Successfully added comment to slide 2."
        assert service.comments[0]["slide_id"] == "S2"

    @pytest.mark.asyncio
    async def test_confirmation_without_slide_number(self):
        context = FULL_CONTEXT.model_copy(update={"slide_number": None})

        result = await AddCommentToSlideTool(FakeSlidesService()).run({"commentText": "x", "slideNumber": 4}, context)

        assert result.message == "Successfully added comment to the current slide."

    def test_declaration_follows_argument_model(self):
        declaration = AddCommentToSlideTool(FakeSlidesService()).declaration()
        schema = declaration.parameters_json_schema

        assert declaration.name == "addCommentToSlide"
        assert set(schema["properties"]) == {"commentText", "slideNumber"}
        assert schema["required"] == ["commentText"]
        assert schema["properties"]["commentText"]["minLength"] == 1
        slide_number = schema["properties"]["slideNumber"]["anyOf"]
        assert {"type": "integer", "minimum": 1} in slide_number


class TestCreateSlideTool:
    """Tests for CreateSlideTool."""

    @pytest.mark.asyncio
    async def test_returns_structured_slide_id(self):
        service = FakeSlidesService(slide_ids=["newslide123"])
        tool = CreateSlideTool(service)

        result = await tool.run({"title": "Roadmap", "content": "Q3 plan"}, FULL_CONTEXT)

        assert result.ok
        assert result.slide_id == "newslide123"
        assert "ID newslide123" in result.message
        assert service.slides == [
            {"access_token": "tok", "presentation_id": "P1", "title": "Roadmap", "content": "Q3 plan"}
        ]

    @pytest.mark.asyncio
    async def test_does_not_need_slide_id(self):
        tool = CreateSlideTool(FakeSlidesService())
        context = ToolContext(presentation_id="P1", access_token="tok")

        result = await tool.run({"title": "Roadmap", "content": "Q3 plan"}, context)

        assert result.ok

    @pytest.mark.asyncio
    async def test_missing_token_returns_error_string(self):
        service = FakeSlidesService()
        tool = CreateSlideTool(service)

        result = await tool.run({"title": "Roadmap", "content": "Q3 plan"}, ToolContext(presentation_id="P1"))

        assert not result.ok
        assert result.slide_id is None
        assert service.slides == []

    @pytest.mark.asyncio
    async def test_upstream_error_returns_failure_string(self):
        service = FakeSlidesService(error=PresentationServiceError("Invalid requests[0]", 400))

        result = await CreateSlideTool(service).run({"title": "Roadmap", "content": "Q3 plan"}, FULL_CONTEXT)

        assert not result.ok
        assert result.message == "Failed to create slide. Error: Invalid requests[0]"

    @pytest.mark.asyncio
    async def test_non_json_success_body_returns_failure_string(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy</html>")

        result = await CreateSlideTool(mock_slides_service(handler)).run(
            {"title": "Roadmap", "content": "Q3 plan"}, FULL_CONTEXT
        )

        assert not result.ok
        assert result.slide_id is None
        assert result.message == "Failed to create slide. Error: Invalid response from Google API"

    def test_declaration_follows_argument_model(self):
        schema = CreateSlideTool(FakeSlidesService()).declaration().parameters_json_schema

        assert sorted(schema["required"]) == ["content", "title"]
        assert schema["properties"]["title"]["minLength"] == 1


def test_default_tools_names_are_unique():
    names = [tool.name for tool in default_tools(FakeSlidesService())]
    assert names == ["addCommentToSlide", "createSlide"]
