"""Tests for the conversational agent and its flow entry point."""

import httpx
import pytest
from pydantic import ValidationError

from slide_sage.core.agent import ConversationalAgent
from slide_sage.core.flows import conversational_agent, next_history
from slide_sage.exceptions import ModelInvocationError
from slide_sage.utils.schemas import AgentInput, ConversationTurn, ModelTurn
from tests.fakes import FakeChatModel, FakeSlidesService, mock_slides_service, tool_call


def make_agent(model, service=None):
    return ConversationalAgent(model=model, service=service or FakeSlidesService())


class TestAgentWithoutTools:

    @pytest.mark.asyncio
    async def test_plain_reply_is_returned_verbatim(self, agent_payload):
        model = FakeChatModel(ModelTurn(text="  What should the comment say?\n"))

        output = await conversational_agent(agent_payload, agent=make_agent(model))

        assert output.response == "  What should the comment say?\n"
        assert output.comment_added is None
        assert output.slide_added is None
        assert len(model.calls) == 1

    @pytest.mark.asyncio
    async def test_absent_fields_are_omitted_when_serialized(self, agent_payload):
        model = FakeChatModel(ModelTurn(text="Hello"))

        output = await conversational_agent(agent_payload, agent=make_agent(model))

        assert output.model_dump(by_alias=True, exclude_none=True) == {"response": "Hello"}

    @pytest.mark.asyncio
    async def test_model_receives_instruction_history_and_tools(self, agent_payload):
        model = FakeChatModel(ModelTurn(text="ok"))
        agent_payload.update(
            history=[{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
            slide_content="Our logo",
            analysis_prompt="Brand consistency",
        )

        await conversational_agent(agent_payload, agent=make_agent(model))

        call = model.calls[0]
        assert [t.content for t in call["history"]] == ["hi", "hello", "Add a comment saying 'fix the logo'"]
        assert call["history"][-1].role == "user"
        assert [d.name for d in call["tools"]] == ["addCommentToSlide", "createSlide"]
        assert call["temperature"] == 0.1
        assert "Brand consistency" in call["system_instruction"]
        assert "Slide 2" in call["system_instruction"]
        assert "Our logo" in call["system_instruction"]
        assert "tok" not in call["system_instruction"]


class TestAgentCommentTool:

    @pytest.mark.asyncio
    async def test_add_comment_scenario(self, agent_payload):
        service = FakeSlidesService()
        model = FakeChatModel(
            ModelTurn(
                text="Done, I added the comment.",
                tool_calls=[tool_call("addCommentToSlide", commentText="fix the logo", slideNumber=2)],
            )
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model, service))

        assert output.comment_added.slide_number == 2
        assert output.comment_added.comment_text == "fix the logo"
        assert output.response == "Done, I added the comment."
        assert service.comments == [
            {"access_token": "tok", "presentation_id": "P1", "slide_id": "S2", "text": "fix the logo"}
        ]

    @pytest.mark.asyncio
    async def test_slide_number_defaults_to_input(self, agent_payload):
        model = FakeChatModel(
            ModelTurn(text="Added.", tool_calls=[tool_call("addCommentToSlide", commentText="fix the logo")])
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model))

        assert output.comment_added.slide_number == 2

    @pytest.mark.asyncio
    async def test_duplicate_comment_calls_last_wins(self, agent_payload):
        service = FakeSlidesService()
        model = FakeChatModel(
            ModelTurn(
                text="Added both.",
                tool_calls=[
                    tool_call("addCommentToSlide", commentText="first", slideNumber=1),
                    tool_call("addCommentToSlide", commentText="second", slideNumber=3),
                ],
            )
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model, service))

        assert output.comment_added.slide_number == 3
        assert output.comment_added.comment_text == "second"
        # Both executed, in the order requested
        assert [c["text"] for c in service.comments] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_missing_slide_id_does_not_raise(self, agent_payload):
        agent_payload.pop("slide_id")
        service = FakeSlidesService()
        model = FakeChatModel(
            ModelTurn(text="", tool_calls=[tool_call("addCommentToSlide", commentText="fix the logo")]),
            ModelTurn(text="I could not add the comment: no slide is selected."),
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model, service))

        assert output.response == "I could not add the comment: no slide is selected."
        assert output.comment_added is None
        assert service.comments == []
        _, result = model.calls[1]["tool_results"][0]
        assert result.message.startswith("Error:")

    @pytest.mark.asyncio
    async def test_forbidden_comment_still_produces_response(self, agent_payload):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": {"code": 403, "message": "The caller does not have permission"}})

        model = FakeChatModel(
            ModelTurn(text="", tool_calls=[tool_call("addCommentToSlide", commentText="fix the logo", slideNumber=2)]),
            ModelTurn(text="Sorry, I don't have permission to comment on this presentation."),
        )
        agent = make_agent(model, mock_slides_service(handler))

        output = await conversational_agent(agent_payload, agent=agent)

        assert output.response == "Sorry, I don't have permission to comment on this presentation."
        assert output.comment_added is None

        followup = model.calls[1]
        assert followup["tools"] is None
        _, result = followup["tool_results"][0]
        assert not result.ok
        assert "Failed" in result.message

    @pytest.mark.asyncio
    async def test_tool_messages_used_when_model_stays_silent(self, agent_payload):
        service = FakeSlidesService()
        model = FakeChatModel(
            ModelTurn(text="", tool_calls=[tool_call("addCommentToSlide", commentText="fix the logo")]),
            ModelTurn(text=""),
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model, service))

        assert output.response == "Successfully added comment to slide 2."

    @pytest.mark.asyncio
    async def test_followup_failure_falls_back_to_tool_messages(self, agent_payload):
        class FailingFollowup(FakeChatModel):
            async def generate(self, *args, **kwargs):
                if self.calls:
                    raise ModelInvocationError("boom")
                return await super().generate(*args, **kwargs)

        model = FailingFollowup(
            ModelTurn(text="", tool_calls=[tool_call("addCommentToSlide", commentText="fix the logo")])
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model))

        assert output.response == "Successfully added comment to slide 2."
        assert output.comment_added.comment_text == "fix the logo"


class TestAgentSlideTool:

    @pytest.mark.asyncio
    async def test_create_slide_scenario(self, agent_payload):
        service = FakeSlidesService(slide_ids=["newslide123"])
        agent_payload.update(prompt="Create a slide titled 'Roadmap' with 'Q3 plan'")
        model = FakeChatModel(
            ModelTurn(text="Created.", tool_calls=[tool_call("createSlide", title="Roadmap", content="Q3 plan")])
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model, service))

        assert output.slide_added.slide_id == "newslide123"
        assert output.comment_added is None
        assert service.slides[0]["title"] == "Roadmap"
        assert service.slides[0]["content"] == "Q3 plan"

    @pytest.mark.asyncio
    async def test_duplicate_slide_calls_last_wins(self, agent_payload):
        service = FakeSlidesService(slide_ids=["first", "second"])
        model = FakeChatModel(
            ModelTurn(
                text="Created two slides.",
                tool_calls=[
                    tool_call("createSlide", title="A", content="a"),
                    tool_call("createSlide", title="B", content="b"),
                ],
            )
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model, service))

        assert output.slide_added.slide_id == "second"

    @pytest.mark.asyncio
    async def test_comment_and_slide_in_one_turn(self, agent_payload):
        model = FakeChatModel(
            ModelTurn(
                text="Done.",
                tool_calls=[
                    tool_call("createSlide", title="Roadmap", content="Q3 plan"),
                    tool_call("addCommentToSlide", commentText="fix the logo"),
                ],
            )
        )

        output = await conversational_agent(agent_payload, agent=make_agent(model))

        assert output.slide_added.slide_id == "newslide123"
        assert output.comment_added.comment_text == "fix the logo"

    @pytest.mark.asyncio
    async def test_unknown_tool_is_ignored(self, agent_payload):
        model = FakeChatModel(ModelTurn(text="Hmm.", tool_calls=[tool_call("deleteSlide", slideId="S2")]))

        output = await conversational_agent(agent_payload, agent=make_agent(model))

        assert output.response == "Hmm."
        assert output.comment_added is None
        assert output.slide_added is None


class TestFlowValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["presentation_id", "access_token", "prompt"])
    async def test_missing_required_field_raises(self, agent_payload, field):
        agent_payload.pop(field)
        model = FakeChatModel(ModelTurn(text="unused"))

        with pytest.raises(ValidationError):
            await conversational_agent(agent_payload, agent=make_agent(model))

        assert model.calls == []

    @pytest.mark.asyncio
    async def test_empty_token_raises(self, agent_payload):
        agent_payload["access_token"] = ""

        with pytest.raises(ValidationError):
            await conversational_agent(agent_payload, agent=make_agent(FakeChatModel()))

    @pytest.mark.asyncio
    async def test_camel_case_payload_accepted(self):
        payload = {
            "prompt": "hi",
            "presentationId": "P1",
            "slideId": "S2",
            "slideNumber": 2,
            "accessToken": "tok",
        }
        output = await conversational_agent(payload, agent=make_agent(FakeChatModel(ModelTurn(text="hello"))))

        assert output.response == "hello"

    @pytest.mark.asyncio
    async def test_model_error_propagates(self, agent_payload):
        class Broken:
            async def generate(self, **kwargs):
                raise ModelInvocationError("provider down")

        with pytest.raises(ModelInvocationError):
            await conversational_agent(agent_payload, agent=make_agent(Broken()))

    def test_token_not_in_repr(self, agent_payload):
        assert "tok" not in repr(AgentInput.model_validate(agent_payload))


class TestHistory:

    @pytest.mark.asyncio
    async def test_history_is_prefix_of_next_history(self, agent_payload):
        history = [ConversationTurn(role="user", content="hi"), ConversationTurn(role="assistant", content="hello")]
        agent_payload["history"] = history
        model = FakeChatModel(ModelTurn(text="What should it say?"))

        output = await conversational_agent(agent_payload, agent=make_agent(model))
        updated = next_history(history, agent_payload["prompt"], output.response)

        assert updated[: len(history)] == history
        assert len(updated) == len(history) + 2
        assert updated[-2] == ConversationTurn(role="user", content=agent_payload["prompt"])
        assert updated[-1] == ConversationTurn(role="assistant", content="What should it say?")
        assert len(history) == 2
