"""Tests for tool schemas, action parsing and the action executor."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from socials_studio.carousel import CarouselOutput, CarouselService, Slide
from socials_studio.constants import ContentType, EditedBy, SlideField
from socials_studio.content import ContentVersion, ProjectAsset
from socials_studio.errors import MalformedActionError, StoreError
from socials_studio.images import ImageService
from socials_studio.providers.text import ToolInvocation
from socials_studio.tools import (
    ACTION_MODELS,
    AVAILABLE_TOOLS,
    TOOL_SCHEMAS,
    ActionCategory,
    ActionExecutor,
    ActionResult,
    parse_action,
    parse_tool_calls,
)
from socials_studio.tools.actions import (
    EditCardAction,
    GenerateImageAction,
    GenerateThumbnailAction,
    RefineImageAction,
    RegenerateSectionAction,
)


@pytest.fixture
def carousel(store, project) -> CarouselOutput:
    carousel = CarouselOutput(
        project_id=project.id,
        slides=[Slide(headline="One"), Slide(headline="Two"), Slide(headline="Three")],
    )
    store.put(carousel)
    return carousel


@pytest.fixture
def executor(store, project, output, output_service, mock_image_provider) -> ActionExecutor:
    return ActionExecutor(
        project.id,
        output_service,
        CarouselService(store),
        ImageService(store, mock_image_provider),
    )


# =============================================================================
# Schemas
# =============================================================================


class TestToolSchemas:
    """Tests for the tool definitions sent to the model."""

    def test_every_tool_has_an_action_model(self):
        assert set(AVAILABLE_TOOLS) == set(ACTION_MODELS)
        assert len(TOOL_SCHEMAS) == 11

    @pytest.mark.parametrize("name,required", [
        ("edit_card", ["content_type", "index", "new_content"]),
        ("remove_card", ["content_type", "index"]),
        ("select_card", ["content_type", "index"]),
        ("regenerate_section", ["content_type"]),
        ("add_more", ["content_type"]),
        ("generate_image", ["prompt"]),
        ("refine_image", ["image_id", "refinement_prompt"]),
        ("generate_thumbnail", ["prompt", "thumbnail_index"]),
        ("edit_carousel_slide", ["slide_index", "field", "value"]),
        ("set_slide_image", ["slide_index", "asset_id"]),
        ("remove_slide_image", ["slide_index"]),
    ])
    def test_required_fields(self, name, required):
        parameters = AVAILABLE_TOOLS[name]["function"]["parameters"]
        assert parameters["required"] == required
        assert set(required) <= set(parameters["properties"])

    def test_content_type_enum(self):
        prop = AVAILABLE_TOOLS["edit_card"]["function"]["parameters"]["properties"]["content_type"]
        assert prop["enum"] == ["hook", "body", "intro", "title", "cta", "visual"]


# =============================================================================
# Parsing
# =============================================================================


class TestParseAction:
    """Tests for parse_action."""

    def test_parse_edit_card(self):
        action = parse_action("edit_card", {"content_type": "hook", "index": 1, "new_content": "New"})
        assert action == EditCardAction(content_type=ContentType.HOOK, index=1, new_content="New")
        assert action.category == ActionCategory.CONTENT

    def test_unknown_action(self):
        with pytest.raises(MalformedActionError, match="Unknown action"):
            parse_action("delete_everything", {})

    def test_missing_required_field(self):
        with pytest.raises(MalformedActionError, match="new_content"):
            parse_action("edit_card", {"content_type": "hook", "index": 0})

    def test_invalid_enum_value(self):
        with pytest.raises(MalformedActionError):
            parse_action("regenerate_section", {"content_type": "poem"})

    def test_extra_fields_ignored(self):
        action = parse_action("remove_slide_image", {"slide_index": 2, "reason": "ugly"})
        assert action.slide_index == 2

    def test_image_defaults(self):
        action = parse_action("generate_image", {"prompt": "A cat", "use_references": None, "aspect_ratio": None})
        assert action == GenerateImageAction(prompt="A cat", use_references=False, aspect_ratio="1:1")

    @pytest.mark.parametrize("name,arguments", [
        ("select_card", {"content_type": "hook", "index": True}),
        ("select_card", {"content_type": "hook", "index": "1"}),
        ("remove_card", {"content_type": "cta", "index": 1.0}),
        ("edit_card", {"content_type": "hook", "index": 0, "new_content": 42}),
        ("generate_image", {"prompt": "A cat", "use_references": "yes"}),
        ("generate_thumbnail", {"prompt": "A cat", "thumbnail_index": "0"}),
        ("edit_carousel_slide", {"slide_index": False, "field": "headline", "value": "New"}),
        ("set_slide_image", {"slide_index": 0, "asset_id": 7}),
    ])
    def test_mistyped_arguments_rejected(self, name, arguments):
        with pytest.raises(MalformedActionError):
            parse_action(name, arguments)

    def test_mistyped_call_dropped_from_batch(self):
        calls = [
            ToolInvocation("select_card", {"content_type": "hook", "index": True}),
            ToolInvocation("select_card", {"content_type": "cta", "index": 1}),
        ]

        actions = parse_tool_calls(calls)

        assert [(action.content_type, action.index) for action in actions] == [(ContentType.CTA, 1)]

    def test_categories(self):
        assert parse_action("add_more", {"content_type": "cta"}).category == ActionCategory.DEFERRED
        assert parse_action("set_slide_image", {"slide_index": 0, "asset_id": "a"}).category == ActionCategory.CAROUSEL
        assert parse_action(
            "refine_image", {"image_id": "i", "refinement_prompt": "r"}
        ).category == ActionCategory.IMAGE


class TestParseToolCalls:
    """Malformed invocations are dropped, the rest are kept in order."""

    def test_drops_only_malformed(self):
        calls = [
            ToolInvocation("select_card", {"content_type": "hook", "index": 0}),
            ToolInvocation("edit_card", {"content_type": "hook"}),
            ToolInvocation("no_such_tool", {}),
            ToolInvocation("remove_card", {"content_type": "cta", "index": 1}),
        ]

        actions = parse_tool_calls(calls)

        assert [action.type for action in actions] == ["select_card", "remove_card"]

    def test_empty(self):
        assert parse_tool_calls([]) == []


# =============================================================================
# Execution
# =============================================================================


class TestExecutor:
    """Tests for ActionExecutor."""

    @pytest.mark.asyncio
    async def test_malformed_plus_valid_applies_exactly_valid(self, executor, store, project):
        calls = [
            ToolInvocation("edit_card", {"content_type": "hook", "index": 0, "new_content": "Edited A"}),
            ToolInvocation("edit_card", {"index": 1}),
            ToolInvocation("select_card", {"content_type": "cta", "index": 1}),
        ]

        report = await executor.execute(parse_tool_calls(calls))

        assert report.applied == 2
        assert report.content_changed
        output = executor.outputs.require(project.id)
        assert output.hooks[0] == "Edited A"
        assert output.selected_cta_index == 1
        versions = store.find(ContentVersion, project_id=project.id)
        assert [version.edited_by for version in versions] == [EditedBy.ASSISTANT]

    @pytest.mark.asyncio
    async def test_failed_action_does_not_stop_batch(self, executor, project):
        actions = [
            parse_action("remove_card", {"content_type": "body", "index": 0}),
            parse_action("select_card", {"content_type": "hook", "index": 9}),
            parse_action("select_card", {"content_type": "hook", "index": 2}),
        ]

        report = await executor.execute(actions)

        assert [result.success for result in report.results] == [False, False, True]
        assert "cannot be removed" in report.results[0].error
        assert executor.outputs.require(project.id).selected_hook_index == 2

    @pytest.mark.asyncio
    async def test_categories_run_content_then_carousel_then_image(self, executor, carousel):
        actions = [
            parse_action("generate_image", {"prompt": "A desk"}),
            parse_action("edit_carousel_slide", {"slide_index": 0, "field": "headline", "value": "New"}),
            parse_action("select_card", {"content_type": "hook", "index": 0}),
        ]

        report = await executor.execute(actions)

        assert [result.action for result in report.results] == [
            "select_card", "edit_carousel_slide", "generate_image"
        ]
        assert report.carousel_changed
        assert len(report.images) == 1

    @pytest.mark.asyncio
    async def test_deferred_actions_become_follow_ups(self, executor):
        action = parse_action("regenerate_section", {"content_type": "hook"})

        report = await executor.execute([action])

        assert report.results == []
        assert report.follow_ups == [RegenerateSectionAction(content_type=ContentType.HOOK)]

    @pytest.mark.asyncio
    async def test_carousel_actions(self, executor, store, project, carousel, png_bytes):
        asset = ProjectAsset(project_id=project.id, filename="logo.png", data=png_bytes)
        store.put(asset)

        report = await executor.execute([
            parse_action("edit_carousel_slide", {"slide_index": 1, "field": "body", "value": "Details"}),
            parse_action("set_slide_image", {"slide_index": 2, "asset_id": asset.id}),
            parse_action("set_slide_image", {"slide_index": 0, "asset_id": "foreign"}),
            parse_action("remove_slide_image", {"slide_index": 7}),
        ])

        assert [result.success for result in report.results] == [True, True, False, False]
        updated = store.find_one(CarouselOutput, project_id=project.id)
        assert updated.slides[1].body == "Details"
        assert updated.slides[2].image_id == asset.id
        assert updated.slides[0].image_id is None

    @pytest.mark.asyncio
    async def test_image_failure_is_collected(self, executor, mock_image_provider):
        from socials_studio.providers.image import ImageResult

        mock_image_provider.generate.return_value = ImageResult(images=[], text="I can't draw that.")

        report = await executor.execute([GenerateImageAction(prompt="Something odd")])

        assert report.images == []
        assert report.image_errors == ["I can't draw that."]

    @pytest.mark.asyncio
    async def test_thumbnail_out_of_range(self, executor):
        report = await executor.execute([GenerateThumbnailAction(prompt="p", thumbnail_index=3)])
        assert not report.results[0].success
        assert "out of range" in report.image_errors[0]

    @pytest.mark.asyncio
    async def test_refine_unknown_image(self, executor):
        report = await executor.execute([RefineImageAction(image_id="missing", refinement_prompt="brighter")])
        assert report.image_errors == ["GeneratedImage not found: missing"]

    @pytest.mark.asyncio
    async def test_image_action_without_image_service(self, store, project, output_service):
        executor = ActionExecutor(project.id, output_service, CarouselService(store))
        report = await executor.execute([GenerateImageAction(prompt="p")])
        assert report.image_errors == ["Image generation is not configured"]

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, project, store):
        outputs = MagicMock()
        outputs.update_selection.side_effect = StoreError("disk full")
        executor = ActionExecutor(project.id, outputs, CarouselService(store))

        with pytest.raises(StoreError):
            await executor.execute([parse_action("select_card", {"content_type": "hook", "index": 0})])

    @pytest.mark.asyncio
    async def test_callback_events(self, store, project, output, output_service):
        events = []

        async def callback(event):
            events.append(event)

        executor = ActionExecutor(project.id, output_service, CarouselService(store), callback=callback)
        await executor.execute([parse_action("select_card", {"content_type": "hook", "index": 0})])

        assert [event["type"] for event in events] == ["action_start", "action_complete"]
        assert events[1]["success"] is True
        assert executor.total_actions == 1


class TestActionResult:
    """Tests for ActionResult.to_message."""

    def test_failure_message(self):
        result = ActionResult(action="edit_card", success=False, error="boom")
        assert result.to_message() == "Action 'edit_card' failed: boom"

    def test_string_result(self):
        assert ActionResult(action="x", success=True, result="done").to_message() == "done"
