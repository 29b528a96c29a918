"""Tests for GeminiAnalysisService — request shaping and state mapping over a mocked genai client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from tests.factories import make_asset, make_request, make_video
from visit_evaluator.models import ReadinessState
from visit_evaluator.request_builder import GenerationRequestBuilder
from visit_evaluator.service import GeminiAnalysisService, map_file_state


def _mock_client() -> MagicMock:
    client = MagicMock()
    client.aio.files.upload = AsyncMock(return_value=SimpleNamespace(
        name="files/xyz",
        uri="https://generativelanguage.googleapis.com/v1beta/files/xyz",
        mime_type="video/mp4",
        state=types.FileState.PROCESSING,
    ))
    client.aio.files.get = AsyncMock(return_value=SimpleNamespace(state=types.FileState.ACTIVE))
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text='{"totalScore": 50, "summary": [], "detailedReport": []}')
    )
    return client


class TestMapFileState:
    def test_processing_is_pending(self):
        assert map_file_state(types.FileState.PROCESSING) == ReadinessState.PENDING

    def test_active_is_ready(self):
        assert map_file_state(types.FileState.ACTIVE) == ReadinessState.READY

    def test_failed_is_failed(self):
        assert map_file_state(types.FileState.FAILED) == ReadinessState.FAILED

    def test_unspecified_is_ready(self):
        assert map_file_state(types.FileState.STATE_UNSPECIFIED) == ReadinessState.READY
        assert map_file_state(None) == ReadinessState.READY


class TestUpload:
    @pytest.mark.asyncio
    async def test_returns_pending_asset(self):
        client = _mock_client()
        service = GeminiAnalysisService(client=client)

        asset = await service.upload(make_video(name="visit.mp4"))

        assert asset.local_name == "visit.mp4"
        assert asset.remote_id == "files/xyz"
        assert asset.uri.endswith("/files/xyz")
        assert asset.mime_type == "video/mp4"
        assert asset.readiness_state == ReadinessState.PENDING

    @pytest.mark.asyncio
    async def test_sends_bytes_mime_type_and_display_name(self):
        client = _mock_client()
        service = GeminiAnalysisService(client=client)
        video = make_video(name="visit.mov", mime_type="video/quicktime", data=b"movbytes")

        await service.upload(video)

        kwargs = client.aio.files.upload.await_args.kwargs
        assert kwargs["file"].read() == b"movbytes"
        assert kwargs["config"].mime_type == "video/quicktime"
        assert kwargs["config"].display_name == "visit.mov"

    @pytest.mark.asyncio
    async def test_falls_back_to_declared_mime_type(self):
        client = _mock_client()
        client.aio.files.upload.return_value.mime_type = None
        service = GeminiAnalysisService(client=client)

        asset = await service.upload(make_video(mime_type="video/x-msvideo"))

        assert asset.mime_type == "video/x-msvideo"

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        client = _mock_client()
        client.aio.files.upload.side_effect = ConnectionError("down")
        service = GeminiAnalysisService(client=client)

        with pytest.raises(ConnectionError):
            await service.upload(make_video())


class TestGetState:
    @pytest.mark.asyncio
    async def test_queries_by_remote_id(self):
        client = _mock_client()
        service = GeminiAnalysisService(client=client)

        state = await service.get_state("files/xyz")

        assert state == ReadinessState.READY
        client.aio.files.get.assert_awaited_once_with(name="files/xyz")


class TestGenerate:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        client = _mock_client()
        service = GeminiAnalysisService(client=client, model="gemini-2.5-flash")
        asset = make_asset(uri="https://files.example/1", mime_type="video/mp4")
        request = GenerationRequestBuilder().build(make_request(), [asset])

        text = await service.generate(request)

        assert text.startswith('{"totalScore": 50')
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"

        content = kwargs["contents"][0]
        assert content.role == "user"
        assert content.parts[0].text == request.prompt_text
        assert content.parts[1].file_data.file_uri == "https://files.example/1"
        assert content.parts[1].file_data.mime_type == "video/mp4"

        config = kwargs["config"]
        assert config.temperature == 0.2
        assert config.response_mime_type == "application/json"
        assert config.response_schema.type == types.Type.OBJECT
        assert set(config.response_schema.required) == {"totalScore", "summary", "detailedReport"}
        detailed = config.response_schema.properties["detailedReport"]
        assert detailed.type == types.Type.ARRAY
        assert detailed.items.required == [
            "category", "item", "maxPoints", "score", "feedback", "needsImprovement",
        ]

    @pytest.mark.asyncio
    async def test_empty_text_becomes_empty_string(self):
        client = _mock_client()
        client.aio.models.generate_content.return_value = SimpleNamespace(text=None)
        service = GeminiAnalysisService(client=client)
        request = GenerationRequestBuilder().build(make_request(), [make_asset()])

        assert await service.generate(request) == ""


class TestConstruction:
    def test_default_model_from_config(self):
        service = GeminiAnalysisService(client=MagicMock())
        assert service.model == "gemini-2.5-flash"

    def test_builds_client_from_api_key(self):
        service = GeminiAnalysisService(api_key="test-key")
        assert service.model == "gemini-2.5-flash"
