"""Remote analysis service access — file store + multimodal generation.

The pipeline talks to the service through three operations (upload,
status query, generate). ``AnalysisService`` is the seam the rest of the
package depends on; ``GeminiAnalysisService`` implements it on top of the
``google-genai`` async client.

No module-level client: callers construct the service with a credential
(or an already-built ``genai.Client``) and pass it in, so tests can swap
in a mock.
"""

from __future__ import annotations

import io
from typing import Protocol

from google import genai
from google.genai import types

from visit_evaluator.config import GEMINI_API_KEY, LLM_MODEL, RESPONSE_MIME_TYPE
from visit_evaluator.models import (
    GenerationRequest,
    ReadinessState,
    RemoteAsset,
    VideoFile,
)


class AnalysisService(Protocol):
    async def upload(self, video: VideoFile) -> RemoteAsset: ...

    async def get_state(self, remote_id: str) -> ReadinessState: ...

    async def generate(self, request: GenerationRequest) -> str: ...


def map_file_state(state: types.FileState | None) -> ReadinessState:
    """Translate the file store's lifecycle state into a readiness state.

    Only PROCESSING keeps the poller waiting; any state other than FAILED
    is usable.
    """
    if state == types.FileState.PROCESSING:
        return ReadinessState.PENDING
    if state == types.FileState.FAILED:
        return ReadinessState.FAILED
    return ReadinessState.READY


class GeminiAnalysisService:
    """``AnalysisService`` backed by the Gemini Files and Models APIs."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = LLM_MODEL,
        client: genai.Client | None = None,
    ):
        self._client = client or genai.Client(api_key=api_key or GEMINI_API_KEY)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def upload(self, video: VideoFile) -> RemoteAsset:
        uploaded = await self._client.aio.files.upload(
            file=io.BytesIO(video.data),
            config=types.UploadFileConfig(
                mime_type=video.mime_type,
                display_name=video.name,
            ),
        )
        return RemoteAsset(
            local_name=video.name,
            remote_id=uploaded.name,
            uri=uploaded.uri,
            mime_type=uploaded.mime_type or video.mime_type,
            readiness_state=ReadinessState.PENDING,
        )

    async def get_state(self, remote_id: str) -> ReadinessState:
        remote_file = await self._client.aio.files.get(name=remote_id)
        return map_file_state(remote_file.state)

    async def generate(self, request: GenerationRequest) -> str:
        parts = [types.Part.from_text(text=request.prompt_text)]
        parts.extend(
            types.Part.from_uri(file_uri=ref.uri, mime_type=ref.mime_type)
            for ref in request.file_references
        )

        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=[types.Content(role="user", parts=parts)],
            config=types.GenerateContentConfig(
                temperature=request.temperature,
                response_mime_type=RESPONSE_MIME_TYPE,
                response_schema=types.Schema.model_validate(request.response_schema),
            ),
        )
        return response.text or ""
