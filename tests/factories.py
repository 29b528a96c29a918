"""Test factories for creating valid model instances and service doubles.

Tests override only the fields they care about.
"""

import json
from unittest.mock import AsyncMock, MagicMock

from visit_evaluator.models import (
    EvaluationRequest,
    ReadinessState,
    RemoteAsset,
    VideoFile,
)
from visit_evaluator.service import GeminiAnalysisService


def make_video(**overrides) -> VideoFile:
    defaults = dict(
        name="visit_part1.mp4",
        mime_type="video/mp4",
        data=b"\x00\x00\x00\x18ftypmp42",
    )
    defaults.update(overrides)
    return VideoFile(**defaults)


def make_asset(**overrides) -> RemoteAsset:
    defaults = dict(
        local_name="visit_part1.mp4",
        remote_id="files/abc123",
        uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
        mime_type="video/mp4",
        readiness_state=ReadinessState.PENDING,
    )
    defaults.update(overrides)
    return RemoteAsset(**defaults)


def make_request(videos=None, **overrides) -> EvaluationRequest:
    defaults = dict(
        store_code="D123450000",
        store_name="강남점",
        video_date="2025-08-09",
        staff_name="홍길동",
    )
    defaults.update(overrides)
    request = EvaluationRequest(**defaults)
    for index, video in enumerate(videos if videos is not None else [make_video()]):
        request = request.with_video(index, video)
    return request


def make_report_item(**overrides) -> dict:
    defaults = dict(
        category="맞이",
        item="1-1 맞이인사",
        maxPoints=5,
        score=5,
        feedback="매장명을 포함한 맞이인사를 했습니다.",
        needsImprovement=False,
    )
    defaults.update(overrides)
    return defaults


def make_report_payload(**overrides) -> dict:
    defaults = dict(
        totalScore=52,
        summary=[{"text": "전반적으로 친절한 응대", "needsImprovement": False}],
        detailedReport=[make_report_item()],
    )
    defaults.update(overrides)
    return defaults


def make_report_json(**overrides) -> str:
    return json.dumps(make_report_payload(**overrides), ensure_ascii=False)


def asset_for(video: VideoFile) -> RemoteAsset:
    """Remote handle the fake store returns for ``video``."""
    return make_asset(
        local_name=video.name,
        remote_id=f"files/{video.name}",
        uri=f"https://generativelanguage.googleapis.com/v1beta/files/{video.name}",
        mime_type=video.mime_type,
    )


def mock_service(
    states: dict[str, list] | None = None,
    generated: str | None = None,
) -> MagicMock:
    """Create a mock AnalysisService.

    ``states`` maps remote_id -> sequence of ReadinessState (or exceptions)
    returned by successive get_state calls for that asset. Unlisted assets
    are READY on the first query.
    """
    service = MagicMock(spec=GeminiAnalysisService)
    queues = {remote_id: list(seq) for remote_id, seq in (states or {}).items()}

    async def _upload(video):
        return asset_for(video)

    async def _get_state(remote_id):
        queue = queues.get(remote_id)
        if not queue:
            return ReadinessState.READY
        value = queue.pop(0)
        if isinstance(value, BaseException):
            raise value
        return value

    service.upload = AsyncMock(side_effect=_upload)
    service.get_state = AsyncMock(side_effect=_get_state)
    service.generate = AsyncMock(
        return_value=generated if generated is not None else make_report_json()
    )
    return service
