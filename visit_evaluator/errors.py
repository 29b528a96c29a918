"""Failure taxonomy for the upload-and-generate pipeline.

Every error carries a category and a short Korean message that the
Orchestrator shows to the operator. The technical detail stays in the
exception text and its ``__cause__`` and goes to the log only.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    PROCESSING = "processing"
    NETWORK = "network"
    INTERNAL = "internal"


VALIDATION_MESSAGE = "매장코드, 응대직원, 그리고 하나 이상의 영상을 입력해주세요."
NO_ASSETS_MESSAGE = "업로드된 영상이 없습니다. 영상을 추가한 후 다시 시도해주세요."
MALFORMED_PAYLOAD_MESSAGE = (
    "분석 결과를 처리하는 중 오류가 발생했습니다. 반환된 데이터가 올바른 형식이 아닙니다."
)
ASSET_FAILED_MESSAGE = "영상 처리에 실패했습니다. 다른 영상으로 다시 시도해주세요."
NETWORK_MESSAGE = "네트워크 오류로 분석을 완료하지 못했습니다. 잠시 후 다시 시도해주세요."
INTERNAL_MESSAGE = "내부 오류가 발생했습니다. 처음부터 다시 시도해주세요."
GENERIC_MESSAGE = "분석 중 오류가 발생했습니다."


class EvaluationError(Exception):
    """Base class for every failure that aborts a submission."""

    category: ErrorCategory = ErrorCategory.INTERNAL
    user_message: str = GENERIC_MESSAGE


class SubmissionValidationError(EvaluationError):
    """Pre-flight check failed; nothing was sent to the remote service."""

    category = ErrorCategory.VALIDATION
    user_message = VALIDATION_MESSAGE


class UploadError(EvaluationError):
    category = ErrorCategory.NETWORK
    user_message = NETWORK_MESSAGE

    def __init__(self, local_name: str):
        super().__init__(f"Upload failed for file {local_name}.")
        self.local_name = local_name


class AssetProcessingFailed(EvaluationError):
    category = ErrorCategory.PROCESSING
    user_message = ASSET_FAILED_MESSAGE

    def __init__(self, local_name: str):
        super().__init__(f"File processing failed for {local_name}.")
        self.local_name = local_name


class StatusQueryError(EvaluationError):
    category = ErrorCategory.NETWORK
    user_message = NETWORK_MESSAGE

    def __init__(self, local_name: str):
        super().__init__(f"Could not get processing status for file {local_name}.")
        self.local_name = local_name


class PollingCancelled(EvaluationError):
    category = ErrorCategory.INTERNAL
    user_message = INTERNAL_MESSAGE

    def __init__(self, local_name: str):
        super().__init__(f"Polling cancelled for file {local_name}.")
        self.local_name = local_name


class NoAssetsAvailable(EvaluationError):
    """Every slot came back absent after the upload join."""

    category = ErrorCategory.INTERNAL
    user_message = NO_ASSETS_MESSAGE


class EmptyAssetSet(EvaluationError):
    """A generation request was requested with zero ready assets."""

    category = ErrorCategory.INTERNAL
    user_message = INTERNAL_MESSAGE


class GenerationError(EvaluationError):
    category = ErrorCategory.NETWORK
    user_message = NETWORK_MESSAGE


class MalformedReportPayload(EvaluationError):
    """The generation output was not valid JSON or not report-shaped.

    ``raw_text`` keeps the payload for diagnostics; it is never part of
    ``user_message``.
    """

    category = ErrorCategory.PROCESSING
    user_message = MALFORMED_PAYLOAD_MESSAGE

    def __init__(self, reason: str, raw_text: str):
        super().__init__(reason)
        self.raw_text = raw_text
