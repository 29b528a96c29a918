"""Orchestrator — submission state machine over the upload-and-generate pipeline.

States: idle -> loading -> success | error, and any state -> idle on reset.
Sequence per submission: validate -> upload + poll every slot (concurrent)
-> build the generation request -> generate -> parse.

Every submission takes a generation token. ``reset()`` and each new
submission advance the token, so a pipeline still running for an older
token can finish but cannot write its outcome into the session.
"""

from __future__ import annotations

import asyncio
import logging

from visit_evaluator.errors import (
    GENERIC_MESSAGE,
    EvaluationError,
    GenerationError,
    SubmissionValidationError,
)
from visit_evaluator.interpreter import ResponseInterpreter
from visit_evaluator.models import (
    EvaluationReport,
    EvaluationRequest,
    GenerationRequest,
    SessionState,
    SessionStatus,
    VideoFile,
)
from visit_evaluator.request_builder import GenerationRequestBuilder
from visit_evaluator.service import AnalysisService
from visit_evaluator.uploader import UploadCoordinator

logger = logging.getLogger(__name__)


def validate_request(request: EvaluationRequest) -> None:
    """Pre-flight check; raises before anything reaches the remote service."""
    missing = []
    if not request.store_code:
        missing.append("store_code")
    if not request.staff_name:
        missing.append("staff_name")
    if request.populated_slot_count == 0:
        missing.append("video_slots")
    if missing:
        raise SubmissionValidationError(f"Missing required input: {', '.join(missing)}")


class Orchestrator:
    """Owns the session state the UI renders.

    The state is only replaced here, at the transition points below, and
    always with a new frozen ``SessionState``.
    """

    def __init__(
        self,
        service: AnalysisService,
        *,
        coordinator: UploadCoordinator | None = None,
        builder: GenerationRequestBuilder | None = None,
        interpreter: ResponseInterpreter | None = None,
    ):
        self._service = service
        self._coordinator = coordinator or UploadCoordinator(service)
        self._builder = builder or GenerationRequestBuilder()
        self._interpreter = interpreter or ResponseInterpreter()
        self._token = 0
        self._state = SessionState()

    # --- Read access ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def request(self) -> EvaluationRequest:
        return self._state.request

    @property
    def result(self) -> EvaluationReport | None:
        return self._state.result

    @property
    def error_message(self) -> str:
        return self._state.error_message

    # --- Form edits ---

    def update_request(self, **fields) -> EvaluationRequest:
        self._ensure_editable()
        self._set(request=self._state.request.with_fields(**fields))
        return self._state.request

    def set_video(self, index: int, video: VideoFile | None) -> EvaluationRequest:
        self._ensure_editable()
        self._set(request=self._state.request.with_video(index, video))
        return self._state.request

    def reset(self) -> SessionState:
        """Discard request and result data and return to the initial form."""
        self._token += 1
        self._state = SessionState()
        logger.info("session_reset", extra={"token": self._token})
        return self._state

    # --- Submission ---

    async def submit(self) -> SessionState:
        """Run one full submission and return the resulting state.

        Accepted from idle or error only. Failures never raise out of here;
        they land in the error state with a category-specific message. If
        the calling task is cancelled the session still ends in error and
        the cancellation propagates.
        """
        if self._state.status in (SessionStatus.LOADING, SessionStatus.SUCCESS):
            raise RuntimeError(f"cannot submit while session is {self._state.status.value}")

        request = self._state.request
        try:
            validate_request(request)
        except SubmissionValidationError as exc:
            logger.warning("submission_rejected", extra={"reason": str(exc)})
            self._set(status=SessionStatus.ERROR, result=None, error_message=exc.user_message)
            return self._state

        self._token += 1
        token = self._token
        self._set(status=SessionStatus.LOADING, result=None, error_message="")
        logger.info(
            "submission_started",
            extra={
                "token": token,
                "store_code": request.store_code,
                "files": request.populated_slot_count,
            },
        )

        try:
            report = await self._run(request)
        except EvaluationError as exc:
            logger.error(
                "submission_failed",
                extra={
                    "token": token,
                    "category": exc.category.value,
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            self._finish(token, status=SessionStatus.ERROR, error_message=exc.user_message)
            return self._state
        except asyncio.CancelledError:
            logger.warning("submission_cancelled", extra={"token": token})
            self._finish(token, status=SessionStatus.ERROR, error_message=GENERIC_MESSAGE)
            raise
        except Exception as exc:
            logger.error(
                "submission_failed",
                extra={"token": token, "category": "unexpected", "error_type": type(exc).__name__},
                exc_info=True,
            )
            self._finish(token, status=SessionStatus.ERROR, error_message=GENERIC_MESSAGE)
            return self._state

        logger.info(
            "submission_succeeded",
            extra={"token": token, "total_score": report.total_score},
        )
        self._finish(token, status=SessionStatus.SUCCESS, result=report)
        return self._state

    async def _run(self, request: EvaluationRequest) -> EvaluationReport:
        assets = await self._coordinator.upload_all(request.video_slots)
        ready = [asset for asset in assets if asset is not None]
        generation_request = self._builder.build(request, ready)
        raw_text = await self._generate(generation_request)
        return self._interpreter.parse(raw_text)

    async def _generate(self, generation_request: GenerationRequest) -> str:
        logger.info(
            "generation_started",
            extra={"files": len(generation_request.file_references)},
        )
        try:
            raw_text = await self._service.generate(generation_request)
        except Exception as exc:
            logger.error("generation_failed", exc_info=True)
            raise GenerationError("Generation call failed.") from exc
        logger.info("generation_completed", extra={"chars": len(raw_text)})
        return raw_text

    # --- State transitions ---

    def _set(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)

    def _finish(self, token: int, **changes) -> None:
        if token != self._token:
            logger.warning(
                "stale_result_discarded",
                extra={"token": token, "current_token": self._token},
            )
            return
        self._set(**changes)

    def _ensure_editable(self) -> None:
        # After success the request still names the store and staff of the shown result.
        if self._state.status in (SessionStatus.LOADING, SessionStatus.SUCCESS):
            raise RuntimeError(f"cannot edit the request while session is {self._state.status.value}")
