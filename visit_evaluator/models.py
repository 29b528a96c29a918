"""Pydantic models for the Store Visit Evaluator.

All BaseModel subclasses and enums live here. No remote calls.

Sections:
  1. Enums
  2. Operator input (form metadata + video slots)
  3. Remote assets and generation request
  4. Evaluation report (structured output)
  5. Session state (Orchestrator snapshot)
"""

from __future__ import annotations

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from visit_evaluator.config import DEFAULT_VIDEO_DATE, MAX_VIDEO_SLOTS

Number = Union[int, float]


def _empty_slots() -> tuple[VideoFile | None, ...]:
    return (None,) * MAX_VIDEO_SLOTS


# ---------------------------------------------------------------------------
# 1. Enums
# ---------------------------------------------------------------------------


class ReadinessState(str, Enum):
    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


# ---------------------------------------------------------------------------
# 2. Operator input
# ---------------------------------------------------------------------------


class VideoFile(BaseModel):
    """A raw video selected by the operator, held in memory until upload."""

    model_config = ConfigDict(frozen=True)

    name: str
    mime_type: str
    data: bytes = Field(repr=False)

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> VideoFile:
        path = Path(path)
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, mime_type=mime_type, data=path.read_bytes())


class EvaluationRequest(BaseModel):
    """Operator-entered metadata plus the fixed-size row of video slots.

    Instances are frozen; the ``with_*`` helpers return updated copies so a
    request captured by an in-flight submission never changes underneath it.
    """

    model_config = ConfigDict(frozen=True)

    store_code: str = ""
    store_name: str = ""
    video_date: str = DEFAULT_VIDEO_DATE
    staff_name: str = ""
    video_slots: tuple[VideoFile | None, ...] = Field(
        default_factory=_empty_slots, max_length=MAX_VIDEO_SLOTS
    )

    @classmethod
    def default(cls) -> EvaluationRequest:
        return cls()

    def with_fields(self, **fields) -> EvaluationRequest:
        unknown = set(fields) - set(type(self).model_fields)
        if unknown:
            raise TypeError(f"unknown request fields: {sorted(unknown)}")
        return self.model_validate({**self.model_dump(), **fields})

    def with_video(self, index: int, video: VideoFile | None) -> EvaluationRequest:
        if not 0 <= index < len(self.video_slots):
            raise IndexError(f"video slot {index} out of range")
        slots = list(self.video_slots)
        slots[index] = video
        return self.model_copy(update={"video_slots": tuple(slots)})

    @property
    def populated_slot_count(self) -> int:
        return sum(1 for slot in self.video_slots if slot is not None)

    def is_submittable(self) -> bool:
        """True when store code, staff name and at least one video are present."""
        return bool(self.store_code) and bool(self.staff_name) and self.populated_slot_count > 0


# ---------------------------------------------------------------------------
# 3. Remote assets and generation request
# ---------------------------------------------------------------------------


class RemoteAsset(BaseModel):
    """Handle to a file accepted by the remote store.

    Frozen: the poller hands back a copy with the terminal state instead of
    mutating the instance it was given.
    """

    model_config = ConfigDict(frozen=True)

    local_name: str
    remote_id: str
    uri: str
    mime_type: str
    readiness_state: ReadinessState = ReadinessState.PENDING


class FileReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    mime_type: str
    uri: str


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt_text: str
    file_references: tuple[FileReference, ...]
    response_schema: dict
    temperature: float


# ---------------------------------------------------------------------------
# 4. Evaluation report
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    """Base for models parsed from the camelCase JSON the service returns."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SummaryItem(_WireModel):
    text: str
    needs_improvement: bool


class ReportItem(_WireModel):
    category: str
    item: str
    max_points: Number
    score: Number
    feedback: str
    needs_improvement: bool

    @property
    def is_penalty(self) -> bool:
        return self.max_points == 0


class EvaluationReport(_WireModel):
    total_score: Number
    summary: tuple[SummaryItem, ...]
    detailed_report: tuple[ReportItem, ...]

    def penalty_items(self) -> list[ReportItem]:
        """Deduction-only lines (zero max points), exactly as returned.

        Whether ``total_score`` already includes these deductions is not
        settled by the rubric; nothing here adjusts the total.
        """
        return [item for item in self.detailed_report if item.is_penalty]


# ---------------------------------------------------------------------------
# 5. Session state
# ---------------------------------------------------------------------------


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.IDLE
    request: EvaluationRequest = Field(default_factory=EvaluationRequest.default)
    result: EvaluationReport | None = None
    error_message: str = ""
