"""Store visit video evaluator: upload, poll, generate, interpret."""

from visit_evaluator.errors import EvaluationError
from visit_evaluator.models import (
    EvaluationReport,
    EvaluationRequest,
    SessionState,
    SessionStatus,
    VideoFile,
)
from visit_evaluator.orchestrator import Orchestrator
from visit_evaluator.service import AnalysisService, GeminiAnalysisService

__all__ = [
    "AnalysisService",
    "EvaluationError",
    "EvaluationReport",
    "EvaluationRequest",
    "GeminiAnalysisService",
    "Orchestrator",
    "SessionState",
    "SessionStatus",
    "VideoFile",
]
