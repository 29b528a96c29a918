"""Turn the generation call's raw text into an ``EvaluationReport``.

Two phases: ``decode`` checks JSON syntax, ``validate`` checks the decoded
value has the report's shape. Score ranges and category names are not
re-checked; the response schema already constrains the producer.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from visit_evaluator.errors import MalformedReportPayload
from visit_evaluator.models import EvaluationReport

logger = logging.getLogger(__name__)


class ResponseInterpreter:

    def decode(self, raw_text: str) -> object:
        try:
            return json.loads(raw_text)
        except (json.JSONDecodeError, TypeError) as exc:
            logger.error(
                "report_payload_malformed",
                extra={"phase": "decode", "raw_text": raw_text},
            )
            raise MalformedReportPayload(f"Report payload is not valid JSON: {exc}", raw_text) from exc

    def validate(self, payload: object, raw_text: str = "") -> EvaluationReport:
        try:
            return EvaluationReport.model_validate(payload)
        except ValidationError as exc:
            logger.error(
                "report_payload_malformed",
                extra={"phase": "validate", "raw_text": raw_text, "errors": exc.error_count()},
            )
            raise MalformedReportPayload(f"Report payload has the wrong shape: {exc}", raw_text) from exc

    def parse(self, raw_text: str) -> EvaluationReport:
        report = self.validate(self.decode(raw_text), raw_text)
        logger.info(
            "report_parsed",
            extra={
                "total_score": report.total_score,
                "summary_items": len(report.summary),
                "report_items": len(report.detailed_report),
            },
        )
        return report
