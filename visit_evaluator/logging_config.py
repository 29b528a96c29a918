"""Structured JSON logging for the Store Visit Evaluator.

Emits all log events as structured JSON with base fields:
agent_id, domain, timestamp, level, event.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone

from visit_evaluator.config import AGENT_ID

DOMAIN = "store_visit_evaluation"

EVENT_TYPES = [
    "asset_upload_started",
    "asset_uploaded",
    "asset_upload_failed",
    "asset_status_polled",
    "asset_status_query_failed",
    "asset_ready",
    "asset_processing_failed",
    "asset_polling_cancelled",
    "uploads_completed",
    "uploads_aborted",
    "no_assets_available",
    "generation_request_built",
    "generation_started",
    "generation_completed",
    "generation_failed",
    "report_payload_malformed",
    "report_parsed",
    "submission_rejected",
    "submission_started",
    "submission_succeeded",
    "submission_failed",
    "submission_cancelled",
    "stale_result_discarded",
    "session_reset",
]


class StructuredJsonFormatter(logging.Formatter):

    _DEFAULT_RECORD_KEYS = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__
    ) | {"extra_fields", "message"}

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "agent_id": AGENT_ID,
            "domain": DOMAIN,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "event": record.getMessage(),
            "logger": record.name,
        }

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        for key in vars(record):
            if key not in self._DEFAULT_RECORD_KEYS:
                val = getattr(record, key)
                if isinstance(val, (str, int, float, bool, list, dict, type(None))):
                    log_entry[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = "".join(
                traceback.format_exception(*record.exc_info)
            )

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)
