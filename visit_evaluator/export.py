"""Spreadsheet export of a finished evaluation report.

The CSV is written for Excel: UTF-8 with a leading byte-order mark, a
Korean header row, text cells double-quoted with embedded quotes doubled,
numeric cells bare.
"""

from __future__ import annotations

from pathlib import Path

from visit_evaluator.models import EvaluationReport, EvaluationRequest, ReportItem

BOM = "\ufeff"
CSV_HEADERS = ["평가 단계", "세부 항목", "최대 배점", "획득 점수", "피드백"]


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_item_score(item: ReportItem) -> str:
    """``score / maxPoints`` for scored items, the bare score for penalty lines."""
    if item.max_points > 0:
        return f"{_number(item.score)} / {_number(item.max_points)}"
    return _number(item.score)


def report_to_csv(report: EvaluationReport) -> str:
    rows = [
        [
            _quote(item.category),
            _quote(item.item),
            _number(item.max_points),
            _number(item.score),
            _quote(item.feedback),
        ]
        for item in report.detailed_report
    ]
    lines = [",".join(CSV_HEADERS)] + [",".join(row) for row in rows]
    return BOM + "\n".join(lines)


def csv_filename(request: EvaluationRequest) -> str:
    return f"[{request.store_name}]_{request.staff_name}_평가결과.csv"


def write_csv(report: EvaluationReport, request: EvaluationRequest, directory: str | Path) -> Path:
    """Write the report CSV into ``directory`` and return the file path."""
    path = Path(directory) / csv_filename(request)
    path.write_text(report_to_csv(report), encoding="utf-8", newline="")
    return path
