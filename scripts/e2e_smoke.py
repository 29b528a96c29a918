"""E2E smoke test — runs the real orchestrator against the live Gemini API.

NOT a pytest test. Run manually when you want to validate the full pipeline
with real uploads, status polling, and a real generation call.

Usage:
    python scripts/e2e_smoke.py visit1.mp4
    python scripts/e2e_smoke.py visit1.mp4 visit2.mov --store-code D123450000 \
        --store-name 강남점 --staff-name 홍길동

Prerequisites:
    - GEMINI_API_KEY (or GOOGLE_API_KEY) set in .env or environment
    - LLM_MODEL set (or defaults from config.py)

Output:
    - Structured JSON log lines for every pipeline step
    - Console summary of the report
    - CSV export saved to --output-dir (default: current directory)
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path

# --- Path setup (script is in scripts/, imports visit_evaluator from the repo root) ---
repo_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(repo_root))

from dotenv import load_dotenv
load_dotenv(repo_root / ".env")

from visit_evaluator.config import MAX_TOTAL_SCORE, MAX_VIDEO_SLOTS
from visit_evaluator.export import format_item_score, write_csv
from visit_evaluator.logging_config import setup_logging
from visit_evaluator.models import EvaluationReport, SessionStatus, VideoFile
from visit_evaluator.orchestrator import Orchestrator
from visit_evaluator.service import GeminiAnalysisService


def _print_report(report: EvaluationReport, elapsed: float) -> None:
    sep = "=" * 60
    print(f"\n{sep}")
    print(f"  Total score:   {report.total_score} / {MAX_TOTAL_SCORE}")
    print(f"  Elapsed:       {elapsed:.1f}s")
    print(sep)

    for entry in report.summary:
        mark = "!" if entry.needs_improvement else "-"
        print(f"  {mark} {entry.text}")
    print(sep)

    for item in report.detailed_report:
        mark = "!" if item.needs_improvement else " "
        print(f"  {mark} [{item.category}] {item.item}: {format_item_score(item)}")

    penalties = report.penalty_items()
    if penalties:
        print(f"  Penalty lines: {len(penalties)}")
    print(sep)


async def run(args: argparse.Namespace) -> int:
    setup_logging()

    orchestrator = Orchestrator(GeminiAnalysisService())
    orchestrator.update_request(
        store_code=args.store_code,
        store_name=args.store_name,
        video_date=args.video_date,
        staff_name=args.staff_name,
    )
    for index, path in enumerate(args.videos):
        orchestrator.set_video(index, VideoFile.from_path(path))

    print(f"\nSubmitting {len(args.videos)} video(s) for {args.store_name or args.store_code}")
    print("  This will upload files and make a real generation call.\n")

    start = time.monotonic()
    state = await orchestrator.submit()
    elapsed = time.monotonic() - start

    if state.status != SessionStatus.SUCCESS:
        print(f"\nFAILED after {elapsed:.1f}s: {state.error_message}")
        return 1

    _print_report(state.result, elapsed)
    output_path = write_csv(state.result, state.request, args.output_dir)
    print(f"  Saved: {output_path}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Store visit E2E smoke test — real Gemini run")
    parser.add_argument("videos", nargs="+", help=f"Up to {MAX_VIDEO_SLOTS} video files")
    parser.add_argument("--store-code", default="D123450000", help="Store code")
    parser.add_argument("--store-name", default="강남점", help="Store name used in the greeting check")
    parser.add_argument("--video-date", default="2025-08-09", help="Filming date (YYYY-MM-DD)")
    parser.add_argument("--staff-name", default="홍길동", help="Employee name")
    parser.add_argument("--output-dir", default=".", help="Directory for the CSV export")
    args = parser.parse_args()

    if len(args.videos) > MAX_VIDEO_SLOTS:
        parser.error(f"at most {MAX_VIDEO_SLOTS} videos are accepted")

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
