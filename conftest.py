"""Test environment setup — adds repo root to sys.path for visit_evaluator imports."""

import os
import sys
from pathlib import Path

# Dummy credential so constructing a GeminiAnalysisService never needs a real key.
# Tests mock the client; the key is never used for real API calls.
os.environ.setdefault("GEMINI_API_KEY", "test-key-for-tests")

repo_root = str(Path(__file__).resolve().parent)
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)
