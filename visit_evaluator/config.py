"""Centralized configuration for the Store Visit Evaluator.

All environment variables, tunable constants, and config file loaders
live here. No other module defines configuration values.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml


PACKAGE_DIR = Path(__file__).parent


def _float_env(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


# --- Agent Identity ---

AGENT_ID = os.getenv("AGENT_ID", "store_visit_evaluator")

# --- Credentials ---

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_API_KEY", ""))

# --- LLM ---

LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
GENERATION_TEMPERATURE = _float_env("GENERATION_TEMPERATURE", 0.2)
RESPONSE_MIME_TYPE = "application/json"

# --- Upload / Polling ---

POLL_INTERVAL_SECONDS = _float_env("POLL_INTERVAL_SECONDS", 5.0)
MAX_VIDEO_SLOTS = 3

# --- Form Defaults ---

DEFAULT_VIDEO_DATE = os.getenv("DEFAULT_VIDEO_DATE", "2025-08-09")

# --- Scoring ---

MAX_TOTAL_SCORE = 60


# --- Config Loaders ---


def load_response_schema() -> dict:
    """Load the structured-output contract from schemas/response_schema.yml.

    The returned dict uses the remote service's schema vocabulary
    (``type``, ``properties``, ``items``, ``required``, ``description``)
    and is passed through to the generation call unchanged.
    """
    schema_path = PACKAGE_DIR / "schemas" / "response_schema.yml"
    with open(schema_path, encoding="utf-8") as f:
        return yaml.safe_load(f)
