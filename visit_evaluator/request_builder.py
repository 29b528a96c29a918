"""Assemble the single multimodal generation request.

The rubric prompt is data: it lives in ``prompts/evaluation_task.md`` and
only the four metadata fields are interpolated. One file reference is
appended per ready asset, in input order, and the fixed response schema
plus a low temperature are attached.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from visit_evaluator.config import GENERATION_TEMPERATURE, load_response_schema
from visit_evaluator.errors import EmptyAssetSet
from visit_evaluator.models import (
    EvaluationRequest,
    FileReference,
    GenerationRequest,
    RemoteAsset,
)
from visit_evaluator.prompt_loader import load_prompt

logger = logging.getLogger(__name__)

PROMPT_NAME = "evaluation_task"


class GenerationRequestBuilder:

    def __init__(
        self,
        template: str | None = None,
        response_schema: dict | None = None,
        temperature: float = GENERATION_TEMPERATURE,
    ):
        self._template = template if template is not None else load_prompt(PROMPT_NAME)
        self._schema = response_schema if response_schema is not None else load_response_schema()
        self._temperature = temperature

    def render_prompt(self, request: EvaluationRequest) -> str:
        return self._template.format(
            store_code=request.store_code,
            store_name=request.store_name,
            video_date=request.video_date,
            staff_name=request.staff_name,
        )

    def build(self, request: EvaluationRequest, assets: Sequence[RemoteAsset]) -> GenerationRequest:
        """Build the generation request for ``request`` over ``assets``.

        Raises:
            EmptyAssetSet: ``assets`` is empty.
        """
        if not assets:
            raise EmptyAssetSet("No video files provided for analysis.")

        file_references = tuple(
            FileReference(mime_type=asset.mime_type, uri=asset.uri) for asset in assets
        )
        generation_request = GenerationRequest(
            prompt_text=self.render_prompt(request),
            file_references=file_references,
            response_schema=self._schema,
            temperature=self._temperature,
        )
        logger.info(
            "generation_request_built",
            extra={"store_code": request.store_code, "files": len(file_references)},
        )
        return generation_request
