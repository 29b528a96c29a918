"""Fan out one upload + readiness poll per populated video slot.

Populated slots run concurrently; empty slots stay ``None`` in place and
cost nothing. The join is all-or-nothing: the first failing slot fails
the whole batch and the sibling tasks still uploading or polling are
cancelled before the error propagates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from visit_evaluator.errors import EvaluationError, NoAssetsAvailable, UploadError
from visit_evaluator.models import RemoteAsset, VideoFile
from visit_evaluator.poller import FileReadinessPoller
from visit_evaluator.service import AnalysisService

logger = logging.getLogger(__name__)


class UploadCoordinator:

    def __init__(self, service: AnalysisService, poller: FileReadinessPoller | None = None):
        self._service = service
        self._poller = poller or FileReadinessPoller(service)

    async def upload_all(
        self,
        slots: Sequence[VideoFile | None],
        cancel_event: asyncio.Event | None = None,
    ) -> list[RemoteAsset | None]:
        """Upload every populated slot and wait until each one is READY.

        Returns a list the same length as ``slots`` with ``None`` kept at
        the positions of empty slots.

        Raises:
            NoAssetsAvailable: Every slot was empty.
            EvaluationError: The first upload or poll failure, unchanged;
                the remaining slots are cancelled before it propagates.
        """
        populated = [index for index, video in enumerate(slots) if video is not None]
        results: list[RemoteAsset | None] = [None] * len(slots)

        if populated:
            tasks = [
                asyncio.create_task(self._upload_one(slots[index], cancel_event))
                for index in populated
            ]
            try:
                ready = await asyncio.gather(*tasks)
            except BaseException:
                await self._cancel_pending(tasks)
                raise
            for index, asset in zip(populated, ready):
                results[index] = asset

        if all(asset is None for asset in results):
            logger.error("no_assets_available", extra={"slots": len(slots)})
            raise NoAssetsAvailable("No video files were uploaded.")

        logger.info(
            "uploads_completed",
            extra={"slots": len(slots), "uploaded": len(populated)},
        )
        return results

    async def _upload_one(
        self,
        video: VideoFile,
        cancel_event: asyncio.Event | None,
    ) -> RemoteAsset:
        logger.info(
            "asset_upload_started",
            extra={"local_name": video.name, "mime_type": video.mime_type, "size": len(video.data)},
        )
        try:
            asset = await self._service.upload(video)
        except EvaluationError:
            raise
        except Exception as exc:
            logger.error("asset_upload_failed", extra={"local_name": video.name}, exc_info=True)
            raise UploadError(video.name) from exc

        logger.info(
            "asset_uploaded",
            extra={"local_name": video.name, "remote_id": asset.remote_id},
        )
        return await self._poller.wait_until_ready(asset, cancel_event)

    @staticmethod
    async def _cancel_pending(tasks: list[asyncio.Task]) -> None:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.warning("uploads_aborted", extra={"cancelled": len(pending)})
            await asyncio.gather(*pending, return_exceptions=True)
