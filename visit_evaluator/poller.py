"""Drive one uploaded asset from PENDING to a terminal readiness state.

Status is queried, and while the service still reports PENDING the poller
suspends for a fixed interval and asks again. There is no iteration cap
and no client-side timeout; the optional cancellation event is checked
before every query and after every suspension.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from visit_evaluator.config import POLL_INTERVAL_SECONDS
from visit_evaluator.errors import AssetProcessingFailed, PollingCancelled, StatusQueryError
from visit_evaluator.models import ReadinessState, RemoteAsset
from visit_evaluator.service import AnalysisService

logger = logging.getLogger(__name__)


class FileReadinessPoller:

    def __init__(
        self,
        service: AnalysisService,
        interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._service = service
        self._interval = interval
        self._sleep = sleep

    async def wait_until_ready(
        self,
        asset: RemoteAsset,
        cancel_event: asyncio.Event | None = None,
    ) -> RemoteAsset:
        """Poll until the asset is READY and return a READY copy of it.

        Raises:
            AssetProcessingFailed: The service reported FAILED.
            StatusQueryError: A status query raised; not retried.
            PollingCancelled: ``cancel_event`` was set.
        """
        if asset.readiness_state == ReadinessState.READY:
            return asset
        if asset.readiness_state == ReadinessState.FAILED:
            raise AssetProcessingFailed(asset.local_name)

        poll = 0
        while True:
            self._check_cancelled(asset, cancel_event)

            poll += 1
            state = await self._query(asset)
            logger.info(
                "asset_status_polled",
                extra={
                    "local_name": asset.local_name,
                    "remote_id": asset.remote_id,
                    "status": state.value,
                    "poll": poll,
                },
            )

            if state == ReadinessState.READY:
                logger.info("asset_ready", extra={"local_name": asset.local_name, "polls": poll})
                return asset.model_copy(update={"readiness_state": ReadinessState.READY})

            if state == ReadinessState.FAILED:
                logger.error(
                    "asset_processing_failed",
                    extra={"local_name": asset.local_name, "remote_id": asset.remote_id},
                )
                raise AssetProcessingFailed(asset.local_name)

            await self._sleep(self._interval)
            self._check_cancelled(asset, cancel_event)

    async def _query(self, asset: RemoteAsset) -> ReadinessState:
        try:
            return await self._service.get_state(asset.remote_id)
        except Exception as exc:
            logger.error(
                "asset_status_query_failed",
                extra={"local_name": asset.local_name, "remote_id": asset.remote_id},
                exc_info=True,
            )
            raise StatusQueryError(asset.local_name) from exc

    @staticmethod
    def _check_cancelled(asset: RemoteAsset, cancel_event: asyncio.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.warning("asset_polling_cancelled", extra={"local_name": asset.local_name})
            raise PollingCancelled(asset.local_name)
