# File: src/utxo_gateway/monitoring/health.py
"""Importer liveness tracking.

A background task polls the chain tip. A failing poll means the importer is
broken (ERROR); a tip that has not moved for longer than the staleness window
means the chain is merely quiet (STALE). ``get_status`` never touches the
backend, so the status endpoint is as fresh as the polling cadence allows.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Set

from ..explorer.models import BlockReference

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    OK = "OK"
    STALE = "STALE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class HealthSnapshot:
    last_observed_tip: Optional[BlockReference]
    last_changed_at: float


class HealthChecker:
    def __init__(
        self,
        fetch_tip: Callable[[], Awaitable[BlockReference]],
        stale_after: float = 120.0,
        poll_interval: float = 2.0,
        clock: Callable[[], float] = time.time,
        on_new_tip: Optional[Callable[[BlockReference], Awaitable[None]]] = None,
        metrics=None
    ):
        self.fetch_tip = fetch_tip
        self.stale_after = stale_after
        self.poll_interval = poll_interval
        self.clock = clock
        self.on_new_tip = on_new_tip
        self.metrics = metrics
        self.snapshot = HealthSnapshot(last_observed_tip=None, last_changed_at=clock())
        self._status = HealthStatus.ERROR
        self._last_error: Optional[str] = "no chain tip observed yet"
        self._task: Optional[asyncio.Task] = None
        self._notifications: Set[asyncio.Task] = set()
        self.running = False

    def get_status(self) -> HealthStatus:
        return self._status

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    async def poll_once(self) -> HealthStatus:
        """Query the chain tip once and reclassify"""
        try:
            tip = await self.fetch_tip()
        except Exception as e:
            self._set_status(HealthStatus.ERROR, str(e))
            return self._status

        now = self.clock()
        if tip != self.snapshot.last_observed_tip:
            self.snapshot = HealthSnapshot(last_observed_tip=tip, last_changed_at=now)
            self._set_status(HealthStatus.OK)
            logger.info(f"New chain tip {tip.hash} at height {tip.number}")
            if self.metrics:
                self.metrics.record_tip(tip)
            self._schedule_notify(tip)
        elif now - self.snapshot.last_changed_at < self.stale_after:
            self._set_status(HealthStatus.OK)
        else:
            self._set_status(HealthStatus.STALE)
        return self._status

    def _set_status(self, status: HealthStatus, error: Optional[str] = None):
        if status != self._status:
            if status == HealthStatus.ERROR:
                logger.error(f"Importer health check failed: {error}")
            else:
                logger.info(f"Importer health {self._status.value} -> {status.value}")
        self._status = status
        self._last_error = error
        if self.metrics:
            self.metrics.record_health(status.value)

    def _schedule_notify(self, tip: BlockReference):
        # the poll never waits on subscribers
        if self.on_new_tip is None:
            return
        task = asyncio.create_task(self._notify(tip))
        self._notifications.add(task)
        task.add_done_callback(self._notifications.discard)

    async def flush_notifications(self):
        """Wait for pending tip notifications to finish"""
        if self._notifications:
            await asyncio.gather(*list(self._notifications), return_exceptions=True)

    async def _notify(self, tip: BlockReference):
        try:
            await self.on_new_tip(tip)
        except Exception as e:
            logger.error(f"New tip notification failed: {str(e)}")

    async def start(self):
        """Start the background polling task"""
        if self._task is not None:
            return
        self.running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Health checker started, polling every {self.poll_interval}s")

    async def stop(self):
        """Stop the background polling task"""
        self.running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        for task in list(self._notifications):
            task.cancel()
        await self.flush_notifications()
        logger.info("Health checker stopped")

    async def _run(self):
        while self.running:
            await self.poll_once()
            await asyncio.sleep(self.poll_interval)
