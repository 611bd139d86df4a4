"""Concurrent probe dispatch.

One task per entry; each task emits exactly one ProbeResult when it
finishes. Tasks never touch dashboard state themselves.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from ssh_ogm.models import Collection, Entry, ProbeResult, ProbeStatus, ProxyEntry
from ssh_ogm.protocols import HostProber

logger = logging.getLogger(__name__)


class ProbeOrchestrator:
    """Fans out probes for a collection of entries."""

    def __init__(self, prober: HostProber) -> None:
        self.prober = prober
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        """Number of probes still in flight."""
        return len(self._tasks)

    def dispatch(
        self,
        entries: Iterable[Entry],
        emit: Callable[[ProbeResult], None],
        generation: int = 0,
    ) -> list[asyncio.Task[Any]]:
        """Start one probe per entry without waiting for any of them.

        Must be called from a running event loop. Earlier dispatches are
        left running.

        Args:
            entries: Entries to probe
            emit: Called once per entry with its result, in completion order
            generation: Tag copied into every result of this dispatch

        Returns:
            The started tasks
        """
        started = []
        for entry in entries:
            task = asyncio.create_task(
                self._probe_one(entry, emit, generation),
                name=f"probe-{entry.alias}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            started.append(task)

        logger.debug("Dispatched %d probes (generation=%d)", len(started), generation)
        return started

    async def _probe_one(
        self,
        entry: Entry,
        emit: Callable[[ProbeResult], None],
        generation: int,
    ) -> None:
        try:
            status = await self.prober.probe(entry.host, entry.port)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Probe of %s (%s) failed: %s", entry.alias, entry.host, e)
            status = ProbeStatus.OFFLINE
        logger.info("Probe %s -> %s", entry.alias, status.value)
        collection = (
            Collection.PROXIES if isinstance(entry, ProxyEntry) else Collection.SERVERS
        )
        emit(
            ProbeResult(
                alias=entry.alias,
                status=status,
                generation=generation,
                collection=collection,
            )
        )

    async def cancel_all(self) -> None:
        """Cancel every probe still in flight and wait for them to finish."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Cancelled %d outstanding probes", len(tasks))
