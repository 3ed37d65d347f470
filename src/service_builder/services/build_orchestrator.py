"""Build orchestrator — run one build pipeline per affected directory.

Per directory the emission order is fixed: the source-status event, then
(unless the directory was deleted) ``build_started`` followed by exactly one
of ``build_finished`` / ``build_failed``.  Directories are independent: a
failed build never stops another one, it only turns the overall outcome into
a failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from service_builder.domain.entities import (
    ClassificationResult,
    DirectoryResult,
    DirectoryStatus,
    EventType,
    RunReport,
)
from service_builder.domain.ports.event_emitter import EventEmitter
from service_builder.domain.ports.image_builder import ImageBuilder

logger = logging.getLogger(__name__)


class _Progress:
    """Completion and failure counters shared by the per-directory tasks."""

    def __init__(self, total: int) -> None:
        self.total = total
        self.completed = 0
        self.failures = 0
        self._lock = asyncio.Lock()

    async def record(self, failed: bool) -> int:
        async with self._lock:
            self.completed += 1
            if failed:
                self.failures += 1
            return self.completed


class BuildOrchestrator:
    """Fans out build pipelines over a classification result.

    Parameters
    ----------
    builder:
        Adapter building and publishing one directory.
    emitter:
        Adapter publishing lifecycle events.  Its failures are logged only.
    sequential:
        Run directories one after the other on the calling task, in
        classification order, so build output does not interleave.
    max_concurrency:
        Cap on in-flight pipelines in concurrent mode; ``None`` is unbounded.
    """

    def __init__(
        self,
        builder: ImageBuilder,
        emitter: EventEmitter,
        sequential: bool = False,
        max_concurrency: int | None = None,
    ) -> None:
        self._builder = builder
        self._emitter = emitter
        self._sequential = sequential
        self._max_concurrency = max_concurrency

    async def run(self, classification: ClassificationResult) -> RunReport:
        """Process every directory and return once all of them are done."""
        items = list(classification.items())
        logger.info("%d service director%s affected", len(items), "y" if len(items) == 1 else "ies")
        progress = _Progress(len(items))

        if self._sequential:
            results = [await self._process(d, s, progress) for d, s in items]
        else:
            process = self._bounded(self._process)
            results = list(await asyncio.gather(*(process(d, s, progress) for d, s in items)))

        report = RunReport(results=results)
        if progress.failures:
            logger.error(
                "%d of %d build(s) failed: %s",
                progress.failures,
                len(items),
                ", ".join(r.directory for r in report.failed),
            )
        else:
            logger.info("All %d director%s processed", len(items), "y" if len(items) == 1 else "ies")
        return report

    def _bounded(
        self,
        func: Callable[[str, DirectoryStatus, _Progress], Awaitable[DirectoryResult]],
    ) -> Callable[[str, DirectoryStatus, _Progress], Awaitable[DirectoryResult]]:
        if self._max_concurrency is None:
            return func
        sem = asyncio.Semaphore(self._max_concurrency)

        async def _limited(
            directory: str, status: DirectoryStatus, progress: _Progress
        ) -> DirectoryResult:
            async with sem:
                return await func(directory, status, progress)

        return _limited

    async def _process(
        self, directory: str, status: DirectoryStatus, progress: _Progress
    ) -> DirectoryResult:
        """Run the pipeline of a single directory.  Never raises for build errors."""
        await self._emit(directory, status.event_type)

        if status is DirectoryStatus.DELETED:
            done = await progress.record(failed=False)
            logger.warning("Skipping build of deleted %s (%d/%d)", directory, done, progress.total)
            return DirectoryResult(directory=directory, status=status)

        logger.info("Build started: %s (%s)", directory, status.value)
        await self._emit(directory, EventType.BUILD_STARTED)
        try:
            await self._builder.build(directory)
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            done = await progress.record(failed=True)
            logger.error("Build failed: %s (%d/%d): %s", directory, done, progress.total, error)
            await self._emit(directory, EventType.BUILD_FAILED, error)
            return DirectoryResult(directory=directory, status=status, error=error)

        done = await progress.record(failed=False)
        logger.info("Build finished: %s (%d/%d)", directory, done, progress.total)
        await self._emit(directory, EventType.BUILD_FINISHED)
        return DirectoryResult(directory=directory, status=status, built=True)

    async def _emit(
        self, directory: str, event_type: EventType, error: str | None = None
    ) -> None:
        try:
            await self._emitter.emit(directory, event_type, error)
        except Exception:
            logger.warning(
                "Failed to emit %s for %s", event_type.value, directory, exc_info=True
            )
