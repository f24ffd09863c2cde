"""Bounded worker pool executing per-file jobs."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import TypeAlias, cast

from jxl_converter.application.aggregator import ResultAggregator
from jxl_converter.application.results import (
    Failed,
    FileTask,
    JobOutcome,
    RunSummary,
    Skipped,
    WalkFailure,
)

logger = logging.getLogger(__name__)

SKIP_INTERRUPTED = "run interrupted"

JobHandler: TypeAlias = Callable[[FileTask], JobOutcome]

_STOP = object()
_DRAIN_POLL_SECONDS = 0.1


class WorkerPool:
    """Fixed pool of ``jobs`` worker threads fed through a bounded queue.

    The caller's thread consumes the task iterable and blocks when the queue
    is full, so a fast walker never runs more than ``queue_depth`` tasks
    ahead of the workers.

    Parameters
    ----------
    handler : Callable[[FileTask], JobOutcome]
        Job body executed on a worker thread.
    jobs : int, default=2
        Pool size; values below 1 are treated as 1.
    queue_depth : int | None, default=None
        Maximum number of queued, not yet started tasks (``jobs * 4``).
    aggregator : ResultAggregator | None, default=None
        Destination for outcomes; a fresh one is created when omitted.
    """

    def __init__(
        self,
        handler: JobHandler,
        jobs: int = 2,
        queue_depth: int | None = None,
        aggregator: ResultAggregator | None = None,
    ) -> None:
        self.handler = handler
        self.jobs = max(jobs, 1)
        self.queue_depth = max(queue_depth or self.jobs * 4, 1)
        self.aggregator = aggregator or ResultAggregator()
        self._queue: queue.Queue[object] = queue.Queue(maxsize=self.queue_depth)
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Stop starting new jobs; queued tasks are drained as skipped."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """Whether the pool has stopped starting new jobs."""
        return self._cancelled.is_set()

    def run(self, items: Iterable[FileTask | WalkFailure]) -> RunSummary:
        """Process every item and return the finalized summary.

        Ctrl-C at any point after the workers start (while feeding, or while
        waiting for the workers to finish) cancels the pool: in-flight jobs
        complete, queued tasks are skipped and the summary is flagged as
        interrupted.
        """
        executor = ThreadPoolExecutor(max_workers=self.jobs, thread_name_prefix="jxl-worker")
        workers = [executor.submit(self._worker_loop) for _ in range(self.jobs)]
        try:
            self._feed(items)
        except KeyboardInterrupt:
            self._interrupt()
        finally:
            self._drain(workers)
            executor.shutdown(wait=True)
        for worker in workers:
            worker.result()

        return self.aggregator.finalize(interrupted=self.cancelled)

    def _feed(self, items: Iterable[FileTask | WalkFailure]) -> None:
        for item in items:
            if self.cancelled:
                break
            if isinstance(item, WalkFailure):
                self.aggregator.record(Failed.from_exception(item.path, item.error))
                continue
            self._queue.put(item)

    def _drain(self, workers: list[Future[None]]) -> None:
        # One stop marker per worker, then wait; a Ctrl-C here cancels and
        # keeps waiting so no job is torn and no task is lost.
        pending_stops = len(workers)
        while True:
            try:
                while pending_stops:
                    self._queue.put(_STOP)
                    pending_stops -= 1
                while not all(worker.done() for worker in workers):
                    wait(workers, timeout=_DRAIN_POLL_SECONDS)
                return
            except KeyboardInterrupt:
                self._interrupt()

    def _interrupt(self) -> None:
        if not self.cancelled:
            logger.warning("interrupted; waiting for in-flight jobs to finish")
        self.cancel()

    def _worker_loop(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                task = cast(FileTask, item)
                if self.cancelled:
                    outcome: JobOutcome = Skipped(
                        source_path=task.source_path, reason=SKIP_INTERRUPTED
                    )
                else:
                    outcome = self._run_job(task)
                self.aggregator.record(outcome)
            finally:
                self._queue.task_done()

    def _run_job(self, task: FileTask) -> JobOutcome:
        try:
            return self.handler(task)
        except Exception as exc:
            logger.exception("unexpected error while processing %s", task.source_path)
            return Failed.from_exception(task.source_path, exc)


def run_pool(
    items: Iterable[FileTask | WalkFailure],
    handler: JobHandler,
    *,
    jobs: int = 2,
    queue_depth: int | None = None,
    aggregator: ResultAggregator | None = None,
) -> RunSummary:
    """Run ``handler`` over ``items`` with at most ``jobs`` concurrent jobs."""
    pool = WorkerPool(handler, jobs=jobs, queue_depth=queue_depth, aggregator=aggregator)
    return pool.run(items)
