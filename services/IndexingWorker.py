# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-21
# Description: IndexingWorker.py
# -----------------------------------------------------------------------------
import logging
import queue
import threading
from typing import Optional

from services.MemberIndexService import MemberIndexService
from utility.logging_utils import get_class_logger
import settings

_STOP = object()


class IndexingWorker:
    """
    Background indexing for member writes.

    submit() never blocks the calling request: the id goes onto a bounded
    queue consumed by a single daemon thread. A full queue drops the id with
    a warning; a later write or a reindex picks it up again. Failures are
    logged, never returned to the submitter.
    """

    def __init__(
        self,
        *,
        index_service: MemberIndexService,
        maxsize: int = settings.INDEX_QUEUE_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.index_service = index_service
        self.logger = logger or get_class_logger(self.__class__)
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._thread: Optional[threading.Thread] = None
        # guards _running together with enqueueing, so no id lands behind _STOP
        self._lock = threading.Lock()
        self._running = False
        self.processed = 0
        self.failed = 0
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._thread = threading.Thread(target=self._run, name="member-indexing-worker", daemon=True)
            self._thread.start()
        self.logger.info("IndexingWorker started (maxsize=%d)", self._queue.maxsize)

    def stop(self, timeout: float = 10.0) -> None:
        """Stop accepting work, drain what is queued, then join the thread."""
        with self._lock:
            if not self._running:
                return
            self._running = False
        self._queue.put(_STOP)
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                self.logger.warning("IndexingWorker did not stop within %.1fs", timeout)
        self.logger.info(
            "IndexingWorker stopped (processed=%d failed=%d dropped=%d)",
            self.processed,
            self.failed,
            self.dropped,
        )

    def submit(self, member_id: str) -> bool:
        with self._lock:
            if not self._running:
                self.dropped += 1
                accepted = False
                reason = "IndexingWorker not running"
            else:
                try:
                    self._queue.put_nowait(member_id)
                    accepted = True
                except queue.Full:
                    self.dropped += 1
                    accepted = False
                    reason = "Indexing queue full"
        if not accepted:
            self.logger.warning("%s; member %s not queued", reason, member_id)
            return False
        self.logger.debug("Queued member %s for indexing", member_id)
        return True

    def pending(self) -> int:
        return self._queue.qsize()

    def join(self) -> None:
        """Block until every queued id has been processed (tests / batch scripts)."""
        self._queue.join()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self.index_service.index_record(str(item))
                self.processed += 1
            except Exception as e:
                self.failed += 1
                self.logger.error("Background indexing failed for member '%s': %s", item, e)
            finally:
                self._queue.task_done()
