"""Deliver background task results to the UI thread as Qt signals.

Journal calls run on the TaskRunner's worker threads and return futures.
FutureRelay lives on the UI thread; when a watched future completes, its
done-callback emits a signal from the worker thread, and Qt queues the
connected slots onto the UI thread.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future

from PySide6.QtCore import QObject, Signal


class FutureRelay(QObject):
    """Re-emit future outcomes tagged with the action that produced them.

    Signals:
        succeeded: emitted with (tag, result) when the future resolves
        failed: emitted with (tag, message) when the future raises
    """

    succeeded = Signal(str, object)
    failed = Signal(str, str)

    def watch(self, tag: str, future: Future) -> Future:
        future.add_done_callback(lambda done: self._deliver(tag, done))
        return future

    def _deliver(self, tag: str, future: Future) -> None:
        if future.cancelled():
            logging.info("Background task %s was cancelled", tag)
            return

        exc = future.exception()
        try:
            if exc is not None:
                logging.error("Background task %s failed: %s", tag, exc)
                self.failed.emit(tag, str(exc))
            else:
                self.succeeded.emit(tag, future.result())
        except RuntimeError:
            # the relay can be destroyed while the window is closing
            logging.exception("Failed to deliver result of background task %s", tag)
