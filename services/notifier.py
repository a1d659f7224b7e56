"""Ordered publish/subscribe channel for "data changed" events."""

import itertools
import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A single "data changed" notification.

    Attributes:
        sequence: Position in the total order of notifications (starts at 1).
        reason: Short label of the action that caused the change.
    """

    sequence: int
    reason: Optional[str] = None


Handler = Callable[[ChangeEvent], None]

_STOP = object()


class ChangeNotifier:
    """Broadcasts change events to subscribers on one worker thread.

    ``notify_changed`` only enqueues, so publishers never wait on observers.
    The worker delivers events in the order they were raised, one handler at
    a time, so observers never see events out of order or concurrently.
    """

    def __init__(self):
        self._handlers: List[Handler] = []
        self._handlers_lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._queue: "queue.Queue" = queue.Queue()
        self._pending = 0
        self._idle = threading.Condition()
        self._closed = False
        self._worker = threading.Thread(
            target=self._run, name="tally-notifier", daemon=True
        )
        self._worker.start()

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Register a handler.

        Args:
            handler: Callable receiving each ChangeEvent.

        Returns:
            A callable that removes the handler again.
        """
        with self._handlers_lock:
            self._handlers.append(handler)

        def unsubscribe():
            with self._handlers_lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def notify_changed(self, reason: Optional[str] = None) -> Optional[ChangeEvent]:
        """Raise a change event for delivery to all subscribers.

        Args:
            reason: Short label of the action that caused the change.

        Returns:
            The enqueued event, or None if the notifier is already closed.
        """
        with self._idle:
            if self._closed:
                logger.warning(f"Change dropped, notifier is closed: {reason}")
                return None
            event = ChangeEvent(sequence=next(self._sequence), reason=reason)
            self._pending += 1
            self._queue.put(event)

        logger.debug(f"Change #{event.sequence} raised: {reason}")
        return event

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until every raised event has been delivered.

        Returns:
            True if the queue drained, False if the timeout expired first.
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def close(self, timeout: Optional[float] = None) -> None:
        """Deliver what is queued, then stop the worker thread."""
        with self._idle:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._worker.join(timeout)

    def _run(self) -> None:
        while True:
            event = self._queue.get()
            if event is _STOP:
                return

            with self._handlers_lock:
                handlers = list(self._handlers)

            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Change handler {handler!r} failed on #{event.sequence}")

            with self._idle:
                self._pending -= 1
                self._idle.notify_all()
