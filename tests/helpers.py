"""Helper utilities for tests."""

import argparse
import threading


class EventRecorder:
    """Subscribes to a ChangeNotifier and keeps every event it receives."""

    def __init__(self, notifier):
        self.notifier = notifier
        self.events = []
        self.threads = set()
        self.unsubscribe = notifier.subscribe(self._record)

    def _record(self, event):
        self.threads.add(threading.current_thread().name)
        self.events.append(event)

    def drain(self):
        """Wait for pending deliveries and return the events seen so far."""
        assert self.notifier.flush(timeout=5)
        return list(self.events)


def make_args(**kwargs) -> argparse.Namespace:
    """Build an argparse namespace for calling cmd_* handlers directly."""
    return argparse.Namespace(**kwargs)
