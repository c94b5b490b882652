"""Host event hooks the pipeline subscribes to."""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class Signal:
    """A list of callbacks invoked synchronously, in registration order."""

    def __init__(self, name: str):
        self.name = name
        self._callbacks: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, callback: Callable) -> None:
        with self._lock:
            self._callbacks.append(callback)
        logger.debug("Connected %r to %s", callback, self.name)

    def emit(self, *args) -> None:
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(*args)

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)


class Events:
    """The hooks a host raises: attribute creation, post-init, snapshots."""

    def __init__(self):
        self.create_attr_evt = Signal("create_attr_evt")
        self.post_init_evt = Signal("post_init_evt")
        self.process_snapshot = Signal("process_snapshot")
