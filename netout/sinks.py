"""Output sinks: discard, local stream/file, and remote HTTP collector."""

import logging
import sys
import threading
from dataclasses import dataclass
from typing import TextIO

import requests

from netout.config import Config
from netout.errors import ConfigError, DeliveryError, NetworkError, StreamWriteError

logger = logging.getLogger(__name__)

USER_AGENT = "netout/0.1"


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    error: DeliveryError | None = None

    @classmethod
    def success(cls) -> "DeliveryResult":
        return cls(True)

    @classmethod
    def failure(cls, error: DeliveryError) -> "DeliveryResult":
        return cls(False, error)


class Sink:
    kind = "abstract"

    def deliver(self, text: str) -> DeliveryResult:
        raise NotImplementedError

    def close(self):
        pass


class DiscardSink(Sink):
    kind = "discard"

    def deliver(self, text: str) -> DeliveryResult:
        return DeliveryResult.success()


class StreamSink(Sink):
    """Writes one line per record to stdout, stderr, or an opened file."""

    kind = "stream"

    def __init__(self, stream: TextIO, name: str, owns_stream: bool = False):
        self._stream = stream
        self._owns_stream = owns_stream
        self.name = name
        self._lock = threading.Lock()

    @classmethod
    def open_file(cls, path: str) -> "StreamSink":
        try:
            f = open(path, "w", encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not open text log file {path}: {e}") from e
        return cls(f, path, owns_stream=True)

    def deliver(self, text: str) -> DeliveryResult:
        with self._lock:
            try:
                self._stream.write(text + "\n")
                self._stream.flush()
            except (OSError, ValueError) as e:
                return DeliveryResult.failure(StreamWriteError(f"write to {self.name} failed: {e}"))
        return DeliveryResult.success()

    def close(self):
        with self._lock:
            if self._owns_stream and not self._stream.closed:
                self._stream.close()


class RemoteSink(Sink):
    """POSTs each record to a collector URL over one shared HTTP session.

    The session is not shared between concurrent requests: every delivery
    holds the lock for the whole request.
    """

    kind = "remote"

    def __init__(self, url: str, timeout: float = 5.0, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self._lock = threading.Lock()
        self._session = session or requests.Session()
        if not url:
            logger.warning("Remote sink has no post URL; every delivery will fail")

    def deliver(self, text: str) -> DeliveryResult:
        if not self.url:
            return DeliveryResult.failure(NetworkError("no post URL configured"))
        with self._lock:
            if self._session is None:
                return DeliveryResult.failure(NetworkError("sink is closed"))
            try:
                response = self._session.post(
                    self.url,
                    data=text.encode("utf-8", errors="replace"),
                    headers={
                        "Content-Type": "text/plain; charset=utf-8",
                        "User-Agent": USER_AGENT,
                    },
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                return DeliveryResult.failure(NetworkError(str(e)))
        # Only transport completion counts; the status code is not inspected.
        logger.debug("Posted %d bytes to %s (HTTP %d)", len(text), self.url, response.status_code)
        return DeliveryResult.success()

    def close(self):
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None


def create_sink(config: Config) -> Sink:
    """Choose the single active sink from configuration."""
    if config.sink == "remote":
        logger.info("Delivering records to %s", config.posturl or "<no url>")
        return RemoteSink(config.posturl, timeout=config.timeout)
    if config.sink != "stream":
        logger.warning("Unknown sink %r, falling back to stream output", config.sink)

    filename = config.filename
    if filename == "none":
        return DiscardSink()
    if filename == "stdout":
        return StreamSink(sys.stdout, "stdout")
    if filename == "stderr":
        return StreamSink(sys.stderr, "stderr")
    try:
        return StreamSink.open_file(filename)
    except ConfigError as e:
        logger.warning("%s; discarding records", e)
        return DiscardSink()
