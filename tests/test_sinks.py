"""Tests for the output sinks."""

import sys
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from netout.config import Config
from netout.errors import NetworkError, StreamWriteError
from netout.sinks import USER_AGENT, DeliveryResult, DiscardSink, RemoteSink, StreamSink, create_sink


class _CollectorHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        self.server.received.append((self.path, body, self.headers.get("User-Agent")))
        self.send_response(self.server.status)
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def collector():
    """Run a loopback HTTP collector; yields the server (received, status, url)."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _CollectorHandler)
    server.received = []
    server.status = 200
    host, port = server.server_address
    server.url = f"http://{host}:{port}/ingest"
    t = threading.Thread(target=server.serve_forever, daemon=True)
    t.start()
    yield server
    server.shutdown()
    server.server_close()


class TestDiscardSink:
    def test_always_succeeds(self):
        sink = DiscardSink()
        assert sink.deliver("anything") == DeliveryResult.success()
        sink.close()


class TestStreamSink:
    def test_file_sink_writes_lines(self, tmp_path):
        path = tmp_path / "records.log"
        sink = StreamSink.open_file(str(path))
        assert sink.deliver("first").ok
        assert sink.deliver("second").ok
        sink.close()
        assert path.read_text() == "first\nsecond\n"

    def test_stdout(self, capsys):
        sink = create_sink(Config(filename="stdout"))
        assert sink.deliver("region=init").ok
        assert capsys.readouterr().out == "region=init\n"

    def test_stderr(self, capsys):
        sink = create_sink(Config(filename="stderr"))
        sink.deliver("to stderr")
        captured = capsys.readouterr()
        assert captured.err == "to stderr\n"
        assert captured.out == ""

    def test_write_after_close_fails(self, tmp_path):
        sink = StreamSink.open_file(str(tmp_path / "x.log"))
        sink.close()
        result = sink.deliver("late")
        assert not result.ok
        assert isinstance(result.error, StreamWriteError)

    def test_close_does_not_close_stdout(self):
        sink = StreamSink(sys.stdout, "stdout")
        sink.close()
        assert not sys.stdout.closed

    def test_concurrent_writes_do_not_interleave(self, tmp_path):
        path = tmp_path / "threads.log"
        sink = StreamSink.open_file(str(path))

        def worker(n):
            for i in range(50):
                sink.deliver(f"worker{n}-{i}-" + "x" * 100)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        sink.close()

        lines = path.read_text().splitlines()
        assert len(lines) == 200
        assert all(line.endswith("x" * 100) for line in lines)


class TestCreateSink:
    def test_none_is_discard(self):
        assert isinstance(create_sink(Config(filename="none")), DiscardSink)

    def test_unwritable_file_falls_back_to_discard(self, caplog):
        sink = create_sink(Config(filename="/not/writable/path"))
        assert isinstance(sink, DiscardSink)
        assert "Could not open text log file /not/writable/path" in caplog.text
        assert sink.deliver("dropped").ok

    def test_file_path(self, tmp_path):
        sink = create_sink(Config(filename=str(tmp_path / "out.log")))
        assert isinstance(sink, StreamSink)
        sink.close()

    def test_remote(self):
        sink = create_sink(Config(sink="remote", posturl="http://127.0.0.1:1/", timeout=0.5))
        assert isinstance(sink, RemoteSink)
        assert sink.timeout == 0.5
        sink.close()

    def test_unknown_sink_uses_stream(self, caplog):
        sink = create_sink(Config(sink="carrier-pigeon", filename="none"))
        assert isinstance(sink, DiscardSink)
        assert "Unknown sink" in caplog.text


class TestRemoteSink:
    def test_posts_body(self, collector):
        sink = RemoteSink(collector.url, timeout=5)
        try:
            assert sink.deliver("region=init      120").ok
        finally:
            sink.close()
        path, body, agent = collector.received[0]
        assert path == "/ingest"
        assert body == "region=init      120"
        assert agent.startswith("netout/")

    def test_status_code_not_inspected(self, collector):
        collector.status = 500
        sink = RemoteSink(collector.url, timeout=5)
        try:
            assert sink.deliver("rejected but sent").ok
        finally:
            sink.close()
        assert len(collector.received) == 1

    def test_reuses_session_across_threads(self, collector):
        sink = RemoteSink(collector.url, timeout=5)
        results = []

        def worker(n):
            for i in range(5):
                results.append(sink.deliver(f"{n}-{i}").ok)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        sink.close()

        assert results == [True] * 20
        assert sorted(body for _, body, _ in collector.received) == sorted(
            f"{n}-{i}" for n in range(4) for i in range(5)
        )

    def test_unencodable_text_is_replaced(self, collector):
        sink = RemoteSink(collector.url, timeout=5)
        try:
            result = sink.deliver("region=bad\ud800")
        finally:
            sink.close()
        assert result.ok
        assert collector.received[0][1] == "region=bad?"

    def test_injected_session_headers_untouched(self, collector):
        session = requests.Session()
        before = dict(session.headers)
        sink = RemoteSink(collector.url, timeout=5, session=session)
        assert sink.deliver("x").ok
        assert dict(session.headers) == before
        assert collector.received[0][2] == USER_AGENT
        sink.close()

    def test_empty_url_fails_every_time(self):
        sink = RemoteSink("")
        for _ in range(3):
            result = sink.deliver("x")
            assert not result.ok
            assert isinstance(result.error, NetworkError)

    def test_unreachable_endpoint(self):
        sink = RemoteSink("http://127.0.0.1:1/", timeout=1)
        result = sink.deliver("x")
        assert not result.ok
        assert isinstance(result.error, NetworkError)
        sink.close()

    def test_invalid_url(self):
        result = RemoteSink("not a url").deliver("x")
        assert isinstance(result.error, NetworkError)

    def test_deliver_after_close(self):
        sink = RemoteSink("http://127.0.0.1:1/")
        sink.close()
        sink.close()
        assert not sink.deliver("x").ok
