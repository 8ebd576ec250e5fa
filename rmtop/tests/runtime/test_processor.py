from __future__ import annotations

import pytest

from rmtop.core.errors import ServerDisconnectedError, ServerReplyError
from rmtop.protocol.args import GeoRecord
from rmtop.protocol.loader import CommandTable
from rmtop.runtime.dispatcher import DecodeDispatcher
from rmtop.runtime.processor import StreamProcessor
from rmtop.stats.aggregator import FrequencyAggregator
from rmtop.transport.errors import TransportClosedError, TransportIOError


class FakeTransport:
    """Minimal TransportIO stub: serves staged chunks, then raises."""
    def __init__(self, chunks=(), *, end_with: Exception | None = None):
        self.chunks = list(chunks)
        self.end_with = end_with
        self.writes: list[bytes] = []
        self.raise_on_write: Exception | None = None

    def write(self, data: bytes) -> int:
        if self.raise_on_write:
            raise self.raise_on_write
        self.writes.append(data)
        return len(data)

    def read(self, n: int) -> bytes:
        if self.chunks:
            return self.chunks.pop(0)
        if self.end_with is not None:
            raise self.end_with
        return b""

    def flush(self) -> None:
        return None


class RecordingDispatcher:
    def __init__(self):
        self.events = []

    def submit(self, event) -> None:
        self.events.append(event)


class CollectSink:
    def __init__(self):
        self.batches = []
        self.closed = False

    def on_batch(self, batch) -> None:
        self.batches.append(batch)

    def close(self) -> None:
        self.closed = True


def test_handshake_sends_auth_then_monitor():
    t = FakeTransport()
    p = StreamProcessor(t, FrequencyAggregator())

    p.handshake("MY_MONITOR", password="s3cret")

    assert t.writes == [b"AUTH s3cret\r\n", b"MY_MONITOR\r\n"]


def test_handshake_without_password():
    t = FakeTransport()
    p = StreamProcessor(t, FrequencyAggregator())

    p.handshake()

    assert t.writes == [b"MONITOR\r\n"]


def test_send_failure_is_disconnect():
    t = FakeTransport()
    t.raise_on_write = TransportIOError("broken pipe")
    p = StreamProcessor(t, FrequencyAggregator())

    with pytest.raises(ServerDisconnectedError):
        p.handshake()


def test_ack_then_geoadd_end_to_end():
    agg = FrequencyAggregator()
    sink = CollectSink()
    disp = DecodeDispatcher(CommandTable.load(), [sink])
    t = FakeTransport([
        b"+OK\r\n",
        b'1634 [0 127.0.0.1:1] "GEOADD" "key" "13.361389" "38.115556" "Palermo"\r\n',
    ])
    p = StreamProcessor(t, agg, disp)

    assert p.pump() == 1
    assert p.pump() == 1
    disp.join()
    disp.close()

    assert agg.count("GEOADD") == 1
    assert agg.count("") == 0
    assert p.acks == 1

    assert len(sink.batches) == 1
    batch = sink.batches[0]
    assert batch.key == "key"
    assert batch.records == (GeoRecord("13.361389", "38.115556", "Palermo"),)
    assert sink.closed is True


def test_lines_split_across_reads():
    agg = FrequencyAggregator()
    d = RecordingDispatcher()
    t = FakeTransport([b'1 [0 127.0.0.1:1] "GE', b'T" "k"\r\n1 [0 127.0.0.1:1] "GET" "j"\r\n'])
    p = StreamProcessor(t, agg, d)

    assert p.pump() == 0
    assert p.pump() == 2

    assert agg.count("GET") == 2
    assert [e.args for e in d.events] == [("k",), ("j",)]


def test_unknown_commands_are_counted_but_not_decoded():
    agg = FrequencyAggregator()
    sink = CollectSink()
    disp = DecodeDispatcher(CommandTable.load(), [sink])
    p = StreamProcessor(FakeTransport(), agg, disp)

    p.handle_line('1 [0 127.0.0.1:1] "GET" "k"')
    disp.join()
    disp.close()

    assert agg.count("GET") == 1
    assert sink.batches == []
    assert disp.ignored == 1


def test_line_without_bracket_is_non_event():
    agg = FrequencyAggregator()
    d = RecordingDispatcher()
    p = StreamProcessor(FakeTransport(), agg, d)

    assert p.handle_line("garbage") is None
    assert p.non_events == 1
    assert agg.has_data is False
    assert d.events == []


def test_error_line_is_fatal_with_server_text():
    t = FakeTransport([b"-ERR unknown command 'MY_MONITOR'\r\n"])
    p = StreamProcessor(t, FrequencyAggregator())

    with pytest.raises(ServerReplyError) as ei:
        p.pump()

    assert "unknown command 'MY_MONITOR'" in ei.value.message
    assert ei.value.message.startswith("Redis return error message: ERR ")


def test_connection_close_is_fatal():
    t = FakeTransport([b"+OK\r\n"], end_with=TransportClosedError("connection closed by server"))
    p = StreamProcessor(t, FrequencyAggregator())

    with pytest.raises(ServerDisconnectedError):
        p.run()

    assert p.acks == 1


def test_read_error_is_fatal():
    t = FakeTransport(end_with=TransportIOError("reset by peer"))
    p = StreamProcessor(t, FrequencyAggregator())

    with pytest.raises(ServerDisconnectedError) as ei:
        p.pump()
    assert ei.value.hint == "reset by peer"


def test_run_stops_on_event():
    import threading

    stop = threading.Event()
    agg = FrequencyAggregator()

    class StoppingTransport(FakeTransport):
        def read(self, n: int) -> bytes:
            stop.set()
            return b'1 [0 127.0.0.1:1] "DEL" "k"\n'

    p = StreamProcessor(StoppingTransport(), agg)
    p.run(stop)

    assert agg.count("DEL") == 1
