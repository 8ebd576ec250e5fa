# rmtop/runtime/processor.py
from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol as TypingProtocol

from rmtop.core.errors import ServerDisconnectedError, ServerReplyError
from rmtop.protocol.decoder import CommandEvent, decode_line
from rmtop.protocol.lines import LineReader, is_ack, is_error
from rmtop.stats.aggregator import FrequencyAggregator
from rmtop.transport.errors import TransportClosedError, TransportError


class TransportIO(TypingProtocol):
    """Minimal I/O interface for StreamProcessor."""
    def write(self, data: bytes) -> int: ...
    def read(self, n: int) -> bytes: ...
    def flush(self) -> None: ...


class EventDispatcher(TypingProtocol):
    def submit(self, event: CommandEvent) -> None: ...


class StreamProcessor:
    """
    Reads the MONITOR feed, counts every command synchronously and hands
    the decoded event to the dispatcher for argument decoding.

    Transport failures and server error lines are fatal (no retry).
    """

    READ_SIZE = 4096

    def __init__(
        self,
        transport: TransportIO,
        aggregator: FrequencyAggregator,
        dispatcher: Optional[EventDispatcher] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.aggregator = aggregator
        self.dispatcher = dispatcher

        self._log = logger or logging.getLogger(__name__)
        self._reader = LineReader(logger=self._log)

        self.lines_seen = 0
        self.acks = 0
        self.non_events = 0

    # ---------------- Commands ----------------
    def send_command(self, *parts: str) -> None:
        """Send an inline command (space separated, newline terminated)."""
        raw = (" ".join(parts) + "\r\n").encode("utf-8")
        try:
            self.transport.write(raw)
            self.transport.flush()
        except TransportError as e:
            self._log.warning("CMD_SEND_FAILED cmd=%s err=%s", parts[0] if parts else "", e)
            raise ServerDisconnectedError(
                "Failed to send command to server.",
                hint=str(e),
                details={"cmd": parts[0] if parts else ""},
            ) from None

    def handshake(self, monitor_command: str = "MONITOR", password: Optional[str] = None) -> None:
        if password:
            self.send_command("AUTH", password)
        self.send_command(monitor_command)
        self._log.info("MONITOR_STARTED cmd=%s auth=%s", monitor_command, bool(password))

    # ---------------- Line handling ----------------
    def handle_line(self, line: str) -> Optional[CommandEvent]:
        """
        Process one feed line. Returns the decoded event, or None for
        acknowledgements and non-event lines.
        """
        self.lines_seen += 1

        if is_ack(line):
            self.acks += 1
            return None

        if is_error(line):
            text = line[1:].rstrip("\r\n")
            self._log.error("SERVER_ERROR_LINE text=%s", text)
            raise ServerReplyError(
                f"Redis return error message: {text}",
                details={"line": line},
            )

        event = decode_line(line)
        if not event.name:
            self.non_events += 1
            self._log.debug("NON_EVENT_LINE line=%r", line[:120])
            return None

        self.aggregator.increment(event.name)
        if self.dispatcher is not None:
            self.dispatcher.submit(event)
        return event

    # ---------------- RX Pump ----------------
    def pump(self) -> int:
        """Read once from the transport and handle every complete line."""
        try:
            data = self.transport.read(self.READ_SIZE)
        except TransportClosedError as e:
            self._log.warning("TRANSPORT_CLOSED err=%s", e)
            raise ServerDisconnectedError("Connection closed by server.", hint=str(e)) from None
        except TransportError as e:
            self._log.exception("TRANSPORT_READ_FAILED")
            raise ServerDisconnectedError("Failed to read from server.", hint=str(e)) from None

        if data:
            self._reader.feed(data)

        handled = 0
        for line in self._reader.lines():
            self.handle_line(line)
            handled += 1
        return handled

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Pump until stop_event is set; errors propagate to the caller."""
        while stop_event is None or not stop_event.is_set():
            self.pump()
