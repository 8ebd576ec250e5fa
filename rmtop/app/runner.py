# rmtop/app/runner.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, TextIO

import yaml

from rmtop.app.config import MonitorConfig
from rmtop.app.sinks import JsonlRecordSink, LoggingRecordSink
from rmtop.core.errors import ConfigError, ServerConnectError
from rmtop.protocol.loader import CommandTable
from rmtop.runtime.dispatcher import DecodeDispatcher
from rmtop.runtime.processor import StreamProcessor
from rmtop.stats.aggregator import FrequencyAggregator
from rmtop.stats.render import TableRenderer
from rmtop.stats.reporter import IntervalReporter
from rmtop.transport.base import Transport
from rmtop.transport.errors import TransportError, TransportOpenError
from rmtop.transport.registry import TransportDriverRegistry


@dataclass
class MonitorRun:
    """
    Everything one monitored connection needs, threaded explicitly
    (no process-wide globals).
    """

    config: MonitorConfig
    transport: Transport
    table: CommandTable
    aggregator: FrequencyAggregator
    dispatcher: DecodeDispatcher
    processor: StreamProcessor
    reporter: IntervalReporter
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def start(self) -> None:
        try:
            self.transport.open()
        except TransportOpenError as e:
            self.logger.warning("TRANSPORT_OPEN_FAILED target=%s err=%s", self.transport.describe(), e)
            raise ServerConnectError(
                f"Could not connect to {self.transport.describe()}.",
                hint=str(e),
                details={"driver": self.config.driver},
            ) from None
        except TransportError as e:
            self.logger.exception("TRANSPORT_OPEN_ERROR")
            raise ServerConnectError(
                "Transport error while connecting.",
                hint=str(e),
                details={"driver": self.config.driver},
            ) from None

        self.logger.info("CONNECTED target=%s", self.transport.describe())
        self.processor.handshake(self.config.monitor_command, self.config.password)
        self.reporter.start()

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        self.processor.run(stop_event)

    def close(self) -> None:
        self.reporter.stop()
        if self.reporter.is_alive():
            self.reporter.join(timeout=1.0)

        try:
            self.dispatcher.close()
        except Exception:
            self.logger.exception("DISPATCHER_CLOSE_ERROR")

        try:
            self.transport.close()
        except Exception:
            self.logger.exception("TRANSPORT_CLOSE_ERROR")

    def __enter__(self) -> "MonitorRun":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_command_table(path: Optional[str]) -> CommandTable:
    try:
        return CommandTable.load(path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(
            "Failed to load command table.",
            hint=str(e),
            details={"commands_path": path},
        ) from None


def start_run(
    cfg: MonitorConfig,
    *,
    out: Optional[TextIO] = None,
    drivers: Optional[TransportDriverRegistry] = None,
    logger: Optional[logging.Logger] = None,
) -> MonitorRun:
    """
    Build a MonitorRun from config. Nothing is opened until MonitorRun.start().

    `drivers` is injectable to support testing and custom transports.
    """
    log = logger or logging.getLogger(__name__)

    table = load_command_table(cfg.commands_path)

    drivers = drivers or TransportDriverRegistry.default()
    try:
        transport = drivers.create(cfg.driver, **cfg.transport_params())
    except (TransportError, TypeError) as e:
        raise ConfigError(
            f"Failed to construct transport (driver='{cfg.driver}').",
            hint=str(e),
            details={"driver": cfg.driver},
        ) from None

    sinks: list = [LoggingRecordSink()]
    if cfg.records_file:
        try:
            sinks.append(JsonlRecordSink(file_path=cfg.records_file, logger=log))
        except OSError as e:
            raise ConfigError(
                f"Cannot write records file '{cfg.records_file}'.",
                hint=str(e),
                details={"records_file": cfg.records_file},
            ) from None

    aggregator = FrequencyAggregator()
    dispatcher = DecodeDispatcher(table, sinks, workers=cfg.decode_workers, logger=log)
    processor = StreamProcessor(transport, aggregator, dispatcher, logger=log)
    reporter = IntervalReporter(
        aggregator,
        TableRenderer(out, color=cfg.color),
        interval_s=cfg.interval_s,
        logger=log,
    )

    log.info("RUN_CREATED driver=%s commands=%s", cfg.driver, ",".join(table.names()))

    return MonitorRun(
        config=cfg,
        transport=transport,
        table=table,
        aggregator=aggregator,
        dispatcher=dispatcher,
        processor=processor,
        reporter=reporter,
        logger=log,
    )
