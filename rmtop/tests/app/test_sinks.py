from __future__ import annotations

import json
import logging
from pathlib import Path

from rmtop.app.sinks import JsonlRecordSink, LoggingRecordSink
from rmtop.interfaces.record_sink import DecodedBatch
from rmtop.protocol.args import GeoRecord, KeyValueRecord


def _geo_batch() -> DecodedBatch:
    return DecodedBatch(
        command="GEOADD",
        key="Sicily",
        kind="geo",
        records=(GeoRecord("13.361389", "38.115556", "Palermo"),),
    )


def test_batch_as_dict_omits_empty_fields():
    d = _geo_batch().as_dict()

    assert d == {
        "command": "GEOADD",
        "key": "Sicily",
        "kind": "geo",
        "records": [{"longitude": "13.361389", "latitude": "38.115556", "member": "Palermo"}],
    }


def test_logging_sink_emits_records(caplog):
    sink = LoggingRecordSink()
    batch = DecodedBatch("HSET", "user:1", "pairs", (KeyValueRecord("name", "bob"),), dropped=1)

    with caplog.at_level(logging.INFO, logger="rmtop.records"):
        sink.on_batch(batch)

    assert "RECORDS cmd=HSET key=user:1 kind=pairs" in caplog.text
    assert '"value": "bob"' in caplog.text
    sink.close()


def test_logging_sink_quiet_when_level_disabled(caplog):
    sink = LoggingRecordSink()

    with caplog.at_level(logging.WARNING, logger="rmtop.records"):
        sink.on_batch(_geo_batch())

    assert caplog.records == []


def test_jsonl_sink_writes_one_line_per_batch(tmp_path: Path):
    path = tmp_path / "out" / "records.jsonl"
    sink = JsonlRecordSink(file_path=path, flush_interval_s=0.05)

    sink.on_batch(_geo_batch())
    sink.on_batch(DecodedBatch("HSET", "h", "pairs", (KeyValueRecord("a", "1"),), dropped=1))
    sink.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2

    first = json.loads(lines[0])
    assert first["command"] == "GEOADD"
    assert first["records"][0]["member"] == "Palermo"
    assert "ts_utc" in first

    second = json.loads(lines[1])
    assert second["dropped"] == 1


def test_jsonl_sink_ignores_batches_after_close(tmp_path: Path):
    path = tmp_path / "records.jsonl"
    sink = JsonlRecordSink(file_path=path)
    sink.close()

    sink.on_batch(_geo_batch())
    sink.close()

    assert not path.exists()
