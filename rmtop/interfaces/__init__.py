from .record_sink import DecodedBatch, RecordSink

__all__ = ["DecodedBatch", "RecordSink"]
