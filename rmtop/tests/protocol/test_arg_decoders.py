from __future__ import annotations

from rmtop.protocol.args import (
    ArgsRecord,
    GeoRecord,
    KeyValueRecord,
    decode_args,
    decode_geo,
    decode_pairs,
    record_as_dict,
)


def test_pairs_even_length():
    res = decode_pairs(["k1", "v1", "k2", "v2"])

    assert res.records == (KeyValueRecord("k1", "v1"), KeyValueRecord("k2", "v2"))
    assert res.dropped == 0
    assert res.anomaly is False


def test_pairs_odd_length_drops_trailing_token():
    res = decode_pairs(["k1", "v1", "k2"])

    assert res.records == (KeyValueRecord("k1", "v1"),)
    assert res.dropped == 1
    assert res.anomaly is True


def test_pairs_empty():
    res = decode_pairs([])
    assert res.records == ()
    assert res.dropped == 0


def test_geo_two_triples_in_field_order():
    res = decode_geo(["lon1", "lat1", "m1", "lon2", "lat2", "m2"])

    assert res.records == (
        GeoRecord(longitude="lon1", latitude="lat1", member="m1"),
        GeoRecord(longitude="lon2", latitude="lat2", member="m2"),
    )
    assert res.dropped == 0


def test_geo_seven_tokens_keeps_two_complete_records():
    res = decode_geo(["lon1", "lat1", "m1", "lon2", "lat2", "m2", "lon3"])

    assert len(res.records) == 2
    assert res.records[-1].member == "m2"
    assert res.dropped == 1


def test_geo_keeps_numeric_text_verbatim():
    res = decode_geo(["13.361389000000001", "38.115556", "Palermo"])

    assert res.records[0].longitude == "13.361389000000001"
    assert res.records[0].latitude == "38.115556"


def test_geo_short_input_does_not_crash():
    res = decode_geo(["13.36", "38.11"])
    assert res.records == ()
    assert res.dropped == 2


def test_raw_forwards_values():
    res = decode_args(["k", "v", "EX", "10"])
    assert res.records == (ArgsRecord(values=("k", "v", "EX", "10")),)


def test_record_as_dict():
    assert record_as_dict(KeyValueRecord("f", "v")) == {"key": "f", "value": "v"}
    assert record_as_dict(GeoRecord("1", "2", "m")) == {"longitude": "1", "latitude": "2", "member": "m"}
    assert record_as_dict(ArgsRecord(values=("a", "b"))) == {"values": ["a", "b"]}
