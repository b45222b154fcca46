import struct

import pytest

from tsframe.record import Label, Sample, TimeSeries


def _ts() -> TimeSeries:
    return TimeSeries(
        labels=[Label("__name__", "http_requests_total"), Label("path", "/ünïcode")],
        samples=[Sample(1.25, 1_700_000_000_000), Sample(-3.0, 1_700_000_015_000)],
    )


def test_size_matches_marshal_to():
    ts = _ts()
    buf = bytearray(ts.size())
    assert ts.marshal_to(buf) == ts.size()


def test_marshal_unmarshal():
    ts = _ts()
    buf = bytearray(ts.size())
    ts.marshal_to(buf)
    assert TimeSeries.unmarshal(bytes(buf)) == ts


def test_layout_is_big_endian():
    ts = TimeSeries(labels=[Label("a", "bc")], samples=[Sample(2.0, 7)])
    buf = bytearray(ts.size())
    ts.marshal_to(buf)
    assert bytes(buf) == (
        struct.pack("!I", 1)
        + struct.pack("!I", 1) + b"a" + struct.pack("!I", 2) + b"bc"
        + struct.pack("!I", 1) + struct.pack("!dq", 2.0, 7)
    )


def test_empty_series():
    ts = TimeSeries()
    assert ts.size() == 8
    buf = bytearray(8)
    ts.marshal_to(buf)
    assert TimeSeries.unmarshal(buf) == ts


def test_marshal_into_larger_buffer_writes_prefix_only():
    ts = _ts()
    buf = bytearray(b"\xff" * (ts.size() + 10))
    n = ts.marshal_to(memoryview(buf))
    assert buf[n:] == b"\xff" * 10


def test_marshal_to_small_buffer():
    with pytest.raises(ValueError):
        _ts().marshal_to(bytearray(3))


def test_label_lookup():
    ts = _ts()
    assert ts.label("__name__") == "http_requests_total"
    assert ts.label("missing") is None


@pytest.mark.parametrize("cut", [0, 2, 5, 10])
def test_truncated_payload_rejected(cut):
    ts = _ts()
    buf = bytearray(ts.size())
    ts.marshal_to(buf)
    with pytest.raises(ValueError):
        TimeSeries.unmarshal(bytes(buf[:cut]))


def test_trailing_bytes_rejected():
    ts = _ts()
    buf = bytearray(ts.size())
    ts.marshal_to(buf)
    with pytest.raises(ValueError, match="trailing"):
        TimeSeries.unmarshal(bytes(buf) + b"\x00")


def test_invalid_utf8_rejected():
    payload = struct.pack("!I", 1) + struct.pack("!I", 1) + b"\xff" + struct.pack("!I", 0) + struct.pack("!I", 0)
    with pytest.raises(ValueError):
        TimeSeries.unmarshal(payload)
