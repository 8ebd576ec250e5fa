from __future__ import annotations

from rmtop.protocol.lines import LineReader, is_ack, is_error


def test_get_line_returns_none_until_newline():
    r = LineReader()

    r.feed(b'1 [0 127.0.0.1:1] "GET"')
    assert r.get_line() is None

    r.feed(b' "k"\r\n')
    assert r.get_line() == '1 [0 127.0.0.1:1] "GET" "k"'
    assert r.get_line() is None


def test_lines_drains_multiple_and_keeps_partial():
    r = LineReader()
    r.feed(b"+OK\r\nfirst\nsec")

    assert r.lines() == ["+OK", "first"]
    assert bytes(r.buffer) == b"sec"


def test_invalid_utf8_is_replaced():
    r = LineReader()
    r.feed(b"\xff\xfe\n")

    line = r.get_line()
    assert line is not None
    assert "�" in line


def test_oversized_partial_line_is_discarded():
    r = LineReader(max_line=8)
    r.feed(b"x" * 20)

    assert r.get_line() is None
    assert len(r.buffer) == 0


def test_ack_and_error_classification():
    assert is_ack("+OK")
    assert not is_ack("+OK extra")
    assert is_error("-ERR unknown command 'MY_MONITOR'")
    assert is_error("-NOAUTH Authentication required.")
    assert not is_error('1 [0 127.0.0.1:1] "DEL" "-x"')
