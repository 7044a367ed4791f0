import pytest

from tdswire.context import (
    Context,
    EncodingError,
    FeatureLevel,
    ProtocolError,
    Reader,
    TdsError,
)


def test_context_defaults():
    ctx = Context()
    assert ctx.packet_size == 4096
    assert ctx.version is FeatureLevel.SQL_SERVER_N
    assert ctx.transaction_descriptor == bytes(8)
    assert ctx.last_meta is None
    assert ctx.spn == ""


def test_next_packet_id_increments():
    ctx = Context()
    assert [ctx.next_packet_id() for _ in range(3)] == [0, 1, 2]


def test_next_packet_id_wraps():
    ctx = Context()
    ids = [ctx.next_packet_id() for _ in range(257)]
    assert ids[255] == 255
    assert ids[256] == 0


def test_set_spn():
    ctx = Context()
    ctx.set_spn("db.example.com", 1433)
    assert ctx.spn == "MSSQLSvc/db.example.com:1433"


def test_done_row_count_bytes_by_version():
    assert FeatureLevel.SQL_SERVER_N.done_row_count_bytes() == 8
    assert FeatureLevel.SQL_SERVER_2005.done_row_count_bytes() == 8
    assert FeatureLevel.SQL_SERVER_V7.done_row_count_bytes() == 4


def test_feature_level_rejects_unknown_value():
    with pytest.raises(ValueError):
        FeatureLevel(0x12345678)


def test_read_integers():
    value16, value32, value64 = 0xBEEF, 0xDEADBEEF, 0x0102030405060708
    data = (
        bytes([7])
        + value16.to_bytes(2, "little")
        + value32.to_bytes(4, "little")
        + value32.to_bytes(4, "big")
        + value64.to_bytes(8, "little")
    )
    reader = Reader(data)
    assert reader.read_u8() == 7
    assert reader.read_u16_le() == value16
    assert reader.read_u32_le() == value32
    assert reader.read_u32_be() == value32
    assert reader.read_u64_le() == value64
    assert reader.remaining == 0


def test_read_exact_and_eof():
    reader = Reader(b"abc")
    assert reader.read_exact(2) == b"ab"
    with pytest.raises(ProtocolError):
        reader.read_exact(2)


def test_read_u32_on_short_buffer():
    with pytest.raises(TdsError):
        Reader(b"\x01\x02").read_u32_le()


def test_read_b_varchar():
    text = "héllo"
    data = bytes([len(text)]) + text.encode("utf-16-le")
    assert Reader(data).read_b_varchar() == text


def test_read_us_varchar():
    text = "owner"
    data = len(text).to_bytes(2, "little") + text.encode("utf-16-le")
    reader = Reader(data)
    assert reader.read_us_varchar() == text
    assert reader.remaining == 0


def test_invalid_utf16_raises_encoding_error():
    # a lone low surrogate is not valid UTF-16
    data = bytes([1]) + b"\x00\xdc"
    with pytest.raises(EncodingError):
        Reader(data).read_b_varchar()


def test_reader_uses_given_context():
    ctx = Context(packet_size=8192)
    assert Reader(b"", ctx).context.packet_size == 8192