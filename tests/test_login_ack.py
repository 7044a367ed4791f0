import struct

import pytest

from tdswire.context import FeatureLevel, ProtocolError, Reader
from tdswire.login_ack import TokenLoginAck


def login_ack(tds_version, prog_name, version, interface=1):
    raw_name = prog_name.encode("utf-16-le")
    body = (
        bytes([interface])
        + struct.pack(">I", tds_version)
        + bytes([len(raw_name) // 2])
        + raw_name
        + struct.pack("<I", version)
    )
    return struct.pack("<H", len(body)) + body


def test_decode_login_ack():
    data = login_ack(FeatureLevel.SQL_SERVER_N, "Microsoft SQL Server", 0x10000FA0)
    reader = Reader(data)
    ack = TokenLoginAck.decode(reader)
    assert ack == TokenLoginAck(
        1, FeatureLevel.SQL_SERVER_N, "Microsoft SQL Server", 0x10000FA0
    )
    assert reader.remaining == 0


def test_version_is_read_big_endian():
    data = login_ack(FeatureLevel.SQL_SERVER_2008_R2, "srv", 1, interface=0)
    ack = TokenLoginAck.decode(Reader(data))
    assert ack.tds_version is FeatureLevel.SQL_SERVER_2008_R2
    assert ack.interface == 0


def test_invalid_tds_version():
    data = login_ack(0x12345678, "srv", 1)
    with pytest.raises(ProtocolError, match="Invalid TDS version"):
        TokenLoginAck.decode(Reader(data))


def test_truncated_token():
    data = login_ack(FeatureLevel.SQL_SERVER_N, "srv", 1)[:-2]
    with pytest.raises(ProtocolError):
        TokenLoginAck.decode(Reader(data))