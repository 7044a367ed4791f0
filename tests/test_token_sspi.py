import struct

import pytest

from tdswire.context import ProtocolError, Reader
from tdswire.token_sspi import TokenSspi


def test_decode_reads_length_prefixed_blob():
    blob = b"NTLMSSP\x00\x01"
    reader = Reader(struct.pack("<H", len(blob)) + blob + b"rest")
    token = TokenSspi.decode(reader)
    assert bytes(token) == blob
    assert reader.remaining == len(b"rest")


def test_encode_is_raw_blob():
    blob = b"\x01\x02\x03"
    assert TokenSspi(blob).encode() == blob


def test_roundtrip_with_framing():
    blob = bytes(range(40))
    framed = struct.pack("<H", len(blob)) + TokenSspi(blob).encode()
    assert TokenSspi.decode(Reader(framed)) == TokenSspi(blob)


def test_truncated_blob():
    with pytest.raises(ProtocolError):
        TokenSspi.decode(Reader(struct.pack("<H", 10) + b"abc"))