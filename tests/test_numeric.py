import pytest

from tdswire.context import ProtocolError, Reader
from tdswire.numeric import Numeric


def test_numeric_eq():
    assert Numeric(100501, 2) == Numeric(1005010, 3)
    assert Numeric(100501, 2) != Numeric(10050, 1)


def test_equal_values_hash_alike():
    assert hash(Numeric(100501, 2)) == hash(Numeric(1005010, 3))
    assert len({Numeric(100501, 2), Numeric(1005010, 3)}) == 1


def test_numeric_to_f64():
    assert float(Numeric(57705, 2)) == 577.05


def test_numeric_to_int_dec_part():
    n = Numeric(57705, 2)
    assert n.int_part() == 577
    assert n.dec_part() == 5
    assert int(n) == 577


def test_negative_parts_truncate_toward_zero():
    n = Numeric(-57705, 2)
    assert n.int_part() == -577
    assert n.dec_part() == -5


def test_calculates_precision_correctly():
    assert Numeric(57705, 2).precision() == 5


def test_precision_of_small_value():
    assert Numeric(5, 2).precision() == 3


def test_display():
    assert str(Numeric(57705, 2)) == "577.05"
    assert str(Numeric(57705, 0)) == "57705.0"


def test_scale_limit():
    with pytest.raises(ValueError):
        Numeric(1, 38)


@pytest.mark.parametrize(
    "value, expected_len",
    [(57705, 5), (10**12, 9), (10**20, 13), (10**30, 17)],
)
def test_encoded_len(value, expected_len):
    n = Numeric(value, 0)
    assert n.encoded_len() == expected_len
    assert len(n.encode()) == expected_len + 1


def test_encode_wire_bytes():
    assert Numeric(57705, 2).encode() == bytes([5, 1]) + (57705).to_bytes(4, "little")
    assert Numeric(-57705, 2).encode()[1] == 0


@pytest.mark.parametrize(
    "value, scale",
    [(57705, 2), (-57705, 2), (10**15, 3), (-(10**22), 4), (10**35, 0), (0, 0)],
)
def test_roundtrip(value, scale):
    original = Numeric(value, scale)
    decoded = Numeric.decode(Reader(original.encode()), scale)
    assert decoded == original
    assert decoded.value == value
    assert decoded.scale == scale


def test_decode_null():
    assert Numeric.decode(Reader(b"\x00"), 2) is None


def test_decode_invalid_sign():
    with pytest.raises(ProtocolError, match="invalid sign"):
        Numeric.decode(Reader(bytes([5, 2, 0, 0, 0, 0])), 0)


def test_decode_invalid_length():
    with pytest.raises(ProtocolError, match="invalid length of 7"):
        Numeric.decode(Reader(bytes([7, 1]) + bytes(6)), 0)