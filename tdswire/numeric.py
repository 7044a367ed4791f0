"""Fixed-point decimal values as carried by DECIMAL and NUMERIC columns."""

from __future__ import annotations

from .context import ProtocolError, Reader

MAX_SCALE = 37

_U32 = (1 << 32) - 1
_U64 = (1 << 64) - 1
_U128 = (1 << 128) - 1


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Numeric:
    """A decimal number stored as an integer and a scale of at most 37."""

    __slots__ = ("_value", "_scale")

    def __init__(self, value: int, scale: int = 0) -> None:
        if not 0 <= scale <= MAX_SCALE:
            raise ValueError(f"scale must be between 0 and {MAX_SCALE}, got {scale}")
        self._value = int(value)
        self._scale = int(scale)

    @property
    def value(self) -> int:
        """The unscaled integer value."""
        return self._value

    @property
    def scale(self) -> int:
        """Number of digits after the decimal point."""
        return self._scale

    def _pow_scale(self) -> int:
        return 10**self._scale

    def int_part(self) -> int:
        """The integer part, truncated toward zero."""
        return _trunc_div(self._value, self._pow_scale())

    def dec_part(self) -> int:
        """The fractional digits as an integer, carrying the value's sign."""
        return self._value - self.int_part() * self._pow_scale()

    def precision(self) -> int:
        """Total number of digits, counting at least one before the point."""
        digits = len(str(abs(self.int_part()))) if self.int_part() else 0
        return (digits or 1) + self._scale

    def encoded_len(self) -> int:
        """Length byte used on the wire: sign plus 4, 8, 12 or 16 value bytes."""
        precision = self.precision()
        if 1 <= precision <= 9:
            return 5
        if 10 <= precision <= 19:
            return 9
        if 20 <= precision <= 28:
            return 13
        return 17

    def encode(self) -> bytes:
        """Encode as length byte, sign byte and little-endian magnitude."""
        length = self.encoded_len()
        sign = 0 if self._value < 0 else 1
        magnitude = abs(self._value)
        if length == 5:
            body = (magnitude & _U32).to_bytes(4, "little")
        elif length == 9:
            body = (magnitude & _U64).to_bytes(8, "little")
        elif length == 13:
            body = (magnitude & _U64).to_bytes(8, "little") + (
                (magnitude >> 64) & _U32
            ).to_bytes(4, "little")
        else:
            body = (magnitude & _U128).to_bytes(16, "little")
        return bytes((length, sign)) + body

    @classmethod
    def decode(cls, reader: Reader, scale: int) -> Numeric | None:
        """Read a value; a zero length byte means NULL and gives None."""
        length = reader.read_u8()
        if length == 0:
            return None
        sign_byte = reader.read_u8()
        if sign_byte == 0:
            sign = -1
        elif sign_byte == 1:
            sign = 1
        else:
            raise ProtocolError("decimal: invalid sign")
        if length == 5:
            magnitude = reader.read_u32_le()
        elif length == 9:
            magnitude = reader.read_u64_le()
        elif length in (13, 17):
            magnitude = int.from_bytes(reader.read_exact(length - 1), "little")
            if magnitude >= 1 << 127:
                magnitude -= 1 << 128
        else:
            raise ProtocolError(
                f"decimal/numeric: invalid length of {length} received"
            )
        return cls(magnitude * sign, scale)

    def _normalized(self) -> tuple[int, int]:
        value, scale = self._value, self._scale
        while scale > 0 and value % 10 == 0:
            value //= 10
            scale -= 1
        return value, scale

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Numeric):
            return NotImplemented
        if self._scale > other._scale:
            return 10 ** (self._scale - other._scale) * other._value == self._value
        if self._scale < other._scale:
            return 10 ** (other._scale - self._scale) * self._value == other._value
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._normalized())

    def __float__(self) -> float:
        return self.dec_part() / self._pow_scale() + float(self.int_part())

    def __int__(self) -> int:
        return self.int_part()

    def __str__(self) -> str:
        dec = self.dec_part()
        dec_text = f"{dec:0{self._scale}d}" if self._scale else str(dec)
        return f"{self.int_part()}.{dec_text}"

    def __repr__(self) -> str:
        return f"Numeric({self._value}, scale={self._scale})"