"""Column type descriptions (TYPE_INFO) as sent in metadata and parameters."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

from .collation import Collation
from .context import ProtocolError, Reader

XML_SIZE = 0xFFFFFFFFFFFFFFFE


@dataclass(frozen=True)
class TypeLength:
    """A column length in bytes or characters; ``limit`` None means MAX."""

    limit: Optional[int] = None

    @property
    def is_max(self) -> bool:
        """True when the length is unlimited and stored out of row."""
        return self.limit is None

    def __str__(self) -> str:
        return "max" if self.limit is None else str(self.limit)


class FixedLenType(IntEnum):
    """Types whose length is implied by the type byte."""

    NULL = 0x1F
    INT1 = 0x30
    BIT = 0x32
    INT2 = 0x34
    INT4 = 0x38
    DATETIME4 = 0x3A
    FLOAT4 = 0x3B
    MONEY = 0x3C
    DATETIME = 0x3D
    FLOAT8 = 0x3E
    MONEY4 = 0x7A
    INT8 = 0x7F


class VarLenType(IntEnum):
    """Types followed by an explicit length."""

    GUID = 0x24
    INTN = 0x26
    BITN = 0x68
    DECIMALN = 0x6A
    NUMERICN = 0x6C
    FLOATN = 0x6D
    MONEY = 0x6E
    DATETIMEN = 0x6F
    DATEN = 0x28
    TIMEN = 0x29
    DATETIME2 = 0x2A
    DATETIME_OFFSETN = 0x2B
    BIG_VAR_BIN = 0xA5
    BIG_VAR_CHAR = 0xA7
    BIG_BINARY = 0xAD
    BIG_CHAR = 0xAF
    NVARCHAR = 0xE7
    NCHAR = 0xEF
    XML = 0xF1
    UDT = 0xF0
    TEXT = 0x23
    IMAGE = 0x22
    NTEXT = 0x63
    SS_VARIANT = 0x62


_BYTE_LEN_TYPES = frozenset(
    {
        VarLenType.DATEN,
        VarLenType.TIMEN,
        VarLenType.DATETIME_OFFSETN,
        VarLenType.DATETIME2,
        VarLenType.BITN,
        VarLenType.INTN,
        VarLenType.FLOATN,
        VarLenType.DECIMALN,
        VarLenType.NUMERICN,
        VarLenType.GUID,
        VarLenType.MONEY,
        VarLenType.DATETIMEN,
    }
)

_USHORT_LEN_TYPES = frozenset(
    {
        VarLenType.NCHAR,
        VarLenType.BIG_CHAR,
        VarLenType.NVARCHAR,
        VarLenType.BIG_VAR_CHAR,
        VarLenType.BIG_BINARY,
        VarLenType.BIG_VAR_BIN,
    }
)

_LONG_LEN_TYPES = frozenset({VarLenType.IMAGE, VarLenType.TEXT, VarLenType.NTEXT})

_COLLATED_TYPES = frozenset(
    {
        VarLenType.NTEXT,
        VarLenType.TEXT,
        VarLenType.BIG_CHAR,
        VarLenType.NCHAR,
        VarLenType.NVARCHAR,
        VarLenType.BIG_VAR_CHAR,
    }
)


def _utf16(text: str) -> tuple[int, bytes]:
    raw = text.encode("utf-16-le")
    return len(raw) // 2, raw


@dataclass(frozen=True)
class XmlSchema:
    """The schema collection an XML column is bound to."""

    db_name: str
    owner: str
    collection: str


@dataclass(frozen=True)
class VarLenContext:
    """A variable-length type with its length and optional collation."""

    ty: VarLenType
    length: int
    collation: Optional[Collation] = None

    def encode(self) -> bytes:
        """Type byte, length field of the type's width, then the collation."""
        out = bytearray([self.ty])
        if self.ty in _BYTE_LEN_TYPES:
            out.append(self.length & 0xFF)
        elif self.ty in _USHORT_LEN_TYPES:
            out += struct.pack("<H", self.length & 0xFFFF)
        elif self.ty in _LONG_LEN_TYPES:
            out += struct.pack("<I", self.length & 0xFFFFFFFF)
        elif self.ty is not VarLenType.XML:
            raise ValueError(f"encoding {self.ty.name} is not supported")
        if self.collation is not None:
            out += struct.pack("<IB", self.collation.info, self.collation.sort_id)
        return bytes(out)


@dataclass(frozen=True)
class FixedLen:
    """A fixed-length type."""

    ty: FixedLenType

    def encode(self) -> bytes:
        return bytes([self.ty])


@dataclass(frozen=True)
class VarLenSized:
    """A variable-length type described by a context."""

    context: VarLenContext

    def encode(self) -> bytes:
        return self.context.encode()


@dataclass(frozen=True)
class VarLenSizedPrecision:
    """A decimal or numeric type with size, precision and scale."""

    ty: VarLenType
    size: int
    precision: int
    scale: int

    def encode(self) -> bytes:
        return bytes([self.ty, self.size & 0xFF, self.precision, self.scale])


@dataclass(frozen=True)
class XmlTypeInfo:
    """The XML type, optionally bound to a schema collection."""

    schema: Optional[XmlSchema] = None
    size: int = XML_SIZE

    def encode(self) -> bytes:
        out = bytearray([VarLenType.XML])
        if self.schema is None:
            out.append(0)
            return bytes(out)
        out.append(1)
        units, raw = _utf16(self.schema.db_name)
        out.append(units & 0xFF)
        out += raw
        units, raw = _utf16(self.schema.owner)
        out.append(units & 0xFF)
        out += raw
        units, raw = _utf16(self.schema.collection)
        out += struct.pack("<H", units & 0xFFFF)
        out += raw
        return bytes(out)


TypeInfo = Union[FixedLen, VarLenSized, VarLenSizedPrecision, XmlTypeInfo]


def decode_type_info(reader: Reader) -> TypeInfo:
    """Read a TYPE_INFO structure."""
    raw = reader.read_u8()
    try:
        return FixedLen(FixedLenType(raw))
    except ValueError:
        pass
    try:
        ty = VarLenType(raw)
    except ValueError:
        raise ProtocolError(f"invalid or unsupported column type: {raw}") from None

    if ty is VarLenType.XML:
        schema = None
        if reader.read_u8() == 1:
            db_name = reader.read_b_varchar()
            owner = reader.read_b_varchar()
            collection = reader.read_us_varchar()
            schema = XmlSchema(db_name, owner, collection)
        return XmlTypeInfo(schema, XML_SIZE)

    if ty is VarLenType.DATEN:
        length = 3
    elif ty in _BYTE_LEN_TYPES:
        length = reader.read_u8()
    elif ty in _USHORT_LEN_TYPES:
        length = reader.read_u16_le()
    elif ty in _LONG_LEN_TYPES:
        length = reader.read_u32_le()
    else:
        raise ProtocolError(f"column type {ty.name} is not supported")

    collation = None
    if ty in _COLLATED_TYPES:
        info = reader.read_u32_le()
        sort_id = reader.read_u8()
        collation = Collation(info, sort_id)

    if ty in (VarLenType.DECIMALN, VarLenType.NUMERICN):
        precision = reader.read_u8()
        scale = reader.read_u8()
        return VarLenSizedPrecision(ty, length, precision, scale)

    return VarLenSized(VarLenContext(ty, length, collation))