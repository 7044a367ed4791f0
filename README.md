# tdswire

Building blocks for the TDS wire protocol used by SQL Server. The package
provides the pre-login message, column type descriptions, exact decimals,
collations, and several of the server's response tokens. It works only on
bytes and opens no connections.

## Install

    pip install tdswire

## Modules

- `tdswire.context` holds `Context`, which tracks the packet size, packet ids
  (`next_packet_id`, which wraps after 255), the transaction descriptor and
  the service principal name (`set_spn`). It also holds `FeatureLevel` (with
  `done_row_count_bytes`), the `Reader` over a byte buffer (`read_u8`,
  `read_u16_le`, `read_u32_le`, `read_u32_be`, `read_u64_le`, `read_exact`,
  `read_b_varchar`, `read_us_varchar`) and the errors `TdsError`,
  `ProtocolError`, `EncodingError` and `BulkInputError`.
- `tdswire.collation` holds `Collation` (`lcid`, `encoding`) and the lookups
  `lcid_to_encoding` and `sortid_to_encoding`. Each lookup returns a Python
  codec name, or `None` when the code page is unsupported.
- `tdswire.numeric` holds `Numeric`, an exact decimal with a scale of at most
  37 (`int_part`, `dec_part`, `precision`, `encoded_len`, `encode`,
  `decode`).
- `tdswire.type_info` holds the column type descriptions `FixedLen`,
  `VarLenSized` (wrapping a `VarLenContext`), `VarLenSizedPrecision` and
  `XmlTypeInfo` (with an optional `XmlSchema`). It also holds the enums
  `FixedLenType` and `VarLenType`, `TypeLength`, and `decode_type_info`.
- `tdswire.pre_login` holds `PreloginMessage` (`encode`, `decode`,
  `negotiated_encryption`), `EncryptionLevel` and `ActivityId`.
- `tdswire.token_order` holds `TokenOrder`.
- `tdswire.token_info` holds `TokenInfo`.
- `tdswire.token_sspi` holds `TokenSspi`.
- `tdswire.login_ack` holds `TokenLoginAck`.
- `tdswire.feature_ext_ack` holds `TokenFeatureExtAck` and `FedAuthAck`.

A token's `decode` reads the token body from a `Reader`. The token type byte
must already have been consumed.

## Example

```python
from tdswire.collation import Collation
from tdswire.context import Reader
from tdswire.numeric import Numeric
from tdswire.pre_login import PreloginMessage
from tdswire.token_order import TokenOrder

message = PreloginMessage()
message.fed_auth_required = True
payload = message.encode()
assert PreloginMessage.decode(payload) == message

amount = Numeric(57705, 2)
print(amount)                  # 577.05
assert Numeric.decode(Reader(amount.encode()), 2) == amount

print(Collation(13632521, 52).encoding())   # cp1252

order = TokenOrder.decode(Reader(b"\x04\x00\x01\x00\x02\x00"))
print(order.column_indexes)    # [1, 2]
```

When the bytes break the protocol, the package raises `ProtocolError`. When
text cannot be decoded, it raises `EncodingError`. Both are subclasses of
`TdsError`.

## What it does not do

The package is not a database client. It does not connect to a server,
authenticate or run queries. It also does not read the tokens that describe
result columns, carry rows, report completion (DONE) or announce environment
changes. You have to dispatch on token type bytes and parse those tokens
yourself.

## Tests

    pip install -e ".[test]"
    pytest