"""FEATUREEXTACK token: the server's answer to requested feature extensions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .context import ProtocolError, Reader

FEA_EXT_FEDAUTH = 0x02
FEA_EXT_TERMINATOR = 0xFF

NONCE_LEN = 32


@dataclass(frozen=True)
class FedAuthAck:
    """Acknowledgement of federated authentication with a security token."""

    nonce: Optional[bytes] = None


@dataclass
class TokenFeatureExtAck:
    """All feature acknowledgements sent with the login response."""

    features: list[FedAuthAck] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: Reader) -> TokenFeatureExtAck:
        """Read features until the terminator byte."""
        features: list[FedAuthAck] = []
        while True:
            feature_id = reader.read_u8()
            if feature_id == FEA_EXT_TERMINATOR:
                break
            if feature_id != FEA_EXT_FEDAUTH:
                raise ProtocolError(f"unsupported feature {feature_id}")
            data_len = reader.read_u32_le()
            if data_len == NONCE_LEN:
                nonce: Optional[bytes] = reader.read_exact(NONCE_LEN)
            elif data_len == 0:
                nonce = None
            else:
                raise ProtocolError("invalid Feature_Ext_Ack token")
            features.append(FedAuthAck(nonce))
        return cls(features)