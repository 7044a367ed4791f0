"""Encoding and decoding of TDS pre-login messages, type descriptions, decimals, collations and server tokens."""

__version__ = "0.12.3"