"""
Signature Module

Raster capture of hand-drawn signatures for signature fields.
"""

from .capture import (
    SignatureError,
    clear_signature,
    decode_signature,
    encode_signature,
    is_signature_captured,
    render_signature,
)

__all__ = [
    "SignatureError",
    "clear_signature",
    "decode_signature",
    "encode_signature",
    "is_signature_captured",
    "render_signature"
]
