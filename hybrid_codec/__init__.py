"""
hybrid_codec
============
Hybrid-encryption transport codec.
RSA-OAEP key wrapping + AES-GCM payload encryption + timestamp freshness.

    encode(plaintext, public_key)              -> FramedMessage
    decode(frame, private_key, window=None)    -> plaintext

Frames serialize to canonical JSON and can travel over any transport
(HTTP, queues, files). The codec itself does no I/O.

License: Apache 2.0
"""

__version__ = "1.0.0"

from .config   import CodecConfig, DEFAULT_CONFIG, FRAME_VERSION
from .decoder  import DecodeResult, Decoder
from .encoder  import Encoder
from .errors   import (ClockSkewError, CodecError, DecodeError, EncodeError,
                       KeyGenerationError, KeyUnwrapError, KeyWrapError,
                       MalformedMessageError, PayloadDecryptError,
                       StaleMessageError, UnsupportedVersionError)
from .framing  import FramedMessage
from .keys     import (KeyRing, KeyWrapper, export_private_pem, export_public_pem,
                       generate_keypair, key_id, load_private_key,
                       load_public_key)
from .symmetric import PayloadCipher


def encode(plaintext: bytes, recipient_public_key) -> FramedMessage:
    """Encode with the default configuration."""
    return Encoder().encode(plaintext, recipient_public_key)


def decode(message, recipient_private_key, freshness_window=None) -> bytes:
    """Decode with the default configuration."""
    return Decoder().decode(message, recipient_private_key, freshness_window)


__all__ = [
    "encode",
    "decode",
    "Encoder",
    "Decoder",
    "DecodeResult",
    "FramedMessage",
    "CodecConfig",
    "DEFAULT_CONFIG",
    "FRAME_VERSION",
    "KeyRing",
    "KeyWrapper",
    "PayloadCipher",
    "generate_keypair",
    "export_public_pem",
    "export_private_pem",
    "load_public_key",
    "load_private_key",
    "key_id",
    "CodecError",
    "EncodeError",
    "DecodeError",
    "KeyGenerationError",
    "KeyWrapError",
    "MalformedMessageError",
    "UnsupportedVersionError",
    "KeyUnwrapError",
    "PayloadDecryptError",
    "StaleMessageError",
    "ClockSkewError",
]
