"""
Encoder: RSA-OAEP + AES-GCM envelope encryption
===============================================
Encrypt the DATA with a fresh random AES key, then encrypt THAT key
with the recipient's RSA public key. Only the holder of the matching
private key can recover the AES key, and only the AES key opens the
payload.

    1. fresh 128-bit AES key from os.urandom
    2. AES-GCM(payload), random nonce, header as associated data
    3. RSA-OAEP(AES key) under the recipient's public key
    4. stamp the current UTC time
    5. frame it

The AES key lives in a bytearray that is wiped before encode() returns,
on success or failure.

Dependencies: cryptography >= 41.0
"""

import logging

from .config import DEFAULT_CONFIG, CodecConfig
from .framing import FramedMessage
from .keys import KeyWrapper, PublicKeyLike, key_id, load_public_key
from .symmetric import PayloadCipher

logger = logging.getLogger(__name__)


class Encoder:
    """Builds FramedMessages for a recipient's RSA public key."""

    def __init__(self, config: CodecConfig = None):
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> CodecConfig:
        return self._config

    def encode(self, plaintext: bytes, recipient_public_key: PublicKeyLike) -> FramedMessage:
        """
        Encrypt plaintext for the holder of the matching private key.

        Raises KeyGenerationError if no randomness is available and
        KeyWrapError if the public key is unusable.
        """
        if not isinstance(plaintext, (bytes, bytearray, memoryview)):
            raise TypeError(f"plaintext must be bytes, not {type(plaintext).__name__}.")
        cfg        = self._config
        public_key = load_public_key(recipient_public_key)
        kid        = key_id(public_key)
        timestamp  = cfg.now()

        cipher = PayloadCipher.generate(cfg.symmetric_key_bits)
        try:
            wrapped = KeyWrapper(cfg.hash_algorithm()).wrap(public_key, cipher.key)
            header  = FramedMessage(b"", wrapped, timestamp, kid, cfg.version)
            data    = cipher.encrypt(bytes(plaintext), header.header_bytes())
        finally:
            cipher.wipe()

        logger.debug(
            "Encoded %d bytes for key %s (RSA-%d): data=%dB key=%dB",
            len(plaintext), kid, public_key.key_size, len(data), len(wrapped),
        )
        return FramedMessage(
            ciphertext=data,
            wrapped_key=wrapped,
            timestamp=timestamp,
            kid=kid,
            version=cfg.version,
        )
