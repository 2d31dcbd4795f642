"""
Payload cipher: AES-GCM
=======================
AES in Galois/Counter Mode with a fresh random nonce per message.

GCM gives authenticated encryption: any change to the ciphertext, the
nonce or the associated data is detected on decryption. The random
nonce means two encryptions of the same plaintext under the same key
never produce the same bytes.

Key size: 128 bits by default (192 / 256 accepted).
Nonce:    96 bits (12 bytes), randomly generated per message.
Tag:      128 bits (16 bytes).

Payload format: nonce(12) || ciphertext || tag(16)

Dependencies: cryptography >= 41.0
"""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import SYMMETRIC_KEY_BITS
from .errors import KeyGenerationError, PayloadDecryptError

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
TAG_SIZE   = 16


def wipe(buf: bytearray) -> None:
    """Overwrite key material in place."""
    for i in range(len(buf)):
        buf[i] = 0


def _urandom(n: int) -> bytes:
    try:
        return os.urandom(n)
    except (OSError, NotImplementedError) as exc:
        raise KeyGenerationError(f"Secure random source unavailable: {exc}") from exc


class PayloadCipher:
    """AES-GCM under a single-message key held in a wipeable bytearray."""

    NONCE_SIZE = NONCE_SIZE
    TAG_SIZE   = TAG_SIZE

    def __init__(self, key: bytearray):
        """
        Takes ownership of key; wipe() zeroes this same buffer.
        """
        if len(key) * 8 not in SYMMETRIC_KEY_BITS:
            raise ValueError(f"AES key must be one of {SYMMETRIC_KEY_BITS} bits.")
        self._key = key

    @classmethod
    def generate(cls, bits: int = 128) -> "PayloadCipher":
        """Fresh key from the OS random source."""
        if bits not in SYMMETRIC_KEY_BITS:
            raise ValueError(f"AES key must be one of {SYMMETRIC_KEY_BITS} bits.")
        return cls(bytearray(_urandom(bits // 8)))

    @property
    def key(self) -> bytearray:
        return self._key

    def wipe(self) -> None:
        wipe(self._key)

    def encrypt(self, plaintext: bytes, aad: bytes = None) -> bytes:
        """
        Encrypt and authenticate.
        aad = associated data, authenticated but not encrypted.
        Returns: nonce || ciphertext+tag
        """
        nonce = _urandom(self.NONCE_SIZE)
        ct    = AESGCM(self._key).encrypt(nonce, plaintext, aad)
        return nonce + ct

    def decrypt(self, payload: bytes, aad: bytes = None) -> bytes:
        """
        Decrypt and verify the authentication tag.
        Raises PayloadDecryptError if the payload is short or was tampered with.
        """
        if len(payload) < self.NONCE_SIZE + self.TAG_SIZE:
            raise PayloadDecryptError("Payload too short.")
        nonce = payload[:self.NONCE_SIZE]
        ct    = payload[self.NONCE_SIZE:]
        try:
            return AESGCM(self._key).decrypt(nonce, ct, aad)
        except InvalidTag:
            logger.debug("GCM tag mismatch on %d byte payload", len(payload))
            raise PayloadDecryptError("Payload authentication failed.") from None
