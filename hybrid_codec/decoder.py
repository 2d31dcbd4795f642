"""
Decoder
=======
Opens a FramedMessage in a fixed order, failing fast:

    parse -> unwrap key -> decrypt payload -> freshness check

Each stage needs the previous stage's output, and rejecting malformed
frames before the RSA step avoids spending a private-key operation on
garbage.

Callers should show KeyUnwrapError and PayloadDecryptError to users as
the same generic "decryption failed" (both carry that public_message).
The precise kind is logged here at WARNING.

Dependencies: cryptography >= 41.0
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .config import (DEFAULT_CONFIG, SYMMETRIC_KEY_BITS, CodecConfig, Window,
                     as_timedelta, check_window)
from .errors import (ClockSkewError, DecodeError, KeyUnwrapError,
                     StaleMessageError)
from .framing import FramedMessage
from .keys import (KeyRing, KeyWrapper, PrivateKeyLike, key_id,
                   load_private_key)
from .symmetric import PayloadCipher, wipe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeResult:
    """Either plaintext or the typed error that stopped decoding."""

    plaintext: Optional[bytes] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> bytes:
        if self.error is not None:
            raise self.error
        return self.plaintext


class Decoder:
    """
    Opens FramedMessages with an RSA private key.

    The key can be given per call, or the Decoder can hold a KeyRing and
    pick the key named by the frame's kid.
    """

    def __init__(self, config: CodecConfig = None, keyring: KeyRing = None):
        self._config  = config or DEFAULT_CONFIG
        self._keyring = keyring

    @property
    def config(self) -> CodecConfig:
        return self._config

    @property
    def keyring(self) -> Optional[KeyRing]:
        return self._keyring

    def decode(self, message, recipient_private_key: PrivateKeyLike = None,
               freshness_window: Optional[Window] = None) -> bytes:
        """
        Recover the plaintext of a frame.

        message may be a FramedMessage, a dict, or serialized JSON.
        freshness_window (timedelta or seconds) overrides the configured
        default; when both are None the timestamp is not checked.
        A negative or non-numeric window raises ValueError / TypeError
        before any key is touched.
        """
        try:
            return self._decode(message, recipient_private_key, freshness_window)
        except DecodeError as exc:
            logger.warning("Decode failed: %s: %s", type(exc).__name__, exc)
            raise

    def try_decode(self, message, recipient_private_key: PrivateKeyLike = None,
                   freshness_window: Optional[Window] = None) -> DecodeResult:
        """Same as decode(), but returns a DecodeResult instead of raising."""
        try:
            plaintext = self.decode(message, recipient_private_key, freshness_window)
        except DecodeError as exc:
            return DecodeResult(error=exc)
        return DecodeResult(plaintext=plaintext)

    def _decode(self, message, recipient_private_key, freshness_window) -> bytes:
        cfg = self._config
        window = check_window(freshness_window)
        if window is None:
            window = as_timedelta(cfg.freshness_window)

        # 1. Parse
        frame = FramedMessage.parse(message)

        # 2. Unwrap key
        private_key = self._select_key(frame.kid, recipient_private_key)
        sym_key = KeyWrapper(cfg.hash_algorithm()).unwrap(private_key, frame.wrapped_key)
        try:
            if len(sym_key) * 8 not in SYMMETRIC_KEY_BITS:
                raise KeyUnwrapError()

            # 3. Decrypt payload
            plaintext = PayloadCipher(sym_key).decrypt(frame.ciphertext, frame.header_bytes())
        finally:
            wipe(sym_key)

        # 4. Freshness
        if window is not None:
            self._check_freshness(frame, window)

        logger.debug("Decoded %d bytes with key %s", len(plaintext), frame.kid)
        return plaintext

    def _select_key(self, kid: str, recipient_private_key):
        if recipient_private_key is not None:
            private_key = load_private_key(recipient_private_key)
            if key_id(private_key) != kid:
                logger.debug("Frame kid %s does not match supplied key", kid)
                raise KeyUnwrapError()
            return private_key
        if self._keyring is None:
            raise TypeError("No private key supplied and the Decoder has no KeyRing.")
        return self._keyring.get(kid)

    def _check_freshness(self, frame: FramedMessage, window: timedelta) -> None:
        now = self._config.now()
        age = now - frame.timestamp
        if age > window:
            raise StaleMessageError(
                f"Message is {age.total_seconds():.1f}s old; "
                f"window is {window.total_seconds():.1f}s.",
                age_seconds=age.total_seconds(),
            )
        skew = as_timedelta(self._config.clock_skew)
        if -age > skew:
            raise ClockSkewError(
                f"Message is dated {-age.total_seconds():.1f}s in the future; "
                f"tolerance is {skew.total_seconds():.1f}s.",
                age_seconds=age.total_seconds(),
            )
