"""
Codec configuration
===================
All tunables are passed explicitly into Encoder / Decoder construction.
Nothing here is read from the environment and nothing is module-global
except the immutable DEFAULT_CONFIG.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

from cryptography.hazmat.primitives import hashes

FRAME_VERSION = 1

# AES-GCM accepts exactly these key lengths.
SYMMETRIC_KEY_BITS = (128, 192, 256)

_OAEP_HASHES = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}

Window = Union[timedelta, int, float]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_timedelta(value: Optional[Window]) -> Optional[timedelta]:
    """Accept a timedelta or a number of seconds."""
    if value is None or isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected timedelta or seconds, got {type(value).__name__}.")
    return timedelta(seconds=value)


def check_window(value: Optional[Window], name: str = "freshness_window") -> Optional[timedelta]:
    """as_timedelta() that also refuses negative durations."""
    window = as_timedelta(value)
    if window is not None and window < timedelta(0):
        raise ValueError(f"{name} must not be negative.")
    return window


@dataclass(frozen=True)
class CodecConfig:
    """
    symmetric_key_bits  length of the per-message AES key (128 by default)
    oaep_hash           digest used for both OAEP and MGF1
    freshness_window    default maximum message age; None disables the check
    clock_skew          how far ahead of our clock a timestamp may be
    version             frame version written by the Encoder
    clock               callable returning an aware UTC datetime
    """

    symmetric_key_bits: int = 128
    oaep_hash: str = "sha256"
    freshness_window: Optional[Window] = None
    clock_skew: Window = timedelta(seconds=30)
    version: int = FRAME_VERSION
    clock: Callable[[], datetime] = field(default=utc_now, compare=False)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.symmetric_key_bits not in SYMMETRIC_KEY_BITS:
            raise ValueError(
                f"symmetric_key_bits must be one of {SYMMETRIC_KEY_BITS}, "
                f"got {self.symmetric_key_bits}."
            )
        if self.oaep_hash not in _OAEP_HASHES:
            raise ValueError(f"Unsupported OAEP hash: {self.oaep_hash!r}.")
        if self.version != FRAME_VERSION:
            raise ValueError(f"Only frame version {FRAME_VERSION} can be written.")
        check_window(self.freshness_window)
        if check_window(self.clock_skew, "clock_skew") is None:
            raise ValueError("clock_skew must be set.")

    @property
    def symmetric_key_bytes(self) -> int:
        return self.symmetric_key_bits // 8

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return _OAEP_HASHES[self.oaep_hash]()

    def now(self) -> datetime:
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now


DEFAULT_CONFIG = CodecConfig()
