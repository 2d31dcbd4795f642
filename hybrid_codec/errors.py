"""
Error taxonomy
==============
Every failure the codec can produce, one class per stage.

    CodecError
    ├── EncodeError
    │   ├── KeyGenerationError      random source unavailable
    │   └── KeyWrapError            bad public key / oversized key material
    └── DecodeError
        ├── MalformedMessageError   wire format violation
        │   └── UnsupportedVersionError
        ├── KeyUnwrapError          wrong private key / padding failure
        ├── PayloadDecryptError     GCM tag mismatch / truncated payload
        └── StaleMessageError       outside the freshness window
            └── ClockSkewError      dated too far in the future

None of these are retried by the codec. A cryptographic failure is not
transient; resending is the caller's decision.
"""


class CodecError(Exception):
    """Base class for every error raised by hybrid_codec."""

    public_message = "message rejected"


class EncodeError(CodecError):
    """Failure while building a frame."""


class KeyGenerationError(EncodeError):
    """The secure random source could not supply key material."""


class KeyWrapError(EncodeError):
    """The symmetric key could not be wrapped under the public key."""


class DecodeError(CodecError):
    """Failure while opening a frame."""


class MalformedMessageError(DecodeError):
    """The frame is not structurally valid."""


class UnsupportedVersionError(MalformedMessageError):
    """The frame carries a version tag this codec does not speak."""

    def __init__(self, version):
        super().__init__(f"Unsupported frame version: {version!r}")
        self.version = version


class KeyUnwrapError(DecodeError):
    """
    The wrapped key could not be recovered.

    Always carries the same message: wrong key, key id mismatch and
    padding failure are indistinguishable to the caller.
    """

    public_message = "decryption failed"

    def __init__(self, msg: str = "Unable to unwrap message key."):
        super().__init__(msg)


class PayloadDecryptError(DecodeError):
    """The payload failed authentication or was truncated."""

    public_message = "decryption failed"


class StaleMessageError(DecodeError):
    """The frame's timestamp falls outside the freshness window."""

    def __init__(self, msg: str, age_seconds: float = None):
        super().__init__(msg)
        self.age_seconds = age_seconds


class ClockSkewError(StaleMessageError):
    """The frame's timestamp is ahead of the local clock beyond tolerance."""
